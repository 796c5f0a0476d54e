"""
String enum definitions for trivia game concepts.
"""

from enum import StrEnum


class GamePhase(StrEnum):
    """Phase of the per-round turn state machine."""

    PREVIEW = "preview"
    AWAITING_CLUE_CHOICE = "awaiting_clue_choice"
    ACTIVE_CLUE = "active_clue"


class ActionType(StrEnum):
    """Actions accepted by the game reducer."""

    CLICK_CLUE = "click_clue"
    ANSWER_CLUE = "answer_clue"
    PLAYER_JOIN = "player_join"
    PLAYER_CHANGE_NAME = "player_change_name"
    START_ROUND = "start_round"


class RoomEventType(StrEnum):
    """Types of persisted room events."""

    JOIN = "join"
    CHANGE_NAME = "change_name"
    START_ROUND = "start_round"
    CHOOSE_CLUE = "choose_clue"
