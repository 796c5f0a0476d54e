"""
Reducer input vocabulary.

Actions are a closed, discriminated set of frozen models. They are either
derived from room events by the translator or originated locally by the
player holding board control; they are never persisted themselves.
"""

from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field

from trivia.logic.enums import ActionType
from trivia.logic.models import Player


class ClickClue(BaseModel):
    """Select the clue at (row, col) as the active clue."""

    model_config = ConfigDict(frozen=True)

    type: Literal[ActionType.CLICK_CLUE] = ActionType.CLICK_CLUE
    row: int
    col: int


class AnswerClue(BaseModel):
    """Close the active clue and mark it answered."""

    model_config = ConfigDict(frozen=True)

    type: Literal[ActionType.ANSWER_CLUE] = ActionType.ANSWER_CLUE


class PlayerJoin(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: Literal[ActionType.PLAYER_JOIN] = ActionType.PLAYER_JOIN
    player: Player


class PlayerChangeName(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: Literal[ActionType.PLAYER_CHANGE_NAME] = ActionType.PLAYER_CHANGE_NAME
    player: Player


class StartRound(BaseModel):
    """Leave the round preview, if round matches the current round."""

    model_config = ConfigDict(frozen=True)

    type: Literal[ActionType.START_ROUND] = ActionType.START_ROUND
    round: int


Action = Annotated[
    ClickClue | AnswerClue | PlayerJoin | PlayerChangeName | StartRound,
    Field(discriminator="type"),
]

# Actions a client may originate itself; player changes only arrive through the room log.
LOCAL_ACTION_TYPES = (ClickClue, AnswerClue, StartRound)
