"""
Turn state machine for a trivia room.

reduce() is a pure function of (GameState, Action). It never mutates its
input and always returns a new GameState object, so callers can compare
references to detect that a reduction happened. Actions that lose a benign
race (an already answered cell, a stale round number, a click outside the
clue-choice phase) come back as an unchanged copy. Contract breaches raise
InvalidActionError.

Phase transitions:

    PREVIEW --StartRound(round)--> AWAITING_CLUE_CHOICE
    AWAITING_CLUE_CHOICE --ClickClue(i, j)--> ACTIVE_CLUE
    ACTIVE_CLUE --AnswerClue--> AWAITING_CLUE_CHOICE, or PREVIEW of the next round
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from trivia.logic.actions import AnswerClue, ClickClue, PlayerChangeName, PlayerJoin, StartRound
from trivia.logic.enums import GamePhase
from trivia.logic.exceptions import InvalidActionError
from trivia.logic.grid import grid_get, grid_set, in_bounds
from trivia.logic.state import round_fields

if TYPE_CHECKING:
    from trivia.logic.actions import Action
    from trivia.logic.models import Player
    from trivia.logic.state import GameState


def reduce(state: GameState, action: Action) -> GameState:
    """Apply one action to the state and return the successor state."""
    if isinstance(action, StartRound):
        return _start_round(state, action.round)
    if isinstance(action, ClickClue):
        return _click_clue(state, action.row, action.col)
    if isinstance(action, AnswerClue):
        return _answer_clue(state)
    if isinstance(action, PlayerJoin):
        return _player_join(state, action.player)
    if isinstance(action, PlayerChangeName):
        return _put_player(state, action.player)
    raise InvalidActionError(f"unhandled action: {action!r}")


def _start_round(state: GameState, round_number: int) -> GameState:
    if state.phase != GamePhase.PREVIEW or round_number != state.round:
        return state.model_copy()
    return state.model_copy(update={"phase": GamePhase.AWAITING_CLUE_CHOICE})


def _click_clue(state: GameState, row: int, col: int) -> GameState:
    if not in_bounds(state.answered, row, col):
        raise InvalidActionError(f"clue ({row}, {col}) is not on the board for round {state.round}")
    if state.phase != GamePhase.AWAITING_CLUE_CHOICE or grid_get(state.answered, row, col):
        return state.model_copy()
    return state.model_copy(
        update={
            "phase": GamePhase.ACTIVE_CLUE,
            "active_clue": (row, col),
        },
    )


def _answer_clue(state: GameState) -> GameState:
    if state.active_clue is None:
        raise InvalidActionError("cannot answer clue if no clue is active")

    row, col = state.active_clue
    num_answered = state.num_answered + 1

    if num_answered >= state.num_clues_in_round:
        # Board exhausted: move to the preview of the next round with a fresh grid.
        return state.model_copy(
            update={
                "phase": GamePhase.PREVIEW,
                "active_clue": None,
                **round_fields(state.game, state.round + 1),
            },
        )

    return state.model_copy(
        update={
            "phase": GamePhase.AWAITING_CLUE_CHOICE,
            "active_clue": None,
            "answered": grid_set(state.answered, row, col, True),
            "num_answered": num_answered,
        },
    )


def _player_join(state: GameState, player: Player) -> GameState:
    new_state = _put_player(state, player)
    if not state.players and state.board_control is None:
        # First player ever recorded takes board control for the session.
        return new_state.model_copy(update={"board_control": player.user_id})
    return new_state


def _put_player(state: GameState, player: Player) -> GameState:
    if state.get_player(player.user_id) is None:
        players = (*state.players, player)
    else:
        # Rejoins and renames keep the player's original join position.
        players = tuple(player if p.user_id == player.user_id else p for p in state.players)
    return state.model_copy(update={"players": players})
