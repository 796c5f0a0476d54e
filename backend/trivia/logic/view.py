"""
Read-only projections of game state for the rendering layer.

A SessionView is rebuilt from scratch whenever the state changes. It holds
no state of its own and nothing in it flows back into the reducer.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict

from trivia.logic.enums import GamePhase
from trivia.logic.grid import Grid, grid_get, transpose_grid
from trivia.logic.models import Board, Clue, Player

if TYPE_CHECKING:
    from trivia.logic.state import GameState


class SessionView(BaseModel):
    """UI-facing view of one room."""

    model_config = ConfigDict(frozen=True)

    phase: GamePhase
    round: int
    num_rounds: int
    board: Board | None
    clue: Clue | None = None
    category: str | None = None
    active_clue: tuple[int, int] | None = None
    board_control: str | None = None
    players: tuple[Player, ...] = ()
    answered: Grid[bool] = ()
    num_answered: int = 0
    num_clues_in_round: int = 0

    @property
    def is_game_over(self) -> bool:
        """True once the round counter has moved past the last board."""
        return self.board is None

    def is_answered(self, row: int, col: int) -> bool:
        return grid_get(self.answered, row, col)

    def can_choose_clue(self, user_id: str) -> bool:
        """Whether user_id may pick the next clue right now."""
        return self.phase == GamePhase.AWAITING_CLUE_CHOICE and self.board_control == user_id

    def columns(self) -> Grid[bool]:
        """Answered flags grouped per category, for column-major board rendering."""
        return transpose_grid(self.answered)


def build_session_view(state: GameState) -> SessionView:
    """Derive the SessionView for a state."""
    board = state.game.get_board(state.round)

    clue: Clue | None = None
    category: str | None = None
    if state.active_clue is not None and board is not None:
        row, col = state.active_clue
        clue = board.categories[col].clues[row]
        category = board.category_names[col] if col < len(board.category_names) else board.categories[col].name

    return SessionView(
        phase=state.phase,
        round=state.round,
        num_rounds=len(state.game.boards),
        board=board,
        clue=clue,
        category=category,
        active_clue=state.active_clue,
        board_control=state.board_control,
        players=state.players,
        answered=state.answered,
        num_answered=state.num_answered,
        num_clues_in_round=state.num_clues_in_round,
    )
