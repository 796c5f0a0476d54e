"""
Replicated game state for a trivia room.

GameState is a frozen Pydantic model. It is only ever replaced, never
mutated: the reducer derives every successor with model_copy, and the grid
helpers build a fresh answered matrix on each update.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, model_validator

from trivia.logic.enums import GamePhase
from trivia.logic.grid import Grid, board_shape, create_grid, grid_shape
from trivia.logic.models import Game, Player


class GameState(BaseModel):
    """
    Authoritative per-room state.

    Invariants checked at construction:
    - active_clue is set if and only if phase is ACTIVE_CLUE
    - num_answered never exceeds num_clues_in_round
    - answered matches the shape of the current round's board
    - player user ids are unique
    """

    model_config = ConfigDict(frozen=True)

    game: Game
    phase: GamePhase = GamePhase.PREVIEW
    round: int = Field(default=0, ge=0)
    answered: Grid[bool] = ()
    num_answered: int = Field(default=0, ge=0)
    num_clues_in_round: int = Field(default=0, ge=0)
    active_clue: tuple[int, int] | None = None
    board_control: str | None = None
    # In join order.
    players: tuple[Player, ...] = ()

    @model_validator(mode="after")
    def _validate_invariants(self) -> GameState:
        if (self.active_clue is not None) != (self.phase == GamePhase.ACTIVE_CLUE):
            raise ValueError(
                f"active_clue must be set exactly when phase is {GamePhase.ACTIVE_CLUE}, "
                f"got phase={self.phase} active_clue={self.active_clue}",
            )
        if self.num_answered > self.num_clues_in_round:
            raise ValueError(
                f"num_answered ({self.num_answered}) exceeds num_clues_in_round ({self.num_clues_in_round})",
            )
        expected = board_shape(self.game.get_board(self.round))
        if grid_shape(self.answered) != expected:
            raise ValueError(f"answered grid shape {grid_shape(self.answered)} != board shape {expected}")
        if len(set(self.player_ids)) != len(self.players):
            raise ValueError(f"duplicate player ids in {self.player_ids}")
        return self

    @property
    def player_ids(self) -> tuple[str, ...]:
        return tuple(player.user_id for player in self.players)

    def get_player(self, user_id: str) -> Player | None:
        """Return the player with user_id, or None if they never joined."""
        return next((player for player in self.players if player.user_id == user_id), None)


def round_fields(game: Game, round_number: int) -> dict[str, object]:
    """
    Return the per-round fields for a fresh round.

    Rounds past the last board get an empty grid and zero clues; treating
    that as game over is left to the caller.
    """
    board = game.get_board(round_number)
    rows, cols = board_shape(board)
    return {
        "round": round_number,
        "answered": create_grid(rows, cols, False),
        "num_answered": 0,
        "num_clues_in_round": rows * cols,
    }


def create_initial_state(game: Game, round_number: int = 0) -> GameState:
    """Return the starting state for a room: preview of the given round, no players."""
    return GameState(game=game, phase=GamePhase.PREVIEW, **round_fields(game, round_number))
