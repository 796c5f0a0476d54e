"""
Pydantic models for game reference data and players.

Game, Board, Category and Clue are read-only reference data loaded once per
room. The reducer only reads them; nothing in the core ever rebuilds them.
"""

from pydantic import BaseModel, ConfigDict, Field


class Clue(BaseModel):
    """A single question/answer/value unit on a board."""

    model_config = ConfigDict(frozen=True)

    clue: str
    answer: str
    value: int


class Category(BaseModel):
    """A named, ordered column of clues."""

    model_config = ConfigDict(frozen=True)

    name: str
    clues: tuple[Clue, ...]


class Board(BaseModel):
    """Categories active for one round. All categories share the same clue count."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    category_names: tuple[str, ...] = Field(default=(), alias="categoryNames")
    categories: tuple[Category, ...]

    @property
    def num_clues(self) -> int:
        return sum(len(category.clues) for category in self.categories)


class Game(BaseModel):
    """A full game: one board per round."""

    model_config = ConfigDict(frozen=True)

    id: str = ""
    title: str = ""
    author: str = ""
    copyright: str = ""
    note: str = ""
    boards: tuple[Board, ...]

    def get_board(self, round_number: int) -> Board | None:
        """Return the board for a round, or None once the game has run out of boards."""
        if 0 <= round_number < len(self.boards):
            return self.boards[round_number]
        return None


class Player(BaseModel):
    """A player in a room, keyed by user_id."""

    model_config = ConfigDict(frozen=True)

    user_id: str
    name: str
