"""Game loader: parse the .jep.json game format into a Game.

The file holds a single JSON object with game metadata and one board per
round. Unlike the reducer, which trusts its reference data, the loader is
the input boundary and rejects boards that are empty or not rectangular.
"""

from __future__ import annotations

import json
from pathlib import Path

from pydantic import ValidationError

from trivia.logic.exceptions import GameLoadError
from trivia.logic.models import Game

# Safety limit for game files read from disk or uploaded.
_MAX_GAME_FILE_BYTES = 5 * 1024 * 1024


def _validate_boards(game: Game) -> None:
    if not game.boards:
        raise GameLoadError("Game must contain at least one board")
    for round_number, board in enumerate(game.boards):
        if not board.categories:
            raise GameLoadError(f"Board {round_number} has no categories")
        clue_counts = {len(category.clues) for category in board.categories}
        if len(clue_counts) != 1:
            raise GameLoadError(
                f"Board {round_number} is not rectangular: categories have clue counts {sorted(clue_counts)}",
            )
        if clue_counts == {0}:
            raise GameLoadError(f"Board {round_number} has no clues")
        if board.category_names and len(board.category_names) != len(board.categories):
            raise GameLoadError(
                f"Board {round_number} has {len(board.category_names)} category names "
                f"for {len(board.categories)} categories",
            )


def load_game_from_string(content: str, game_id: str = "") -> Game:
    """Parse a JSON game document into a validated Game."""
    content = content.strip()
    if not content:
        raise GameLoadError("Empty game content")
    if len(content.encode("utf-8")) > _MAX_GAME_FILE_BYTES:
        raise GameLoadError(f"Game exceeds maximum size ({_MAX_GAME_FILE_BYTES} bytes)")

    try:
        data = json.loads(content)
    except json.JSONDecodeError as exc:
        raise GameLoadError(f"Malformed JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise GameLoadError(f"Game must be a JSON object, got {type(data).__name__}")

    if game_id:
        data = {**data, "id": game_id}
    try:
        game = Game.model_validate(data)
    except ValidationError as exc:
        raise GameLoadError(f"Invalid game: {exc}") from exc

    _validate_boards(game)
    return game


def load_game_from_file(path: str | Path) -> Game:
    """Load a game from a file path. The file name up to its first dot becomes the game id."""
    path = Path(path)
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise GameLoadError(f"Cannot read game file {path}: {exc}") from exc
    return load_game_from_string(content, game_id=path.name.split(".")[0])
