import json
from pathlib import Path

import pytest

from trivia.logic.exceptions import GameLoadError
from trivia.logic.loader import load_game_from_file, load_game_from_string
from trivia.tests.helpers import MOCK_GAME

FIXTURES = Path(__file__).resolve().parent.parent / "fixtures"


def _board(*clue_counts: int) -> dict:
    return {
        "categoryNames": [f"C{i}" for i in range(len(clue_counts))],
        "categories": [
            {"name": f"C{i}", "clues": [{"clue": "q", "answer": "a", "value": 200} for _ in range(count)]}
            for i, count in enumerate(clue_counts)
        ],
    }


class TestLoadGameFromFile:
    def test_loads_mock_game(self):
        game = load_game_from_file(FIXTURES / "mock.jep.json")

        assert game.id == "mock"
        assert game.title == "Mock Game"
        assert game.boards == MOCK_GAME.boards

    def test_missing_file_raises(self, tmp_path):
        with pytest.raises(GameLoadError, match="Cannot read game file"):
            load_game_from_file(tmp_path / "nope.jep.json")


class TestLoadGameFromString:
    def test_rectangular_board(self):
        game = load_game_from_string(json.dumps({"boards": [_board(3, 3)]}))
        assert len(game.boards[0].categories) == 2
        assert game.boards[0].category_names == ("C0", "C1")

    def test_explicit_game_id(self):
        game = load_game_from_string(json.dumps({"boards": [_board(1)]}), game_id="g1")
        assert game.id == "g1"

    def test_empty_content_raises(self):
        with pytest.raises(GameLoadError, match="Empty game content"):
            load_game_from_string("   ")

    def test_malformed_json_raises(self):
        with pytest.raises(GameLoadError, match="Malformed JSON"):
            load_game_from_string("{boards: ")

    def test_non_object_raises(self):
        with pytest.raises(GameLoadError, match="must be a JSON object"):
            load_game_from_string("[]")

    def test_missing_boards_raises(self):
        with pytest.raises(GameLoadError, match="Invalid game"):
            load_game_from_string(json.dumps({"title": "x"}))

    def test_no_boards_raises(self):
        with pytest.raises(GameLoadError, match="at least one board"):
            load_game_from_string(json.dumps({"boards": []}))

    def test_ragged_board_raises(self):
        with pytest.raises(GameLoadError, match=r"Board 1 is not rectangular: .*\[2, 3\]"):
            load_game_from_string(json.dumps({"boards": [_board(2, 2), _board(3, 2)]}))

    def test_board_without_clues_raises(self):
        with pytest.raises(GameLoadError, match="Board 0 has no clues"):
            load_game_from_string(json.dumps({"boards": [_board(0, 0)]}))

    def test_category_name_count_mismatch_raises(self):
        board = _board(1, 1)
        board["categoryNames"] = ["only one"]
        with pytest.raises(GameLoadError, match="1 category names for 2 categories"):
            load_game_from_string(json.dumps({"boards": [board]}))
