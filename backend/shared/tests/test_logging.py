import json
import logging
from datetime import UTC, datetime
from enum import Enum
from pathlib import Path
from unittest.mock import patch

import pytest
import structlog

from shared.logging import _serialize_enums, configure_structlog, setup_logging
from trivia.logic.enums import GamePhase, RoomEventType


@pytest.fixture(autouse=True)
def _restore_root_logger():
    """Close handlers added by setup_logging and put the test configuration back."""
    root = logging.getLogger()
    level = root.level
    yield
    for handler in root.handlers[:]:
        handler.close()
        root.removeHandler(handler)
    root.setLevel(level)
    configure_structlog()


@pytest.fixture
def allow_file_logging():
    """Disable the _is_test guard so a real file handler is created."""
    with patch("shared.logging._is_test", return_value=False):
        yield


class TestSetupLogging:
    def test_stdout_handler_only_by_default(self):
        assert setup_logging() is None
        root = logging.getLogger()

        assert root.level == logging.INFO
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0].formatter, structlog.stdlib.ProcessorFormatter)

    def test_no_log_file_under_pytest(self, tmp_path):
        assert setup_logging(log_dir=tmp_path / "rooms") is None
        assert not (tmp_path / "rooms").exists()

    @pytest.mark.usefixtures("allow_file_logging")
    def test_log_file_named_after_start_time(self, tmp_path):
        fixed_time = datetime(2025, 3, 15, 10, 30, 45, tzinfo=UTC)
        with patch("shared.logging.datetime") as mock_dt:
            mock_dt.now.return_value = fixed_time
            log_path = setup_logging(log_dir=tmp_path / "nested" / "rooms")

        assert log_path == tmp_path / "nested" / "rooms" / "2025-03-15_10-30-45.log"
        file_handler = logging.getLogger().handlers[1]
        assert isinstance(file_handler, logging.FileHandler)
        assert Path(file_handler.baseFilename) == log_path

    @pytest.mark.usefixtures("allow_file_logging")
    def test_json_lines_carry_bound_context(self, tmp_path, monkeypatch):
        monkeypatch.setenv("LOG_FORMAT", "json")
        log_path = setup_logging(log_dir=str(tmp_path))

        log = structlog.get_logger("test.json").bind(room_id=7)
        log.info("applied room event", event_type=RoomEventType.CHOOSE_CLUE, phase=GamePhase.ACTIVE_CLUE)

        assert log_path is not None
        parsed = json.loads(log_path.read_text().strip().splitlines()[0])
        assert parsed["event"] == "applied room event"
        assert parsed["room_id"] == 7
        assert parsed["event_type"] == "choose_clue"
        assert parsed["phase"] == "active_clue"

    @pytest.mark.usefixtures("allow_file_logging")
    def test_console_output(self, tmp_path, monkeypatch):
        monkeypatch.setenv("LOG_FORMAT", "console")
        log_path = setup_logging(log_dir=tmp_path)

        structlog.get_logger("test.console").warning("detached from room feed")

        assert log_path is not None
        assert "detached from room feed" in log_path.read_text()

    def test_repeated_calls_replace_handlers(self):
        setup_logging()
        setup_logging()
        assert len(logging.getLogger().handlers) == 1

    def test_explicit_level_wins(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "ERROR")
        setup_logging(level=logging.DEBUG)
        assert logging.getLogger().level == logging.DEBUG

    def test_level_from_env(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "warning")
        setup_logging()
        assert logging.getLogger().level == logging.WARNING

    def test_invalid_level_raises(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "loud")
        with pytest.raises(ValueError, match="Invalid LOG_LEVEL"):
            setup_logging()

    def test_invalid_format_raises(self, monkeypatch):
        monkeypatch.setenv("LOG_FORMAT", "xml")
        with pytest.raises(ValueError, match="Invalid LOG_FORMAT"):
            setup_logging()


class TestConfigureStructlog:
    def test_events_reach_caplog(self, caplog):
        with caplog.at_level(logging.INFO):
            structlog.get_logger("test.caplog").info("attached to room feed", backlog=3)

        assert len(caplog.records) == 1
        assert caplog.records[0].levelno == logging.INFO
        assert "attached to room feed" in caplog.text


class TestSerializeEnums:
    class _Shade(Enum):
        LIGHT = "light"
        DARK = "dark"

    def test_top_level(self):
        result = _serialize_enums(None, "", {"phase": GamePhase.PREVIEW, "round": 1})
        assert result == {"phase": "preview", "round": 1}

    def test_inside_dict_value(self):
        result = _serialize_enums(None, "", {"data": {"shade": self._Shade.DARK, "count": 3}})
        assert result["data"] == {"shade": "dark", "count": 3}

    def test_inside_tuple_value(self):
        result = _serialize_enums(None, "", {"types": (RoomEventType.JOIN, "custom", self._Shade.LIGHT)})
        assert result["types"] == ("join", "custom", "light")

    def test_other_values_untouched(self):
        payload = [GamePhase.PREVIEW]
        result = _serialize_enums(None, "", {"items": payload, "name": "x"})
        assert result["items"] is payload
