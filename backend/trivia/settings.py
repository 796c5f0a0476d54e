"""Trivia room configuration via environment variables."""

from pydantic import Field
from pydantic_settings import BaseSettings

from trivia.replication.engine import DEFAULT_MAX_HISTORY_EVENTS


class TriviaSettings(BaseSettings):
    model_config = {"env_prefix": "TRIVIA_"}

    log_dir: str | None = Field(default=None, min_length=1)
    games_dir: str = Field(default="backend/data/games", min_length=1)
    max_history_events: int = Field(default=DEFAULT_MAX_HISTORY_EVENTS, ge=1)
