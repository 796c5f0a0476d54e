"""Replay a recorded room log against a game and print the resulting view.

Feeds an NDJSON room log (one room event row per line, as stored by the
action layer) through a ReplicationEngine the same way a client would see
it on attach, then prints the SessionView as JSON.

Usage:
    uv run python bin/replay-room.py
    uv run python bin/replay-room.py --game path/to/game.jep.json --log path/to/room.ndjson
    uv run python bin/replay-room.py --user-id a --redeliver
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from pathlib import Path
from typing import TYPE_CHECKING, Any

from shared.logging import setup_logging
from trivia.logic.exceptions import GameLoadError, HistoryTooLargeError, ProtocolViolationError
from trivia.logic.loader import load_game_from_file
from trivia.messaging.events import parse_room_event
from trivia.replication.engine import ReplicationEngine
from trivia.settings import TriviaSettings

if TYPE_CHECKING:
    from collections.abc import Callable

    from trivia.logic.state import GameState
    from trivia.messaging.events import RoomEvent

FIXTURES = Path(__file__).resolve().parent.parent / "backend" / "trivia" / "tests" / "fixtures"
DEFAULT_GAME = FIXTURES / "mock.jep.json"
DEFAULT_LOG = FIXTURES / "mock-room.ndjson"


class _RecordedSubscription:
    def __init__(self, feed: RecordedRoomFeed) -> None:
        self._feed = feed

    async def unsubscribe(self) -> None:
        self._feed.listeners.clear()


class RecordedRoomFeed:
    """Feed over a fixed list of events; redeliver() replays them as live pushes."""

    def __init__(self, events: list[RoomEvent]) -> None:
        self.events = events
        self.listeners: list[Callable[[Any], None]] = []

    async def fetch_events(self, room_id: int) -> list[RoomEvent]:
        return [event for event in self.events if event.room_id == room_id]

    async def subscribe(self, room_id: int, listener: Callable[[Any], None]) -> _RecordedSubscription:
        self.listeners.append(listener)
        return _RecordedSubscription(self)

    def redeliver(self) -> None:
        for listener in list(self.listeners):
            for event in self.events:
                listener(event)


def resolve_game_path(game: Path, games_dir: str) -> Path:
    """Look a bare game file name up in games_dir when it is not a path that exists."""
    if game.exists() or game.is_absolute() or len(game.parts) > 1:
        return game
    return Path(games_dir) / game


def load_room_log(path: Path) -> list[RoomEvent]:
    """Parse an NDJSON room log, skipping blank lines."""
    events = []
    for line_number, line in enumerate(path.read_text(encoding="utf-8").splitlines(), start=1):
        if not line.strip():
            continue
        try:
            row = json.loads(line)
        except json.JSONDecodeError as exc:
            raise ValueError(f"{path.name}:{line_number}: malformed JSON: {exc}") from exc
        events.append(parse_room_event(row))
    return events


async def replay_room(
    game_path: Path,
    log_path: Path,
    *,
    room_id: int | None,
    user_id: str | None,
    redeliver: bool,
    settings: TriviaSettings,
) -> ReplicationEngine:
    game = load_game_from_file(resolve_game_path(game_path, settings.games_dir))
    events = load_room_log(log_path)
    if room_id is None:
        room_id = events[0].room_id if events else 0

    feed = RecordedRoomFeed(events)
    engine = ReplicationEngine(
        game=game,
        room_id=room_id,
        feed=feed,
        user_id=user_id,
        max_history_events=settings.max_history_events,
    )

    def _print_transition(state: GameState) -> None:
        print(f"  -> {state.phase} round={state.round} answered={state.num_answered}/{state.num_clues_in_round}")

    engine.add_listener(_print_transition)
    print(f"Replaying {len(events)} events from {log_path.name} against {game.title or game.id!r}")
    await engine.attach()
    if redeliver:
        # At-least-once transports may replay the whole log after a reconnect.
        feed.redeliver()
    await engine.detach()
    return engine


def main() -> None:
    parser = argparse.ArgumentParser(description="Replay a room event log and print the session view")
    parser.add_argument(
        "--game",
        type=Path,
        default=DEFAULT_GAME,
        help="path to .jep.json game file, or a file name in TRIVIA_GAMES_DIR (default: mock.jep.json fixture)",
    )
    parser.add_argument(
        "--log",
        type=Path,
        default=DEFAULT_LOG,
        help="path to NDJSON room log (default: mock-room.ndjson fixture)",
    )
    parser.add_argument("--room-id", type=int, default=None, help="room to replicate (default: room of first event)")
    parser.add_argument("--user-id", default=None, help="local user id, used for can_choose_clue in the output")
    parser.add_argument(
        "--redeliver",
        action="store_true",
        help="push every event again after attach to check deduplication",
    )
    args = parser.parse_args()

    settings = TriviaSettings()
    setup_logging(log_dir=settings.log_dir)

    try:
        engine = asyncio.run(
            replay_room(
                args.game,
                args.log,
                room_id=args.room_id,
                user_id=args.user_id,
                redeliver=args.redeliver,
                settings=settings,
            ),
        )
    except (OSError, ValueError, GameLoadError, HistoryTooLargeError, ProtocolViolationError) as exc:
        print(f"Replay failed: {exc}", file=sys.stderr)
        sys.exit(1)

    view = engine.view()
    output: dict[str, Any] = view.model_dump(mode="json", exclude={"board"})
    output["is_game_over"] = view.is_game_over
    if args.user_id is not None:
        output["can_choose_clue"] = view.can_choose_clue(args.user_id)
    print(json.dumps(output, indent=2))


if __name__ == "__main__":
    main()
