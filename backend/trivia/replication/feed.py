"""Room event feed protocols.

The feed is the external transport that stores room events and pushes new
ones to subscribers. The replication engine only depends on these
protocols; connection handling, retries and backoff live behind them.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from trivia.messaging.events import RoomEvent


class FeedSubscription(Protocol):
    """Handle for a live subscription to a room's events."""

    async def unsubscribe(self) -> None: ...


class RoomEventFeed(Protocol):
    """Historical query plus live push of a room's event log.

    fetch_events returns the backlog in ascending id order. subscribe
    delivers newly inserted events at least once; a delivery may repeat an
    event already returned by fetch_events or delivered before.
    Listeners are invoked on the event loop thread with either a parsed
    RoomEvent or the raw row straight off the transport.
    """

    async def fetch_events(self, room_id: int) -> Sequence[RoomEvent]: ...

    async def subscribe(
        self,
        room_id: int,
        listener: Callable[[RoomEvent | dict[str, Any]], None],
    ) -> FeedSubscription: ...
