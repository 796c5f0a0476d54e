"""Typed exceptions for trivia protocol violations and engine misuse.

Protocol violations are fatal: they mean a producer of actions or room
events broke the contract the reducer relies on, and the core cannot
safely continue from a guessed state. Benign races (already answered
cells, stale rounds, duplicate event ids) are never raised; they are
absorbed as no-op transitions.
"""


class ProtocolViolationError(Exception):
    """Base exception for contract breaches between producers and the reducer."""


class InvalidActionError(ProtocolViolationError):
    """Action cannot be applied to the current state (e.g. answering with no active clue)."""


class RoomEventError(ProtocolViolationError):
    """A persisted room event violates the wire contract."""


class UnknownRoomEventTypeError(RoomEventError):
    """Room event carries a type the translator does not know."""

    def __init__(self, *, event_id: int, event_type: str) -> None:
        self.event_id = event_id
        self.event_type = event_type
        super().__init__(f"unhandled room event type {event_type!r} (event {event_id})")


class InvalidRoomEventError(RoomEventError):
    """Raised when a room event envelope or payload is malformed.

    Attributes:
        event_id: Id of the offending event, or None if the envelope itself is unreadable.
        reason: Human-readable explanation of what is wrong with the event.

    """

    def __init__(self, *, event_id: int | None, reason: str) -> None:
        self.event_id = event_id
        self.reason = reason
        super().__init__(f"invalid room event {event_id}: {reason}")


class EngineStateError(Exception):
    """Replication engine lifecycle misuse (attaching twice, dispatching before attach)."""


class HistoryTooLargeError(Exception):
    """Historical backlog exceeds the configured event limit."""


class GameLoadError(Exception):
    """Raised when a game file cannot be loaded or parsed."""
