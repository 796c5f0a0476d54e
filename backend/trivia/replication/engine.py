"""Replication engine: keep a client's GameState in step with its room log.

The engine owns the only mutable reference to the room's state. Room events
reach it twice over: once as the historical backlog fetched at attach time,
then as live pushes from the feed, which delivers at least once and may
repeat anything it has already sent. Both streams go through
apply_room_event, which records each event id before translating it, so
a repeated id is a no-op no matter which stream it arrives on.

Local actions from this client's player go through dispatch() straight to
the reducer; the action layer persists the matching room event separately
and it comes back through the feed for everyone else.

Everything after the awaited feed calls is synchronous, so one event or
action is reduced to completion before the next one starts.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import structlog

from trivia.logic.actions import LOCAL_ACTION_TYPES, ClickClue
from trivia.logic.exceptions import EngineStateError, HistoryTooLargeError, InvalidActionError, InvalidRoomEventError
from trivia.logic.reducer import reduce
from trivia.logic.state import create_initial_state
from trivia.logic.view import SessionView, build_session_view
from trivia.messaging.events import parse_room_event
from trivia.messaging.translator import translate_room_event

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from trivia.logic.actions import Action
    from trivia.logic.models import Game
    from trivia.logic.state import GameState
    from trivia.messaging.events import RoomEvent
    from trivia.replication.feed import FeedSubscription, RoomEventFeed

logger = structlog.get_logger()

# Safety limit to keep a corrupt or hostile backlog from stalling attach.
DEFAULT_MAX_HISTORY_EVENTS = 100_000


class ReplicationEngine:
    """
    Apply a room's event log, exactly once per event id, to a local GameState.

    Lifecycle: construct, await attach(), dispatch/observe, await detach().
    An engine is single-use; it cannot be re-attached after detach.
    """

    def __init__(
        self,
        *,
        game: Game,
        room_id: int,
        feed: RoomEventFeed,
        user_id: str | None = None,
        max_history_events: int = DEFAULT_MAX_HISTORY_EVENTS,
    ) -> None:
        self._room_id = room_id
        self._feed = feed
        self._user_id = user_id
        self._max_history_events = max_history_events
        self._state = create_initial_state(game)
        self._seen: set[int] = set()
        self._subscription: FeedSubscription | None = None
        self._attached = False
        self._detached = False
        self._listeners: list[Callable[[GameState], None]] = []
        self._log = logger.bind(room_id=room_id)

    @property
    def room_id(self) -> int:
        return self._room_id

    @property
    def state(self) -> GameState:
        return self._state

    @property
    def seen_event_ids(self) -> frozenset[int]:
        return frozenset(self._seen)

    @property
    def is_attached(self) -> bool:
        return self._attached and not self._detached

    def view(self) -> SessionView:
        """Return the SessionView for the current state."""
        return build_session_view(self._state)

    def add_listener(self, listener: Callable[[GameState], None]) -> Callable[[], None]:
        """Register a state-change listener. Returns a callable that removes it."""
        self._listeners.append(listener)

        def remove() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return remove

    async def attach(self, history: Sequence[RoomEvent | dict[str, Any]] | None = None) -> None:
        """
        Apply the historical backlog, then subscribe to live events.

        history is the backlog the caller already holds (e.g. from a page
        load); when omitted it is fetched from the feed. The backlog is
        applied in ascending id order regardless of how it was given.
        If detach() runs while attach is awaiting the feed, attach returns
        without applying the fetched backlog or keeping a subscription.

        Raises:
            EngineStateError: If the engine was already attached or detached.
            HistoryTooLargeError: If the backlog exceeds max_history_events.
            RoomEventError: If a backlog event violates the wire contract.

        """
        if self._attached or self._detached:
            raise EngineStateError(f"engine for room {self._room_id} cannot be attached twice")
        self._attached = True

        if history is None:
            history = await self._feed.fetch_events(self._room_id)
            if self._detached:
                self._log.info("detached while fetching backlog, nothing applied")
                return
        if len(history) > self._max_history_events:
            raise HistoryTooLargeError(
                f"room {self._room_id} backlog has {len(history)} events, limit is {self._max_history_events}",
            )

        backlog = sorted((parse_room_event(raw) for raw in history), key=lambda event: event.id)
        applied = sum(self.apply_room_event(event) for event in backlog)

        subscription = await self._feed.subscribe(self._room_id, self._on_live_event)
        if self._detached:
            # detach() ran while subscribe was in flight and had nothing to cancel.
            await subscription.unsubscribe()
            self._log.info("detached while subscribing, subscription cancelled")
            return
        self._subscription = subscription
        self._log.info("attached to room feed", backlog=len(backlog), applied=applied)

    async def detach(self) -> None:
        """Unsubscribe from the live feed. Later deliveries are ignored."""
        if self._detached:
            return
        self._detached = True
        subscription, self._subscription = self._subscription, None
        if subscription is not None:
            await subscription.unsubscribe()
        self._log.info("detached from room feed", seen=len(self._seen))

    def apply_room_event(self, raw: RoomEvent | dict[str, Any]) -> bool:
        """
        Translate and reduce one room event unless its id was already seen.

        Returns True if the event produced an action, False if it was a
        repeat or an inadmissible clue choice.
        """
        event = parse_room_event(raw)
        if event.room_id != self._room_id:
            raise InvalidRoomEventError(
                event_id=event.id,
                reason=f"event belongs to room {event.room_id}, engine replicates room {self._room_id}",
            )
        if event.id in self._seen:
            self._log.debug("skipping seen room event", event_id=event.id)
            return False
        self._seen.add(event.id)

        action = translate_room_event(self._state, event)
        if action is None:
            return False
        self._apply(action)
        self._log.debug("applied room event", event_id=event.id, event_type=event.type)
        return True

    def dispatch(self, action: Action) -> GameState:
        """
        Apply an action originated by the local player.

        Only ClickClue, AnswerClue and StartRound may be dispatched locally;
        player changes arrive exclusively through the room log. A ClickClue
        from a local user who does not hold board control is dropped.

        Raises:
            EngineStateError: If the engine is not attached.
            InvalidActionError: If the action type may not originate locally,
                or the reducer rejects it.

        """
        if not self.is_attached:
            raise EngineStateError(f"engine for room {self._room_id} is not attached")
        if not isinstance(action, LOCAL_ACTION_TYPES):
            raise InvalidActionError(f"{action.type} cannot be dispatched locally")
        if isinstance(action, ClickClue) and (self._user_id is None or self._state.board_control != self._user_id):
            self._log.debug("dropping local clue click without board control", user_id=self._user_id)
            return self._state
        return self._apply(action)

    def _on_live_event(self, raw: RoomEvent | dict[str, Any]) -> None:
        if self._detached:
            self._log.debug("ignoring room event delivered after detach")
            return
        self.apply_room_event(raw)

    def _apply(self, action: Action) -> GameState:
        previous = self._state
        self._state = reduce(previous, action)
        if self._state != previous:
            self._notify()
        return self._state

    def _notify(self) -> None:
        for listener in list(self._listeners):
            try:
                listener(self._state)
            except Exception:
                self._log.exception("error in state listener")
