"""Room event translator: map persisted room events onto reducer actions.

Every known event type maps to exactly one action, except choose_clue,
which is admitted only when the current state allows the pick: the round
is waiting for a clue choice, the picker holds board control, and the cell
is still open. Inadmissible picks are dropped (None) because they are the
expected outcome of two clients racing, not a fault.

The admission check reads the *current* replicated state, so events must
be translated one at a time in log order, each immediately before its
action is reduced.

Unknown types and malformed payloads raise RoomEventError subclasses: the
log producer broke the wire contract and guessing would corrupt state.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog
from pydantic import ValidationError

from trivia.logic.actions import ClickClue, PlayerChangeName, PlayerJoin, StartRound
from trivia.logic.enums import GamePhase, RoomEventType
from trivia.logic.exceptions import InvalidRoomEventError, UnknownRoomEventTypeError
from trivia.logic.grid import grid_get, in_bounds
from trivia.logic.models import Player
from trivia.messaging.events import PAYLOAD_MODELS, ChooseCluePayload, PlayerPayload, StartRoundPayload

if TYPE_CHECKING:
    from trivia.logic.actions import Action
    from trivia.logic.state import GameState
    from trivia.messaging.events import RoomEvent, RoomEventPayload

logger = structlog.get_logger()


def _parse_event_type(event: RoomEvent) -> RoomEventType:
    try:
        return RoomEventType(event.type)
    except ValueError as exc:
        raise UnknownRoomEventTypeError(event_id=event.id, event_type=event.type) from exc


def _parse_payload(event: RoomEvent, event_type: RoomEventType) -> RoomEventPayload:
    if not isinstance(event.payload, dict):
        raise InvalidRoomEventError(
            event_id=event.id,
            reason=f"{event_type} payload must be an object, got {type(event.payload).__name__}",
        )
    try:
        return PAYLOAD_MODELS[event_type].model_validate(event.payload)
    except ValidationError as exc:
        raise InvalidRoomEventError(event_id=event.id, reason=f"{event_type} payload: {exc}") from exc


def _admit_clue_choice(state: GameState, event: RoomEvent, payload: ChooseCluePayload) -> ClickClue | None:
    if state.phase != GamePhase.AWAITING_CLUE_CHOICE:
        logger.debug("dropping clue choice outside clue-choice phase", event_id=event.id, phase=state.phase)
        return None
    if state.board_control != payload.user_id:
        logger.debug(
            "dropping clue choice from player without board control",
            event_id=event.id,
            user_id=payload.user_id,
            board_control=state.board_control,
        )
        return None
    if not in_bounds(state.answered, payload.i, payload.j):
        raise InvalidRoomEventError(
            event_id=event.id,
            reason=f"clue ({payload.i}, {payload.j}) is not on the board for round {state.round}",
        )
    if grid_get(state.answered, payload.i, payload.j):
        logger.debug("dropping clue choice for answered clue", event_id=event.id, i=payload.i, j=payload.j)
        return None
    return ClickClue(row=payload.i, col=payload.j)


def translate_room_event(state: GameState, event: RoomEvent) -> Action | None:
    """
    Translate a room event into the action it represents.

    Returns None when a choose_clue event is not admissible against state.

    Raises:
        UnknownRoomEventTypeError: If the event type is not a RoomEventType.
        InvalidRoomEventError: If the payload does not match its declared type,
            or a clue choice addresses a cell outside the current board.

    """
    event_type = _parse_event_type(event)
    payload = _parse_payload(event, event_type)

    if isinstance(payload, PlayerPayload):
        player = Player(user_id=payload.user_id, name=payload.name)
        if event_type == RoomEventType.JOIN:
            return PlayerJoin(player=player)
        return PlayerChangeName(player=player)
    if isinstance(payload, StartRoundPayload):
        return StartRound(round=payload.round)
    return _admit_clue_choice(state, event, payload)
