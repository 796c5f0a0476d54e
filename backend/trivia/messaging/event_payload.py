"""Centralized room event payload shaping.

The action layer that appends room events and the translator that reads
them share the payload models in trivia.messaging.events, so the wire
shape of each event type is defined once.
"""

from __future__ import annotations

from typing import Any

from pydantic import ValidationError

from trivia.logic.enums import RoomEventType
from trivia.messaging.events import PAYLOAD_MODELS


def room_event_payload(event_type: RoomEventType | str, **fields: Any) -> dict[str, Any]:
    """Return the canonical wire dict for a room event payload.

    Fields may be given by attribute name (user_id) or wire alias (userId).
    The result always uses wire aliases, e.g.
    room_event_payload("choose_clue", user_id="a", i=0, j=1)
    -> {"userId": "a", "i": 0, "j": 1}.

    Raises:
        ValueError: If the event type is unknown or the fields do not form a valid payload.

    """
    try:
        model = PAYLOAD_MODELS[RoomEventType(event_type)]
    except ValueError as exc:
        raise ValueError(f"unknown room event type: {event_type!r}") from exc
    try:
        payload = model.model_validate(fields, by_alias=True, by_name=True)
    except ValidationError as exc:
        raise ValueError(f"invalid {event_type} payload: {exc}") from exc
    return payload.model_dump(by_alias=True)
