"""Room event envelope and per-type payload models.

RoomEvent is the server-ordered log entry persisted by the room's action
layer and pushed to every client. Its payload is free-form on the wire;
the payload models below are the typed shape each event type must carry.
Payload models are strict: "1" is not an int, and True is not an int.
They accept wire aliases (userId) only. The envelope's id and room_id are
strict too, since deduplication keys on the id.
"""

from __future__ import annotations

from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError

from trivia.logic.enums import RoomEventType
from trivia.logic.exceptions import InvalidRoomEventError


class RoomEvent(BaseModel):
    """
    Immutable, server-ordered room log entry.

    `id` is monotonic and unique per log; it is the only ordering the
    replication engine relies on. `type` is kept as a plain string so an
    unknown type reaches the translator and fails there, loudly.
    """

    model_config = ConfigDict(frozen=True)

    id: int = Field(strict=True)
    timestamp: str = Field(default="", validation_alias=AliasChoices("timestamp", "ts"))
    room_id: int = Field(strict=True, validation_alias=AliasChoices("room_id", "roomId"))
    type: str
    payload: Any = None


class PlayerPayload(BaseModel):
    """Payload of join and change_name events."""

    model_config = ConfigDict(frozen=True, strict=True)

    user_id: str = Field(alias="userId", min_length=1)
    name: str


class StartRoundPayload(BaseModel):
    model_config = ConfigDict(frozen=True, strict=True)

    round: int = Field(ge=0)


class ChooseCluePayload(BaseModel):
    """Payload of choose_clue events: who picked which cell."""

    model_config = ConfigDict(frozen=True, strict=True)

    user_id: str = Field(alias="userId", min_length=1)
    i: int = Field(ge=0)
    j: int = Field(ge=0)


RoomEventPayload = PlayerPayload | StartRoundPayload | ChooseCluePayload

PAYLOAD_MODELS: dict[RoomEventType, type[RoomEventPayload]] = {
    RoomEventType.JOIN: PlayerPayload,
    RoomEventType.CHANGE_NAME: PlayerPayload,
    RoomEventType.START_ROUND: StartRoundPayload,
    RoomEventType.CHOOSE_CLUE: ChooseCluePayload,
}

if set(PAYLOAD_MODELS) != set(RoomEventType):
    raise RuntimeError(  # pragma: no cover
        f"PAYLOAD_MODELS keys {set(PAYLOAD_MODELS)} != RoomEventType members {set(RoomEventType)}",
    )


def parse_room_event(raw: RoomEvent | dict[str, Any]) -> RoomEvent:
    """Return raw as a RoomEvent, validating the envelope of plain mappings."""
    if isinstance(raw, RoomEvent):
        return raw
    try:
        return RoomEvent.model_validate(raw)
    except ValidationError as exc:
        event_id = raw.get("id") if isinstance(raw, dict) else None
        raise InvalidRoomEventError(
            event_id=event_id if type(event_id) is int else None,
            reason=f"malformed envelope: {exc}",
        ) from exc
