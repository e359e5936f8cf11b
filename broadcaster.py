import json
from typing import Union

from pydantic import BaseModel

from backend import RoomRegistry
from logging_config import get_logger

logger = get_logger(__name__)


def serialize_event(event: Union[BaseModel, dict]) -> str:
    if isinstance(event, BaseModel):
        event = event.model_dump(by_alias=True)
    return json.dumps(event, allow_nan=False)


class Broadcaster:
    """Fans one serialized event out to the live members of a room."""

    def __init__(self, registry: RoomRegistry):
        self.registry = registry

    def broadcast(self, room_id: str, event: Union[BaseModel, dict]) -> int:
        members = self.registry.members_of(room_id)
        if not members:
            return 0

        payload = serialize_event(event)
        delivered = 0
        for member in members:
            if not member.is_sendable():
                continue
            try:
                member.send(payload)
                delivered += 1
            except Exception as e:
                logger.warning(f"Error sending to {member!r} in room {room_id}: {e}")
        logger.debug(f"Broadcast to room {room_id}: {delivered}/{len(members)} members")
        return delivered
