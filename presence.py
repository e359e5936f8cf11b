from typing import Any

from broadcaster import Broadcaster
from logging_config import get_logger
from schemas.events import PresenceEvent

logger = get_logger(__name__)


def announce_join(broadcaster: Broadcaster, room_id: str, user: Any) -> int:
    logger.info(f"Presence join in room {room_id}: {user}")
    return broadcaster.broadcast(room_id, PresenceEvent(event="join", user=user))


def announce_leave(broadcaster: Broadcaster, room_id: str, user: Any) -> int:
    logger.info(f"Presence leave in room {room_id}: {user}")
    return broadcaster.broadcast(room_id, PresenceEvent(event="leave", user=user))


def depart(broadcaster: Broadcaster, connection) -> int:
    """Take `connection` out of its room and tell the members that remain.

    Room and user are captured before the registry clears them. A connection
    that is in no room produces no event.
    """
    room_id = connection.room_id
    user = connection.user
    if room_id is None:
        return 0
    broadcaster.registry.leave(connection)
    return announce_leave(broadcaster, room_id, user)
