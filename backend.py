import threading
from typing import Dict, FrozenSet, Optional, Set

from logging_config import get_logger

logger = get_logger(__name__)


def normalize_room_id(room_id: str) -> str:
    return room_id.lower()


class RoomRegistry:
    """In-memory mapping of room id -> member connections.

    A connection is in at most one room, and a room that loses its last member
    is removed immediately. Members are any objects carrying a writable
    `room_id` attribute.
    """

    def __init__(self):
        self._rooms: Dict[str, Set] = {}
        self._lock = threading.Lock()
        logger.info("Initializing in-memory RoomRegistry")

    def join(self, connection, room_id: str) -> str:
        """Move `connection` into `room_id`, leaving its current room first."""
        room_id = normalize_room_id(room_id)
        with self._lock:
            self._discard(connection)
            self._rooms.setdefault(room_id, set()).add(connection)
            connection.room_id = room_id
            count = len(self._rooms[room_id])
        logger.debug(f"{connection!r} joined room {room_id} ({count} members)")
        return room_id

    def leave(self, connection) -> Optional[str]:
        """Remove `connection` from its room. Returns the room it left, if any."""
        with self._lock:
            room_id = self._discard(connection)
        if room_id is not None:
            logger.debug(f"{connection!r} left room {room_id}")
        return room_id

    def members_of(self, room_id: str) -> FrozenSet:
        with self._lock:
            return frozenset(self._rooms.get(normalize_room_id(room_id), ()))

    def rooms(self) -> Dict[str, FrozenSet]:
        with self._lock:
            return {room_id: frozenset(members) for room_id, members in self._rooms.items()}

    def _discard(self, connection) -> Optional[str]:
        # caller holds the lock
        room_id = connection.room_id
        if room_id is None:
            return None
        members = self._rooms.get(room_id)
        if members is not None:
            members.discard(connection)
            if not members:
                del self._rooms[room_id]
                logger.info(f"Room {room_id} is empty, removed")
        connection.room_id = None
        return room_id


room_registry = RoomRegistry()
