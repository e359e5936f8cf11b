import json
from typing import Union

from pydantic import ValidationError

import presence
from backend import RoomRegistry
from broadcaster import Broadcaster, serialize_event
from constants import ANONYMOUS_USER, DEFAULT_ROOM_ID
from logging_config import get_logger
from schemas.events import (
    ChatEvent,
    ChatFrame,
    InboundFrame,
    JoinedEvent,
    JoinFrame,
    ReactionEvent,
    ReactionFrame,
    TypingEvent,
    TypingFrame,
    is_truthy,
)

logger = get_logger(__name__)


def _reject_constant(name: str):
    # NaN and Infinity are not JSON
    raise ValueError(f"Invalid JSON constant {name}")


class EventDispatcher:
    """Turns client frames into registry changes and room broadcasts.

    The protocol is best-effort: malformed frames, frames missing required
    fields, unknown types and non-join frames from a connection outside any
    room are all dropped without a reply.
    """

    def __init__(self, registry: RoomRegistry):
        self.registry = registry
        self.broadcaster = Broadcaster(registry)
        self._handlers = {
            "chat": self._handle_chat,
            "typing": self._handle_typing,
            "reaction": self._handle_reaction,
        }

    def on_connect(self, connection):
        logger.info(f"Connection {connection.connection_id} opened")

    def on_frame(self, connection, raw: Union[str, bytes]):
        try:
            data = json.loads(raw, parse_constant=_reject_constant)
        except ValueError:
            logger.debug(f"Dropping unparsable frame from {connection!r}")
            return
        if not isinstance(data, dict):
            logger.debug(f"Dropping non-object frame from {connection!r}")
            return

        try:
            frame_type = InboundFrame.model_validate(data).type
            if frame_type == "join":
                self._handle_join(connection, JoinFrame.model_validate(data))
                return

            if connection.room_id is None:
                logger.debug(f"Dropping {frame_type!r} frame from {connection!r}: not in a room")
                return

            handler = self._handlers.get(frame_type)
            if handler is None:
                logger.debug(f"Dropping unknown frame type {frame_type!r} from {connection!r}")
                return
            handler(connection, data)
        except ValidationError as e:
            logger.debug(f"Dropping invalid frame from {connection!r}: {e.error_count()} errors")

    def on_disconnect(self, connection):
        logger.info(f"Connection {connection.connection_id} closed (room: {connection.room_id})")
        presence.depart(self.broadcaster, connection)

    def _handle_join(self, connection, frame: JoinFrame):
        if connection.room_id is not None:
            presence.depart(self.broadcaster, connection)

        room_id = self.registry.join(connection, frame.room_id or DEFAULT_ROOM_ID)
        connection.user = frame.user if is_truthy(frame.user) else dict(ANONYMOUS_USER)
        connection.send(serialize_event(JoinedEvent(room_id=room_id)))
        presence.announce_join(self.broadcaster, room_id, connection.user)

    def _handle_chat(self, connection, data: dict):
        frame = ChatFrame.model_validate(data)
        self.broadcaster.broadcast(connection.room_id, ChatEvent(message=frame.message))

    def _handle_typing(self, connection, data: dict):
        frame = TypingFrame.model_validate(data)
        self.broadcaster.broadcast(connection.room_id, TypingEvent(
            user_id=frame.user_id,
            user_name=frame.user_name,
            is_typing=is_truthy(frame.is_typing),
        ))

    def _handle_reaction(self, connection, data: dict):
        frame = ReactionFrame.model_validate(data)
        self.broadcaster.broadcast(connection.room_id, ReactionEvent(payload=frame.payload))
