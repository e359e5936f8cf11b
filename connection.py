import asyncio
import uuid
from datetime import datetime
from typing import Any, Optional

from fastapi.websockets import WebSocket, WebSocketState

from constants import SEND_QUEUE_SIZE, SEND_TIMEOUT_SECONDS
from logging_config import get_logger

logger = get_logger(__name__)


class Connection:
    """One client session on top of a WebSocket.

    Outbound payloads go through a bounded queue drained by a writer task, so
    `send` never waits on the client. When the queue is full the oldest pending
    payload is dropped.

    `room_id` is maintained by the room registry only.
    """

    def __init__(self, websocket: WebSocket, queue_size: int = SEND_QUEUE_SIZE,
                 send_timeout: float = SEND_TIMEOUT_SECONDS):
        self.connection_id = str(uuid.uuid4())
        self.websocket = websocket
        self.room_id: Optional[str] = None
        self.user: Any = None
        self.connected_at = datetime.now().isoformat()
        self.send_timeout = send_timeout
        self._outbox: asyncio.Queue = asyncio.Queue(maxsize=queue_size)
        self._writer: Optional[asyncio.Task] = None
        self._closed = False

    def __repr__(self):
        return f"Connection({self.connection_id[:8]}, room={self.room_id!r})"

    @property
    def pending(self) -> int:
        return self._outbox.qsize()

    def start(self):
        if self._writer is None:
            self._writer = asyncio.create_task(self._drain())

    def is_sendable(self) -> bool:
        if self._closed:
            return False
        return (self.websocket.client_state == WebSocketState.CONNECTED
                and self.websocket.application_state == WebSocketState.CONNECTED)

    def send(self, text: str):
        """Queue a serialized payload for delivery. Never blocks."""
        try:
            self._outbox.put_nowait(text)
        except asyncio.QueueFull:
            # Drop oldest to make room
            try:
                self._outbox.get_nowait()
                self._outbox.task_done()
            except asyncio.QueueEmpty:
                pass
            self._outbox.put_nowait(text)
            logger.warning(f"Outbound queue full for connection {self.connection_id}, dropped oldest payload")

    async def _drain(self):
        while True:
            text = await self._outbox.get()
            try:
                await asyncio.wait_for(self.websocket.send_text(text), timeout=self.send_timeout)
            except asyncio.TimeoutError:
                # the frame may be half written, nothing more can go on this socket
                logger.warning(f"Send to connection {self.connection_id} timed out after {self.send_timeout}s, stopping writer")
                self._closed = True
                return
            except Exception as e:
                logger.warning(f"Send to connection {self.connection_id} failed, stopping writer: {e}")
                self._closed = True
                return
            finally:
                self._outbox.task_done()

    def close(self):
        """Stop accepting payloads and cancel the writer task."""
        self._closed = True
        if self._writer is not None and not self._writer.done():
            self._writer.cancel()
        logger.debug(f"Connection {self.connection_id} closed with {self.pending} undelivered payloads")
