"""Test configuration and fixtures."""
import json
import uuid
from datetime import datetime

import pytest

from backend import RoomRegistry
from broadcaster import Broadcaster
from dispatcher import EventDispatcher


class FakeConnection:
    """Stand-in for connection.Connection that records every payload it is sent."""

    def __init__(self, name: str = "", sendable: bool = True):
        self.connection_id = name or str(uuid.uuid4())
        self.room_id = None
        self.user = None
        self.connected_at = datetime.now().isoformat()
        self.sendable = sendable
        self.sent: list[str] = []

    def __repr__(self):
        return f"FakeConnection({self.connection_id})"

    def is_sendable(self) -> bool:
        return self.sendable

    def send(self, text: str):
        self.sent.append(text)

    @property
    def events(self) -> list[dict]:
        return [json.loads(text) for text in self.sent]

    def clear(self):
        self.sent.clear()


class BrokenConnection(FakeConnection):
    """Reports itself sendable but fails on every send."""

    def send(self, text: str):
        raise RuntimeError("transport gone")


@pytest.fixture
def registry() -> RoomRegistry:
    return RoomRegistry()


@pytest.fixture
def broadcaster(registry) -> Broadcaster:
    return Broadcaster(registry)


@pytest.fixture
def dispatcher(registry) -> EventDispatcher:
    return EventDispatcher(registry)


def join_frame(room_id=None, user=None) -> str:
    frame = {"type": "join"}
    if room_id is not None:
        frame["roomId"] = room_id
    if user is not None:
        frame["user"] = user
    return json.dumps(frame)
