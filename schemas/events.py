import time
from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


def now_ms() -> int:
    return int(time.time() * 1000)


def is_truthy(value: Any) -> bool:
    """Truthiness as browser clients see it: empty objects and arrays count as set."""
    if isinstance(value, (dict, list)):
        return True
    return bool(value)


# Inbound frames. Unknown fields are ignored.

class InboundFrame(BaseModel):
    type: str


class JoinFrame(BaseModel):
    room_id: Optional[str] = Field(None, alias="roomId")
    user: Any = None

    @field_validator("room_id", mode="before")
    @classmethod
    def falsy_room_id_is_unset(cls, value: Any) -> Any:
        # falsy falls back to the default room, other non-strings fail validation
        if not is_truthy(value):
            return None
        return value


class ChatFrame(BaseModel):
    message: Any


class TypingFrame(BaseModel):
    user_id: Any = Field(alias="userId")
    user_name: Any = Field(alias="userName")
    is_typing: Any = Field(alias="isTyping")


class ReactionFrame(BaseModel):
    payload: Any


# Outbound events. Serialize with model_dump(by_alias=True).

class OutboundEvent(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class JoinedEvent(OutboundEvent):
    type: Literal["joined"] = "joined"
    room_id: str = Field(alias="roomId")


class PresenceEvent(OutboundEvent):
    type: Literal["presence"] = "presence"
    event: Literal["join", "leave"]
    user: Any
    at: int = Field(default_factory=now_ms)


class ChatEvent(OutboundEvent):
    type: Literal["chat"] = "chat"
    message: Any
    at: int = Field(default_factory=now_ms)


class TypingEvent(OutboundEvent):
    type: Literal["typing"] = "typing"
    user_id: Any = Field(alias="userId")
    user_name: Any = Field(alias="userName")
    is_typing: bool = Field(alias="isTyping")
    at: int = Field(default_factory=now_ms)


class ReactionEvent(OutboundEvent):
    type: Literal["reaction"] = "reaction"
    payload: Any
    at: int = Field(default_factory=now_ms)
