from pydantic import BaseModel
from typing import Any, Optional


class RoomSummary(BaseModel):
    room_id: str
    online_users_count: int

class OnlineUser(BaseModel):
    connection_id: str
    user: Any = None
    connected_at: str

class RoomDetailsResponse(BaseModel):
    room_id: str
    online_users_count: int
    online_users: Optional[list[OnlineUser]] = None
