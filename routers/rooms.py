from fastapi import APIRouter, HTTPException, Request

from backend import normalize_room_id, room_registry
from logging_config import get_logger
from schemas.rooms import OnlineUser, RoomDetailsResponse, RoomSummary

logger = get_logger(__name__)

rooms_router = APIRouter(prefix="/rooms", tags=["rooms"])


@rooms_router.get("", response_model=list[RoomSummary])
async def list_rooms(request: Request):
    """List rooms that currently have at least one member."""
    client_host = request.client.host if request.client else 'unknown'
    rooms = room_registry.rooms()
    logger.info(f"Room list request from {client_host}: {len(rooms)} live rooms")
    return [
        RoomSummary(room_id=room_id, online_users_count=len(members))
        for room_id, members in sorted(rooms.items())
    ]


@rooms_router.get("/{room_id}", response_model=RoomDetailsResponse)
async def get_room_details(room_id: str, request: Request):
    """
    Get room details including the users currently online.

    Returns:
    - room_id: Normalized room identifier
    - online_users_count: Current number of members
    - online_users: Connection id, last known user descriptor and connect time of each member
    """
    client_host = request.client.host if request.client else 'unknown'
    room_id = normalize_room_id(room_id)
    logger.info(f"Room details request for {room_id} from {client_host}")

    members = room_registry.members_of(room_id)
    if not members:
        logger.warning(f"Room details failed: Room {room_id} not found")
        raise HTTPException(status_code=404, detail="Room not found")

    online_users = sorted(
        (OnlineUser(connection_id=m.connection_id, user=m.user, connected_at=m.connected_at) for m in members),
        key=lambda u: u.connected_at,
    )
    return RoomDetailsResponse(
        room_id=room_id,
        online_users_count=len(members),
        online_users=online_users,
    )
