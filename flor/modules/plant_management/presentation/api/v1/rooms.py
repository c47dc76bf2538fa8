"""
Rooms API Endpoints

Endpoints:
- GET /rooms: List rooms (by name)
- POST /rooms: Create room
- PATCH /rooms/{room_id}: Rename room
- DELETE /rooms/{room_id}: Delete an empty room
"""

from uuid import UUID

from fastapi import APIRouter, Depends, Response, status

from flor.shared.core.dependencies import CurrentUser, get_current_user

from ....domain.services import RoomService
from ...dependencies import get_room_service
from ..schemas.room_schemas import RoomCreateRequest, RoomListResponse, RoomResponse, RoomUpdateRequest

rooms_router = APIRouter()


@rooms_router.get("/rooms", response_model=RoomListResponse, summary="List rooms")
async def list_rooms(
    current_user: CurrentUser = Depends(get_current_user),
    room_service: RoomService = Depends(get_room_service),
) -> RoomListResponse:
    rooms = await room_service.list_rooms(current_user.user_id)
    return RoomListResponse(rooms=[RoomResponse.model_validate(r) for r in rooms], count=len(rooms))


@rooms_router.post(
    "/rooms",
    response_model=RoomResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create room",
    responses={422: {"description": "Invalid room name"}}
)
async def create_room(
    request: RoomCreateRequest,
    current_user: CurrentUser = Depends(get_current_user),
    room_service: RoomService = Depends(get_room_service),
) -> RoomResponse:
    room = await room_service.create_room(current_user.user_id, request.name)
    return RoomResponse.model_validate(room)


@rooms_router.patch(
    "/rooms/{room_id}",
    response_model=RoomResponse,
    summary="Rename room",
    responses={404: {"description": "Room not found"}, 422: {"description": "Invalid room name"}}
)
async def rename_room(
    room_id: UUID,
    request: RoomUpdateRequest,
    current_user: CurrentUser = Depends(get_current_user),
    room_service: RoomService = Depends(get_room_service),
) -> RoomResponse:
    room = await room_service.rename_room(str(room_id), current_user.user_id, request.name)
    return RoomResponse.model_validate(room)


@rooms_router.delete(
    "/rooms/{room_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Delete room",
    responses={404: {"description": "Room not found"}, 409: {"description": "Room still has plants"}}
)
async def delete_room(
    room_id: UUID,
    current_user: CurrentUser = Depends(get_current_user),
    room_service: RoomService = Depends(get_room_service),
) -> Response:
    await room_service.delete_room(str(room_id), current_user.user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
