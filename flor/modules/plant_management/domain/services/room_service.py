# 📄 File: flor/modules/plant_management/domain/services/room_service.py
# 🧭 Purpose (Layman Explanation):
# Lets people sort their plants into rooms like "Kitchen" or "Bedroom", and stops them from
# deleting a room that still has plants in it.
# 🧪 Purpose (Technical Summary):
# Domain service for room CRUD with name validation, per-user ownership and a conflict
# check on delete while plants remain assigned.
# 🔗 Dependencies:
# Room model, room/plant repositories, flor.shared.core.exceptions
# 🔄 Connected Modules / Calls From:
# Rooms API endpoints (flor.modules.plant_management.presentation.api.v1.rooms)

import logging
from datetime import datetime, timezone
from typing import List
from uuid import uuid4

from flor.shared.core.exceptions import ConflictError, NotFoundError, ValidationError

from ..models.room import MAX_ROOM_NAME_LENGTH, Room
from ..repositories.plant_repository import PlantRepository
from ..repositories.room_repository import RoomRepository

logger = logging.getLogger(__name__)


def validate_room_name(name: str) -> str:
    trimmed = name.strip() if isinstance(name, str) else ""
    if not trimmed:
        raise ValidationError("Room name is required", field="name")
    if len(trimmed) > MAX_ROOM_NAME_LENGTH:
        raise ValidationError(
            f"Room name must be {MAX_ROOM_NAME_LENGTH} characters or less",
            field="name"
        )
    return trimmed


class RoomService:
    """Room CRUD scoped to the owning user."""

    def __init__(self, room_repository: RoomRepository, plant_repository: PlantRepository):
        self.room_repository = room_repository
        self.plant_repository = plant_repository

    async def list_rooms(self, user_id: str) -> List[Room]:
        return await self.room_repository.list_by_user(user_id)

    async def get_room(self, room_id: str, user_id: str) -> Room:
        room = await self.room_repository.get_for_user(room_id, user_id)
        if room is None:
            raise NotFoundError("Room not found", resource_type="room", resource_id=room_id)
        return room

    async def create_room(self, user_id: str, name: str) -> Room:
        room = Room(
            id=str(uuid4()),
            user_id=user_id,
            name=validate_room_name(name),
            created_at=datetime.now(timezone.utc),
        )
        created = await self.room_repository.create(room)
        logger.info(f"Room {created.id} created for user {user_id}")
        return created

    async def rename_room(self, room_id: str, user_id: str, name: str) -> Room:
        await self.get_room(room_id, user_id)
        return await self.room_repository.rename(room_id, validate_room_name(name))

    async def delete_room(self, room_id: str, user_id: str) -> None:
        """
        Delete an empty room.

        Raises:
            ConflictError: If plants are still assigned to the room
        """
        await self.get_room(room_id, user_id)

        plant_count = await self.plant_repository.count_in_room(room_id, user_id)
        if plant_count > 0:
            noun = "plant" if plant_count == 1 else "plants"
            raise ConflictError(
                f"Cannot delete room with {plant_count} {noun}. Move plants to another room first.",
                resource_type="room"
            )

        await self.room_repository.delete(room_id)
        logger.info(f"Room {room_id} deleted by user {user_id}")
