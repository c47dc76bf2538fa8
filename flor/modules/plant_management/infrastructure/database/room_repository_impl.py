import logging
from typing import Dict, Iterable, List, Optional

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from flor.shared.core.exceptions import DatabaseError, NotFoundError

from ...domain.models.room import Room
from ...domain.repositories.room_repository import RoomRepository
from .models import RoomModel

logger = logging.getLogger(__name__)


class RoomRepositoryImpl(RoomRepository):
    """SQLAlchemy implementation of the RoomRepository interface."""

    def __init__(self, session: AsyncSession):
        self._session = session

    async def create(self, room: Room) -> Room:
        try:
            model = RoomModel(**room.model_dump())
            self._session.add(model)
            await self._session.flush()
            return Room.model_validate(model)
        except SQLAlchemyError as e:
            logger.error(f"Database error during room creation: {e}")
            raise DatabaseError(f"Failed to create room: {e}", operation="insert", table="rooms") from e

    async def get_for_user(self, room_id: str, user_id: str) -> Optional[Room]:
        try:
            stmt = select(RoomModel).where(RoomModel.id == room_id, RoomModel.user_id == user_id)
            result = await self._session.execute(stmt)
            model = result.scalar_one_or_none()
            return Room.model_validate(model) if model else None
        except SQLAlchemyError as e:
            logger.error(f"Database error retrieving room {room_id}: {e}")
            raise DatabaseError(f"Failed to retrieve room: {e}", operation="select", table="rooms") from e

    async def list_by_user(self, user_id: str) -> List[Room]:
        try:
            stmt = select(RoomModel).where(RoomModel.user_id == user_id).order_by(RoomModel.name)
            result = await self._session.execute(stmt)
            return [Room.model_validate(model) for model in result.scalars().all()]
        except SQLAlchemyError as e:
            logger.error(f"Database error listing rooms for {user_id}: {e}")
            raise DatabaseError(f"Failed to list rooms: {e}", operation="select", table="rooms") from e

    async def get_names(self, room_ids: Iterable[str]) -> Dict[str, str]:
        room_ids = list(room_ids)
        if not room_ids:
            return {}
        try:
            stmt = select(RoomModel.id, RoomModel.name).where(RoomModel.id.in_(room_ids))
            result = await self._session.execute(stmt)
            return {room_id: name for room_id, name in result.all()}
        except SQLAlchemyError as e:
            logger.error(f"Database error reading room names: {e}")
            raise DatabaseError(f"Failed to read room names: {e}", operation="select", table="rooms") from e

    async def rename(self, room_id: str, name: str) -> Room:
        try:
            model = await self._session.get(RoomModel, room_id)
            if model is None:
                raise NotFoundError("Room not found", resource_type="room", resource_id=room_id)
            model.name = name
            await self._session.flush()
            return Room.model_validate(model)
        except SQLAlchemyError as e:
            logger.error(f"Database error renaming room {room_id}: {e}")
            raise DatabaseError(f"Failed to rename room: {e}", operation="update", table="rooms") from e

    async def delete(self, room_id: str) -> None:
        try:
            await self._session.execute(delete(RoomModel).where(RoomModel.id == room_id))
        except SQLAlchemyError as e:
            logger.error(f"Database error deleting room {room_id}: {e}")
            raise DatabaseError(f"Failed to delete room: {e}", operation="delete", table="rooms") from e
