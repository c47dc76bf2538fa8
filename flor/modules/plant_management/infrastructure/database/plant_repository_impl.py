# 📄 File: flor/modules/plant_management/infrastructure/database/plant_repository_impl.py
# 🧭 Purpose (Layman Explanation):
# Does the actual database work for plants: saving new ones, looking them up, changing
# and deleting them, and counting how many a user has.
#
# 🧪 Purpose (Technical Summary):
# SQLAlchemy async implementation of PlantRepository mapping PlantModel rows to Plant
# domain entities and wrapping SQLAlchemy failures in DatabaseError.
#
# 🔗 Dependencies:
# - flor.modules.plant_management.domain.repositories.plant_repository (interface)
# - flor.modules.plant_management.infrastructure.database.models (PlantModel)
# - SQLAlchemy async session
#
# 🔄 Connected Modules / Calls From:
# - flor.modules.plant_management.presentation.dependencies (service wiring)

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import delete, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from flor.shared.core.exceptions import DatabaseError, NotFoundError

from ...domain.models.plant import Plant
from ...domain.repositories.plant_repository import PlantRepository
from .models import PlantModel

logger = logging.getLogger(__name__)


class PlantRepositoryImpl(PlantRepository):
    """
    SQLAlchemy implementation of the PlantRepository interface.
    """

    def __init__(self, session: AsyncSession):
        self._session = session

    async def create(self, plant: Plant) -> Plant:
        try:
            model = PlantModel(**plant.model_dump())
            self._session.add(model)
            await self._session.flush()
            return Plant.model_validate(model)

        except SQLAlchemyError as e:
            logger.error(f"Database error during plant creation: {e}")
            raise DatabaseError(f"Failed to create plant: {e}", operation="insert", table="plants") from e

    async def get_by_id(self, plant_id: str) -> Optional[Plant]:
        try:
            model = await self._session.get(PlantModel, plant_id)
            return Plant.model_validate(model) if model else None

        except SQLAlchemyError as e:
            logger.error(f"Database error retrieving plant {plant_id}: {e}")
            raise DatabaseError(f"Failed to retrieve plant: {e}", operation="select", table="plants") from e

    async def list_by_user(self, user_id: str, room_id: Optional[str] = None) -> List[Plant]:
        try:
            stmt = select(PlantModel).where(PlantModel.user_id == user_id)
            if room_id:
                stmt = stmt.where(PlantModel.room_id == room_id)
            stmt = stmt.order_by(PlantModel.updated_at.desc())

            result = await self._session.execute(stmt)
            return [Plant.model_validate(model) for model in result.scalars().all()]

        except SQLAlchemyError as e:
            logger.error(f"Database error listing plants for {user_id}: {e}")
            raise DatabaseError(f"Failed to list plants: {e}", operation="select", table="plants") from e

    async def update(self, plant_id: str, values: Dict[str, Any]) -> Plant:
        try:
            model = await self._session.get(PlantModel, plant_id)
            if model is None:
                raise NotFoundError("Plant not found", resource_type="plant", resource_id=plant_id)

            for key, value in values.items():
                setattr(model, key, value)
            await self._session.flush()
            return Plant.model_validate(model)

        except SQLAlchemyError as e:
            logger.error(f"Database error updating plant {plant_id}: {e}")
            raise DatabaseError(f"Failed to update plant: {e}", operation="update", table="plants") from e

    async def delete(self, plant_id: str) -> None:
        try:
            await self._session.execute(delete(PlantModel).where(PlantModel.id == plant_id))

        except SQLAlchemyError as e:
            logger.error(f"Database error deleting plant {plant_id}: {e}")
            raise DatabaseError(f"Failed to delete plant: {e}", operation="delete", table="plants") from e

    async def count_by_user(self, user_id: str) -> int:
        return await self._count(PlantModel.user_id == user_id)

    async def count_in_room(self, room_id: str, user_id: str) -> int:
        return await self._count(PlantModel.room_id == room_id, PlantModel.user_id == user_id)

    async def _count(self, *conditions) -> int:
        try:
            stmt = select(func.count()).select_from(PlantModel).where(*conditions)
            result = await self._session.execute(stmt)
            return result.scalar_one()

        except SQLAlchemyError as e:
            logger.error(f"Database error counting plants: {e}")
            raise DatabaseError(f"Failed to count plants: {e}", operation="count", table="plants") from e
