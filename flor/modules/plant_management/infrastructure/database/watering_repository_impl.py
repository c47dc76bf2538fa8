import logging
from datetime import datetime
from typing import Dict, Iterable, List, Optional

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from flor.shared.core.exceptions import DatabaseError

from ...domain.models.watering import WateringHistory
from ...domain.repositories.watering_repository import WateringRepository
from .models import WateringHistoryModel

logger = logging.getLogger(__name__)


class WateringRepositoryImpl(WateringRepository):
    """SQLAlchemy implementation of the WateringRepository interface."""

    def __init__(self, session: AsyncSession):
        self._session = session

    async def add(self, entry: WateringHistory) -> WateringHistory:
        try:
            model = WateringHistoryModel(**entry.model_dump())
            self._session.add(model)
            await self._session.flush()
            return WateringHistory.model_validate(model)
        except SQLAlchemyError as e:
            logger.error(f"Database error recording watering for {entry.plant_id}: {e}")
            raise DatabaseError(
                f"Failed to record watering: {e}", operation="insert", table="watering_history"
            ) from e

    async def list_for_plant(self, plant_id: str, limit: int = 10) -> List[WateringHistory]:
        try:
            stmt = (
                select(WateringHistoryModel)
                .where(WateringHistoryModel.plant_id == plant_id)
                .order_by(WateringHistoryModel.watered_at.desc())
                .limit(limit)
            )
            result = await self._session.execute(stmt)
            return [WateringHistory.model_validate(model) for model in result.scalars().all()]
        except SQLAlchemyError as e:
            logger.error(f"Database error reading watering history for {plant_id}: {e}")
            raise DatabaseError(
                f"Failed to read watering history: {e}", operation="select", table="watering_history"
            ) from e

    async def last_watered_at(self, plant_ids: Iterable[str]) -> Dict[str, Optional[datetime]]:
        plant_ids = list(plant_ids)
        last: Dict[str, Optional[datetime]] = {plant_id: None for plant_id in plant_ids}
        if not plant_ids:
            return last

        try:
            stmt = (
                select(WateringHistoryModel.plant_id, func.max(WateringHistoryModel.watered_at))
                .where(WateringHistoryModel.plant_id.in_(plant_ids))
                .group_by(WateringHistoryModel.plant_id)
            )
            result = await self._session.execute(stmt)
            for plant_id, watered_at in result.all():
                last[plant_id] = watered_at
            return last
        except SQLAlchemyError as e:
            logger.error(f"Database error reading last watering dates: {e}")
            raise DatabaseError(
                f"Failed to read last watering dates: {e}", operation="select", table="watering_history"
            ) from e
