# 📄 File: flor/modules/plant_management/domain/services/watering_service.py
# 🧭 Purpose (Layman Explanation):
# Writes down every time someone waters a plant and shows them the recent waterings.
# 🧪 Purpose (Technical Summary):
# Domain service appending insert-only watering history rows for owned plants and reading
# the newest entries first.
# 🔗 Dependencies:
# WateringHistory model, plant/watering repositories, flor.shared.core.exceptions
# 🔄 Connected Modules / Calls From:
# Watering API endpoints (POST /water/{plant_id}, GET /plants/{plant_id}/watering-history)

import logging
from datetime import datetime, timezone
from typing import Callable, List, Optional
from uuid import uuid4

from flor.shared.core.exceptions import NotFoundError

from ..models.watering import WateringHistory
from ..repositories.plant_repository import PlantRepository
from ..repositories.watering_repository import WateringRepository
from .plant_service import PLANT_NOT_FOUND

logger = logging.getLogger(__name__)


class WateringService:
    """
    Records watering events and reads history for owned plants.
    """

    def __init__(
        self,
        plant_repository: PlantRepository,
        watering_repository: WateringRepository,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.plant_repository = plant_repository
        self.watering_repository = watering_repository
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    async def _owns(self, plant_id: str, user_id: str) -> bool:
        plant = await self.plant_repository.get_by_id(plant_id)
        return plant is not None and plant.user_id == user_id

    async def record_watering(
        self,
        plant_id: str,
        user_id: str,
        watered_at: Optional[datetime] = None,
    ) -> WateringHistory:
        """
        Append a watering event (defaults to now).

        Raises:
            NotFoundError: If the plant is missing or owned by someone else
        """
        if not await self._owns(plant_id, user_id):
            raise NotFoundError(PLANT_NOT_FOUND, resource_type="plant", resource_id=plant_id)

        now = self._clock()
        entry = WateringHistory(
            id=str(uuid4()),
            plant_id=plant_id,
            watered_at=watered_at or now,
            created_at=now,
        )
        saved = await self.watering_repository.add(entry)
        logger.info(f"Watering recorded for plant {plant_id} at {saved.watered_at.isoformat()}")
        return saved

    async def get_watering_history(self, plant_id: str, user_id: str, limit: int = 10) -> List[WateringHistory]:
        """Newest first; plants the user does not own yield an empty list."""
        if not await self._owns(plant_id, user_id):
            return []
        return await self.watering_repository.list_for_plant(plant_id, limit=limit)
