from abc import ABC, abstractmethod
from datetime import datetime
from typing import Dict, Iterable, List, Optional

from ..models.watering import WateringHistory


class WateringRepository(ABC):
    """
    Repository interface for the insert-only watering history.
    """

    @abstractmethod
    async def add(self, entry: WateringHistory) -> WateringHistory:
        pass

    @abstractmethod
    async def list_for_plant(self, plant_id: str, limit: int = 10) -> List[WateringHistory]:
        """Newest first."""
        pass

    @abstractmethod
    async def last_watered_at(self, plant_ids: Iterable[str]) -> Dict[str, Optional[datetime]]:
        """
        Most recent ``watered_at`` per plant.

        Plants without history map to None.
        """
        pass
