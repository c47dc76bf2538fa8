# 📄 File: flor/modules/plant_management/domain/repositories/plant_repository.py
# 🧭 Purpose (Layman Explanation):
# Defines the contract for saving, finding, changing and removing plants without saying
# which database does the work.
# 🧪 Purpose (Technical Summary):
# Repository interface for Plant entities following the Repository pattern and dependency
# inversion; concrete implementations live in the infrastructure layer.
# 🔗 Dependencies:
# Domain models (Plant), typing, abc
# 🔄 Connected Modules / Calls From:
# plant_service.py, room_service.py, plant_repository_impl.py, in-memory test fakes

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from ..models.plant import Plant


class PlantRepository(ABC):
    """
    Repository interface for Plant data access operations.

    Implementation Notes:
    - Methods return domain entities (Plant), not database models
    - Failures surface as DatabaseError
    """

    @abstractmethod
    async def create(self, plant: Plant) -> Plant:
        """
        Persist a new plant.

        Args:
            plant: Plant entity with its generated id

        Returns:
            The stored Plant
        """
        pass

    @abstractmethod
    async def get_by_id(self, plant_id: str) -> Optional[Plant]:
        """Get a plant by id regardless of owner."""
        pass

    @abstractmethod
    async def list_by_user(self, user_id: str, room_id: Optional[str] = None) -> List[Plant]:
        """
        List a user's plants, most recently updated first.

        Args:
            user_id: Owner id
            room_id: Optional room filter
        """
        pass

    @abstractmethod
    async def update(self, plant_id: str, values: Dict[str, Any]) -> Plant:
        """Apply column values to a plant and return the updated entity."""
        pass

    @abstractmethod
    async def delete(self, plant_id: str) -> None:
        """Delete a plant; watering history and feedback cascade."""
        pass

    @abstractmethod
    async def count_by_user(self, user_id: str) -> int:
        pass

    @abstractmethod
    async def count_in_room(self, room_id: str, user_id: str) -> int:
        pass
