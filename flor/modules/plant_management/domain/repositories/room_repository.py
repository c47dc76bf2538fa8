from abc import ABC, abstractmethod
from typing import Dict, Iterable, List, Optional

from ..models.room import Room


class RoomRepository(ABC):
    """Repository interface for Room data access operations."""

    @abstractmethod
    async def create(self, room: Room) -> Room:
        pass

    @abstractmethod
    async def get_for_user(self, room_id: str, user_id: str) -> Optional[Room]:
        """Get a room only if it belongs to ``user_id``."""
        pass

    @abstractmethod
    async def list_by_user(self, user_id: str) -> List[Room]:
        """List a user's rooms ordered by name."""
        pass

    @abstractmethod
    async def get_names(self, room_ids: Iterable[str]) -> Dict[str, str]:
        """Map room id to room name for the given ids."""
        pass

    @abstractmethod
    async def rename(self, room_id: str, name: str) -> Room:
        pass

    @abstractmethod
    async def delete(self, room_id: str) -> None:
        pass
