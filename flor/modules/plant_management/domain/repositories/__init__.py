from .plant_repository import PlantRepository
from .room_repository import RoomRepository
from .watering_repository import WateringRepository

__all__ = ["PlantRepository", "RoomRepository", "WateringRepository"]
