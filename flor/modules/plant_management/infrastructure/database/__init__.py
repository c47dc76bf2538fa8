"""
Plant Management Database Layer

SQLAlchemy models and repository implementations for plants, rooms and
watering history.
"""

from .models import PlantModel, RoomModel, WateringHistoryModel
from .plant_repository_impl import PlantRepositoryImpl
from .room_repository_impl import RoomRepositoryImpl
from .watering_repository_impl import WateringRepositoryImpl

__all__ = [
    "PlantModel",
    "RoomModel",
    "WateringHistoryModel",
    "PlantRepositoryImpl",
    "RoomRepositoryImpl",
    "WateringRepositoryImpl",
]
