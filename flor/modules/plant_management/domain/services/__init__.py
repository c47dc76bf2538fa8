from .plant_service import PlantService
from .room_service import RoomService
from .watering_calculator import (
    calculate_watering_status,
    format_watering_status,
    sort_by_next_watering,
)
from .watering_service import WateringService

__all__ = [
    "PlantService",
    "RoomService",
    "WateringService",
    "calculate_watering_status",
    "format_watering_status",
    "sort_by_next_watering",
]
