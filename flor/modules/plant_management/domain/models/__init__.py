"""
Plant Management Domain Models
"""

from .plant import (
    MAX_PLANT_NAME_LENGTH,
    MAX_WATERING_FREQUENCY_DAYS,
    MIN_WATERING_FREQUENCY_DAYS,
    Plant,
    PlantChanges,
    PlantDetails,
    PlantDraft,
    PlantNeedingWater,
    PlantSortOption,
    PlantWithWatering,
)
from .room import MAX_ROOM_NAME_LENGTH, Room
from .watering import WateringHistory, WateringStatus

__all__ = [
    "Plant",
    "PlantDraft",
    "PlantChanges",
    "PlantWithWatering",
    "PlantDetails",
    "PlantNeedingWater",
    "PlantSortOption",
    "Room",
    "WateringHistory",
    "WateringStatus",
    "MAX_PLANT_NAME_LENGTH",
    "MIN_WATERING_FREQUENCY_DAYS",
    "MAX_WATERING_FREQUENCY_DAYS",
    "MAX_ROOM_NAME_LENGTH",
]
