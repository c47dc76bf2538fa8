# 📄 File: flor/modules/plant_management/domain/models/plant.py
# 🧭 Purpose (Layman Explanation):
# Defines what a plant is in Flor: its name, photo, how often it needs water, which room it
# lives in, plus the care notes, and the "when do I water next" details shown in lists.
# 🧪 Purpose (Technical Summary):
# Pydantic domain models for the Plant aggregate, its create/update payloads and the
# read models enriched with derived watering status.
# 🔗 Dependencies:
# pydantic, datetime, typing, watering models
# 🔄 Connected Modules / Calls From:
# plant_service.py, plant_repository.py, plant_repository_impl.py, plant API schemas

from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .watering import WateringHistory

MAX_PLANT_NAME_LENGTH = 100
MIN_WATERING_FREQUENCY_DAYS = 1
MAX_WATERING_FREQUENCY_DAYS = 365


class PlantSortOption(str, Enum):
    """Orderings offered by the plant list."""
    WATERING = "watering"
    NAME = "name"


class Plant(BaseModel):
    """
    Plant owned by one user.

    Watering status is never stored on the plant; it is derived from the
    most recent watering history row.
    """
    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    name: str
    photo_url: Optional[str] = None
    watering_frequency_days: int
    room_id: Optional[str] = None
    light_requirements: Optional[str] = None
    fertilizing_tips: Optional[str] = None
    pruning_tips: Optional[str] = None
    troubleshooting: Optional[str] = None
    created_with_ai: bool = False
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class PlantDraft(BaseModel):
    """Fields supplied when creating a plant (validated by PlantService)."""
    name: str
    watering_frequency_days: int
    room_id: Optional[str] = None
    light_requirements: Optional[str] = None
    fertilizing_tips: Optional[str] = None
    pruning_tips: Optional[str] = None
    troubleshooting: Optional[str] = None


class PlantChanges(BaseModel):
    """Partial update; only fields explicitly set are applied."""
    name: Optional[str] = None
    watering_frequency_days: Optional[int] = None
    room_id: Optional[str] = None
    light_requirements: Optional[str] = None
    fertilizing_tips: Optional[str] = None
    pruning_tips: Optional[str] = None
    troubleshooting: Optional[str] = None


class PlantWithWatering(Plant):
    room_name: Optional[str] = None
    last_watered_date: Optional[datetime] = None
    next_watering_date: Optional[datetime] = None
    days_until_watering: Optional[int] = None
    is_overdue: bool = False


class PlantDetails(PlantWithWatering):
    watering_history: List[WateringHistory] = Field(default_factory=list)


class PlantNeedingWater(BaseModel):
    plant_id: str
    plant_name: str
    photo_url: Optional[str] = None
    last_watered: datetime
    next_watering: datetime
    days_overdue: int
