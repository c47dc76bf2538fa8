from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class WateringHistory(BaseModel):
    """One watering event. History rows are insert-only."""
    model_config = ConfigDict(from_attributes=True)

    id: str
    plant_id: str
    watered_at: datetime
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class WateringStatus(BaseModel):
    """Derived watering state of a plant; never persisted."""
    model_config = ConfigDict(frozen=True)

    next_watering_date: Optional[datetime] = None
    days_until_watering: Optional[int] = None
    is_overdue: bool = False
