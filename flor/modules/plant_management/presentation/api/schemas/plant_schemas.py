# 📄 File: flor/modules/plant_management/presentation/api/schemas/plant_schemas.py
# 🧭 Purpose (Layman Explanation):
# Defines what the app sends when adding or editing a plant and what it gets back,
# including the "water today" style status text.
#
# 🧪 Purpose (Technical Summary):
# Pydantic request/response schemas for plant CRUD, plant details, watering history,
# watering actions and the notifications feed. Business validation (name length,
# frequency range) stays in PlantService so its messages reach the client unchanged.
#
# 🔗 Dependencies:
# - pydantic
# - flor.modules.plant_management.domain.models
# - flor.modules.plant_management.domain.services.watering_calculator (status text)
#
# 🔄 Connected Modules / Calls From:
# - flor.modules.plant_management.presentation.api.v1.plants
# - flor.modules.plant_management.presentation.api.v1.watering
# - flor.modules.ai_assistant.presentation.api.v1.ai

"""
Plant Management API Schemas

Request Schemas:
- PlantCreateRequest: New plant
- PlantUpdateRequest: Partial plant update
- WaterPlantRequest: Optional explicit watering time

Response Schemas:
- PlantResponse / PlantListResponse / PlantDetailResponse
- WateringHistoryResponse / WateringHistoryListResponse / WaterPlantResponse
- NotificationsResponse
"""

from datetime import datetime
from typing import List, Optional, Union
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from ....domain.models import (
    Plant,
    PlantChanges,
    PlantDetails,
    PlantDraft,
    PlantNeedingWater,
    PlantWithWatering,
)
from ....domain.services.watering_calculator import format_watering_status


# =============================================================================
# REQUEST SCHEMAS
# =============================================================================

class PlantCreateRequest(BaseModel):
    name: str = Field(..., description="Plant name (1-100 characters)", examples=["Kitchen Pothos"])
    watering_frequency_days: int = Field(..., description="Days between waterings (1-365)", examples=[7])
    room_id: Optional[UUID] = Field(None, description="Room the plant lives in")
    light_requirements: Optional[str] = None
    fertilizing_tips: Optional[str] = None
    pruning_tips: Optional[str] = None
    troubleshooting: Optional[str] = None

    def to_draft(self) -> PlantDraft:
        data = self.model_dump()
        data["room_id"] = str(self.room_id) if self.room_id else None
        return PlantDraft(**data)


class PlantUpdateRequest(BaseModel):
    """Only fields present in the request body are changed; ``room_id: null`` unassigns the room."""

    name: Optional[str] = None
    watering_frequency_days: Optional[int] = None
    room_id: Optional[UUID] = None
    light_requirements: Optional[str] = None
    fertilizing_tips: Optional[str] = None
    pruning_tips: Optional[str] = None
    troubleshooting: Optional[str] = None

    def to_changes(self) -> PlantChanges:
        data = self.model_dump(exclude_unset=True)
        if data.get("room_id") is not None:
            data["room_id"] = str(data["room_id"])
        return PlantChanges(**data)


class WaterPlantRequest(BaseModel):
    watered_at: Optional[datetime] = Field(None, description="When the plant was watered (defaults to now)")


# =============================================================================
# RESPONSE SCHEMAS
# =============================================================================

class PlantResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    photo_url: Optional[str] = None
    watering_frequency_days: int
    room_id: Optional[str] = None
    room_name: Optional[str] = None
    light_requirements: Optional[str] = None
    fertilizing_tips: Optional[str] = None
    pruning_tips: Optional[str] = None
    troubleshooting: Optional[str] = None
    created_with_ai: bool = False
    created_at: datetime
    updated_at: datetime

    last_watered_date: Optional[datetime] = None
    next_watering_date: Optional[datetime] = None
    days_until_watering: Optional[int] = None
    is_overdue: bool = False
    watering_status: str = Field(..., description='Display text such as "Water today"')

    @classmethod
    def from_domain(cls, plant: Union[Plant, PlantWithWatering]) -> "PlantResponse":
        days = getattr(plant, "days_until_watering", None)
        return cls(**plant.model_dump(), watering_status=format_watering_status(days))


class PlantListResponse(BaseModel):
    plants: List[PlantResponse]
    count: int


class WateringHistoryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    plant_id: str
    watered_at: datetime
    created_at: datetime


class PlantDetailResponse(PlantResponse):
    watering_history: List[WateringHistoryResponse] = Field(default_factory=list)

    @classmethod
    def from_details(cls, details: PlantDetails) -> "PlantDetailResponse":
        return cls(
            **details.model_dump(exclude={"watering_history"}),
            watering_status=format_watering_status(details.days_until_watering),
            watering_history=[WateringHistoryResponse.model_validate(h) for h in details.watering_history],
        )


class WateringHistoryListResponse(BaseModel):
    plant_id: str
    history: List[WateringHistoryResponse]
    count: int


class WaterPlantResponse(BaseModel):
    success: bool = True
    message: str = "Plant watered"
    watering: WateringHistoryResponse


class NotificationsResponse(BaseModel):
    notifications: List[PlantNeedingWater]
    count: int
