"""
AI Assistant API Schemas

Request Schemas:
- CareRequest: Plant name to generate care for
- AIPlantCreateRequest: Reviewed wizard result to save as a plant
- FeedbackRequest: Thumbs up/down on the AI output

Response Schemas:
- IdentificationResponse, FeedbackResponse, WizardStepsResponse
"""

from typing import Any, Dict, List, Optional
from uuid import UUID

from pydantic import BaseModel, Field

from flor.modules.plant_management.domain.models import PlantDraft

from ...domain.models import CareInstructions, FeedbackType, PlantIdentificationResult


class CareRequest(BaseModel):
    plant_name: str = Field(..., description="Common or scientific plant name", examples=["Monstera deliciosa"])


class AIPlantCreateRequest(BaseModel):
    name: str = Field(..., description="Plant name (1-100 characters)")
    care: CareInstructions
    room_id: Optional[UUID] = None

    def to_draft(self) -> PlantDraft:
        return PlantDraft(
            name=self.name,
            room_id=str(self.room_id) if self.room_id else None,
            **self.care.as_plant_fields(),
        )


class FeedbackRequest(BaseModel):
    feedback_type: FeedbackType
    comment: str = Field("", max_length=1000)
    ai_response_snapshot: Optional[Dict[str, Any]] = None


class IdentificationResponse(BaseModel):
    identification: PlantIdentificationResult
    suggested_name: str


class FeedbackResponse(BaseModel):
    success: bool


class WizardStepsResponse(BaseModel):
    initial_step: str
    steps: List[Dict[str, Any]]
