# 📄 File: flor/modules/ai_assistant/domain/models.py
# 🧭 Purpose (Layman Explanation):
# Describes what the AI helpers hand back: which plant it thinks is in the photo, and the
# care sheet (how often to water, how much light, feeding and pruning tips).
# 🧪 Purpose (Technical Summary):
# Pydantic models for identification results, generated care instructions and AI quality
# feedback, plus the enums constraining watering amount and feedback type.
# 🔗 Dependencies:
# pydantic, enum
# 🔄 Connected Modules / Calls From:
# plantnet_client.py, openai_client.py, ai_plant_service.py, wizard.py, AI API schemas

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class WateringAmount(str, Enum):
    LOW = "low"
    MID = "mid"
    HEAVY = "heavy"


class FeedbackType(str, Enum):
    THUMBS_UP = "thumbs_up"
    THUMBS_DOWN = "thumbs_down"


class PlantIdentificationResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    scientific_name: str
    common_names: List[str] = Field(default_factory=list)
    confidence: float = Field(..., ge=0.0, le=1.0)

    @property
    def display_name(self) -> str:
        """First common name, falling back to the scientific name."""
        return self.common_names[0] if self.common_names else self.scientific_name


class CareInstructions(BaseModel):
    model_config = ConfigDict(frozen=True)

    watering_frequency_days: int = Field(..., ge=1, le=365)
    watering_amount: WateringAmount = WateringAmount.MID
    light_requirements: str
    fertilizing_tips: List[str] = Field(default_factory=list)
    pruning_tips: List[str] = Field(default_factory=list)
    troubleshooting: List[str] = Field(default_factory=list)

    def as_plant_fields(self) -> Dict[str, Any]:
        """Care notes flattened into the plant's free-text columns."""
        return {
            "watering_frequency_days": self.watering_frequency_days,
            "light_requirements": self.light_requirements or None,
            "fertilizing_tips": "\n".join(self.fertilizing_tips) or None,
            "pruning_tips": "\n".join(self.pruning_tips) or None,
            "troubleshooting": "\n".join(self.troubleshooting) or None,
        }


class AIFeedback(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    plant_id: str
    feedback_type: FeedbackType
    comment: Optional[str] = None
    ai_response_snapshot: Optional[Dict[str, Any]] = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
