"""
AI Assistant Domain

Identification and care models, the AI plant service and the wizard state machine.
"""

from .ai_plant_service import AIPlantService
from .models import (
    AIFeedback,
    CareInstructions,
    FeedbackType,
    PlantIdentificationResult,
    WateringAmount,
)
from .repository import AIFeedbackRepository

__all__ = [
    "AIPlantService",
    "AIFeedback",
    "AIFeedbackRepository",
    "CareInstructions",
    "FeedbackType",
    "PlantIdentificationResult",
    "WateringAmount",
]
