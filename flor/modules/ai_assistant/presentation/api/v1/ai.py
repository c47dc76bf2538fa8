# 📄 File: flor/modules/ai_assistant/presentation/api/v1/ai.py
# 🧭 Purpose (Layman Explanation):
# The web endpoints behind the "add plant with AI" wizard: recognise a photo, write a care
# sheet, save the plant and send feedback on how good the AI was.
#
# 🧪 Purpose (Technical Summary):
# FastAPI endpoints delegating to AIPlantService. Identification is rate limited per client
# address with slowapi; uploaded photos are validated and normalised with Pillow before
# they are sent to PlantNet.
#
# 🔗 Dependencies:
# - FastAPI router, File/UploadFile
# - slowapi: Per-endpoint rate limiting
# - flor.modules.ai_assistant.presentation.dependencies
#
# 🔄 Connected Modules / Calls From:
# - flor.api.v1.router (router inclusion), flor.main (limiter registration)

"""
AI Assistant API Endpoints

Endpoints:
- POST /ai/identify: Identify the plant in an uploaded photo
- POST /ai/care: Generate care instructions for a plant name
- POST /ai/plants: Save a reviewed AI plant (counts against the monthly quota)
- POST /ai/plants/{plant_id}/feedback: Thumbs up/down on the AI output
- GET /ai/wizard/steps: Wizard step graph for clients
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, File, Request, UploadFile, status
from slowapi import Limiter
from slowapi.util import get_remote_address

from flor.modules.plant_management.presentation.api.schemas.plant_schemas import PlantResponse
from flor.shared.config.settings import get_settings
from flor.shared.core.dependencies import CurrentUser, get_current_user
from flor.shared.infrastructure.storage.photo_storage import PlantPhotoStorage, get_photo_storage

from ....domain.ai_plant_service import AIPlantService
from ....domain.models import CareInstructions
from ....domain.wizard import WizardStep, step_graph
from ...dependencies import get_ai_plant_service
from ..schemas import (
    AIPlantCreateRequest,
    CareRequest,
    FeedbackRequest,
    FeedbackResponse,
    IdentificationResponse,
    WizardStepsResponse,
)

logger = logging.getLogger(__name__)

# Rate limiting configuration
limiter = Limiter(key_func=get_remote_address)

ai_router = APIRouter(prefix="/ai")


def _identify_rate_limit() -> str:
    return get_settings().AI_IDENTIFY_RATE_LIMIT


@ai_router.post(
    "/identify",
    response_model=IdentificationResponse,
    summary="Identify plant from photo",
    responses={
        200: {"description": "Best matching species"},
        401: {"description": "Authentication required"},
        422: {"description": "Invalid or oversized image"},
        429: {"description": "Too many identification requests"},
        502: {"description": "Identification service failed"},
    }
)
@limiter.limit(_identify_rate_limit)
async def identify_plant(
    request: Request,
    file: UploadFile = File(..., description="Plant photo (JPG, PNG or WEBP)"),
    current_user: CurrentUser = Depends(get_current_user),
    photo_storage: PlantPhotoStorage = Depends(get_photo_storage),
    ai_service: AIPlantService = Depends(get_ai_plant_service),
) -> IdentificationResponse:
    image_data = photo_storage.process_image(await file.read())
    result = await ai_service.identify_plant(image_data)
    return IdentificationResponse(identification=result, suggested_name=result.display_name)


@ai_router.post(
    "/care",
    response_model=CareInstructions,
    summary="Generate care instructions",
    responses={
        401: {"description": "Authentication required"},
        422: {"description": "Plant name missing"},
        502: {"description": "Care generation failed"},
    }
)
async def generate_care(
    request: CareRequest,
    current_user: CurrentUser = Depends(get_current_user),
    ai_service: AIPlantService = Depends(get_ai_plant_service),
) -> CareInstructions:
    return await ai_service.generate_care(request.plant_name)


@ai_router.post(
    "/plants",
    response_model=PlantResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Save AI plant",
    responses={
        201: {"description": "Plant created"},
        401: {"description": "Authentication required"},
        422: {"description": "Invalid name or watering frequency"},
        429: {"description": "Plant or AI generation limit reached"},
    }
)
async def create_ai_plant(
    request: AIPlantCreateRequest,
    current_user: CurrentUser = Depends(get_current_user),
    ai_service: AIPlantService = Depends(get_ai_plant_service),
) -> PlantResponse:
    plant = await ai_service.create_ai_plant(current_user.user_id, request.to_draft())
    return PlantResponse.from_domain(plant)


@ai_router.post(
    "/plants/{plant_id}/feedback",
    response_model=FeedbackResponse,
    summary="Rate AI output",
)
async def record_feedback(
    plant_id: UUID,
    request: FeedbackRequest,
    current_user: CurrentUser = Depends(get_current_user),
    ai_service: AIPlantService = Depends(get_ai_plant_service),
) -> FeedbackResponse:
    success = await ai_service.record_feedback(
        current_user.user_id,
        str(plant_id),
        request.feedback_type,
        comment=request.comment,
        ai_response_snapshot=request.ai_response_snapshot,
    )
    return FeedbackResponse(success=success)


@ai_router.get("/wizard/steps", response_model=WizardStepsResponse, summary="Wizard step graph")
async def get_wizard_steps() -> WizardStepsResponse:
    return WizardStepsResponse(initial_step=WizardStep.PHOTO_UPLOAD.value, steps=step_graph())
