"""
AI Assistant Module Dependencies
"""

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from flor.modules.plant_management.domain.services import PlantService
from flor.modules.plant_management.presentation.dependencies import get_plant_service
from flor.modules.usage_limits.domain import UsageLimitService
from flor.modules.usage_limits.presentation.dependencies import get_usage_limit_service
from flor.shared.config.settings import Settings, get_settings
from flor.shared.infrastructure.database.session import get_db_session

from ..domain.ai_plant_service import AIPlantService
from ..domain.repository import AIFeedbackRepository
from ..infrastructure.database.feedback_repository_impl import AIFeedbackRepositoryImpl
from ..infrastructure.external.openai_client import OpenAICareClient
from ..infrastructure.external.plantnet_client import PlantNetClient


def get_plantnet_client(settings: Settings = Depends(get_settings)) -> PlantNetClient:
    return PlantNetClient.from_settings(settings)


def get_care_client(settings: Settings = Depends(get_settings)) -> OpenAICareClient:
    return OpenAICareClient.from_settings(settings)


def get_feedback_repository(session: AsyncSession = Depends(get_db_session)) -> AIFeedbackRepository:
    return AIFeedbackRepositoryImpl(session)


def get_ai_plant_service(
    identifier: PlantNetClient = Depends(get_plantnet_client),
    care_generator: OpenAICareClient = Depends(get_care_client),
    plant_service: PlantService = Depends(get_plant_service),
    usage_service: UsageLimitService = Depends(get_usage_limit_service),
    feedback_repository: AIFeedbackRepository = Depends(get_feedback_repository),
    settings: Settings = Depends(get_settings),
) -> AIPlantService:
    return AIPlantService(
        identifier,
        care_generator,
        plant_service,
        usage_service,
        feedback_repository,
        timeout_seconds=settings.AI_REQUEST_TIMEOUT_SECONDS,
        max_retries=settings.AI_MAX_RETRIES,
    )
