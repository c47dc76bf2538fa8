# 📄 File: flor/modules/ai_assistant/domain/ai_plant_service.py
# 🧭 Purpose (Layman Explanation):
# Runs the "add a plant with AI" flow: recognise the plant in a photo, write its care sheet,
# save it (if the user still has free AI plants left) and collect thumbs up/down feedback.
# 🧪 Purpose (Technical Summary):
# Application service composing the PlantNet and OpenAI clients (each call bounded by
# with_timeout and retried by with_retry), the usage limit service, PlantService and the
# AI feedback repository.
# 🔗 Dependencies:
# flor.shared.utils.resilience, UsageLimitService, PlantService, AI clients
# 🔄 Connected Modules / Calls From:
# flor.modules.ai_assistant.presentation.api.v1.ai

import logging
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, Dict, Optional, TypeVar
from uuid import uuid4

from flor.modules.plant_management.domain.models import Plant, PlantDraft
from flor.modules.plant_management.domain.services import PlantService
from flor.modules.usage_limits.domain import UsageLimitService
from flor.shared.core.exceptions import (
    APITimeoutError,
    DatabaseError,
    ExternalAPIError,
    FlorException,
    NotFoundError,
    UsageLimitExceededError,
    ValidationError,
)
from flor.shared.utils.resilience import ErrorType, parse_error, with_retry, with_timeout

from ..infrastructure.external.openai_client import API_NAME as OPENAI_API
from ..infrastructure.external.openai_client import OpenAICareClient
from ..infrastructure.external.plantnet_client import API_NAME as PLANTNET_API
from ..infrastructure.external.plantnet_client import PlantNetClient
from .models import AIFeedback, CareInstructions, FeedbackType, PlantIdentificationResult
from .repository import AIFeedbackRepository

logger = logging.getLogger(__name__)

T = TypeVar("T")


def as_client_error(error: Exception, api_name: str) -> FlorException:
    """
    Translate a failed AI call into the error returned to the client.

    Timeouts become 504 and network, upstream and unclassified failures become
    502, each carrying the friendly text from parse_error. Bad input stays a
    422 and upstream errors already raised as ExternalAPIError pass through.
    """
    if isinstance(error, ValidationError):
        return error

    info = parse_error(error)
    if info.type == ErrorType.TIMEOUT:
        client_error: FlorException = APITimeoutError(info.user_message, api_name=api_name)
    elif info.type in (ErrorType.INVALID_FILE, ErrorType.VALIDATION):
        client_error = ValidationError(info.user_message)
    elif isinstance(error, ExternalAPIError):
        return error
    else:
        client_error = ExternalAPIError(info.user_message, api_name=api_name)

    client_error.details.update({"error_type": info.type.value, "reason": info.message})
    return client_error


class AIPlantService:
    """
    AI-assisted plant creation.

    Args:
        identifier: PlantNet client
        care_generator: OpenAI care client
        plant_service: Plant CRUD
        usage_service: Quota checks and AI usage counter
        feedback_repository: AI feedback store
        timeout_seconds: Hard limit per AI call attempt
        max_retries: Retries for retryable AI failures
        retry_initial_delay: First backoff pause in seconds
    """

    def __init__(
        self,
        identifier: PlantNetClient,
        care_generator: OpenAICareClient,
        plant_service: PlantService,
        usage_service: UsageLimitService,
        feedback_repository: AIFeedbackRepository,
        timeout_seconds: float = 60.0,
        max_retries: int = 3,
        retry_initial_delay: float = 1.0,
    ):
        self.identifier = identifier
        self.care_generator = care_generator
        self.plant_service = plant_service
        self.usage_service = usage_service
        self.feedback_repository = feedback_repository
        self.timeout_seconds = timeout_seconds
        self.max_retries = max_retries
        self.retry_initial_delay = retry_initial_delay

    async def identify_plant(self, image_data: bytes) -> PlantIdentificationResult:
        result = await self._call_ai(
            PLANTNET_API,
            lambda: self.identifier.identify(image_data),
            "Plant identification took too long",
        )
        logger.info(f"Identified {result.scientific_name} ({result.confidence:.2f})")
        return result

    async def generate_care(self, plant_name: str) -> CareInstructions:
        name = (plant_name or "").strip()
        if not name:
            raise ValidationError("Plant name is required", field="plant_name")

        return await self._call_ai(
            OPENAI_API,
            lambda: self.care_generator.generate(name),
            "Care instruction generation took too long",
        )

    async def _call_ai(self, api_name: str, call: Callable[[], Awaitable[T]], timeout_message: str) -> T:
        """Run one AI call with per-attempt timeout and retries, raising client-facing errors."""
        try:
            return await with_retry(
                lambda: with_timeout(call(), self.timeout_seconds, timeout_message),
                max_retries=self.max_retries,
                initial_delay=self.retry_initial_delay,
            )
        except Exception as e:
            client_error = as_client_error(e, api_name)
            if client_error is e:
                raise
            logger.warning(f"{api_name} call failed ({client_error.details['error_type']}): {e}")
            raise client_error from e

    async def ensure_can_create(self, user_id: str) -> None:
        """
        Raises:
            UsageLimitExceededError: If the plant quota or the monthly AI quota is used up
        """
        limits = await self.usage_service.get_user_usage_limits(user_id)

        if not limits.plants.allowed:
            raise UsageLimitExceededError(
                f"Plant limit reached: {limits.plants.limit} max plants",
                limit_type="plants",
                used=limits.plants.count,
                limit=limits.plants.limit,
            )
        if not limits.ai_generations.allowed:
            raise UsageLimitExceededError(
                f"AI generation limit reached: {limits.ai_generations.limit} per month",
                limit_type="ai_generations",
                used=limits.ai_generations.used,
                limit=limits.ai_generations.limit,
            )

    async def create_ai_plant(self, user_id: str, draft: PlantDraft) -> Plant:
        """
        Create a plant flagged as AI-made and count it against this month's quota.

        A failed counter write propagates so the request fails as a whole.
        """
        await self.ensure_can_create(user_id)
        plant = await self.plant_service.create_plant(user_id, draft, created_with_ai=True)
        await self.usage_service.increment_ai_usage(user_id)
        return plant

    async def record_feedback(
        self,
        user_id: str,
        plant_id: str,
        feedback_type: FeedbackType,
        comment: str = "",
        ai_response_snapshot: Optional[Dict[str, Any]] = None,
    ) -> bool:
        """Store feedback on an owned plant; returns False when it could not be saved."""
        try:
            await self.plant_service.get_owned_plant(plant_id, user_id)
            await self.feedback_repository.add(
                AIFeedback(
                    id=str(uuid4()),
                    user_id=user_id,
                    plant_id=plant_id,
                    feedback_type=feedback_type,
                    comment=(comment or "").strip() or None,
                    ai_response_snapshot=ai_response_snapshot,
                    created_at=datetime.now(timezone.utc),
                )
            )
        except (NotFoundError, DatabaseError) as e:
            logger.warning(f"AI feedback for plant {plant_id} not recorded: {e.message}")
            return False

        logger.info(f"AI feedback {FeedbackType(feedback_type).value} recorded for plant {plant_id}")
        return True
