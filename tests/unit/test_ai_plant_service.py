import asyncio

import aiohttp
import pytest

from flor.modules.ai_assistant.domain.ai_plant_service import AIPlantService
from flor.modules.ai_assistant.domain.models import (
    CareInstructions,
    FeedbackType,
    PlantIdentificationResult,
)
from flor.modules.ai_assistant.infrastructure.external.openai_client import OpenAICareClient
from flor.modules.ai_assistant.infrastructure.external.plantnet_client import PlantNetClient
from flor.modules.plant_management.domain.models import Plant, PlantDraft
from flor.modules.usage_limits.domain import UsageLimitService
from flor.shared.core.exceptions import (
    APITimeoutError,
    DatabaseError,
    ExternalAPIError,
    UsageLimitExceededError,
    ValidationError,
)
from flor.shared.utils.resilience import ErrorType, TypedError

from ..conftest import OTHER_USER_ID, USER_ID
from ..fakes import ScriptedCareGenerator, ScriptedIdentifier

IDENTIFICATION = PlantIdentificationResult(
    scientific_name="Ficus elastica Roxb. ex Hornem.",
    common_names=["Rubber Plant"],
    confidence=0.91,
)

CARE = CareInstructions(
    watering_frequency_days=10,
    light_requirements="Bright indirect light",
    fertilizing_tips=["Monthly in spring", "Skip in winter"],
    troubleshooting=["Leaf drop: cold draughts"],
)


@pytest.fixture
def make_service(store, plant_service, usage_service):
    def factory(identifier=None, care_generator=None, usage=None, timeout_seconds=5.0):
        return AIPlantService(
            identifier or PlantNetClient(mock_delay_seconds=0),
            care_generator or OpenAICareClient(mock_delay_seconds=0),
            plant_service,
            usage or usage_service,
            store.feedback,
            timeout_seconds=timeout_seconds,
            max_retries=3,
            retry_initial_delay=0,
        )
    return factory


def draft(name="Rubber Plant") -> PlantDraft:
    return PlantDraft(name=name, **CARE.as_plant_fields())


class TestIdentify:

    async def test_retries_retryable_failures(self, make_service):
        identifier = ScriptedIdentifier(ExternalAPIError("PlantNet API error (503)"), IDENTIFICATION)

        result = await make_service(identifier=identifier).identify_plant(b"jpeg")

        assert result == IDENTIFICATION
        assert identifier.identify.calls == 2

    async def test_gives_up_after_four_attempts(self, make_service):
        identifier = ScriptedIdentifier(ExternalAPIError("PlantNet API error (500)"))

        with pytest.raises(ExternalAPIError):
            await make_service(identifier=identifier).identify_plant(b"jpeg")

        assert identifier.identify.calls == 4

    async def test_slow_identification_times_out(self, make_service):
        class SlowIdentifier:
            async def identify(self, image_data):
                await asyncio.sleep(5)

        service = make_service(identifier=SlowIdentifier(), timeout_seconds=0.05)
        service.max_retries = 0

        with pytest.raises(APITimeoutError) as exc_info:
            await service.identify_plant(b"jpeg")

        assert exc_info.value.status_code == 504
        assert exc_info.value.message == "The request took too long. Please try again."
        assert exc_info.value.details["reason"] == "Plant identification took too long"

    async def test_connection_failure_becomes_network_message(self, make_service):
        identifier = ScriptedIdentifier(aiohttp.ClientConnectionError("Cannot connect to host my-api.plantnet.org"))
        service = make_service(identifier=identifier)
        service.max_retries = 1

        with pytest.raises(ExternalAPIError) as exc_info:
            await service.identify_plant(b"jpeg")

        assert identifier.identify.calls == 2
        assert exc_info.value.status_code == 502
        assert exc_info.value.message == "Network connection failed. Please check your internet and try again."
        assert exc_info.value.details["error_type"] == "network"

    async def test_unclassified_failure_gets_generic_message(self, make_service):
        identifier = ScriptedIdentifier(RuntimeError("boom"))
        service = make_service(identifier=identifier)
        service.max_retries = 0

        with pytest.raises(ExternalAPIError) as exc_info:
            await service.identify_plant(b"jpeg")

        assert exc_info.value.message == "An unexpected error occurred. Please try again."
        assert exc_info.value.details["reason"] == "boom"

    async def test_invalid_file_is_not_retried(self, make_service):
        identifier = ScriptedIdentifier(TypedError("Invalid file format", ErrorType.INVALID_FILE))

        with pytest.raises(ValidationError, match="Invalid file format"):
            await make_service(identifier=identifier).identify_plant(b"jpeg")

        assert identifier.identify.calls == 1


class TestGenerateCare:

    async def test_blank_name_rejected_without_calling_api(self, make_service):
        generator = ScriptedCareGenerator(CARE)

        with pytest.raises(ValidationError, match="Plant name is required"):
            await make_service(care_generator=generator).generate_care("   ")

        assert generator.generate.calls == 0

    async def test_name_is_trimmed(self, make_service):
        generator = ScriptedCareGenerator(CARE)

        care = await make_service(care_generator=generator).generate_care("  Rubber Plant ")

        assert care == CARE

    async def test_mock_generator_end_to_end(self, make_service):
        care = await make_service().generate_care("Monstera deliciosa")

        assert care.watering_frequency_days == 7


class TestCreateAIPlant:

    async def test_creates_flagged_plant_and_counts_usage(self, make_service, store):
        plant = await make_service().create_ai_plant(USER_ID, draft())

        assert plant.created_with_ai is True
        assert plant.watering_frequency_days == 10
        assert plant.fertilizing_tips == "Monthly in spring\nSkip in winter"
        assert plant.pruning_tips is None
        assert store.usage.counters == {(USER_ID, "2025-06"): 1}

    async def test_monthly_quota_blocks_creation(self, make_service, store):
        store.usage.counters[(USER_ID, "2025-06")] = 20

        with pytest.raises(UsageLimitExceededError, match="AI generation limit reached: 20 per month"):
            await make_service().create_ai_plant(USER_ID, draft())

        assert store.plants.plants == {}

    async def test_plant_quota_checked_before_ai_quota(self, make_service, store, clock):
        store.usage.counters[(USER_ID, "2025-06")] = 20
        store.plants.plants["p1"] = Plant(id="p1", user_id=USER_ID, name="Only", watering_frequency_days=3)
        usage = UsageLimitService(store.usage, max_plants_per_user=1, clock=clock)

        with pytest.raises(UsageLimitExceededError) as exc_info:
            await make_service(usage=usage).create_ai_plant(USER_ID, draft())

        assert exc_info.value.details["limit_type"] == "plants"

    async def test_counter_write_failure_fails_request(self, make_service, store):
        store.usage.fail_writes = True

        with pytest.raises(DatabaseError):
            await make_service().create_ai_plant(USER_ID, draft())

    async def test_invalid_frequency_rejected(self, make_service):
        with pytest.raises(ValidationError):
            await make_service().create_ai_plant(USER_ID, PlantDraft(name="Rubber Plant", watering_frequency_days=0))


class TestFeedback:

    async def test_records_feedback_for_own_plant(self, make_service, store):
        service = make_service()
        plant = await service.create_ai_plant(USER_ID, draft())

        ok = await service.record_feedback(
            USER_ID,
            plant.id,
            FeedbackType.THUMBS_UP,
            comment="  spot on ",
            ai_response_snapshot={"care_instructions": CARE.model_dump(mode="json")},
        )

        assert ok is True
        [feedback] = store.feedback.items
        assert feedback.comment == "spot on"
        assert feedback.feedback_type == FeedbackType.THUMBS_UP

    async def test_foreign_plant_returns_false(self, make_service, store):
        service = make_service()
        plant = await service.create_ai_plant(OTHER_USER_ID, draft())

        assert await service.record_feedback(USER_ID, plant.id, FeedbackType.THUMBS_DOWN) is False
        assert store.feedback.items == []

    async def test_storage_failure_returns_false(self, make_service, store):
        service = make_service()
        plant = await service.create_ai_plant(USER_ID, draft())
        store.feedback.fail = True

        assert await service.record_feedback(USER_ID, plant.id, FeedbackType.THUMBS_DOWN) is False
