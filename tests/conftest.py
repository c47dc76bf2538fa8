"""
Shared pytest fixtures.

Environment variables are set before any flor module is imported so the
cached settings pick them up.
"""

import io
import os
import random
from datetime import datetime, timezone

os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("DEBUG", "false")
os.environ.setdefault("SUPABASE_JWT_SECRET", "test-jwt-secret")
os.environ.setdefault("AI_MOCK_DELAY_SECONDS", "0")

import pytest
from httpx import ASGITransport, AsyncClient
from PIL import Image

from flor.main import create_application
from flor.modules.ai_assistant.infrastructure.external.openai_client import OpenAICareClient
from flor.modules.ai_assistant.infrastructure.external.plantnet_client import PlantNetClient
from flor.modules.ai_assistant.presentation.api.v1.ai import limiter
from flor.modules.ai_assistant.presentation.dependencies import (
    get_care_client,
    get_feedback_repository,
    get_plantnet_client,
)
from flor.modules.plant_management.domain.services import PlantService, RoomService, WateringService
from flor.modules.plant_management.presentation.dependencies import (
    get_plant_repository,
    get_room_repository,
    get_watering_repository,
)
from flor.modules.usage_limits.domain import UsageLimitService
from flor.modules.usage_limits.presentation.dependencies import get_usage_limit_service
from flor.shared.core.dependencies import CurrentUser, get_current_user
from flor.shared.infrastructure.storage.photo_storage import PlantPhotoStorage, get_photo_storage

from .fakes import (
    FakeBucket,
    InMemoryFeedbackRepository,
    InMemoryPlantRepository,
    InMemoryRoomRepository,
    InMemoryUsageRepository,
    InMemoryWateringRepository,
)

USER_ID = "5f0c6a52-1d7b-4c1e-9a55-2b8f5b0d6a11"
OTHER_USER_ID = "b7d2e1f0-3c4a-4e8b-8f6d-0a1b2c3d4e5f"

NOW = datetime(2025, 6, 15, 12, 0, tzinfo=timezone.utc)


class Store:
    """All in-memory state behind one test."""

    def __init__(self):
        self.plants = InMemoryPlantRepository()
        self.rooms = InMemoryRoomRepository()
        self.waterings = InMemoryWateringRepository()
        self.usage = InMemoryUsageRepository(self.plants)
        self.feedback = InMemoryFeedbackRepository()
        self.bucket = FakeBucket()
        self.ai_generations_per_month = 20
        self.max_plants_per_user = 100


@pytest.fixture
def store() -> Store:
    return Store()


@pytest.fixture
def clock():
    return lambda: NOW


@pytest.fixture
def photo_storage(store) -> PlantPhotoStorage:
    return PlantPhotoStorage(bucket=store.bucket)


@pytest.fixture
def plant_service(store, photo_storage, clock) -> PlantService:
    return PlantService(store.plants, store.rooms, store.waterings, photo_storage=photo_storage, clock=clock)


@pytest.fixture
def room_service(store) -> RoomService:
    return RoomService(store.rooms, store.plants)


@pytest.fixture
def watering_service(store, clock) -> WateringService:
    return WateringService(store.plants, store.waterings, clock=clock)


@pytest.fixture
def usage_service(store, clock) -> UsageLimitService:
    return UsageLimitService(
        store.usage,
        ai_generations_per_month=store.ai_generations_per_month,
        max_plants_per_user=store.max_plants_per_user,
        clock=clock,
    )


def make_image(fmt: str = "PNG", size=(640, 480), color=(34, 139, 34)) -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", size, color).save(buffer, format=fmt)
    return buffer.getvalue()


# =============================================================================
# API FIXTURES
# =============================================================================

@pytest.fixture
def app(store):
    application = create_application()
    overrides = application.dependency_overrides

    overrides[get_current_user] = lambda: CurrentUser(user_id=USER_ID, email="grower@example.com")
    overrides[get_plant_repository] = lambda: store.plants
    overrides[get_room_repository] = lambda: store.rooms
    overrides[get_watering_repository] = lambda: store.waterings
    overrides[get_feedback_repository] = lambda: store.feedback
    overrides[get_photo_storage] = lambda: PlantPhotoStorage(bucket=store.bucket)
    overrides[get_usage_limit_service] = lambda: UsageLimitService(
        store.usage,
        ai_generations_per_month=store.ai_generations_per_month,
        max_plants_per_user=store.max_plants_per_user,
    )
    overrides[get_plantnet_client] = lambda: PlantNetClient(mock_delay_seconds=0, rng=random.Random(7))
    overrides[get_care_client] = lambda: OpenAICareClient(mock_delay_seconds=0)

    limiter.reset()
    return application


@pytest.fixture
async def client(app):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as http_client:
        yield http_client
