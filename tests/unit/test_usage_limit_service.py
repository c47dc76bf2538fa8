import asyncio
from contextlib import asynccontextmanager
from datetime import datetime, timezone

import pytest

from flor.modules.plant_management.domain.models import Plant
from flor.modules.usage_limits.domain import UsageLimitService, first_day_of_next_month, month_key
from flor.modules.usage_limits.infrastructure import UsageLimitRepositoryImpl
from flor.shared.core.exceptions import DatabaseError, UsageLimitExceededError

from ..conftest import NOW, OTHER_USER_ID, USER_ID


def add_plants(store, count, user_id=USER_ID):
    for i in range(count):
        plant = Plant(id=f"plant-{user_id[:4]}-{i}", user_id=user_id, name=f"Plant {i}", watering_frequency_days=7)
        store.plants.plants[plant.id] = plant


def test_month_key_uses_utc():
    assert month_key(datetime(2025, 1, 31, 23, 30, tzinfo=timezone.utc)) == "2025-01"
    assert month_key(datetime(2025, 12, 5)) == "2025-12"


def test_first_day_of_next_month_rolls_over_year():
    assert first_day_of_next_month(datetime(2025, 12, 20, tzinfo=timezone.utc)) == datetime(
        2026, 1, 1, tzinfo=timezone.utc
    )
    assert first_day_of_next_month(NOW) == datetime(2025, 7, 1, tzinfo=timezone.utc)


class TestAIGenerationLimit:

    async def test_fresh_user_is_allowed(self, usage_service):
        status = await usage_service.check_ai_generation_limit(USER_ID)

        assert status.allowed is True
        assert status.used == 0
        assert status.limit == 20
        assert status.resets_on == datetime(2025, 7, 1, tzinfo=timezone.utc)

    async def test_blocked_at_limit(self, store, usage_service):
        store.usage.counters[(USER_ID, "2025-06")] = 20

        status = await usage_service.check_ai_generation_limit(USER_ID)

        assert status.allowed is False
        assert status.used == 20

    async def test_new_month_starts_from_zero(self, store):
        store.usage.counters[(USER_ID, "2025-06")] = 20
        july = UsageLimitService(store.usage, clock=lambda: datetime(2025, 7, 1, 0, 5, tzinfo=timezone.utc))

        status = await july.check_ai_generation_limit(USER_ID)

        assert status.allowed is True
        assert status.used == 0

    async def test_increment_counts_per_month(self, store, usage_service):
        assert await usage_service.increment_ai_usage(USER_ID) == 1
        assert await usage_service.increment_ai_usage(USER_ID) == 2
        assert store.usage.counters == {(USER_ID, "2025-06"): 2}

    async def test_increment_failure_propagates(self, store, usage_service):
        store.usage.fail_writes = True

        with pytest.raises(DatabaseError):
            await usage_service.increment_ai_usage(USER_ID)


class TestPlantLimit:

    async def test_counts_only_own_plants(self, store, usage_service):
        add_plants(store, 3)
        add_plants(store, 5, user_id=OTHER_USER_ID)

        status = await usage_service.check_plant_limit(USER_ID)

        assert status.count == 3
        assert status.allowed is True

    async def test_ensure_plant_slot_raises_when_full(self, store, clock):
        add_plants(store, 2)
        service = UsageLimitService(store.usage, max_plants_per_user=2, clock=clock)

        with pytest.raises(UsageLimitExceededError) as exc_info:
            await service.ensure_plant_slot(USER_ID)

        assert exc_info.value.message == "Plant limit reached: 2 max plants"
        assert exc_info.value.status_code == 429

    async def test_ensure_ai_generation_available_raises_when_used_up(self, store, usage_service):
        store.usage.counters[(USER_ID, "2025-06")] = 25

        with pytest.raises(UsageLimitExceededError, match="AI generation limit reached: 20 per month"):
            await usage_service.ensure_ai_generation_available(USER_ID)


class TestFailOpen:

    async def test_read_failures_allow_by_default(self, store, usage_service):
        store.usage.fail_reads = True

        limits = await usage_service.get_user_usage_limits(USER_ID)

        assert limits.ai_generations.allowed is True
        assert limits.ai_generations.used == 0
        assert limits.plants.allowed is True
        assert limits.plants.count == 0

    @pytest.mark.parametrize(
        "error",
        [ConnectionRefusedError(111, "Connect call failed"), OSError("Network is unreachable"), asyncio.TimeoutError()],
    )
    async def test_unwrapped_connection_errors_allow(self, store, usage_service, error):
        store.usage.read_error = error

        ai_status = await usage_service.check_ai_generation_limit(USER_ID)
        plant_status = await usage_service.check_plant_limit(USER_ID)

        assert ai_status.allowed is True
        assert ai_status.used == 0
        assert plant_status.allowed is True
        assert plant_status.count == 0

    async def test_repository_wraps_refused_connection(self):
        @asynccontextmanager
        async def unreachable():
            raise ConnectionRefusedError(111, "Connect call failed")
            yield

        repository = UsageLimitRepositoryImpl(session_scope=unreachable)

        with pytest.raises(DatabaseError):
            await repository.get_ai_generations(USER_ID, "2025-06")
        with pytest.raises(DatabaseError):
            await repository.count_plants(USER_ID)

        status = await UsageLimitService(repository).check_ai_generation_limit(USER_ID)
        assert status.allowed is True

    async def test_fail_closed_raises(self, store, clock):
        store.usage.fail_reads = True
        service = UsageLimitService(store.usage, fail_open=False, clock=clock)

        with pytest.raises(DatabaseError):
            await service.check_ai_generation_limit(USER_ID)
        with pytest.raises(DatabaseError):
            await service.check_plant_limit(USER_ID)


async def test_detailed_usage_display_strings(store, usage_service):
    add_plants(store, 4)
    store.usage.counters[(USER_ID, "2025-06")] = 5

    usage = await usage_service.get_detailed_usage(USER_ID)

    assert usage.ai_generations_remaining == 15
    assert usage.plants_remaining == 96
    assert usage.ai_usage_display == "5/20"
    assert usage.ai_remaining_display == "15 left this month"
    assert usage.plants_remaining_display == "96 plant slots available"
    assert usage.can_create_ai_plant is True
    assert usage.can_create_plant is True


async def test_detailed_usage_never_negative(store, usage_service):
    store.usage.counters[(USER_ID, "2025-06")] = 23

    usage = await usage_service.get_detailed_usage(USER_ID)

    assert usage.ai_generations_remaining == 0
    assert usage.ai_remaining_display == "0 left this month"
    assert usage.can_create_ai_plant is False
