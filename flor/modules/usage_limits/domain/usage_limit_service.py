# 📄 File: flor/modules/usage_limits/domain/usage_limit_service.py
# 🧭 Purpose (Layman Explanation):
# Keeps track of how many AI plants someone created this month and how many plants they
# own, and says "no" once they hit the free limits.
# 🧪 Purpose (Technical Summary):
# Domain service enforcing the monthly AI generation quota and the total plant quota.
# Reads fail open when configured to; increments propagate errors. The combined check
# runs both reads concurrently.
# 🔗 Dependencies:
# asyncio, UsageLimitRepository, usage models, flor.shared.core.exceptions
# 🔄 Connected Modules / Calls From:
# usage API endpoint, plant creation endpoint, AIPlantService

import asyncio
import logging
from datetime import datetime, timezone
from typing import Callable, Optional

from flor.shared.core.exceptions import DatabaseError, UsageLimitExceededError

from .models import (
    AI_GENERATIONS_PER_MONTH,
    MAX_PLANTS_PER_USER,
    AIGenerationLimitStatus,
    DetailedUsage,
    PlantCountLimitStatus,
    UserUsageLimits,
    first_day_of_next_month,
    month_key,
)
from .repository import UsageLimitRepository

logger = logging.getLogger(__name__)

# Driver-level connect failures (refused, unreachable, connect timeout) arrive unwrapped
READ_ERRORS = (DatabaseError, OSError, asyncio.TimeoutError)


class UsageLimitService:
    """
    Quota checks for AI plant creation and plant count.

    Args:
        repository: Usage counter persistence
        ai_generations_per_month: Monthly AI quota
        max_plants_per_user: Total plant quota
        fail_open: Treat read failures as "allowed" instead of raising
        clock: Returns the current UTC time
    """

    def __init__(
        self,
        repository: UsageLimitRepository,
        ai_generations_per_month: int = AI_GENERATIONS_PER_MONTH,
        max_plants_per_user: int = MAX_PLANTS_PER_USER,
        fail_open: bool = True,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.repository = repository
        self.ai_generations_per_month = ai_generations_per_month
        self.max_plants_per_user = max_plants_per_user
        self.fail_open = fail_open
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    async def check_ai_generation_limit(self, user_id: str) -> AIGenerationLimitStatus:
        now = self._clock()
        resets_on = first_day_of_next_month(now)

        try:
            used = await self.repository.get_ai_generations(user_id, month_key(now))
        except READ_ERRORS as e:
            if not self.fail_open:
                raise
            logger.error(f"AI usage read failed for {user_id}, allowing request: {e}")
            return AIGenerationLimitStatus(
                allowed=True, used=0, limit=self.ai_generations_per_month, resets_on=resets_on
            )

        return AIGenerationLimitStatus(
            allowed=used < self.ai_generations_per_month,
            used=used,
            limit=self.ai_generations_per_month,
            resets_on=resets_on,
        )

    async def increment_ai_usage(self, user_id: str) -> int:
        """
        Count one AI generation against the current month.

        Raises:
            DatabaseError: If the counter could not be written
        """
        month = month_key(self._clock())
        count = await self.repository.increment_ai_generations(user_id, month)
        logger.info(f"AI usage for {user_id} in {month}: {count}/{self.ai_generations_per_month}")
        return count

    async def check_plant_limit(self, user_id: str) -> PlantCountLimitStatus:
        try:
            count = await self.repository.count_plants(user_id)
        except READ_ERRORS as e:
            if not self.fail_open:
                raise
            logger.error(f"Plant count read failed for {user_id}, allowing request: {e}")
            return PlantCountLimitStatus(allowed=True, count=0, limit=self.max_plants_per_user)

        return PlantCountLimitStatus(
            allowed=count < self.max_plants_per_user,
            count=count,
            limit=self.max_plants_per_user,
        )

    async def get_user_usage_limits(self, user_id: str) -> UserUsageLimits:
        ai_status, plant_status = await asyncio.gather(
            self.check_ai_generation_limit(user_id),
            self.check_plant_limit(user_id),
        )
        return UserUsageLimits(ai_generations=ai_status, plants=plant_status)

    async def get_detailed_usage(self, user_id: str) -> DetailedUsage:
        limits = await self.get_user_usage_limits(user_id)
        ai, plants = limits.ai_generations, limits.plants

        ai_remaining = max(0, ai.limit - ai.used)
        plants_remaining = max(0, plants.limit - plants.count)

        return DetailedUsage(
            ai_generations_used=ai.used,
            ai_generations_limit=ai.limit,
            ai_generations_remaining=ai_remaining,
            ai_resets_on=ai.resets_on,
            plants_count=plants.count,
            plants_limit=plants.limit,
            plants_remaining=plants_remaining,
            can_create_ai_plant=ai.allowed and plants.allowed,
            can_create_plant=plants.allowed,
            ai_usage_display=f"{ai.used}/{ai.limit}",
            ai_remaining_display=f"{ai_remaining} left this month",
            plants_remaining_display=f"{plants_remaining} plant slots available",
        )

    async def ensure_plant_slot(self, user_id: str) -> PlantCountLimitStatus:
        """
        Raises:
            UsageLimitExceededError: If the user already owns the maximum number of plants
        """
        status = await self.check_plant_limit(user_id)
        if not status.allowed:
            raise UsageLimitExceededError(
                f"Plant limit reached: {status.limit} max plants",
                limit_type="plants",
                used=status.count,
                limit=status.limit,
            )
        return status

    async def ensure_ai_generation_available(self, user_id: str) -> AIGenerationLimitStatus:
        """
        Raises:
            UsageLimitExceededError: If this month's AI generations are used up
        """
        status = await self.check_ai_generation_limit(user_id)
        if not status.allowed:
            raise UsageLimitExceededError(
                f"AI generation limit reached: {status.limit} per month",
                limit_type="ai_generations",
                used=status.used,
                limit=status.limit,
            )
        return status
