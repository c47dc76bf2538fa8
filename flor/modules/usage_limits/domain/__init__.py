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
from .usage_limit_service import UsageLimitService

__all__ = [
    "AI_GENERATIONS_PER_MONTH",
    "MAX_PLANTS_PER_USER",
    "AIGenerationLimitStatus",
    "PlantCountLimitStatus",
    "UserUsageLimits",
    "DetailedUsage",
    "UsageLimitRepository",
    "UsageLimitService",
    "first_day_of_next_month",
    "month_key",
]
