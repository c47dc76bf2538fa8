# 📄 File: flor/modules/usage_limits/domain/models.py
# 🧭 Purpose (Layman Explanation):
# Describes the answers to "can this person create another AI plant?" and "can they add
# another plant at all?", plus the friendly summary shown on the usage page.
# 🧪 Purpose (Technical Summary):
# Pydantic value objects for monthly AI generation quota, total plant quota and their
# combined/detailed views; month keys are "YYYY-MM" in UTC.
# 🔗 Dependencies:
# pydantic, datetime
# 🔄 Connected Modules / Calls From:
# usage_limit_service.py, usage API endpoint, AIPlantService

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict

AI_GENERATIONS_PER_MONTH = 20
MAX_PLANTS_PER_USER = 100


def month_key(moment: datetime) -> str:
    """Return the "YYYY-MM" usage bucket for ``moment`` (UTC)."""
    if moment.tzinfo is not None:
        moment = moment.astimezone(timezone.utc)
    return f"{moment.year:04d}-{moment.month:02d}"


def first_day_of_next_month(moment: datetime) -> datetime:
    """UTC midnight on the first day of the month after ``moment``."""
    if moment.tzinfo is not None:
        moment = moment.astimezone(timezone.utc)
    if moment.month == 12:
        return datetime(moment.year + 1, 1, 1, tzinfo=timezone.utc)
    return datetime(moment.year, moment.month + 1, 1, tzinfo=timezone.utc)


class AIGenerationLimitStatus(BaseModel):
    model_config = ConfigDict(frozen=True)

    allowed: bool
    used: int
    limit: int
    resets_on: datetime


class PlantCountLimitStatus(BaseModel):
    model_config = ConfigDict(frozen=True)

    allowed: bool
    count: int
    limit: int


class UserUsageLimits(BaseModel):
    ai_generations: AIGenerationLimitStatus
    plants: PlantCountLimitStatus


class DetailedUsage(BaseModel):
    """Usage numbers plus display strings for the account page."""
    ai_generations_used: int
    ai_generations_limit: int
    ai_generations_remaining: int
    ai_resets_on: datetime
    plants_count: int
    plants_limit: int
    plants_remaining: int
    can_create_ai_plant: bool
    can_create_plant: bool
    ai_usage_display: str
    ai_remaining_display: str
    plants_remaining_display: str
