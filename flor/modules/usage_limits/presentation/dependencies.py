"""
Usage Limits Module Dependencies
"""

from fastapi import Depends

from flor.shared.config.settings import Settings, get_settings

from ..domain.repository import UsageLimitRepository
from ..domain.usage_limit_service import UsageLimitService
from ..infrastructure.usage_repository_impl import UsageLimitRepositoryImpl


def get_usage_limit_repository() -> UsageLimitRepository:
    return UsageLimitRepositoryImpl()


def get_usage_limit_service(
    repository: UsageLimitRepository = Depends(get_usage_limit_repository),
    settings: Settings = Depends(get_settings),
) -> UsageLimitService:
    """Build the usage limit service with the configured quotas."""
    return UsageLimitService(
        repository,
        ai_generations_per_month=settings.AI_GENERATIONS_PER_MONTH,
        max_plants_per_user=settings.MAX_PLANTS_PER_USER,
        fail_open=settings.USAGE_LIMITS_FAIL_OPEN,
    )
