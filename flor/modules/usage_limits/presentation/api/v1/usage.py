"""
Usage API Endpoints

Endpoints:
- GET /usage: Current month's AI generations and plant slots
"""

import logging

from fastapi import APIRouter, Depends

from flor.shared.core.dependencies import CurrentUser, get_current_user

from ....domain.models import DetailedUsage
from ....domain.usage_limit_service import UsageLimitService
from ...dependencies import get_usage_limit_service

logger = logging.getLogger(__name__)

usage_router = APIRouter()


@usage_router.get(
    "/usage",
    response_model=DetailedUsage,
    summary="Get usage limits",
    description="AI generations used this month and remaining plant slots",
    responses={
        200: {"description": "Current usage"},
        401: {"description": "Authentication required"},
    }
)
async def get_usage(
    current_user: CurrentUser = Depends(get_current_user),
    usage_service: UsageLimitService = Depends(get_usage_limit_service),
) -> DetailedUsage:
    return await usage_service.get_detailed_usage(current_user.user_id)
