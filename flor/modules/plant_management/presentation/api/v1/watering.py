"""
Watering API Endpoints

Endpoints:
- POST /water/{plant_id}: Record a watering (now, or an explicit time)
- GET /notifications: Plants due today or overdue
"""

import logging
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Body, Depends, status

from flor.shared.core.dependencies import CurrentUser, get_current_user

from ....domain.services import PlantService, WateringService
from ...dependencies import get_plant_service, get_watering_service
from ..schemas.plant_schemas import (
    NotificationsResponse,
    WateringHistoryResponse,
    WaterPlantRequest,
    WaterPlantResponse,
)

logger = logging.getLogger(__name__)

watering_router = APIRouter()


@watering_router.post(
    "/water/{plant_id}",
    response_model=WaterPlantResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Water plant",
    responses={
        201: {"description": "Watering recorded"},
        401: {"description": "Authentication required"},
        404: {"description": "Plant not found"},
    }
)
async def water_plant(
    plant_id: UUID,
    request: Optional[WaterPlantRequest] = Body(None),
    current_user: CurrentUser = Depends(get_current_user),
    watering_service: WateringService = Depends(get_watering_service),
) -> WaterPlantResponse:
    entry = await watering_service.record_watering(
        str(plant_id),
        current_user.user_id,
        watered_at=request.watered_at if request else None,
    )
    return WaterPlantResponse(watering=WateringHistoryResponse.model_validate(entry))


@watering_router.get(
    "/notifications",
    response_model=NotificationsResponse,
    summary="Plants needing water",
    description="Plants due today or overdue, used for the notification badge",
    responses={
        200: {"description": "Plants needing water"},
        401: {"description": "Authentication required"},
    }
)
async def get_notifications(
    current_user: CurrentUser = Depends(get_current_user),
    plant_service: PlantService = Depends(get_plant_service),
) -> NotificationsResponse:
    plants = await plant_service.get_plants_needing_water(current_user.user_id)
    return NotificationsResponse(notifications=plants, count=len(plants))
