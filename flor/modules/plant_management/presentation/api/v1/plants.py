# 📄 File: flor/modules/plant_management/presentation/api/v1/plants.py
# 🧭 Purpose (Layman Explanation):
# The web endpoints for a user's plant collection: list, add, view, edit, delete, change
# the photo and look at past waterings.
#
# 🧪 Purpose (Technical Summary):
# FastAPI plant CRUD endpoints delegating to PlantService and WateringService, with the
# plant quota enforced before creation. Domain exceptions propagate to the global
# FlorException handler.
#
# 🔗 Dependencies:
# - FastAPI router, File/UploadFile, Query
# - flor.modules.plant_management.presentation.dependencies (service wiring)
# - flor.modules.usage_limits.presentation.dependencies (plant quota)
# - flor.shared.core.dependencies.get_current_user
#
# 🔄 Connected Modules / Calls From:
# - flor.api.v1.router (router inclusion)

"""
Plants API Endpoints

Endpoints:
- GET /plants: List plants with watering status (optional room filter)
- POST /plants: Create a plant
- GET /plants/{plant_id}: Plant details with recent watering history
- PATCH /plants/{plant_id}: Partial update
- DELETE /plants/{plant_id}: Delete plant, its history and its photo
- POST /plants/{plant_id}/photo: Upload or replace the plant photo
- GET /plants/{plant_id}/watering-history: Watering history, newest first
"""

import logging
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, File, Query, Response, UploadFile, status

from flor.modules.usage_limits.domain.usage_limit_service import UsageLimitService
from flor.modules.usage_limits.presentation.dependencies import get_usage_limit_service
from flor.shared.core.dependencies import CurrentUser, get_current_user

from ....domain.models import PlantSortOption
from ....domain.services import PlantService, WateringService
from ...dependencies import get_plant_service, get_watering_service
from ..schemas.plant_schemas import (
    PlantCreateRequest,
    PlantDetailResponse,
    PlantListResponse,
    PlantResponse,
    PlantUpdateRequest,
    WateringHistoryListResponse,
    WateringHistoryResponse,
)

logger = logging.getLogger(__name__)

plants_router = APIRouter()


@plants_router.get(
    "/plants",
    response_model=PlantListResponse,
    summary="List plants",
    description="List the current user's plants, soonest watering first or by name",
    responses={
        200: {"description": "Plants with watering status"},
        401: {"description": "Authentication required"},
    }
)
async def list_plants(
    room_id: Optional[UUID] = Query(None, description="Only plants in this room"),
    sort: PlantSortOption = Query(PlantSortOption.WATERING, description="watering (soonest first) or name"),
    current_user: CurrentUser = Depends(get_current_user),
    plant_service: PlantService = Depends(get_plant_service),
) -> PlantListResponse:
    plants = await plant_service.get_user_plants(
        current_user.user_id,
        room_id=str(room_id) if room_id else None,
        sort=sort,
    )
    return PlantListResponse(
        plants=[PlantResponse.from_domain(plant) for plant in plants],
        count=len(plants),
    )


@plants_router.post(
    "/plants",
    response_model=PlantResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create plant",
    responses={
        201: {"description": "Plant created"},
        401: {"description": "Authentication required"},
        422: {"description": "Invalid name or watering frequency"},
        429: {"description": "Plant limit reached"},
    }
)
async def create_plant(
    request: PlantCreateRequest,
    current_user: CurrentUser = Depends(get_current_user),
    plant_service: PlantService = Depends(get_plant_service),
    usage_service: UsageLimitService = Depends(get_usage_limit_service),
) -> PlantResponse:
    """
    Create a plant for the current user.

    The plant quota is checked first; a full account gets 429 with
    "Plant limit reached: 100 max plants".
    """
    await usage_service.ensure_plant_slot(current_user.user_id)
    plant = await plant_service.create_plant(current_user.user_id, request.to_draft())
    return PlantResponse.from_domain(plant)


@plants_router.get(
    "/plants/{plant_id}",
    response_model=PlantDetailResponse,
    summary="Get plant details",
    responses={
        200: {"description": "Plant with its last 10 waterings"},
        401: {"description": "Authentication required"},
        404: {"description": "Plant not found"},
    }
)
async def get_plant(
    plant_id: UUID,
    current_user: CurrentUser = Depends(get_current_user),
    plant_service: PlantService = Depends(get_plant_service),
) -> PlantDetailResponse:
    details = await plant_service.get_plant(str(plant_id), current_user.user_id)
    return PlantDetailResponse.from_details(details)


@plants_router.patch(
    "/plants/{plant_id}",
    response_model=PlantDetailResponse,
    summary="Update plant",
    responses={
        200: {"description": "Updated plant"},
        401: {"description": "Authentication required"},
        404: {"description": "Plant or room not found"},
        422: {"description": "Invalid name or watering frequency"},
    }
)
async def update_plant(
    plant_id: UUID,
    request: PlantUpdateRequest,
    current_user: CurrentUser = Depends(get_current_user),
    plant_service: PlantService = Depends(get_plant_service),
) -> PlantDetailResponse:
    await plant_service.update_plant(str(plant_id), current_user.user_id, request.to_changes())
    details = await plant_service.get_plant(str(plant_id), current_user.user_id)
    return PlantDetailResponse.from_details(details)


@plants_router.delete(
    "/plants/{plant_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Delete plant",
    responses={
        204: {"description": "Plant deleted"},
        401: {"description": "Authentication required"},
        404: {"description": "Plant not found"},
    }
)
async def delete_plant(
    plant_id: UUID,
    current_user: CurrentUser = Depends(get_current_user),
    plant_service: PlantService = Depends(get_plant_service),
) -> Response:
    await plant_service.delete_plant(str(plant_id), current_user.user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@plants_router.post(
    "/plants/{plant_id}/photo",
    response_model=PlantResponse,
    summary="Upload plant photo",
    description="Upload a JPG, PNG or WEBP photo (max 10MB); it is resized and stored as JPEG",
    responses={
        200: {"description": "Plant with its new photo URL"},
        401: {"description": "Authentication required"},
        404: {"description": "Plant not found"},
        422: {"description": "Invalid or oversized image"},
    }
)
async def upload_plant_photo(
    plant_id: UUID,
    file: UploadFile = File(..., description="Plant photo"),
    current_user: CurrentUser = Depends(get_current_user),
    plant_service: PlantService = Depends(get_plant_service),
) -> PlantResponse:
    image_data = await file.read()
    logger.info(f"Photo upload for plant {plant_id}: {file.filename} ({len(image_data)} bytes)")
    plant = await plant_service.replace_photo(str(plant_id), current_user.user_id, image_data)
    return PlantResponse.from_domain(plant)


@plants_router.get(
    "/plants/{plant_id}/watering-history",
    response_model=WateringHistoryListResponse,
    summary="Get watering history",
    responses={
        200: {"description": "Watering events, newest first"},
        401: {"description": "Authentication required"},
    }
)
async def get_watering_history(
    plant_id: UUID,
    limit: int = Query(10, ge=1, le=100, description="Maximum number of entries"),
    current_user: CurrentUser = Depends(get_current_user),
    watering_service: WateringService = Depends(get_watering_service),
) -> WateringHistoryListResponse:
    history = await watering_service.get_watering_history(str(plant_id), current_user.user_id, limit=limit)
    return WateringHistoryListResponse(
        plant_id=str(plant_id),
        history=[WateringHistoryResponse.model_validate(entry) for entry in history],
        count=len(history),
    )
