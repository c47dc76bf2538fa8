"""
API v1 router aggregation.

Every module router is mounted here; flor.main mounts this router under /api/v1.
"""

from fastapi import APIRouter

from flor.modules.ai_assistant.presentation.api.v1.ai import ai_router
from flor.modules.plant_management.presentation.api.v1.plants import plants_router
from flor.modules.plant_management.presentation.api.v1.rooms import rooms_router
from flor.modules.plant_management.presentation.api.v1.watering import watering_router
from flor.modules.usage_limits.presentation.api.v1.usage import usage_router

from .health import health_router

# Create main API v1 router
api_v1_router = APIRouter()

api_v1_router.include_router(health_router, tags=["Health Check"])
api_v1_router.include_router(plants_router, tags=["Plants"])
api_v1_router.include_router(watering_router, tags=["Watering"])
api_v1_router.include_router(rooms_router, tags=["Rooms"])
api_v1_router.include_router(usage_router, tags=["Usage"])
api_v1_router.include_router(ai_router, tags=["AI Assistant"])
