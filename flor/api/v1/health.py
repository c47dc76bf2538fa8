# 📄 File: flor/api/v1/health.py
# 🧭 Purpose (Layman Explanation):
# Tells monitoring tools whether Flor is up, and whether the database and photo storage answer.
# 🧪 Purpose (Technical Summary):
# Liveness endpoint plus a detailed check probing the database engine and Supabase storage.
# 🔗 Dependencies:
# FastAPI, flor.shared.infrastructure.database.connection, flor.shared.config.supabase
# 🔄 Connected Modules / Calls From:
# flor.api.v1.router, load balancers, uptime monitors

import logging
from datetime import datetime, timezone

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from flor.shared.config.settings import get_settings
from flor.shared.config.supabase import get_supabase_manager
from flor.shared.infrastructure.database.connection import database_health_check

logger = logging.getLogger(__name__)

# Create router for health endpoints
health_router = APIRouter()


@health_router.get(
    "/health",
    summary="Basic Health Check",
    description="Liveness check for load balancers and monitoring"
)
async def health_check() -> JSONResponse:
    return JSONResponse(
        status_code=200,
        content={
            "status": "healthy",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "service": "flor-api",
            "version": get_settings().APP_VERSION,
        }
    )


@health_router.get(
    "/health/detailed",
    summary="Detailed Health Check",
    description="Database and storage connectivity"
)
async def detailed_health_check() -> JSONResponse:
    """
    Check the database and Supabase storage.

    Returns 503 when any component is unhealthy.
    """
    components = {
        "database": await database_health_check(),
        "storage": await get_supabase_manager().health_check(),
    }
    healthy = all(component.get("status") == "healthy" for component in components.values())
    if not healthy:
        logger.warning(f"Health check degraded: {components}")

    return JSONResponse(
        status_code=200 if healthy else 503,
        content={
            "status": "healthy" if healthy else "unhealthy",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "version": get_settings().APP_VERSION,
            "components": components,
        }
    )
