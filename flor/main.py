# 📄 File: flor/main.py
#
# 🧭 Purpose (Layman Explanation):
# The main control center that starts Flor, connects to the database, plugs in all the
# plant, room, usage and AI endpoints, and turns errors into clear messages for the app.
#
# 🧪 Purpose (Technical Summary):
# FastAPI application factory and entry point: lifespan-managed database engine and session
# factory, CORS and request logging middleware, slowapi limiter registration, module router
# mounting under /api/v1 and the JSON error envelope for all exceptions.
#
# 🔗 Dependencies:
# - FastAPI framework, uvicorn, slowapi
# - flor.shared.config.settings, flor.shared.utils.logging
# - flor.shared.infrastructure.database (connection + session managers)
# - flor.api.v1.router
#
# 🔄 Connected Modules / Calls From:
# - uvicorn server startup (flor-api console script)
# - Docker container entry point

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any, AsyncGenerator, Dict, Optional

import uvicorn
from fastapi import FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from flor import __version__
from flor.api.middleware.logging import RequestLoggingMiddleware
from flor.api.v1.router import api_v1_router
from flor.modules.ai_assistant.presentation.api.v1.ai import limiter
from flor.shared.config.settings import get_settings
from flor.shared.config.supabase import cleanup_supabase
from flor.shared.core.exceptions import FlorException, is_client_error
from flor.shared.infrastructure.database.connection import db_manager
from flor.shared.infrastructure.database.session import session_manager
from flor.shared.utils.logging import (
    log_shutdown_event,
    log_startup_event,
    request_id_var,
    setup_logging,
)

# Get application settings
settings = get_settings()

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan context manager.

    Opens the database engine and session factory on startup and releases
    them, together with the Supabase client, on shutdown.
    """
    setup_logging()
    log_startup_event("flor-api", __version__, {"environment": settings.ENVIRONMENT})

    try:
        await db_manager.initialize()
        session_manager.initialize(db_manager.engine)
        logger.info("✅ Database connection initialized")
    except Exception as e:
        logger.error(f"❌ Startup failed: {e}")
        raise

    try:
        yield  # Application is running
    finally:
        log_shutdown_event("flor-api")
        try:
            session_manager.reset()
            await db_manager.close()
            await cleanup_supabase()
            logger.info("✅ Flor API shutdown complete")
        except Exception as e:
            logger.error(f"❌ Shutdown error: {e}")


def _request_id(request: Request) -> Optional[str]:
    return getattr(request.state, "request_id", None) or request_id_var.get() or None


def _error_body(code: str, message: str, details: Dict[str, Any], request: Request) -> Dict[str, Any]:
    return {
        "error": {
            "code": code,
            "message": message,
            "details": details,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "request_id": _request_id(request),
        }
    }


def create_application() -> FastAPI:
    """
    Application factory function.

    Returns:
        FastAPI: Configured FastAPI application instance
    """
    app = FastAPI(
        title=settings.APP_NAME,
        description=settings.APP_DESCRIPTION,
        version=settings.APP_VERSION,
        docs_url="/docs" if settings.DEBUG else None,
        redoc_url="/redoc" if settings.DEBUG else None,
        openapi_url="/openapi.json" if settings.DEBUG else None,
        lifespan=lifespan,
        debug=settings.DEBUG,
    )

    # =========================================================================
    # MIDDLEWARE CONFIGURATION
    # =========================================================================

    app.add_middleware(RequestLoggingMiddleware)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=settings.CORS_ALLOW_CREDENTIALS,
        allow_methods=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )

    # Per-endpoint rate limits (slowapi)
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

    # =========================================================================
    # ROUTER REGISTRATION
    # =========================================================================

    app.include_router(api_v1_router, prefix="/api/v1")

    # =========================================================================
    # EXCEPTION HANDLERS
    # =========================================================================

    @app.exception_handler(FlorException)
    async def flor_exception_handler(request: Request, exc: FlorException) -> JSONResponse:
        """Handle custom Flor application exceptions."""
        if not is_client_error(exc):
            logger.error(f"{exc.error_code}: {exc.message}")
        return JSONResponse(
            status_code=exc.status_code,
            content=_error_body(exc.error_code, exc.message, exc.details, request),
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        errors = [
            {"field": ".".join(str(part) for part in error["loc"]), "message": error["msg"]}
            for error in exc.errors()
        ]
        return JSONResponse(
            status_code=422,
            content=_error_body("VALIDATION_ERROR", "Request validation failed", {"errors": errors}, request),
        )

    @app.exception_handler(Exception)
    async def internal_server_error_handler(request: Request, exc: Exception) -> JSONResponse:
        """Handle unexpected errors without leaking internals."""
        logger.error(f"Internal server error: {exc}", exc_info=True)
        return JSONResponse(
            status_code=500,
            content=_error_body(
                "INTERNAL_SERVER_ERROR",
                "An internal server error occurred",
                {"error_type": type(exc).__name__} if settings.DEBUG else {},
                request,
            ),
        )

    # =========================================================================
    # ROOT ENDPOINTS
    # =========================================================================

    @app.get("/", include_in_schema=False)
    async def root() -> dict:
        """Root endpoint with API information."""
        return {
            "name": settings.APP_NAME,
            "version": settings.APP_VERSION,
            "docs_url": "/docs" if settings.DEBUG else None,
            "health_check": "/api/v1/health",
            "api_base": "/api/v1",
        }

    @app.get("/favicon.ico", include_in_schema=False)
    async def favicon():
        return Response(status_code=204)

    return app


# Create the FastAPI application
app = create_application()


def main():
    """Run the API with uvicorn (``flor-api`` console script)."""
    uvicorn.run(
        "flor.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.RELOAD and settings.is_development,
        log_level=settings.LOG_LEVEL.lower(),
        workers=1 if settings.RELOAD else settings.WORKERS,
    )


if __name__ == "__main__":
    main()
