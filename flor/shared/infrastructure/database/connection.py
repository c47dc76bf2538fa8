# 📄 File: flor/shared/infrastructure/database/connection.py
#
# 🧭 Purpose (Layman Explanation):
# Opens and closes Flor's connection to the database and checks that the database
# is still answering.
#
# 🧪 Purpose (Technical Summary):
# Async SQLAlchemy engine lifecycle (initialize / dispose), connection event listeners
# and a structured health check used by the /health endpoint.
#
# 🔗 Dependencies:
# - sqlalchemy (async engine)
# - flor/shared/config/settings.py, flor/shared/config/database.py
# - asyncpg (PostgreSQL) or aiosqlite (local SQLite)
#
# 🔄 Connected Modules / Calls From:
# - flor/shared/infrastructure/database/session.py (session factory)
# - flor/main.py (lifespan startup/shutdown)
# - flor/api/v1/health.py (database health)

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from sqlalchemy import event, text
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from flor.shared.config.database import build_engine_kwargs
from flor.shared.config.settings import get_settings

logger = logging.getLogger(__name__)


class DatabaseConnectionManager:
    """
    Owns the process-wide async engine.
    """

    def __init__(self):
        self._engine: Optional[AsyncEngine] = None
        self._health_check_query = text("SELECT 1")

    async def initialize(self, url: Optional[str] = None) -> None:
        """Create the engine and verify connectivity."""
        if self._engine is not None:
            logger.warning("Database engine already initialized")
            return

        settings = get_settings()
        url = url or settings.database_url

        try:
            logger.info("Initializing database connection pool...")
            self._engine = create_async_engine(url, **build_engine_kwargs(settings, url))
            self._register_connection_events()

            async with self._engine.begin() as conn:
                await conn.execute(self._health_check_query)

            logger.info(f"Database connection initialized ({self._engine.url.render_as_string(hide_password=True)})")

        except Exception as e:
            logger.error(f"Failed to initialize database connection: {e}")
            if self._engine is not None:
                await self._engine.dispose()
                self._engine = None
            raise

    def _register_connection_events(self) -> None:
        """Register SQLAlchemy connection event listeners."""
        if self._engine is None or self._engine.dialect.name != "sqlite":
            return

        @event.listens_for(self._engine.sync_engine, "connect")
        def set_sqlite_pragma(dbapi_connection, connection_record):
            """SQLite needs foreign keys enabled per connection for cascades."""
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

    async def health_check(self) -> Dict[str, Any]:
        """
        Perform database health check and return structured status.
        """
        timestamp = datetime.now(timezone.utc).isoformat()
        if self._engine is None:
            return {
                "status": "unhealthy",
                "error": "Database engine not initialized",
                "timestamp": timestamp
            }

        try:
            async with self._engine.connect() as conn:
                result = await conn.execute(self._health_check_query)
                result.scalar()
            return {"status": "healthy", "timestamp": timestamp}

        except Exception as e:
            logger.warning(f"Database health check failed: {e}")
            return {"status": "unhealthy", "error": str(e), "timestamp": timestamp}

    async def close(self) -> None:
        """Close database engine and all connections."""
        if self._engine is None:
            logger.warning("Database engine not initialized, nothing to close")
            return

        logger.info("Closing database connection pool...")
        await self._engine.dispose()
        self._engine = None
        logger.info("Database connection pool closed successfully")

    @property
    def engine(self) -> Optional[AsyncEngine]:
        """Get the SQLAlchemy async engine."""
        return self._engine

    @property
    def is_initialized(self) -> bool:
        return self._engine is not None


# Global database connection manager instance
db_manager = DatabaseConnectionManager()


async def database_health_check() -> Dict[str, Any]:
    return await db_manager.health_check()
