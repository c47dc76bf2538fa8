# 📄 File: flor/shared/infrastructure/database/session.py
#
# 🧭 Purpose (Layman Explanation):
# Gives each web request its own short conversation with the database, saving the
# changes when the request succeeds and undoing them when something goes wrong.
#
# 🧪 Purpose (Technical Summary):
# Async SQLAlchemy session management with FastAPI dependency injection: commit on
# success, rollback on error, SQLAlchemy errors wrapped as DatabaseError.
#
# 🔗 Dependencies:
# - sqlalchemy.ext.asyncio (AsyncSession, async_sessionmaker)
# - flor/shared/infrastructure/database/connection.py (database engine)
#
# 🔄 Connected Modules / Calls From:
# - All module repository implementations (Depends(get_db_session))
# - Usage limit service (independent session per concurrent check)

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from sqlalchemy import exc
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from flor.shared.core.exceptions import DatabaseError

logger = logging.getLogger(__name__)


class DatabaseSessionManager:
    """
    Manages database sessions with transaction handling and automatic cleanup.
    """

    def __init__(self):
        self._session_factory: Optional[async_sessionmaker] = None

    def initialize(self, engine: AsyncEngine) -> None:
        """Initialize the session factory with database engine."""
        self._session_factory = async_sessionmaker(
            engine,
            class_=AsyncSession,
            expire_on_commit=False,  # Keep objects accessible after commit
            autoflush=True,
        )
        logger.info("Database session factory initialized successfully")

    def reset(self) -> None:
        self._session_factory = None

    @property
    def is_initialized(self) -> bool:
        return self._session_factory is not None

    @asynccontextmanager
    async def get_session(self) -> AsyncGenerator[AsyncSession, None]:
        """
        Get an async database session with automatic transaction management.

        Yields:
            AsyncSession: Database session

        Raises:
            DatabaseError: If the session is unavailable or SQLAlchemy fails
        """
        if self._session_factory is None:
            raise DatabaseError("Session manager not initialized")

        session: AsyncSession = self._session_factory()

        try:
            yield session
            await session.commit()

        except exc.SQLAlchemyError as e:
            await session.rollback()
            logger.error(f"Database error occurred, transaction rolled back: {e}")
            raise DatabaseError(f"Database operation failed: {e}") from e

        except Exception:
            # Application errors keep their type
            await session.rollback()
            raise

        finally:
            await session.close()


# Global session manager instance
session_manager = DatabaseSessionManager()


# FastAPI dependency for getting database sessions
async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides database sessions.

    Usage:
        @router.get("/plants")
        async def list_plants(db: AsyncSession = Depends(get_db_session)):
            ...
    """
    async with session_manager.get_session() as session:
        yield session


@asynccontextmanager
async def database_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Context manager for sessions outside FastAPI request handling.

    Example:
        async with database_session() as db:
            count = await UsageRepositoryImpl(db).count_plants(user_id)
    """
    async with session_manager.get_session() as session:
        yield session
