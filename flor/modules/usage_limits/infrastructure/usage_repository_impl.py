# 📄 File: flor/modules/usage_limits/infrastructure/usage_repository_impl.py
# 🧭 Purpose (Layman Explanation):
# Reads and bumps the monthly AI counter and counts a user's plants in the database.
# 🧪 Purpose (Technical Summary):
# SQLAlchemy implementation of UsageLimitRepository. Every call opens its own session so
# the AI and plant checks can run concurrently; the increment is a single
# INSERT ... ON CONFLICT DO UPDATE statement (PostgreSQL or SQLite dialect).
# 🔗 Dependencies:
# SQLAlchemy async + dialect inserts, flor.shared.infrastructure.database.session
# 🔄 Connected Modules / Calls From:
# flor.modules.usage_limits.presentation.dependencies

import asyncio
import logging
from datetime import datetime, timezone
from typing import AsyncContextManager, Callable
from uuid import uuid4

from sqlalchemy import func, select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from flor.modules.plant_management.infrastructure.database.models import PlantModel
from flor.shared.core.exceptions import DatabaseError
from flor.shared.infrastructure.database.session import database_session

from ..domain.repository import UsageLimitRepository
from .models import UsageLimitModel

logger = logging.getLogger(__name__)

SessionScope = Callable[[], AsyncContextManager[AsyncSession]]

# SQLAlchemy errors plus the driver connect failures it leaves unwrapped
_READ_FAILURES = (SQLAlchemyError, OSError, asyncio.TimeoutError)

_UPSERT_DIALECTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


class UsageLimitRepositoryImpl(UsageLimitRepository):
    """
    Usage counters backed by the usage_limits and plants tables.

    Args:
        session_scope: Factory for a fresh session context per call
    """

    def __init__(self, session_scope: SessionScope = database_session):
        self._session_scope = session_scope

    async def get_ai_generations(self, user_id: str, month_year: str) -> int:
        try:
            async with self._session_scope() as session:
                stmt = select(UsageLimitModel.ai_generations_this_month).where(
                    UsageLimitModel.user_id == user_id,
                    UsageLimitModel.month_year == month_year,
                )
                result = await session.execute(stmt)
                return result.scalar_one_or_none() or 0

        except _READ_FAILURES as e:
            logger.error(f"Database error reading AI usage for {user_id}: {e}")
            raise DatabaseError(f"Failed to read AI usage: {e}", operation="select", table="usage_limits") from e

    async def increment_ai_generations(self, user_id: str, month_year: str) -> int:
        try:
            async with self._session_scope() as session:
                dialect = session.get_bind().dialect.name
                insert = _UPSERT_DIALECTS.get(dialect)
                if insert is None:
                    raise DatabaseError(
                        f"Atomic usage increment is not supported on {dialect}",
                        operation="upsert",
                        table="usage_limits"
                    )

                now = datetime.now(timezone.utc)
                stmt = insert(UsageLimitModel).values(
                    id=str(uuid4()),
                    user_id=user_id,
                    month_year=month_year,
                    ai_generations_this_month=1,
                    created_at=now,
                    updated_at=now,
                )
                stmt = stmt.on_conflict_do_update(
                    index_elements=[UsageLimitModel.user_id, UsageLimitModel.month_year],
                    set_={
                        "ai_generations_this_month": UsageLimitModel.ai_generations_this_month + 1,
                        "updated_at": now,
                    },
                ).returning(UsageLimitModel.ai_generations_this_month)

                result = await session.execute(stmt)
                return result.scalar_one()

        except SQLAlchemyError as e:
            logger.error(f"Database error incrementing AI usage for {user_id}: {e}")
            raise DatabaseError(f"Failed to update AI usage: {e}", operation="upsert", table="usage_limits") from e

    async def count_plants(self, user_id: str) -> int:
        try:
            async with self._session_scope() as session:
                stmt = select(func.count()).select_from(PlantModel).where(PlantModel.user_id == user_id)
                result = await session.execute(stmt)
                return result.scalar_one()

        except _READ_FAILURES as e:
            logger.error(f"Database error counting plants for {user_id}: {e}")
            raise DatabaseError(f"Failed to count plants: {e}", operation="count", table="plants") from e
