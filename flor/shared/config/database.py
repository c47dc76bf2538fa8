# 📄 File: flor/shared/config/database.py
#
# 🧭 Purpose (Layman Explanation):
# Describes how Flor talks to its database: how many connections to keep open and
# the common base that every table definition builds on.
#
# 🧪 Purpose (Technical Summary):
# SQLAlchemy declarative base with constraint naming conventions and environment-specific
# async engine options for Supabase Postgres (asyncpg) or SQLite (aiosqlite, local/tests).
#
# 🔗 Dependencies:
# - SQLAlchemy 2.0 declarative mapping
# - flor.shared.config.settings
#
# 🔄 Connected Modules / Calls From:
# - flor.shared.infrastructure.database.connection (engine creation)
# - All SQLAlchemy models under flor.modules.*.infrastructure.database
# - migrations/env.py (target metadata)

from typing import Any, Dict

from sqlalchemy import MetaData
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import NullPool

from .settings import Settings


# =============================================================================
# DATABASE MODELS BASE CLASS
# =============================================================================

# Naming convention for database constraints
convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s"
}

metadata = MetaData(naming_convention=convention)


class DatabaseBase(DeclarativeBase):
    """
    Base class for all SQLAlchemy models.

    Shares one MetaData so Alembic sees every Flor table.
    """
    metadata = metadata


# =============================================================================
# ENGINE CONFIGURATION
# =============================================================================

def build_engine_kwargs(settings: Settings, url: str) -> Dict[str, Any]:
    """Get SQLAlchemy engine configuration based on driver and environment."""
    base_config: Dict[str, Any] = {
        "echo": settings.DEBUG and settings.is_development,
    }

    if url.startswith("sqlite"):
        # aiosqlite: no server-side pool to tune
        return base_config

    if settings.is_testing:
        base_config["poolclass"] = NullPool
    else:
        base_config.update({
            "pool_size": settings.DB_POOL_SIZE,
            "max_overflow": settings.DB_MAX_OVERFLOW,
            "pool_timeout": settings.DB_POOL_TIMEOUT,
            "pool_recycle": settings.DB_POOL_RECYCLE,
            "pool_pre_ping": True,
        })

    base_config["connect_args"] = {
        "server_settings": {
            "application_name": f"flor_api_{settings.ENVIRONMENT}",
            "jit": "off",
        },
        # Supabase pooler (pgbouncer) does not support prepared statement caching
        "statement_cache_size": 0,
    }
    return base_config
