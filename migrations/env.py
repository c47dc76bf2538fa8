# 📄 File: migrations/env.py
# 🧭 Purpose (Layman Explanation):
# Tells Alembic how to reach the Flor database and which tables (plants, rooms, watering
# history, usage counters, AI feedback) it is responsible for.
# 🧪 Purpose (Technical Summary):
# Alembic environment: resolves the database URL from flor settings, registers every module's
# SQLAlchemy models on DatabaseBase.metadata and runs migrations offline, sync or async.
# 🔗 Dependencies:
# - alembic, SQLAlchemy, asyncpg / psycopg2
# - flor.shared.config.settings
# 🔄 Connected Modules / Calls From:
# - alembic CLI commands (upgrade, downgrade, revision)

import asyncio
import os
from logging.config import fileConfig

from alembic import context
from sqlalchemy import engine_from_config, pool
from sqlalchemy.ext.asyncio import async_engine_from_config

from flor.shared.config.database import DatabaseBase
from flor.shared.config.settings import get_settings

# Import all module models so autogenerate sees them
from flor.modules.ai_assistant.infrastructure.database.models import AIFeedbackModel  # noqa: F401
from flor.modules.plant_management.infrastructure.database.models import (  # noqa: F401
    PlantModel,
    RoomModel,
    WateringHistoryModel,
)
from flor.modules.usage_limits.infrastructure.models import UsageLimitModel  # noqa: F401

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = DatabaseBase.metadata

# Supabase-managed schemas are never touched by Flor migrations
SUPABASE_SCHEMAS = {"auth", "storage", "realtime", "vault", "extensions"}


def get_database_url(async_driver: bool = False) -> str:
    """Database URL from flor settings, with the driver Alembic needs."""
    url = get_settings().database_url
    if async_driver:
        return url
    return url.replace("postgresql+asyncpg://", "postgresql://")


def include_object(object, name, type_, reflected, compare_to):
    if getattr(object, "schema", None) in SUPABASE_SCHEMAS:
        return False
    if type_ == "table" and reflected and name not in target_metadata.tables:
        return False
    return True


def run_migrations_offline() -> None:
    """Emit SQL to the script output without a live connection."""
    context.configure(
        url=get_database_url(),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        compare_type=True,
    )

    with context.begin_transaction():
        context.run_migrations()


def do_run_migrations(connection) -> None:
    context.configure(
        connection=connection,
        target_metadata=target_metadata,
        compare_type=True,
        include_object=include_object,
    )

    with context.begin_transaction():
        context.run_migrations()


async def run_async_migrations() -> None:
    configuration = config.get_section(config.config_ini_section, {})
    configuration["sqlalchemy.url"] = get_database_url(async_driver=True)

    connectable = async_engine_from_config(
        configuration,
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )

    async with connectable.connect() as connection:
        await connection.run_sync(do_run_migrations)

    await connectable.dispose()


def run_migrations_online() -> None:
    if os.getenv("ALEMBIC_ASYNC", "false").lower() == "true":
        asyncio.run(run_async_migrations())
        return

    configuration = config.get_section(config.config_ini_section, {})
    configuration["sqlalchemy.url"] = get_database_url()

    connectable = engine_from_config(
        configuration,
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )

    with connectable.connect() as connection:
        do_run_migrations(connection)


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
