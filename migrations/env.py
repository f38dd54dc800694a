"""Alembic environment for the devices schema.

The target database comes from ``Settings.database`` (``DATABASE__URL``) and
can be overridden per run with ``alembic -x url=... upgrade head``.
"""

from __future__ import annotations

import asyncio
from logging.config import fileConfig

from alembic import context
from sqlalchemy import pool
from sqlalchemy.ext.asyncio import create_async_engine

from device_api.core.config import get_settings
from device_api.db import models  # noqa: F401
from device_api.infrastructure.database.base import Base

if context.config.config_file_name is not None:
    fileConfig(context.config.config_file_name)


def _database_url() -> str:
    return context.get_x_argument(as_dictionary=True).get("url") or get_settings().database_url


def _configure(**kwargs) -> None:
    context.configure(
        target_metadata=Base.metadata,
        compare_type=True,
        # SQLite cannot ALTER most columns in place.
        render_as_batch=_database_url().startswith("sqlite"),
        **kwargs,
    )


def _migrate(connection) -> None:
    _configure(connection=connection)
    with context.begin_transaction():
        context.run_migrations()


async def _migrate_online() -> None:
    # Own unpooled engine, disposed when the run ends.
    engine = create_async_engine(_database_url(), poolclass=pool.NullPool)
    try:
        async with engine.connect() as connection:
            await connection.run_sync(_migrate)
    finally:
        await engine.dispose()


if context.is_offline_mode():
    _configure(url=_database_url(), literal_binds=True)
    with context.begin_transaction():
        context.run_migrations()
else:
    asyncio.run(_migrate_online())
