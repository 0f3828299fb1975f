"""
Alembic Migration Environment
==============================

What:  Runs Postboard migrations against the database in DATABASE_URL.
How:   Online mode opens an async engine and hands a sync connection to
       Alembic via run_sync; offline mode emits SQL to stdout.
       SQLite targets get batch mode so ALTERs work there too.
"""

import asyncio
from logging.config import fileConfig

from sqlalchemy import pool
from sqlalchemy.engine import Connection
from sqlalchemy.ext.asyncio import async_engine_from_config
from alembic import context

from postboard.config import settings
from postboard.database import Base
import postboard.models  # noqa: F401  (registers every table on Base.metadata)

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata

# DATABASE_URL wins over whatever alembic.ini says
config.set_main_option("sqlalchemy.url", settings.database_url)

_configure_kwargs = {
    "target_metadata": target_metadata,
    "compare_type": True,
    "render_as_batch": settings.is_sqlite,
}


def run_migrations_offline() -> None:
    context.configure(
        url=config.get_main_option("sqlalchemy.url"),
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        **_configure_kwargs,
    )
    with context.begin_transaction():
        context.run_migrations()


def _run_with_connection(connection: Connection) -> None:
    context.configure(connection=connection, **_configure_kwargs)
    with context.begin_transaction():
        context.run_migrations()


async def run_migrations_online() -> None:
    engine = async_engine_from_config(
        config.get_section(config.config_ini_section, {}),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )
    async with engine.connect() as connection:
        await connection.run_sync(_run_with_connection)
    await engine.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    asyncio.run(run_migrations_online())
