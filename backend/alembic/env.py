"""
NoteKeeper Backend: Alembic Migration Environment
=================================================

What:  Runs the users/notes migrations against the configured database.
How:   The URL comes from NoteKeeper settings, or from `-x url=...` on the
       command line. Online runs go through a NullPool async engine; the
       same context options are used offline so generated SQL matches.
Who:   The `alembic` CLI (upgrade, downgrade, revision --autogenerate).

Examples:
    alembic upgrade head
    alembic -x url=sqlite+aiosqlite:///./scratch.db upgrade head
    alembic upgrade head --sql          # offline, prints SQL
"""

import asyncio
from logging.config import fileConfig
from typing import Any, Dict

from sqlalchemy import pool
from sqlalchemy.ext.asyncio import async_engine_from_config
from alembic import context

from notekeeper.config import settings
from notekeeper.database import Base

# Registers Note and User on Base.metadata for --autogenerate
import notekeeper.models  # noqa: F401

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata


def _database_url() -> str:
    return context.get_x_argument(as_dictionary=True).get("url", settings.database_url)


config.set_main_option("sqlalchemy.url", _database_url())


def _include_object(obj, name, type_, reflected, compare_to) -> bool:
    # Autogenerate must never propose dropping tables NoteKeeper does not own
    if type_ == "table" and reflected and compare_to is None:
        return False
    return True


def _context_options(url: str) -> Dict[str, Any]:
    """Options shared by offline and online runs."""
    return {
        "target_metadata": target_metadata,
        "compare_type": True,
        "include_object": _include_object,
        # SQLite cannot ALTER constraints in place (tests, local dev)
        "render_as_batch": url.startswith("sqlite"),
    }


def run_migrations_offline() -> None:
    """Emit SQL to stdout without connecting to the database."""
    url = config.get_main_option("sqlalchemy.url")
    context.configure(
        url=url,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        **_context_options(url),
    )

    with context.begin_transaction():
        context.run_migrations()


def do_run_migrations(connection) -> None:
    context.configure(
        connection=connection,
        **_context_options(config.get_main_option("sqlalchemy.url")),
    )

    with context.begin_transaction():
        context.run_migrations()


async def run_async_migrations() -> None:
    connectable = async_engine_from_config(
        config.get_section(config.config_ini_section, {}),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )

    try:
        async with connectable.connect() as connection:
            await connection.run_sync(do_run_migrations)
    finally:
        await connectable.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    asyncio.run(run_async_migrations())
