"""
alembic.env

Alembic migration environment for the astroblog schema.

Responsibilities:
- Expose `Base.metadata` (posts, tags, comments, audit events) for autogeneration.
- Run migrations offline (SQL script) or online (live connection).

Notes:
- Executed by Alembic, never imported by the API process.
- Online migrations use a synchronous engine, so point `ASTROBLOG_MIGRATIONS_URL` at a
  sync driver (e.g. `sqlite:///./astroblog.db`) when the app URL uses an async one.
"""

from __future__ import annotations

import os
from logging.config import fileConfig

from alembic import context
from sqlalchemy import engine_from_config, pool
from sqlalchemy.engine import make_url

from astroblog.db import models  # noqa: F401  # registers tables on Base.metadata
from astroblog.db.base import Base
from astroblog.settings import Settings

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata

_ASYNC_DRIVERS = {"sqlite+aiosqlite": "sqlite"}


def _get_database_url() -> str:
    if "ASTROBLOG_MIGRATIONS_URL" in os.environ:
        return os.environ["ASTROBLOG_MIGRATIONS_URL"]
    url = make_url(Settings().database_url)
    sync_driver = _ASYNC_DRIVERS.get(url.drivername)
    if sync_driver is not None:
        url = url.set(drivername=sync_driver)
    return url.render_as_string(hide_password=False)


def run_migrations_offline() -> None:
    context.configure(
        url=_get_database_url(),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        render_as_batch=True,
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    configuration = config.get_section(config.config_ini_section) or {}
    configuration["sqlalchemy.url"] = _get_database_url()
    connectable = engine_from_config(configuration, prefix="sqlalchemy.", poolclass=pool.NullPool)

    with connectable.connect() as connection:
        # SQLite cannot ALTER most constraints in place.
        context.configure(
            connection=connection, target_metadata=target_metadata, render_as_batch=True
        )
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
