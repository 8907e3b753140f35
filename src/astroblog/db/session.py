"""
astroblog.db.session

Engine and session factory for the content database.

Responsibilities:
- Build the async engine from `Settings.database_url`.
- Turn on SQLite foreign keys so comment/tag cascades behave like Postgres.
- Build the request-scoped session factory used by `api.deps.db_session`.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import event
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from astroblog.settings import Settings


def create_engine(settings: Settings) -> AsyncEngine:
    engine = create_async_engine(settings.database_url, pool_pre_ping=True)
    if make_url(settings.database_url).get_backend_name() == "sqlite":
        event.listen(engine.sync_engine, "connect", _enable_sqlite_foreign_keys)
    return engine


def _enable_sqlite_foreign_keys(dbapi_connection: Any, _: Any) -> None:
    # Off by default per connection; ON DELETE CASCADE / SET NULL depend on it.
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def create_sessionmaker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    # Presenters read attributes after commit; nothing may be expired by then.
    return async_sessionmaker(bind=engine, expire_on_commit=False, autoflush=False)
