"""
astroblog.db.init_db

Schema bootstrap for dev/test runs; deployed databases are migrated with Alembic.
"""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncEngine

from astroblog.db import models  # noqa: F401  # register tables on Base.metadata
from astroblog.db.base import Base


async def init_db(engine: AsyncEngine) -> None:
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
