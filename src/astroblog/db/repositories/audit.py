"""
astroblog.db.repositories.audit

Repository for `AuditEvent` entities.

Responsibilities:
- Append audit events for content writes.
- Query the trail of a single entity, newest first.
"""

from __future__ import annotations

import uuid
from typing import Any

from sqlalchemy import desc, select
from sqlalchemy.ext.asyncio import AsyncSession

from astroblog.db.models import AuditEvent


class AuditRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def add(
        self,
        *,
        actor: str,
        action: str,
        entity_type: str,
        entity_id: uuid.UUID,
        details: dict[str, Any] | None = None,
    ) -> AuditEvent:
        # Append-only: there is no update or delete path for audit rows.
        ev = AuditEvent(
            actor=actor,
            action=action,
            entity_type=entity_type,
            entity_id=entity_id,
            details=details or {},
        )
        self._session.add(ev)
        await self._session.flush()
        return ev

    async def list_for_entity(
        self, entity_type: str, entity_id: uuid.UUID, *, limit: int = 200
    ) -> list[AuditEvent]:
        stmt = (
            select(AuditEvent)
            .where(AuditEvent.entity_type == entity_type, AuditEvent.entity_id == entity_id)
            .order_by(desc(AuditEvent.created_at))
            .limit(limit)
        )
        return list((await self._session.execute(stmt)).scalars().all())
