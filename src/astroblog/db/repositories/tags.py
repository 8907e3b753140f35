"""
astroblog.db.repositories.tags

Repository for `Tag` entities.
"""

from __future__ import annotations

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from astroblog.db.models import Tag, post_tags


class TagRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(
        self, *, name: str, slug: str, description: str | None, color: str
    ) -> Tag:
        tag = Tag(name=name, slug=slug, description=description, color=color)
        self._session.add(tag)
        await self._session.flush()
        return tag

    async def get_by_slug(self, slug: str) -> Tag | None:
        stmt = select(Tag).where(Tag.slug == slug)
        return (await self._session.execute(stmt)).scalar_one_or_none()

    async def get_by_slugs(self, slugs: list[str]) -> list[Tag]:
        if not slugs:
            return []
        stmt = select(Tag).where(Tag.slug.in_(slugs))
        found = {t.slug: t for t in (await self._session.execute(stmt)).scalars().all()}
        # Keep the caller's order; missing slugs are simply absent.
        return [found[s] for s in dict.fromkeys(slugs) if s in found]

    async def list_with_post_counts(self) -> list[tuple[Tag, int]]:
        stmt = (
            select(Tag, func.count(post_tags.c.post_id))
            .outerjoin(post_tags, post_tags.c.tag_id == Tag.id)
            .group_by(Tag.id)
            .order_by(Tag.name)
        )
        return [(tag, int(count)) for tag, count in (await self._session.execute(stmt)).all()]
