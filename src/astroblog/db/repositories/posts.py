"""
astroblog.db.repositories.posts

Repository for `Post` entities.

Responsibilities:
- Create, fetch, update and delete posts.
- Paginated listing of published posts with search/tag/featured filters.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from sqlalchemy import desc, func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from astroblog.db.models import Post, PostStatus, Tag


@dataclass(frozen=True, slots=True)
class PostFilters:
    search: str | None = None
    tag: str | None = None
    featured: bool = False


class PostRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(
        self,
        *,
        author_id: str,
        author_username: str | None,
        tags: list[Tag],
        **fields: Any,
    ) -> Post:
        post = Post(author_id=author_id, author_username=author_username, tags=tags, **fields)
        self._session.add(post)
        await self._session.flush()
        return post

    async def get(self, post_id: uuid.UUID) -> Post | None:
        return await self._session.get(Post, post_id)

    async def get_by_slug(self, slug: str) -> Post | None:
        stmt = select(Post).where(Post.slug == slug)
        return (await self._session.execute(stmt)).scalar_one_or_none()

    async def slug_taken(self, slug: str, *, exclude: uuid.UUID | None = None) -> bool:
        stmt = select(Post.id).where(Post.slug == slug)
        if exclude is not None:
            stmt = stmt.where(Post.id != exclude)
        return (await self._session.execute(stmt)).first() is not None

    async def list_published(
        self, *, page: int, limit: int, filters: PostFilters
    ) -> tuple[list[Post], int]:
        stmt = select(Post).where(Post.status == PostStatus.PUBLISHED)
        if filters.search:
            term = filters.search
            stmt = stmt.where(
                or_(
                    Post.title.icontains(term, autoescape=True),
                    Post.excerpt.icontains(term, autoescape=True),
                    Post.content.icontains(term, autoescape=True),
                )
            )
        if filters.tag:
            stmt = stmt.where(Post.tags.any(Tag.slug == filters.tag))
        if filters.featured:
            stmt = stmt.where(Post.featured.is_(True))

        total = (
            await self._session.execute(select(func.count()).select_from(stmt.subquery()))
        ).scalar_one()

        page_stmt = (
            stmt.order_by(desc(Post.published_at), desc(Post.created_at))
            .offset((page - 1) * limit)
            .limit(limit)
        )
        posts = list((await self._session.execute(page_stmt)).scalars().all())
        return posts, int(total)

    async def update(self, post: Post, *, changes: dict[str, Any], tags: list[Tag] | None) -> Post:
        for field, value in changes.items():
            setattr(post, field, value)
        if tags is not None:
            post.tags = tags
        post.updated_at = datetime.utcnow()
        await self._session.flush()
        return post

    async def record_view(self, post: Post) -> None:
        # Incremented in SQL so concurrent readers never lose a count.
        await self._session.execute(
            update(Post)
            .where(Post.id == post.id)
            .values(views=Post.views + 1)
            .execution_options(synchronize_session=False)
        )
        await self._session.refresh(post, attribute_names=["views"])

    async def delete(self, post: Post) -> None:
        await self._session.delete(post)
        await self._session.flush()
