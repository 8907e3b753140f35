"""
astroblog.db.repositories.comments

Repository for `Comment` entities.

Responsibilities:
- Create comments (always PENDING until moderated).
- List approved comments for a post, oldest first.
- Record moderation decisions and delete comments.
"""

from __future__ import annotations

import uuid

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from astroblog.db.models import Comment, CommentStatus


class CommentRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(
        self,
        *,
        post_id: uuid.UUID,
        author_id: str,
        author_username: str | None,
        content: str,
        parent_id: uuid.UUID | None = None,
    ) -> Comment:
        comment = Comment(
            post_id=post_id,
            author_id=author_id,
            author_username=author_username,
            content=content,
            parent_id=parent_id,
            status=CommentStatus.PENDING,
        )
        self._session.add(comment)
        await self._session.flush()
        return comment

    async def get(self, comment_id: uuid.UUID) -> Comment | None:
        return await self._session.get(Comment, comment_id)

    async def list_approved(self, post_id: uuid.UUID) -> list[Comment]:
        stmt = (
            select(Comment)
            .where(Comment.post_id == post_id, Comment.status == CommentStatus.APPROVED)
            .order_by(Comment.created_at)
        )
        return list((await self._session.execute(stmt)).scalars().all())

    async def moderate(
        self,
        comment: Comment,
        *,
        status: CommentStatus,
        note: str | None,
        moderator_id: str,
    ) -> Comment:
        comment.status = status
        comment.moderation_note = note
        comment.moderated_by = moderator_id
        await self._session.flush()
        return comment

    async def delete(self, comment: Comment) -> None:
        # Replies survive their parent as top-level comments.
        await self._session.execute(
            update(Comment).where(Comment.parent_id == comment.id).values(parent_id=None)
        )
        await self._session.delete(comment)
        await self._session.flush()
