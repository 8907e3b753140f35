"""
astroblog.api.routers.comments

Reader comments and their moderation.

Responsibilities:
- List approved comments for a published post.
- Accept new comments from any signed-in user (held as PENDING).
- Moderation decisions (MODERATOR and above) and deletion (author or admin).
"""

from __future__ import annotations

import uuid
from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.status import HTTP_201_CREATED, HTTP_404_NOT_FOUND

from astroblog.api.deps import db_session
from astroblog.api.errors import invalid_input, ok
from astroblog.api.presenters import comment_detail
from astroblog.auth.deps import role_required, session_context
from astroblog.auth.gates import require_ownership
from astroblog.auth.models import Principal
from astroblog.auth.roles import Role
from astroblog.auth.session import SessionContext
from astroblog.db.models import Comment, Post, PostStatus
from astroblog.db.repositories.audit import AuditRepo
from astroblog.db.repositories.comments import CommentRepo
from astroblog.db.repositories.posts import PostRepo
from astroblog.observability.logging import get_logger
from astroblog.validation import FieldViolation, Invalid, validate
from astroblog.validation.schemas import CommentCreate, CommentModerate

router = APIRouter(prefix="/api/v1", tags=["comments"])

log = get_logger(__name__)


@router.get("/posts/{post_id}/comments")
async def list_comments(
    post_id: uuid.UUID,
    session: AsyncSession = Depends(db_session),
) -> dict[str, Any]:
    post = await _published_post_or_404(session, post_id)
    comments = await CommentRepo(session).list_approved(post.id)
    return ok([comment_detail(c) for c in comments], message=f"Retrieved {len(comments)} comments")


@router.post("/posts/{post_id}/comments", status_code=HTTP_201_CREATED, response_model=None)
async def create_comment(
    post_id: uuid.UUID,
    payload: dict[str, Any] = Body(...),
    principal: Principal = Depends(role_required(Role.USER)),
    session: AsyncSession = Depends(db_session),
):
    post = await _published_post_or_404(session, post_id)

    result = validate(CommentCreate, payload)
    if isinstance(result, Invalid):
        return invalid_input(result)
    data = result.value

    comments = CommentRepo(session)
    if data.parent_id is not None:
        parent = await comments.get(data.parent_id)
        if parent is None or parent.post_id != post.id:
            return invalid_input(
                Invalid((FieldViolation(field="parent_id", message="Parent comment not found on this post"),))
            )

    comment = await comments.create(
        post_id=post.id,
        author_id=principal.id,
        author_username=principal.username,
        content=data.content,
        parent_id=data.parent_id,
    )
    await session.commit()
    log.info("comment_created", comment_id=str(comment.id), post_id=str(post.id), author_id=principal.id)
    return ok(comment_detail(comment), message="Comment submitted for moderation")


@router.post("/comments/{comment_id}/moderate", response_model=None)
async def moderate_comment(
    comment_id: uuid.UUID,
    payload: dict[str, Any] = Body(...),
    principal: Principal = Depends(role_required(Role.MODERATOR)),
    session: AsyncSession = Depends(db_session),
):
    comments = CommentRepo(session)
    comment = await _comment_or_404(comments, comment_id)

    result = validate(CommentModerate, payload)
    if isinstance(result, Invalid):
        return invalid_input(result)
    data = result.value

    await comments.moderate(
        comment, status=data.status, note=data.moderation_note, moderator_id=principal.id
    )
    await AuditRepo(session).add(
        actor=principal.id,
        action="comment.moderated",
        entity_type="comment",
        entity_id=comment.id,
        details={"status": data.status.value},
    )
    await session.commit()
    log.info("comment_moderated", comment_id=str(comment.id), status=data.status.value, actor=principal.id)
    return ok(comment_detail(comment), message="Comment moderated successfully")


@router.delete("/comments/{comment_id}")
async def delete_comment(
    comment_id: uuid.UUID,
    ctx: SessionContext = Depends(session_context),
    session: AsyncSession = Depends(db_session),
) -> dict[str, Any]:
    comments = CommentRepo(session)
    comment = await _comment_or_404(comments, comment_id)
    principal = await require_ownership(ctx, comment.author_id)

    await AuditRepo(session).add(
        actor=principal.id, action="comment.deleted", entity_type="comment", entity_id=comment.id
    )
    await comments.delete(comment)
    await session.commit()
    log.info("comment_deleted", comment_id=str(comment_id), actor=principal.id)
    return ok({"id": str(comment_id)}, message="Comment deleted successfully")


async def _published_post_or_404(session: AsyncSession, post_id: uuid.UUID) -> Post:
    post = await PostRepo(session).get(post_id)
    if post is None or post.status is not PostStatus.PUBLISHED:
        raise HTTPException(status_code=HTTP_404_NOT_FOUND, detail="Post not found")
    return post


async def _comment_or_404(comments: CommentRepo, comment_id: uuid.UUID) -> Comment:
    comment = await comments.get(comment_id)
    if comment is None:
        raise HTTPException(status_code=HTTP_404_NOT_FOUND, detail="Comment not found")
    return comment
