"""
astroblog.api.routers.posts

Public and CMS endpoints for blog posts.

Responsibilities:
- Paginated, filterable listing of published posts.
- Single post lookup by slug (drafts visible to their owner and admins only).
- Create (EDITOR and above), update/delete/publish (owner or admin).
- Audit trail read-back for a post's owner.
"""

from __future__ import annotations

import math
import uuid
from datetime import UTC, datetime
from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException, Query, Response
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.status import HTTP_201_CREATED, HTTP_404_NOT_FOUND, HTTP_409_CONFLICT

from astroblog.api.deps import db_session, settings_dep
from astroblog.api.errors import invalid_input, ok
from astroblog.api.presenters import audit_event, post_detail, post_summary
from astroblog.auth.deps import optional_principal, role_required, session_context
from astroblog.auth.gates import check_ownership, require_ownership
from astroblog.auth.models import Principal
from astroblog.auth.roles import Role
from astroblog.auth.session import SessionContext
from astroblog.content.text import (
    calculate_reading_time,
    count_words,
    extract_text_from_html,
    truncate_text,
)
from astroblog.db.models import Post, PostStatus, Tag
from astroblog.db.repositories.audit import AuditRepo
from astroblog.db.repositories.posts import PostFilters, PostRepo
from astroblog.db.repositories.tags import TagRepo
from astroblog.observability.logging import get_logger
from astroblog.settings import Settings
from astroblog.validation import FieldViolation, Invalid, validate
from astroblog.validation.schemas import PostCreate, PostUpdate, check_schedule

router = APIRouter(prefix="/api/v1/posts", tags=["posts"])

log = get_logger(__name__)

LIST_CACHE_CONTROL = "public, s-maxage=300, stale-while-revalidate=600"
AUTO_EXCERPT_LENGTH = 200
SLUG_CONFLICT = "A post with this slug already exists"


@router.get("")
async def list_posts(
    response: Response,
    page: int = Query(default=1, ge=1),
    limit: int | None = Query(default=None, ge=1),
    search: str | None = Query(default=None, max_length=200),
    tag: str | None = Query(default=None, max_length=200),
    featured: str | None = Query(default=None),
    session: AsyncSession = Depends(db_session),
    settings: Settings = Depends(settings_dep),
) -> dict[str, Any]:
    # Oversized pages are clamped rather than rejected.
    limit = min(limit or settings.default_page_size, settings.max_page_size)
    filters = PostFilters(search=search or None, tag=tag or None, featured=featured == "true")

    posts, total = await PostRepo(session).list_published(page=page, limit=limit, filters=filters)

    response.headers["Cache-Control"] = LIST_CACHE_CONTROL
    return ok(
        {
            "posts": [post_summary(p) for p in posts],
            "pagination": {
                "page": page,
                "limit": limit,
                "total_count": total,
                "total_pages": math.ceil(total / limit),
                "has_next_page": page * limit < total,
                "has_previous_page": page > 1,
            },
            "filters": {"search": search, "tag": tag, "featured": featured},
            "sorting": {"sort_by": "published_at", "sort_order": "desc"},
        },
        message=f"Retrieved {len(posts)} posts",
    )


@router.get("/{slug}")
async def get_post(
    slug: str,
    principal: Principal | None = Depends(optional_principal),
    session: AsyncSession = Depends(db_session),
) -> dict[str, Any]:
    post = await PostRepo(session).get_by_slug(slug)
    if post is None:
        raise HTTPException(status_code=HTTP_404_NOT_FOUND, detail="Post not found")

    if post.status is not PostStatus.PUBLISHED:
        # Unpublished posts do not exist for anyone but their owner (or an admin).
        if not check_ownership(principal, post.author_id).allowed:
            raise HTTPException(status_code=HTTP_404_NOT_FOUND, detail="Post not found")
    else:
        await PostRepo(session).record_view(post)
        await session.commit()

    return ok(post_detail(post))


@router.post("", status_code=HTTP_201_CREATED, response_model=None)
async def create_post(
    payload: dict[str, Any] = Body(...),
    principal: Principal = Depends(role_required(Role.EDITOR)),
    session: AsyncSession = Depends(db_session),
):
    result = validate(PostCreate, payload)
    if isinstance(result, Invalid):
        return invalid_input(result)
    data = result.value

    posts = PostRepo(session)
    if await posts.slug_taken(data.slug):
        raise HTTPException(status_code=HTTP_409_CONFLICT, detail=SLUG_CONFLICT)

    tags = await _resolve_tags(session, data.tags)
    if isinstance(tags, Invalid):
        return invalid_input(tags)

    plain = extract_text_from_html(data.content)
    try:
        post = await posts.create(
            author_id=principal.id,
            author_username=principal.username,
            tags=tags,
            title=data.title,
            slug=data.slug,
            content=data.content,
            excerpt=data.excerpt or truncate_text(plain, AUTO_EXCERPT_LENGTH) or None,
            status=data.status,
            featured=data.featured,
            meta_title=data.meta_title,
            meta_description=data.meta_description,
            og_image=data.og_image,
            canonical_url=data.canonical_url,
            keywords=list(data.keywords),
            word_count=count_words(plain),
            reading_time=calculate_reading_time(data.content),
            scheduled_at=_naive_utc(data.scheduled_at),
            published_at=_utcnow() if data.status is PostStatus.PUBLISHED else None,
        )
    except IntegrityError:
        # Another request claimed the slug between the check above and this insert.
        await session.rollback()
        raise HTTPException(status_code=HTTP_409_CONFLICT, detail=SLUG_CONFLICT) from None
    await AuditRepo(session).add(
        actor=principal.id,
        action="post.created",
        entity_type="post",
        entity_id=post.id,
        details={"slug": post.slug, "status": post.status.value},
    )
    await session.commit()
    log.info("post_created", post_id=str(post.id), slug=post.slug, author_id=principal.id)
    return ok(post_detail(post), message="Post created successfully")


@router.patch("/{post_id}", response_model=None)
async def update_post(
    post_id: uuid.UUID,
    payload: dict[str, Any] = Body(...),
    ctx: SessionContext = Depends(session_context),
    session: AsyncSession = Depends(db_session),
):
    posts = PostRepo(session)
    post = await _get_post_or_404(posts, post_id)
    principal = await require_ownership(ctx, post.author_id)

    result = validate(PostUpdate, payload)
    if isinstance(result, Invalid):
        return invalid_input(result)

    changes = result.value.model_dump(exclude_unset=True)
    tag_slugs = changes.pop("tags", None)
    # Explicit nulls on required columns are ignored rather than written.
    for field in ("title", "slug", "content", "status", "featured", "keywords"):
        if changes.get(field, ...) is None:
            changes.pop(field)

    if "status" in changes or "scheduled_at" in changes:
        # The rule applies to the post as it will be stored, not to the patch alone.
        try:
            check_schedule(
                changes.get("status", post.status),
                changes["scheduled_at"] if "scheduled_at" in changes else post.scheduled_at,
            )
        except ValueError as e:
            return invalid_input(Invalid((FieldViolation(field="scheduled_at", message=str(e)),)))

    if "slug" in changes and await posts.slug_taken(changes["slug"], exclude=post.id):
        raise HTTPException(status_code=HTTP_409_CONFLICT, detail=SLUG_CONFLICT)

    tags: list[Tag] | None = None
    if tag_slugs is not None:
        resolved = await _resolve_tags(session, tag_slugs)
        if isinstance(resolved, Invalid):
            return invalid_input(resolved)
        tags = resolved

    if "content" in changes:
        changes["word_count"] = count_words(extract_text_from_html(changes["content"]))
        changes["reading_time"] = calculate_reading_time(changes["content"])
    if "scheduled_at" in changes:
        changes["scheduled_at"] = _naive_utc(changes["scheduled_at"])
    if changes.get("status") is PostStatus.PUBLISHED and post.published_at is None:
        changes["published_at"] = _utcnow()

    try:
        await posts.update(post, changes=changes, tags=tags)
    except IntegrityError:
        await session.rollback()
        raise HTTPException(status_code=HTTP_409_CONFLICT, detail=SLUG_CONFLICT) from None
    audited = sorted(changes) + (["tags"] if tags is not None else [])
    await AuditRepo(session).add(
        actor=principal.id,
        action="post.updated",
        entity_type="post",
        entity_id=post.id,
        details={"fields": audited},
    )
    await session.commit()
    log.info("post_updated", post_id=str(post.id), actor=principal.id, fields=audited)
    return ok(post_detail(post), message="Post updated successfully")


@router.post("/{post_id}/publish")
async def publish_post(
    post_id: uuid.UUID,
    ctx: SessionContext = Depends(session_context),
    session: AsyncSession = Depends(db_session),
) -> dict[str, Any]:
    posts = PostRepo(session)
    post = await _get_post_or_404(posts, post_id)
    principal = await require_ownership(ctx, post.author_id)

    await posts.update(
        post,
        changes={"status": PostStatus.PUBLISHED, "published_at": _utcnow(), "scheduled_at": None},
        tags=None,
    )
    await AuditRepo(session).add(
        actor=principal.id, action="post.published", entity_type="post", entity_id=post.id
    )
    await session.commit()
    log.info("post_published", post_id=str(post.id), actor=principal.id)
    return ok(post_detail(post), message="Post published successfully")


@router.delete("/{post_id}")
async def delete_post(
    post_id: uuid.UUID,
    ctx: SessionContext = Depends(session_context),
    session: AsyncSession = Depends(db_session),
) -> dict[str, Any]:
    posts = PostRepo(session)
    post = await _get_post_or_404(posts, post_id)
    principal = await require_ownership(ctx, post.author_id)

    await AuditRepo(session).add(
        actor=principal.id,
        action="post.deleted",
        entity_type="post",
        entity_id=post.id,
        details={"slug": post.slug, "author_id": post.author_id},
    )
    await posts.delete(post)
    await session.commit()
    log.info("post_deleted", post_id=str(post_id), actor=principal.id)
    return ok({"id": str(post_id)}, message="Post deleted successfully")


@router.get("/{post_id}/audit")
async def list_post_audit(
    post_id: uuid.UUID,
    ctx: SessionContext = Depends(session_context),
    session: AsyncSession = Depends(db_session),
) -> dict[str, Any]:
    post = await _get_post_or_404(PostRepo(session), post_id)
    await require_ownership(ctx, post.author_id)
    events = await AuditRepo(session).list_for_entity("post", post.id)
    return ok([audit_event(e) for e in events])


async def _get_post_or_404(posts: PostRepo, post_id: uuid.UUID) -> Post:
    post = await posts.get(post_id)
    if post is None:
        raise HTTPException(status_code=HTTP_404_NOT_FOUND, detail="Post not found")
    return post


async def _resolve_tags(session: AsyncSession, slugs: list[str]) -> list[Tag] | Invalid:
    tags = await TagRepo(session).get_by_slugs(slugs)
    missing = sorted(set(slugs) - {t.slug for t in tags})
    if missing:
        return Invalid((FieldViolation(field="tags", message=f"Unknown tags: {', '.join(missing)}"),))
    return tags


def _utcnow() -> datetime:
    return datetime.utcnow()


def _naive_utc(value: datetime | None) -> datetime | None:
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(UTC).replace(tzinfo=None)


# --- Module Notes -----------------------------------------------------------
# Ownership gates run after the post is loaded (404 first), and before the body is
# validated, so a non-owner never learns which fields would have been rejected.
