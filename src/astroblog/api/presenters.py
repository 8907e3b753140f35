"""
astroblog.api.presenters

ORM -> JSON shapes shared by the content routers.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from astroblog.db.models import AuditEvent, Comment, Post, Tag


def _iso(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


def tag_summary(tag: Tag) -> dict[str, Any]:
    return {"id": str(tag.id), "name": tag.name, "slug": tag.slug, "color": tag.color}


def tag_detail(tag: Tag, *, post_count: int | None = None) -> dict[str, Any]:
    out = {**tag_summary(tag), "description": tag.description}
    if post_count is not None:
        out["post_count"] = post_count
    return out


def post_summary(post: Post) -> dict[str, Any]:
    return {
        "id": str(post.id),
        "title": post.title,
        "slug": post.slug,
        "excerpt": post.excerpt,
        "status": post.status.value,
        "featured": post.featured,
        "published_at": _iso(post.published_at),
        "created_at": _iso(post.created_at),
        "updated_at": _iso(post.updated_at),
        "views": post.views,
        "reading_time": post.reading_time,
        "author": {"id": post.author_id, "username": post.author_username},
        "tags": [tag_summary(t) for t in post.tags],
    }


def post_detail(post: Post) -> dict[str, Any]:
    return {
        **post_summary(post),
        "content": post.content,
        "word_count": post.word_count,
        "scheduled_at": _iso(post.scheduled_at),
        "meta_title": post.meta_title,
        "meta_description": post.meta_description,
        "og_image": post.og_image,
        "canonical_url": post.canonical_url,
        "keywords": list(post.keywords or []),
    }


def comment_detail(comment: Comment) -> dict[str, Any]:
    return {
        "id": str(comment.id),
        "post_id": str(comment.post_id),
        "parent_id": str(comment.parent_id) if comment.parent_id else None,
        "content": comment.content,
        "status": comment.status.value,
        "author": {"id": comment.author_id, "username": comment.author_username},
        "created_at": _iso(comment.created_at),
    }


def audit_event(ev: AuditEvent) -> dict[str, Any]:
    return {
        "id": str(ev.id),
        "actor": ev.actor,
        "action": ev.action,
        "details": ev.details,
        "created_at": _iso(ev.created_at),
    }
