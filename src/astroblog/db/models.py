"""
astroblog.db.models

Persistence schema for the blog.

Responsibilities:
- Define ORM models:
  - Post: authored content plus SEO fields and derived reading stats
  - Tag: taxonomy, many-to-many with posts
  - Comment: reader comments with a moderation status
  - AuditEvent: append-only trail of content writes
"""

from __future__ import annotations

import enum
import uuid
from datetime import datetime
from typing import Any

from sqlalchemy import JSON, Column, Enum, ForeignKey, Index, String, Table, Text, Uuid as SAUuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from astroblog.db.base import Base


def _utcnow() -> datetime:
    # Naive UTC timestamps; SQLite has no tz-aware storage.
    return datetime.utcnow()


class PostStatus(enum.StrEnum):
    DRAFT = "DRAFT"
    PUBLISHED = "PUBLISHED"
    SCHEDULED = "SCHEDULED"
    ARCHIVED = "ARCHIVED"


class CommentStatus(enum.StrEnum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
    SPAM = "SPAM"


post_tags = Table(
    "post_tags",
    Base.metadata,
    Column("post_id", SAUuid(as_uuid=True), ForeignKey("posts.id", ondelete="CASCADE"), primary_key=True),
    Column("tag_id", SAUuid(as_uuid=True), ForeignKey("tags.id", ondelete="CASCADE"), primary_key=True),
)


class Post(Base):
    __tablename__ = "posts"

    id: Mapped[uuid.UUID] = mapped_column(
        SAUuid(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    slug: Mapped[str] = mapped_column(String(200), nullable=False, unique=True, index=True)
    excerpt: Mapped[str | None] = mapped_column(String(500), nullable=True)
    content: Mapped[str] = mapped_column(Text, nullable=False)

    status: Mapped[PostStatus] = mapped_column(Enum(PostStatus), nullable=False, index=True)
    featured: Mapped[bool] = mapped_column(nullable=False, default=False)

    meta_title: Mapped[str | None] = mapped_column(String(60), nullable=True)
    meta_description: Mapped[str | None] = mapped_column(String(160), nullable=True)
    og_image: Mapped[str | None] = mapped_column(String(500), nullable=True)
    canonical_url: Mapped[str | None] = mapped_column(String(500), nullable=True)
    keywords: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)

    # Owner is the session principal id; username is a display snapshot.
    author_id: Mapped[str] = mapped_column(String(256), nullable=False, index=True)
    author_username: Mapped[str | None] = mapped_column(String(100), nullable=True)

    reading_time: Mapped[int] = mapped_column(nullable=False, default=0)
    word_count: Mapped[int] = mapped_column(nullable=False, default=0)
    views: Mapped[int] = mapped_column(nullable=False, default=0)

    published_at: Mapped[datetime | None] = mapped_column(nullable=True, index=True)
    scheduled_at: Mapped[datetime | None] = mapped_column(nullable=True)
    created_at: Mapped[datetime] = mapped_column(nullable=False, default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column(nullable=False, default=_utcnow)

    tags: Mapped[list[Tag]] = relationship(secondary=post_tags, back_populates="posts", lazy="selectin")
    comments: Mapped[list[Comment]] = relationship(
        back_populates="post", cascade="all, delete-orphan"
    )

    __table_args__ = (Index("ix_posts_status_published", "status", "published_at"),)


class Tag(Base):
    __tablename__ = "tags"

    id: Mapped[uuid.UUID] = mapped_column(
        SAUuid(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    name: Mapped[str] = mapped_column(String(50), nullable=False)
    slug: Mapped[str] = mapped_column(String(200), nullable=False, unique=True, index=True)
    description: Mapped[str | None] = mapped_column(String(200), nullable=True)
    color: Mapped[str] = mapped_column(String(7), nullable=False, default="#3B82F6")
    created_at: Mapped[datetime] = mapped_column(nullable=False, default=_utcnow)

    posts: Mapped[list[Post]] = relationship(secondary=post_tags, back_populates="tags")


class Comment(Base):
    __tablename__ = "comments"

    id: Mapped[uuid.UUID] = mapped_column(
        SAUuid(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    post_id: Mapped[uuid.UUID] = mapped_column(
        SAUuid(as_uuid=True), ForeignKey("posts.id", ondelete="CASCADE"), nullable=False, index=True
    )
    parent_id: Mapped[uuid.UUID | None] = mapped_column(
        SAUuid(as_uuid=True), ForeignKey("comments.id", ondelete="SET NULL"), nullable=True
    )

    author_id: Mapped[str] = mapped_column(String(256), nullable=False, index=True)
    author_username: Mapped[str | None] = mapped_column(String(100), nullable=True)
    content: Mapped[str] = mapped_column(Text, nullable=False)

    status: Mapped[CommentStatus] = mapped_column(Enum(CommentStatus), nullable=False, index=True)
    moderation_note: Mapped[str | None] = mapped_column(String(500), nullable=True)
    moderated_by: Mapped[str | None] = mapped_column(String(256), nullable=True)

    created_at: Mapped[datetime] = mapped_column(nullable=False, default=_utcnow)

    post: Mapped[Post] = relationship(back_populates="comments")

    __table_args__ = (Index("ix_comments_post_created", "post_id", "created_at"),)


class AuditEvent(Base):
    __tablename__ = "audit_events"

    id: Mapped[uuid.UUID] = mapped_column(
        SAUuid(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    actor: Mapped[str] = mapped_column(String(256), nullable=False)  # principal id
    action: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    entity_type: Mapped[str] = mapped_column(String(32), nullable=False)
    entity_id: Mapped[uuid.UUID] = mapped_column(SAUuid(as_uuid=True), nullable=False, index=True)
    details: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)

    created_at: Mapped[datetime] = mapped_column(nullable=False, default=_utcnow, index=True)

    __table_args__ = (Index("ix_audit_entity_created", "entity_type", "entity_id", "created_at"),)


# --- Module Notes -----------------------------------------------------------
# Users are not persisted here: identity lives in the session token, and content
# rows reference principals by opaque id only.
