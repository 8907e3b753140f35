"""
astroblog.validation.schemas

Request schemas for content writes.

Responsibilities:
- Shared field rules (slug, http(s) URL, safe HTML, hex color).
- Create/update schemas for posts and tags, create/moderate schemas for comments.

Messages are user-facing; `validation.core.validate` passes them through verbatim.
"""

from __future__ import annotations

import re
import uuid
from datetime import UTC, datetime
from typing import Annotated
from urllib.parse import urlparse

from pydantic import AfterValidator, BaseModel, ConfigDict, model_validator

from astroblog.content.text import generate_slug
from astroblog.db.models import CommentStatus, PostStatus

_SLUG_RE = re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*$")
_TAG_NAME_RE = re.compile(r"^[a-zA-Z0-9\s-]+$")
_HEX_COLOR_RE = re.compile(r"^#[0-9A-F]{6}$", re.IGNORECASE)
_DANGEROUS_HTML = (
    re.compile(r"<script\b[^<]*(?:(?!</script>)<[^<]*)*</script>", re.IGNORECASE),
    re.compile(r"<iframe\b[^<]*(?:(?!</iframe>)<[^<]*)*</iframe>", re.IGNORECASE),
    re.compile(r"javascript:", re.IGNORECASE),
    re.compile(r"on\w+\s*=", re.IGNORECASE),
)

MAX_CONTENT_LENGTH = 50_000
MAX_URL_LENGTH = 500


def _length(label: str, *, max_len: int, min_len: int = 0) -> AfterValidator:
    def check(value: str) -> str:
        if len(value) < min_len:
            if min_len == 1:
                raise ValueError(f"{label} is required")
            raise ValueError(f"{label} must be at least {min_len} characters")
        if len(value) > max_len:
            raise ValueError(f"{label} must be less than {max_len} characters")
        return value

    return AfterValidator(check)


def _not_blank(label: str) -> AfterValidator:
    def check(value: str) -> str:
        if not value.strip():
            raise ValueError(f"{label} cannot be empty or contain only whitespace")
        return value

    return AfterValidator(check)


def _matches(pattern: re.Pattern[str], message: str) -> AfterValidator:
    def check(value: str) -> str:
        if not pattern.match(value):
            raise ValueError(message)
        return value

    return AfterValidator(check)


def _max_items(label: str, limit: int) -> AfterValidator:
    def check(values: list) -> list:
        if len(values) > limit:
            raise ValueError(f"Maximum {limit} {label} allowed")
        return values

    return AfterValidator(check)


def _http_url(value: str) -> str:
    if len(value) > MAX_URL_LENGTH:
        raise ValueError(f"URL must be less than {MAX_URL_LENGTH} characters")
    parsed = urlparse(value)
    if not parsed.scheme or not parsed.netloc:
        raise ValueError("Invalid URL format")
    if parsed.scheme not in ("http", "https"):
        raise ValueError("Only HTTP and HTTPS URLs are allowed")
    return value


def _meta_description(value: str) -> str:
    if len(value) < 120:
        raise ValueError("Meta description should be at least 120 characters for better SEO")
    if len(value) > 160:
        raise ValueError("Meta description must be less than 160 characters for optimal SEO")
    return value


def _safe_html(value: str) -> str:
    if any(p.search(value) for p in _DANGEROUS_HTML):
        raise ValueError("Content contains potentially dangerous HTML")
    return value


Slug = Annotated[
    str,
    _length("Slug", min_len=1, max_len=200),
    _matches(_SLUG_RE, "Slug must contain only lowercase letters, numbers, and hyphens"),
]
HttpUrl = Annotated[str, AfterValidator(_http_url)]
HtmlContent = Annotated[str, _length("Content", min_len=1, max_len=MAX_CONTENT_LENGTH), AfterValidator(_safe_html)]
HexColor = Annotated[str, _matches(_HEX_COLOR_RE, "Color must be a valid hex color (e.g., #FF0000)")]

Title = Annotated[str, _length("Title", min_len=1, max_len=200), _not_blank("Title")]
Excerpt = Annotated[str, _length("Excerpt", max_len=500)]
MetaTitle = Annotated[str, _length("Meta title", max_len=60)]
MetaDescription = Annotated[str, AfterValidator(_meta_description)]
Keyword = Annotated[str, _length("Keyword", min_len=1, max_len=50)]
Keywords = Annotated[list[Keyword], _max_items("keywords", 10)]
TagSlugs = Annotated[list[Slug], _max_items("tags", 10)]


def _as_utc(value: datetime) -> datetime:
    return value if value.tzinfo else value.replace(tzinfo=UTC)


class _Schema(BaseModel):
    model_config = ConfigDict(extra="ignore")


# --- Posts -------------------------------------------------------------------


class PostCreate(_Schema):
    title: Title
    # Derived from the title when omitted.
    slug: Slug | None = None
    content: HtmlContent
    excerpt: Excerpt | None = None
    status: PostStatus = PostStatus.DRAFT
    featured: bool = False
    scheduled_at: datetime | None = None

    meta_title: MetaTitle | None = None
    meta_description: MetaDescription | None = None
    og_image: HttpUrl | None = None
    canonical_url: HttpUrl | None = None
    keywords: Keywords = []
    tags: TagSlugs = []

    @model_validator(mode="after")
    def _derive_slug(self) -> PostCreate:
        if self.slug is None:
            derived = generate_slug(self.title)
            if not _SLUG_RE.match(derived):
                raise ValueError("Slug could not be derived from the title; please provide one")
            self.slug = derived
        return self

    @model_validator(mode="after")
    def _schedule_in_future(self) -> PostCreate:
        check_schedule(self.status, self.scheduled_at)
        return self


class PostUpdate(_Schema):
    title: Title | None = None
    slug: Slug | None = None
    content: HtmlContent | None = None
    excerpt: Excerpt | None = None
    status: PostStatus | None = None
    featured: bool | None = None
    scheduled_at: datetime | None = None

    meta_title: MetaTitle | None = None
    meta_description: MetaDescription | None = None
    og_image: HttpUrl | None = None
    canonical_url: HttpUrl | None = None
    keywords: Keywords | None = None
    tags: TagSlugs | None = None


def check_schedule(status: PostStatus, scheduled_at: datetime | None) -> None:
    if status is not PostStatus.SCHEDULED:
        return
    if scheduled_at is None:
        raise ValueError("Scheduled posts need a scheduled date")
    if _as_utc(scheduled_at) <= datetime.now(tz=UTC):
        raise ValueError("Scheduled date must be in the future")


# --- Tags --------------------------------------------------------------------


class TagCreate(_Schema):
    name: Annotated[
        str,
        _length("Tag name", min_len=1, max_len=50),
        _matches(_TAG_NAME_RE, "Tag name can only contain letters, numbers, spaces, and hyphens"),
    ]
    slug: Slug
    description: Annotated[str, _length("Description", max_len=200)] | None = None
    color: HexColor = "#3B82F6"


# --- Comments ----------------------------------------------------------------


class CommentCreate(_Schema):
    content: Annotated[
        str,
        _length("Comment content", min_len=1, max_len=2000),
        _not_blank("Comment"),
    ]
    parent_id: uuid.UUID | None = None


class CommentModerate(_Schema):
    status: CommentStatus
    moderation_note: Annotated[str, _length("Moderation note", max_len=500)] | None = None

