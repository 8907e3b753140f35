"""
astroblog.api.routers.tags

Tag listing and creation.

Responsibilities:
- List every tag with the number of posts using it.
- Create tags (EDITOR and above).
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.status import HTTP_201_CREATED, HTTP_409_CONFLICT

from astroblog.api.deps import db_session
from astroblog.api.errors import invalid_input, ok
from astroblog.api.presenters import tag_detail
from astroblog.auth.deps import role_required
from astroblog.auth.models import Principal
from astroblog.auth.roles import Role
from astroblog.db.repositories.audit import AuditRepo
from astroblog.db.repositories.tags import TagRepo
from astroblog.observability.logging import get_logger
from astroblog.validation import Invalid, validate
from astroblog.validation.schemas import TagCreate

router = APIRouter(prefix="/api/v1/tags", tags=["tags"])

log = get_logger(__name__)

SLUG_CONFLICT = "A tag with this slug already exists"


@router.get("")
async def list_tags(session: AsyncSession = Depends(db_session)) -> dict[str, Any]:
    rows = await TagRepo(session).list_with_post_counts()
    return ok(
        [tag_detail(tag, post_count=count) for tag, count in rows],
        message=f"Retrieved {len(rows)} tags",
    )


@router.post("", status_code=HTTP_201_CREATED, response_model=None)
async def create_tag(
    payload: dict[str, Any] = Body(...),
    principal: Principal = Depends(role_required(Role.EDITOR)),
    session: AsyncSession = Depends(db_session),
):
    result = validate(TagCreate, payload)
    if isinstance(result, Invalid):
        return invalid_input(result)
    data = result.value

    tags = TagRepo(session)
    if await tags.get_by_slug(data.slug) is not None:
        raise HTTPException(status_code=HTTP_409_CONFLICT, detail=SLUG_CONFLICT)

    try:
        tag = await tags.create(
            name=data.name, slug=data.slug, description=data.description, color=data.color
        )
    except IntegrityError:
        await session.rollback()
        raise HTTPException(status_code=HTTP_409_CONFLICT, detail=SLUG_CONFLICT) from None
    await AuditRepo(session).add(
        actor=principal.id, action="tag.created", entity_type="tag", entity_id=tag.id
    )
    await session.commit()
    log.info("tag_created", tag_id=str(tag.id), slug=tag.slug, actor=principal.id)
    return ok(tag_detail(tag, post_count=0), message="Tag created successfully")
