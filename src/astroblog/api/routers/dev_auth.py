"""
astroblog.api.routers.dev_auth

Local token minting for development and tests.

Responsibilities:
- Issue signed session tokens for an arbitrary subject and role.
- Stay invisible (404) when running in prod.
"""

from __future__ import annotations

from datetime import timedelta

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field
from starlette.status import HTTP_404_NOT_FOUND

from astroblog.api.deps import settings_dep
from astroblog.auth.deps import jwt_config
from astroblog.auth.jwt import issue_token
from astroblog.auth.roles import Role
from astroblog.settings import Settings

router = APIRouter(prefix="/api/v1/dev", tags=["dev"])


class DevTokenRequest(BaseModel):
    subject: str = Field(min_length=1, max_length=256)
    role: Role = Role.USER
    username: str | None = Field(default=None, max_length=100)
    email: str | None = Field(default=None, max_length=320)
    name: str | None = Field(default=None, max_length=200)
    ttl_minutes: int = Field(default=60, ge=1, le=24 * 60)


class DevTokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"


@router.post("/token", response_model=DevTokenResponse)
async def mint_dev_token(
    body: DevTokenRequest,
    settings: Settings = Depends(settings_dep),
) -> DevTokenResponse:
    if settings.env == "prod":
        raise HTTPException(status_code=HTTP_404_NOT_FOUND, detail="Not found")

    token = issue_token(
        cfg=jwt_config(settings),
        subject=body.subject,
        role=body.role,
        username=body.username,
        email=body.email,
        name=body.name,
        ttl=timedelta(minutes=body.ttl_minutes),
    )
    return DevTokenResponse(access_token=token)
