"""
tests.test_session

JWT-backed session resolution and claim mapping.
"""

from __future__ import annotations

import json
from datetime import timedelta

import jwt
import pytest

from astroblog.auth.errors import SessionLookupError
from astroblog.auth.jwt import JwtConfig, issue_token
from astroblog.auth.roles import Role
from astroblog.auth.session import (
    JwtSessionProvider,
    SessionContext,
    current_principal,
    principal_from_claims,
)

CFG = JwtConfig(
    alg="HS256",
    issuer="astroblog",
    audience="astroblog-api",
    secret="session-test-secret-0123456789abcdef",
)


def ctx(token: str | None) -> SessionContext:
    return SessionContext(token=token, provider=JwtSessionProvider(CFG))


@pytest.mark.asyncio
async def test_valid_token_resolves_to_principal() -> None:
    token = issue_token(
        cfg=CFG, subject="user-7", role=Role.MODERATOR, email="stella@example.com", name="Stella"
    )
    principal = await current_principal(ctx(token))

    assert principal is not None
    assert principal.id == "user-7"
    assert principal.role is Role.MODERATOR
    assert principal.username == "stella"
    assert principal.name == "Stella"


@pytest.mark.asyncio
async def test_missing_token_is_anonymous() -> None:
    assert await current_principal(ctx(None)) is None
    assert await current_principal(ctx("")) is None


@pytest.mark.asyncio
async def test_expired_token_is_anonymous() -> None:
    token = issue_token(cfg=CFG, subject="user-7", ttl=timedelta(seconds=-5))
    assert await current_principal(ctx(token)) is None


@pytest.mark.asyncio
async def test_token_for_another_audience_is_anonymous() -> None:
    other = JwtConfig(alg="HS256", issuer="astroblog", audience="elsewhere", secret=CFG.secret)
    token = issue_token(cfg=other, subject="user-7")
    assert await current_principal(ctx(token)) is None


@pytest.mark.asyncio
async def test_unknown_role_claim_is_anonymous() -> None:
    token = jwt.encode(
        {"iss": CFG.issuer, "aud": CFG.audience, "sub": "u", "role": "ROOT", "iat": 0, "exp": 2**40},
        CFG.secret,
        algorithm=CFG.alg,
    )
    assert await current_principal(ctx(token)) is None


@pytest.mark.asyncio
async def test_provider_lookup_raises_on_garbage() -> None:
    with pytest.raises(SessionLookupError):
        await JwtSessionProvider(CFG).lookup("not-a-jwt")


def test_missing_role_claim_defaults_to_user() -> None:
    assert principal_from_claims({"sub": "u1"}).role is Role.USER


def test_explicit_username_wins_over_email() -> None:
    p = principal_from_claims({"sub": "u1", "username": "nova", "email": "x@example.com"})
    assert p.username == "nova"


def test_username_is_absent_without_username_or_email() -> None:
    assert principal_from_claims({"sub": "u1"}).username is None


def test_subject_is_required() -> None:
    with pytest.raises(SessionLookupError):
        principal_from_claims({"role": "ADMIN"})


@pytest.mark.asyncio
async def test_rejected_token_is_logged_without_the_token(log_events) -> None:
    assert await current_principal(ctx("not-a-jwt")) is None

    (event,) = [e for e in log_events() if e["event"] == "session_lookup_failed"]
    assert event["error_type"] == "SessionLookupError"
    assert "not-a-jwt" not in json.dumps(event)
