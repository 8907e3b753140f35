"""
tests.conftest

Shared fixtures: an app bound to a throwaway SQLite file, an HTTP client that
drives it in-process, a helper for minting bearer headers and access to the
structured log events emitted during a test.
"""

from __future__ import annotations

import json
import logging
from collections.abc import AsyncIterator, Callable
from pathlib import Path
from typing import Any

import httpx
import pytest
import pytest_asyncio
from fastapi import FastAPI

from astroblog.api.app import create_app
from astroblog.auth.deps import jwt_config
from astroblog.auth.jwt import issue_token
from astroblog.auth.roles import Role
from astroblog.observability.logging import configure_logging
from astroblog.settings import Settings

TEST_SECRET = "test-secret-0123456789abcdef0123456789"

BearerFactory = Callable[..., dict[str, str]]
LogEvents = Callable[[], list[dict[str, Any]]]


@pytest.fixture(autouse=True)
def _json_logging() -> None:
    # structlog renders through stdlib logging, where `caplog` can see every event.
    configure_logging(service_name="astroblog-api", level="WARNING")


@pytest.fixture
def log_events(caplog: pytest.LogCaptureFixture) -> LogEvents:
    caplog.set_level(logging.INFO)

    def events() -> list[dict[str, Any]]:
        out = []
        for record in caplog.records:
            try:
                event = json.loads(record.getMessage())
            except ValueError:
                continue
            if isinstance(event, dict):
                out.append(event)
        return out

    return events


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(
        env="test",
        log_level="WARNING",
        jwt_secret=TEST_SECRET,
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'astroblog-test.db'}",
        default_page_size=10,
        max_page_size=50,
    )


@pytest_asyncio.fixture
async def app(settings: Settings) -> AsyncIterator[FastAPI]:
    app = create_app(settings=settings)
    # httpx's ASGITransport does not drive lifespan; enter it explicitly.
    async with app.router.lifespan_context(app):
        yield app


@pytest_asyncio.fixture
async def client(app: FastAPI) -> AsyncIterator[httpx.AsyncClient]:
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


@pytest.fixture
def bearer(settings: Settings) -> BearerFactory:
    def make(subject: str, role: Role = Role.USER, **profile: str) -> dict[str, str]:
        token = issue_token(cfg=jwt_config(settings), subject=subject, role=role, **profile)
        return {"Authorization": f"Bearer {token}"}

    return make
