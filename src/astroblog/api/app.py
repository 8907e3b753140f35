"""
astroblog.api.app

FastAPI app factory for the astroblog API.

Responsibilities:
- Build the FastAPI application and register routers, middleware and error handlers.
- Own the DB engine/session factory for the lifetime of the app.
- Pin dependency resolution to the settings the app was built with.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from astroblog import __version__
from astroblog.api.errors import install_exception_handlers
from astroblog.api.routers.comments import router as comments_router
from astroblog.api.routers.dev_auth import router as dev_auth_router
from astroblog.api.routers.health import router as health_router
from astroblog.api.routers.posts import router as posts_router
from astroblog.api.routers.tags import router as tags_router
from astroblog.db.init_db import init_db
from astroblog.db.session import create_engine, create_sessionmaker
from astroblog.observability.logging import configure_logging, get_logger
from astroblog.observability.middleware import RequestContextMiddleware
from astroblog.settings import Settings, get_settings

log = get_logger(__name__)


def create_app(*, settings: Settings) -> FastAPI:
    configure_logging(service_name=settings.service_name, level=settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        log.info("startup", env=settings.env)
        engine = create_engine(settings)
        app.state.engine = engine
        app.state.sessionmaker = create_sessionmaker(engine)
        if settings.env in ("dev", "test"):
            # Prod schemas are managed by Alembic.
            await init_db(engine)
        try:
            yield
        finally:
            await engine.dispose()
            log.info("shutdown")

    app = FastAPI(
        title="astroblog API",
        version=__version__,
        docs_url="/docs",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )
    app.dependency_overrides[get_settings] = lambda: settings

    app.add_middleware(RequestContextMiddleware)
    install_exception_handlers(app)

    app.include_router(health_router, tags=["health"])
    app.include_router(dev_auth_router)
    app.include_router(posts_router)
    app.include_router(tags_router)
    app.include_router(comments_router)

    return app
