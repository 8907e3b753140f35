"""
astroblog.settings

Central configuration model (Pydantic Settings).

Responsibilities:
- Provide strongly-typed, env-driven settings for all layers.
- Hide secrets from repr/logging (e.g., JWT secret).
- Offer a cached settings instance for dependency injection.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    All knobs are read from `ASTROBLOG_*` environment variables.
    Defaults are safe for local development only.
    """

    model_config = SettingsConfigDict(env_prefix="ASTROBLOG_", case_sensitive=False)

    # `dev`/`test` auto-create tables and expose the dev token endpoint.
    env: Literal["dev", "test", "prod"] = "dev"
    service_name: str = "astroblog-api"
    log_level: str = "INFO"

    api_host: str = "0.0.0.0"
    api_port: int = 8080

    # Auth
    jwt_alg: str = "HS256"
    jwt_issuer: str = "astroblog"
    jwt_audience: str = "astroblog-api"
    jwt_secret: str = Field(default="dev-secret-change-me-before-deploying", repr=False)

    # Persistence
    database_url: str = "sqlite+aiosqlite:///./astroblog.db"

    # Pagination
    default_page_size: int = Field(default=10, ge=1)
    max_page_size: int = Field(default=50, ge=1)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    # Cache avoids re-parsing env vars for each request dependency.
    return Settings()


# --- Module Notes -----------------------------------------------------------
# Tests build `Settings(...)` directly and override `get_settings` on the app.
