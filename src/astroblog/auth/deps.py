"""
astroblog.auth.deps

FastAPI dependency functions for authentication and authorization.

Responsibilities:
- Build the explicit per-request `SessionContext` from the bearer header.
- Expose optional-principal and minimum-role dependencies for routers.
"""

from __future__ import annotations

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from astroblog.auth.gates import require_role
from astroblog.auth.jwt import JwtConfig
from astroblog.auth.models import Principal
from astroblog.auth.roles import Role
from astroblog.auth.session import JwtSessionProvider, SessionContext, current_principal
from astroblog.settings import Settings, get_settings

# auto_error=False: a missing header is the anonymous state, not an error.
_bearer = HTTPBearer(auto_error=False)


def jwt_config(settings: Settings) -> JwtConfig:
    return JwtConfig(
        alg=settings.jwt_alg,
        issuer=settings.jwt_issuer,
        audience=settings.jwt_audience,
        secret=settings.jwt_secret,
    )


def session_provider(settings: Settings = Depends(get_settings)) -> JwtSessionProvider:
    return JwtSessionProvider(jwt_config(settings))


def session_context(
    creds: HTTPAuthorizationCredentials | None = Depends(_bearer),
    provider: JwtSessionProvider = Depends(session_provider),
) -> SessionContext:
    token = creds.credentials if creds is not None else None
    return SessionContext(token=token or None, provider=provider)


async def optional_principal(ctx: SessionContext = Depends(session_context)) -> Principal | None:
    return await current_principal(ctx)


def role_required(role: Role):
    async def _dep(ctx: SessionContext = Depends(session_context)) -> Principal:
        # Denials raise `auth.errors` kinds; `api.errors` maps them to 401/403.
        return await require_role(ctx, role)

    return _dep


# --- Module Notes -----------------------------------------------------------
# Ownership checks need the loaded resource, so routers call `require_ownership`
# directly with the `SessionContext` from `session_context`.
