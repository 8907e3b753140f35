"""
astroblog.auth.session

Session resolution.

Responsibilities:
- Define the session provider boundary (token -> identity).
- Implement the JWT-backed provider.
- Resolve an explicit per-request `SessionContext` into a `Principal` or `None`,
  normalizing every lookup failure to the anonymous state.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol

from astroblog.auth.errors import SessionLookupError
from astroblog.auth.jwt import JwtConfig, JwtValidationError, decode_and_validate
from astroblog.auth.models import Principal, derive_username
from astroblog.auth.roles import Role
from astroblog.observability.logging import get_logger

log = get_logger(__name__)


class SessionProvider(Protocol):
    async def lookup(self, token: str) -> Principal | None:
        """
        Return the identity behind `token`, `None` for "no session", or raise.
        """
        ...


class JwtSessionProvider:
    def __init__(self, cfg: JwtConfig) -> None:
        self._cfg = cfg

    async def lookup(self, token: str) -> Principal | None:
        try:
            claims = decode_and_validate(cfg=self._cfg, token=token)
        except JwtValidationError as e:
            raise SessionLookupError(f"invalid token: {e}") from e
        return principal_from_claims(claims)


def principal_from_claims(claims: dict[str, Any]) -> Principal:
    subject = str(claims.get("sub") or "")
    if not subject:
        raise SessionLookupError("token has no subject")

    # Sessions issued before roles existed carry no claim; they are plain users.
    raw_role = claims.get("role") or Role.USER
    try:
        role = Role.parse(raw_role)
    except ValueError as e:
        raise SessionLookupError(str(e)) from e

    email = _optional_str(claims.get("email"))
    return Principal(
        id=subject,
        role=role,
        username=derive_username(_optional_str(claims.get("username")), email),
        email=email,
        name=_optional_str(claims.get("name")),
    )


def _optional_str(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


@dataclass(frozen=True, slots=True)
class SessionContext:
    """
    Request-scoped session input: the raw bearer token (if any) and the provider
    that can resolve it.
    """

    token: str | None
    provider: SessionProvider


async def current_principal(ctx: SessionContext) -> Principal | None:
    if not ctx.token:
        return None
    try:
        return await ctx.provider.lookup(ctx.token)
    except Exception as e:
        # Lookup failures are indistinguishable from "not signed in" to callers.
        log.warning("session_lookup_failed", error=str(e), error_type=type(e).__name__)
        return None


# --- Module Notes -----------------------------------------------------------
# Gates in `auth.gates` are the only callers of `current_principal` on write paths.
