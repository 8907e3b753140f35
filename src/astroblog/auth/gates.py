"""
astroblog.auth.gates

Role and ownership gates.

Responsibilities:
- Pure decision functions (`check_role`, `check_ownership`) over an optional principal.
- Async gates (`require_role`, `require_ownership`) that resolve the session, decide,
  and either return the principal or raise one of the `auth.errors` kinds.
"""

from __future__ import annotations

from astroblog.auth.models import AuthorizationDecision, DenialReason, Principal
from astroblog.auth.roles import Role, role_at_least
from astroblog.auth.session import SessionContext, current_principal


def check_role(principal: Principal | None, required: Role) -> AuthorizationDecision:
    if principal is None:
        return AuthorizationDecision.deny(DenialReason.AUTHENTICATION_REQUIRED)
    if not role_at_least(principal.role, required):
        return AuthorizationDecision.deny(DenialReason.INSUFFICIENT_PERMISSIONS, principal)
    return AuthorizationDecision.allow(principal)


def check_ownership(principal: Principal | None, owner_id: str) -> AuthorizationDecision:
    if principal is None:
        return AuthorizationDecision.deny(DenialReason.AUTHENTICATION_REQUIRED)
    # Admins may act on any resource.
    if principal.is_admin:
        return AuthorizationDecision.allow(principal)
    if principal.id == owner_id:
        return AuthorizationDecision.allow(principal)
    return AuthorizationDecision.deny(DenialReason.ACCESS_DENIED, principal)


async def require_role(ctx: SessionContext, required: Role) -> Principal:
    principal = await current_principal(ctx)
    return check_role(principal, required).unwrap()


async def require_ownership(ctx: SessionContext, owner_id: str) -> Principal:
    principal = await current_principal(ctx)
    return check_ownership(principal, owner_id).unwrap()


# --- Module Notes -----------------------------------------------------------
# Ownership is strict string equality on opaque ids; no prefix or case folding.
# Denials are logged where they are translated to HTTP (`api.errors`), not here.
