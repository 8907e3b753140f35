"""
astroblog.auth

Authentication/authorization package.

Responsibilities:
- Role hierarchy and the request-scoped `Principal`.
- Session resolution from bearer tokens.
- Role and ownership gates used by every write endpoint.
- FastAPI dependencies wiring the gates into routers.
"""

from astroblog.auth.errors import (
    AccessDenied,
    AuthenticationRequired,
    AuthorizationError,
    InsufficientPermissions,
)
from astroblog.auth.gates import check_ownership, check_role, require_ownership, require_role
from astroblog.auth.models import AuthorizationDecision, DenialReason, Principal
from astroblog.auth.roles import Role, role_at_least
from astroblog.auth.session import SessionContext, current_principal

__all__ = [
    "AccessDenied",
    "AuthenticationRequired",
    "AuthorizationDecision",
    "AuthorizationError",
    "DenialReason",
    "InsufficientPermissions",
    "Principal",
    "Role",
    "SessionContext",
    "check_ownership",
    "check_role",
    "current_principal",
    "require_ownership",
    "require_role",
    "role_at_least",
]
