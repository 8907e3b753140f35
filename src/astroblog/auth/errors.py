"""
astroblog.auth.errors

Authorization error kinds surfaced by the gates.

Callers translate these into protocol responses (see `api.errors`):
`AuthenticationRequired` -> 401, the other two -> 403.
"""

from __future__ import annotations

from astroblog.auth.models import DenialReason


class AuthorizationError(Exception):
    reason: DenialReason
    default_message: str = "Not authorized"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.default_message)

    @property
    def message(self) -> str:
        return str(self)


class AuthenticationRequired(AuthorizationError):
    reason = DenialReason.AUTHENTICATION_REQUIRED
    default_message = "Authentication required"


class InsufficientPermissions(AuthorizationError):
    reason = DenialReason.INSUFFICIENT_PERMISSIONS
    default_message = "Insufficient permissions"


class AccessDenied(AuthorizationError):
    reason = DenialReason.ACCESS_DENIED
    default_message = "Access denied: You don't own this resource"


_BY_REASON: dict[DenialReason, type[AuthorizationError]] = {
    DenialReason.AUTHENTICATION_REQUIRED: AuthenticationRequired,
    DenialReason.INSUFFICIENT_PERMISSIONS: InsufficientPermissions,
    DenialReason.ACCESS_DENIED: AccessDenied,
}


def error_for(reason: DenialReason) -> AuthorizationError:
    return _BY_REASON[reason]()


class SessionLookupError(Exception):
    """Session provider could not produce an identity from a token."""
