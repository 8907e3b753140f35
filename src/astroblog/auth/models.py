"""
astroblog.auth.models

Auth domain models.

Responsibilities:
- Define the authenticated identity type (`Principal`) handed to endpoints.
- Define the outcome of a single gate evaluation (`AuthorizationDecision`).
"""

from __future__ import annotations

import enum
from dataclasses import dataclass

from astroblog.auth.roles import Role


@dataclass(frozen=True, slots=True)
class Principal:
    """
    Authenticated caller identity, built fresh per request from session data.
    """

    id: str
    role: Role
    username: str | None = None
    email: str | None = None
    name: str | None = None

    @property
    def is_admin(self) -> bool:
        return self.role is Role.ADMIN


def derive_username(username: str | None, email: str | None) -> str | None:
    if username:
        return username
    if email and "@" in email:
        local = email.split("@", 1)[0]
        return local or None
    return None


class DenialReason(enum.StrEnum):
    AUTHENTICATION_REQUIRED = "AUTHENTICATION_REQUIRED"
    INSUFFICIENT_PERMISSIONS = "INSUFFICIENT_PERMISSIONS"
    ACCESS_DENIED = "ACCESS_DENIED"


@dataclass(frozen=True, slots=True)
class AuthorizationDecision:
    allowed: bool
    principal: Principal | None = None
    reason: DenialReason | None = None

    def __post_init__(self) -> None:
        if self.allowed and (self.principal is None or self.reason is not None):
            raise ValueError("an allowed decision needs a principal and no reason")
        if not self.allowed and self.reason is None:
            raise ValueError("a denied decision needs a reason")

    @classmethod
    def allow(cls, principal: Principal) -> AuthorizationDecision:
        return cls(allowed=True, principal=principal)

    @classmethod
    def deny(cls, reason: DenialReason, principal: Principal | None = None) -> AuthorizationDecision:
        return cls(allowed=False, principal=principal, reason=reason)

    def unwrap(self) -> Principal:
        """
        Return the allowed principal or raise the error kind matching the denial.
        """

        if self.allowed and self.principal is not None:
            return self.principal
        from astroblog.auth.errors import error_for

        # `__post_init__` guarantees a reason on every denial.
        raise error_for(self.reason or DenialReason.AUTHENTICATION_REQUIRED)


# --- Module Notes -----------------------------------------------------------
# Posts and comments store only `Principal.id` (as owner id) and `username`
# (as a display snapshot); nothing else about the caller is persisted.
