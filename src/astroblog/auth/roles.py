"""
astroblog.auth.roles

Role hierarchy.

Responsibilities:
- Define the closed set of roles carried in session tokens.
- Define the single total order used by every "at least this role" check.
"""

from __future__ import annotations

import enum


class Role(enum.StrEnum):
    # Values are the wire format of the JWT `role` claim; treat as stable API contract.
    USER = "USER"
    MODERATOR = "MODERATOR"
    EDITOR = "EDITOR"
    ADMIN = "ADMIN"

    @property
    def rank(self) -> int:
        return _HIERARCHY.index(self) + 1

    @classmethod
    def parse(cls, value: str | Role) -> Role:
        if isinstance(value, Role):
            return value
        try:
            return cls(str(value).strip().upper())
        except ValueError:
            raise ValueError(f"unknown role: {value!r}") from None


# Lowest to highest privilege. The only place the ordering is defined.
_HIERARCHY: tuple[Role, ...] = (Role.USER, Role.MODERATOR, Role.EDITOR, Role.ADMIN)


def role_at_least(actual: Role, required: Role) -> bool:
    return actual.rank >= required.rank


# --- Module Notes -----------------------------------------------------------
# Adding a role means inserting it into `_HIERARCHY`; ranks are positional.
