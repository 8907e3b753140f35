"""
tests.test_gates

Role and ownership gates, driven through an in-memory session provider.
"""

from __future__ import annotations

import pytest

from astroblog.auth import (
    AccessDenied,
    AuthenticationRequired,
    InsufficientPermissions,
    Principal,
    Role,
    SessionContext,
    require_ownership,
    require_role,
)
from astroblog.auth.gates import check_ownership, check_role
from astroblog.auth.models import AuthorizationDecision, DenialReason

ROLES = list(Role)


class FakeProvider:
    """Maps tokens to principals; unknown tokens mean 'no session'."""

    def __init__(self, *principals: Principal) -> None:
        self._by_token = {p.id: p for p in principals}
        self.calls = 0

    async def lookup(self, token: str) -> Principal | None:
        self.calls += 1
        return self._by_token.get(token)


class BrokenProvider:
    async def lookup(self, token: str) -> Principal | None:
        raise RuntimeError("identity provider unreachable")


def ctx_for(principal: Principal | None) -> SessionContext:
    if principal is None:
        return SessionContext(token=None, provider=FakeProvider())
    return SessionContext(token=principal.id, provider=FakeProvider(principal))


@pytest.mark.asyncio
@pytest.mark.parametrize("actual", ROLES)
@pytest.mark.parametrize("required", ROLES)
async def test_require_role_follows_hierarchy(actual: Role, required: Role) -> None:
    principal = Principal(id=f"{actual.value.lower()}-1", role=actual)
    ctx = ctx_for(principal)
    if actual.rank >= required.rank:
        assert await require_role(ctx, required) == principal
    else:
        with pytest.raises(InsufficientPermissions):
            await require_role(ctx, required)


@pytest.mark.asyncio
async def test_editor_passes_moderator_gate_but_moderator_fails_editor_gate() -> None:
    editor = Principal(id="ed-1", role=Role.EDITOR)
    moderator = Principal(id="mod-1", role=Role.MODERATOR)

    assert await require_role(ctx_for(editor), Role.MODERATOR) == editor
    with pytest.raises(InsufficientPermissions, match="Insufficient permissions"):
        await require_role(ctx_for(moderator), Role.EDITOR)


@pytest.mark.asyncio
async def test_admin_satisfies_every_role_requirement() -> None:
    admin = Principal(id="admin-1", role=Role.ADMIN)
    assert await require_role(ctx_for(admin), Role.ADMIN) == admin
    assert await require_role(ctx_for(admin), Role.MODERATOR) == admin


@pytest.mark.asyncio
@pytest.mark.parametrize("required", ROLES)
async def test_no_session_always_requires_authentication(required: Role) -> None:
    with pytest.raises(AuthenticationRequired, match="Authentication required"):
        await require_role(ctx_for(None), required)


@pytest.mark.asyncio
async def test_owner_passes_and_other_user_is_denied() -> None:
    user = Principal(id="user-123", role=Role.USER)
    ctx = ctx_for(user)

    assert await require_ownership(ctx, "user-123") == user
    with pytest.raises(AccessDenied, match="You don't own this resource"):
        await require_ownership(ctx, "user-456")


@pytest.mark.asyncio
@pytest.mark.parametrize("owner_id", ["user-1", "someone-else", ""])
async def test_admin_bypasses_ownership(owner_id: str) -> None:
    admin = Principal(id="admin-1", role=Role.ADMIN)
    assert await require_ownership(ctx_for(admin), owner_id) == admin


@pytest.mark.asyncio
@pytest.mark.parametrize("role", [Role.MODERATOR, Role.EDITOR])
async def test_privileged_non_admins_do_not_bypass_ownership(role: Role) -> None:
    principal = Principal(id="staff-1", role=role)
    with pytest.raises(AccessDenied):
        await require_ownership(ctx_for(principal), "author-9")


@pytest.mark.asyncio
async def test_ownership_compares_ids_exactly() -> None:
    user = Principal(id="user-1", role=Role.USER)
    for owner_id in ("USER-1", "user-1 ", "user-10", "user"):
        with pytest.raises(AccessDenied):
            await require_ownership(ctx_for(user), owner_id)


@pytest.mark.asyncio
async def test_no_session_ownership_requires_authentication() -> None:
    with pytest.raises(AuthenticationRequired):
        await require_ownership(ctx_for(None), "user-1")


@pytest.mark.asyncio
async def test_unknown_token_is_anonymous() -> None:
    ctx = SessionContext(token="not-a-session", provider=FakeProvider())
    with pytest.raises(AuthenticationRequired):
        await require_role(ctx, Role.USER)


@pytest.mark.asyncio
async def test_provider_failure_is_treated_as_anonymous() -> None:
    ctx = SessionContext(token="tok", provider=BrokenProvider())
    with pytest.raises(AuthenticationRequired):
        await require_role(ctx, Role.USER)
    with pytest.raises(AuthenticationRequired):
        await require_ownership(ctx, "user-1")


@pytest.mark.asyncio
async def test_provider_failure_is_logged(log_events) -> None:
    ctx = SessionContext(token="tok", provider=BrokenProvider())
    with pytest.raises(AuthenticationRequired):
        await require_role(ctx, Role.USER)

    failures = [e for e in log_events() if e["event"] == "session_lookup_failed"]
    assert len(failures) == 1
    assert failures[0]["level"] == "warning"
    assert failures[0]["error_type"] == "RuntimeError"
    assert failures[0]["error"] == "identity provider unreachable"


@pytest.mark.asyncio
async def test_gates_do_not_log_denials(log_events) -> None:
    with pytest.raises(InsufficientPermissions):
        await require_role(ctx_for(Principal(id="u-1", role=Role.USER)), Role.ADMIN)
    assert log_events() == []


@pytest.mark.asyncio
async def test_gates_are_idempotent_for_an_unchanged_session() -> None:
    user = Principal(id="user-1", role=Role.USER)
    ctx = ctx_for(user)

    assert await require_ownership(ctx, "user-1") == await require_ownership(ctx, "user-1")
    for _ in range(2):
        with pytest.raises(InsufficientPermissions):
            await require_role(ctx, Role.EDITOR)


@pytest.mark.asyncio
async def test_each_gate_call_resolves_the_session_afresh() -> None:
    user = Principal(id="user-1", role=Role.USER)
    provider = FakeProvider(user)
    ctx = SessionContext(token="user-1", provider=provider)

    await require_role(ctx, Role.USER)
    await require_ownership(ctx, "user-1")
    assert provider.calls == 2


def test_check_functions_return_decisions_without_raising() -> None:
    user = Principal(id="user-1", role=Role.USER)

    assert check_role(user, Role.USER) == AuthorizationDecision.allow(user)
    assert check_role(user, Role.ADMIN).reason is DenialReason.INSUFFICIENT_PERMISSIONS
    assert check_role(None, Role.USER).reason is DenialReason.AUTHENTICATION_REQUIRED
    assert check_ownership(user, "user-2").reason is DenialReason.ACCESS_DENIED
    assert check_ownership(None, "user-2").reason is DenialReason.AUTHENTICATION_REQUIRED


def test_decision_invariants_are_enforced() -> None:
    with pytest.raises(ValueError):
        AuthorizationDecision(allowed=True)
    with pytest.raises(ValueError):
        AuthorizationDecision(allowed=False)
