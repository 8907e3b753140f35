"""
tests.test_roles

The role hierarchy is a single total order: USER < MODERATOR < EDITOR < ADMIN.
"""

from __future__ import annotations

import itertools

import pytest

from astroblog.auth.roles import Role, role_at_least

ORDER = [Role.USER, Role.MODERATOR, Role.EDITOR, Role.ADMIN]


def test_ranks_follow_declared_order() -> None:
    assert [r.rank for r in ORDER] == [1, 2, 3, 4]


@pytest.mark.parametrize(("actual", "required"), list(itertools.product(ORDER, ORDER)))
def test_role_at_least_matches_rank_comparison(actual: Role, required: Role) -> None:
    assert role_at_least(actual, required) is (ORDER.index(actual) >= ORDER.index(required))


@pytest.mark.parametrize("raw", ["editor", " EDITOR ", "Editor", Role.EDITOR])
def test_parse_is_case_insensitive(raw) -> None:
    assert Role.parse(raw) is Role.EDITOR


def test_parse_rejects_unknown_roles() -> None:
    with pytest.raises(ValueError, match="unknown role"):
        Role.parse("SUPERUSER")
