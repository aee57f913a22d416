"""
tests.test_policy

Authorization policy and claim normalization (no I/O).
"""

from __future__ import annotations

from types import SimpleNamespace

import pytest

from service_portal.auth.claims import avatar_url_for, identity_from_claims, parse_groups
from service_portal.auth.models import Identity, ProviderClaims
from service_portal.auth.policy import can_view, is_admin, owns_resource, require_admin
from service_portal.errors import Forbidden


def _identity(key: str = "u1", groups: set[str] | None = None) -> Identity:
    return Identity(
        key=key, email=None, display_name=None, avatar_url=None, groups=frozenset(groups or ())
    )


@pytest.mark.parametrize(
    ("groups", "expected"),
    [({"admin"}, True), ({"admin", "staff"}, True), ({"staff"}, False), (set(), False)],
)
def test_is_admin_iff_admin_group(groups: set[str], expected: bool) -> None:
    assert is_admin(_identity(groups=groups)) is expected


def test_can_view_requires_a_shared_group() -> None:
    entry = SimpleNamespace(allowed_groups=["staff"])
    assert can_view(_identity(groups={"staff", "x"}), entry)
    assert not can_view(_identity(groups={"guest"}), entry)
    assert not can_view(_identity(groups=set()), entry)
    assert not can_view(_identity(groups={"staff"}), SimpleNamespace(allowed_groups=[]))


def test_admin_gets_no_implicit_visibility() -> None:
    entry = SimpleNamespace(allowed_groups=["finance"])
    assert not can_view(_identity(groups={"admin"}), entry)


def test_owns_resource_matches_owner_or_recipient() -> None:
    me = _identity("u1")
    assert owns_resource(me, SimpleNamespace(owner_key="u1"))
    assert owns_resource(me, SimpleNamespace(recipient_key="u1"))
    assert not owns_resource(me, SimpleNamespace(owner_key="u2"))
    assert not owns_resource(me, SimpleNamespace())


def test_require_admin_raises_forbidden() -> None:
    with pytest.raises(Forbidden):
        require_admin(_identity(groups={"staff"}))
    assert require_admin(_identity(groups={"admin"})).key == "u1"


def test_parse_groups_accepts_delimited_string_and_list() -> None:
    assert parse_groups(" admin, staff ,,staff") == frozenset({"admin", "staff"})
    assert parse_groups(["admin", " staff", ""]) == frozenset({"admin", "staff"})
    assert parse_groups(None) == frozenset()
    assert parse_groups("") == frozenset()


def test_avatar_url_is_stable_and_case_insensitive() -> None:
    url = avatar_url_for("Someone@Example.com ")
    assert url == avatar_url_for("someone@example.com")
    assert url.startswith("https://www.gravatar.com/avatar/")
    assert url.endswith("?d=identicon&s=200")
    assert avatar_url_for(None) is None
    assert avatar_url_for("  ") is None


def test_identity_from_claims_normalizes_blank_fields() -> None:
    ident = identity_from_claims(
        ProviderClaims(principal="alice", email="", display_name="  ", groups="a,b")
    )
    assert ident.key == "alice"
    assert ident.email is None
    assert ident.display_name is None
    assert ident.avatar_url is None
    assert ident.groups == frozenset({"a", "b"})
