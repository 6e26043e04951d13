# This test file validates the per-tier allow-sets loaded from the default policy files.
# It exists because allow-sets are explicit and must not be inferred from rank order.

from __future__ import annotations

import pytest

from src.access_policy.decisions import (
    REASON_ALLOWED_BY_POLICY,
    REASON_NO_PRINCIPAL,
    REASON_TIER_NOT_PERMITTED,
    REASON_UNKNOWN_ACTION,
    Outcome,
)
from src.access_policy.permissions import PermissionPolicy
from src.access_policy.tiers import Tier
from tests.access_policy.support import default_engine, viewer

STAFF = {Tier.MODERATOR, Tier.ADMIN, Tier.OWNER}
ALL_TIERS = set(Tier)

EXPECTED_ALLOW_SETS = {
    ("users", "list"): STAFF,
    ("users", "get"): ALL_TIERS,
    ("users", "delete_self"): ALL_TIERS,
    ("users", "delete"): STAFF,
    ("services", "list"): {Tier.GURU} | STAFF,
    ("services", "get"): ALL_TIERS,
}


@pytest.mark.parametrize("key", sorted(EXPECTED_ALLOW_SETS))
def test_default_policy_allow_sets(key: tuple[str, str]) -> None:
    permissions = default_engine().permissions

    assert permissions.allowed_tiers(*key) == EXPECTED_ALLOW_SETS[key]


def test_services_list_requires_guru_or_staff() -> None:
    permissions = default_engine().permissions

    assert not permissions.is_allowed(Tier.BASIC, "services", "list")
    assert not permissions.is_allowed(Tier.EXPERT, "services", "list")
    assert permissions.is_allowed(Tier.GURU, "services", "list")


def test_users_list_is_staff_only() -> None:
    permissions = default_engine().permissions

    assert permissions.is_allowed(Tier.MODERATOR, "users", "list")
    assert not permissions.is_allowed(Tier.BASIC, "users", "list")
    assert not permissions.is_allowed(Tier.GURU, "users", "list")


def test_check_without_principal_is_unauthenticated() -> None:
    decision = default_engine().permissions.check(None, "services", "get")

    assert decision.outcome is Outcome.UNAUTHENTICATED
    assert decision.reason_code == REASON_NO_PRINCIPAL
    assert not decision.allowed


def test_check_denies_unlisted_tier() -> None:
    decision = default_engine().permissions.check(viewer(Tier.EXPERT), "users", "list")

    assert decision.outcome is Outcome.FORBIDDEN
    assert decision.reason_code == REASON_TIER_NOT_PERMITTED


def test_check_allows_listed_tier() -> None:
    decision = default_engine().permissions.check(viewer(Tier.ADMIN), "users", "list")

    assert decision.allowed
    assert decision.reason_code == REASON_ALLOWED_BY_POLICY


def test_unknown_resource_action_is_denied_even_for_owner() -> None:
    decision = default_engine().permissions.check(viewer(Tier.OWNER), "payments", "refund")

    assert decision.outcome is Outcome.FORBIDDEN
    assert decision.reason_code == REASON_UNKNOWN_ACTION


def test_allow_sets_need_not_be_rank_monotonic() -> None:
    policy = PermissionPolicy(allow_sets={("reports", "export"): frozenset({Tier.GURU, Tier.OWNER})})

    assert policy.is_allowed(Tier.GURU, "reports", "export")
    assert not policy.is_allowed(Tier.ADMIN, "reports", "export")
    assert policy.knows("reports", "export")
    assert not policy.knows("reports", "delete")
