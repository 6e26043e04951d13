# This test file validates the user deletion guard.
# It exists to keep deletion strictly rank-ordered so peers never remove each other.
# Self deletion is always allowed, including for the highest tier.

from __future__ import annotations

import pytest

from src.access_policy.decisions import (
    REASON_ACTOR_OUTRANKS_TARGET,
    REASON_NO_PRINCIPAL,
    REASON_SELF_DELETE,
    REASON_TARGET_NOT_FOUND,
    REASON_TARGET_NOT_OUTRANKED,
    Outcome,
)
from src.access_policy.delete_guard import DeleteGuard
from src.access_policy.records import Principal, UserRecord
from src.access_policy.tiers import Tier, TierHierarchy


def _guard() -> DeleteGuard:
    return DeleteGuard(hierarchy=TierHierarchy())


def _user(user_id: str, tier: Tier) -> UserRecord:
    return UserRecord(id=user_id, name=user_id, tier=tier)


@pytest.mark.parametrize(
    "actor_tier,target_tier,allowed",
    [
        (Tier.MODERATOR, Tier.BASIC, True),
        (Tier.MODERATOR, Tier.MODERATOR, False),
        (Tier.MODERATOR, Tier.ADMIN, False),
        (Tier.ADMIN, Tier.MODERATOR, True),
        (Tier.ADMIN, Tier.ADMIN, False),
        (Tier.OWNER, Tier.ADMIN, True),
        (Tier.MODERATOR, Tier.OWNER, False),
        (Tier.ADMIN, Tier.OWNER, False),
    ],
)
def test_delete_requires_strictly_higher_rank(actor_tier: Tier, target_tier: Tier, allowed: bool) -> None:
    actor = Principal(id="actor", tier=actor_tier)

    decision = _guard().check(actor, _user("target", target_tier))

    assert decision.allowed is allowed
    if allowed:
        assert decision.reason_code == REASON_ACTOR_OUTRANKS_TARGET
    else:
        assert decision.outcome is Outcome.FORBIDDEN
        assert decision.reason_code == REASON_TARGET_NOT_OUTRANKED


@pytest.mark.parametrize("tier", list(Tier))
def test_self_delete_is_always_allowed(tier: Tier) -> None:
    target = _user("same", tier)

    decision = _guard().check(target.as_principal(), target)

    assert decision.allowed
    assert decision.reason_code == REASON_SELF_DELETE


def test_missing_target_is_not_found() -> None:
    decision = _guard().check(Principal(id="actor", tier=Tier.OWNER), None)

    assert decision.outcome is Outcome.NOT_FOUND
    assert decision.reason_code == REASON_TARGET_NOT_FOUND


def test_missing_actor_is_unauthenticated() -> None:
    decision = _guard().check(None, _user("target", Tier.BASIC))

    assert decision.outcome is Outcome.UNAUTHENTICATED
    assert decision.reason_code == REASON_NO_PRINCIPAL
