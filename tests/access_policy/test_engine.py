# This test file validates the assembled access policy engine and its decision counters.
# It exists so every gate and guard outcome is observable on the metrics endpoint.

from __future__ import annotations

from prometheus_client import REGISTRY

from src.access_policy.decisions import Outcome
from src.access_policy.records import Principal, UserRecord
from src.access_policy.tiers import Tier
from tests.access_policy.support import default_engine, rated_service, viewer


def _decision_count(resource: str, action: str, outcome: str) -> float:
    value = REGISTRY.get_sample_value(
        "access_policy_decisions_total",
        {"resource": resource, "action": action, "outcome": outcome},
    )
    return value or 0.0


def test_check_increments_decision_counter() -> None:
    engine = default_engine()
    before = _decision_count("services", "list", "forbidden")

    decision = engine.check(viewer(Tier.BASIC), "services", "list")

    assert decision.outcome is Outcome.FORBIDDEN
    assert _decision_count("services", "list", "forbidden") == before + 1


def test_delete_guard_decisions_are_counted() -> None:
    engine = default_engine()
    before = _decision_count("users", "delete_guard", "allowed")

    decision = engine.check_user_delete(
        Principal(id="admin-1", tier=Tier.ADMIN),
        UserRecord(id="mod-1", name="Moderator", tier=Tier.MODERATOR),
    )

    assert decision.allowed
    assert _decision_count("users", "delete_guard", "allowed") == before + 1


def test_resolve_tier_follows_configured_mode() -> None:
    engine = default_engine()

    assert engine.resolve_tier("Moderator") is Tier.MODERATOR


def test_project_services_keeps_input_order() -> None:
    engine = default_engine()
    first = rated_service()
    second = rated_service(with_ratings=False)

    views = engine.project_services([first, second], viewer(Tier.GURU))

    assert [view.profile_rating is not None for view in views] == [True, False]
