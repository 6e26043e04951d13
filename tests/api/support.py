# This file provides shared helpers for API endpoint tests.
# It exists so tests can override the policy engine and record store without touching real data.
# The helpers build consistent config objects, a seeded store, and scoped TestClient contexts.
# Seeded users cover every tier plus two basic participants of the seeded services.

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from datetime import UTC, datetime, timedelta

from fastapi.testclient import TestClient

from src.access_policy.engine import AccessPolicyEngine
from src.access_policy.geo_trust import Coordinate
from src.access_policy.policy_loader import load_access_policy_engine
from src.access_policy.records import RatedTag, Rating, Sentiment, ServiceRecord, UserRecord
from src.access_policy.tiers import Tier
from src.api.api_config import ApiConfig
from src.api.app import app
from src.api.dependencies import get_config, get_policy_engine, get_record_store
from src.api.record_store import InMemoryRecordStore

BASE_TS = datetime(2026, 3, 1, 9, 0, tzinfo=UTC)

SEED_USERS: tuple[tuple[str, Tier], ...] = (
    ("basic-1", Tier.BASIC),
    ("expert-1", Tier.EXPERT),
    ("guru-1", Tier.GURU),
    ("mod-1", Tier.MODERATOR),
    ("mod-2", Tier.MODERATOR),
    ("admin-1", Tier.ADMIN),
    ("admin-2", Tier.ADMIN),
    ("owner-1", Tier.OWNER),
    ("client-1", Tier.BASIC),
    ("powner-1", Tier.BASIC),
)


def build_test_config() -> ApiConfig:
    """Create deterministic API config for tests."""

    return ApiConfig(
        api_name="Test Marketplace API",
        api_version_path="/api/v1",
        schema_version="1.0.0",
        environment="test",
        default_page_size=2,
        max_page_size=5,
        default_sort_order="created_at:asc",
        allowed_origins=[],
        principal_id_header="x-principal-id",
        principal_tier_header="x-principal-tier",
        seed_path=None,
        app_version="0.1.0",
    )


def seeded_store() -> InMemoryRecordStore:
    store = InMemoryRecordStore()
    for index, (user_id, tier) in enumerate(SEED_USERS):
        store.add_user(
            UserRecord(
                id=user_id,
                name=user_id.replace("-", " ").title(),
                tier=tier,
                created_at=BASE_TS + timedelta(minutes=index),
            )
        )

    store.add_service(
        ServiceRecord(
            id="svc-1",
            client_user_id="client-1",
            profile_id="profile-1",
            profile_owner_id="powner-1",
            client_coordinate=Coordinate(latitude=43.259769, longitude=76.935246),
            profile_coordinate=Coordinate(latitude=43.259879, longitude=76.934604),
            profile_rating=Rating(
                id="pr-1",
                score=5,
                review="I like the service! It's very good",
                tags=(RatedTag(tag_id=1, sentiment=Sentiment.LIKE), RatedTag(tag_id=2, sentiment=Sentiment.LIKE)),
            ),
            client_user_rating=Rating(
                id="ur-1",
                score=4,
                review="I liked the client! He is very kind",
                tags=(RatedTag(tag_id=3, sentiment=Sentiment.LIKE), RatedTag(tag_id=4, sentiment=Sentiment.DISLIKE)),
            ),
            created_at=BASE_TS,
            updated_at=BASE_TS,
            updated_by="powner-1",
        )
    )
    store.add_service(
        ServiceRecord(
            id="svc-2",
            client_user_id="basic-1",
            profile_id="profile-2",
            profile_owner_id="expert-1",
            client_coordinate=Coordinate(latitude=43.259769, longitude=76.935246),
            profile_coordinate=Coordinate(latitude=43.260759, longitude=76.935246),
            created_at=BASE_TS + timedelta(hours=1),
        )
    )
    store.add_service(
        ServiceRecord(
            id="svc-3",
            client_user_id="guru-1",
            profile_id="profile-1",
            profile_owner_id="powner-1",
            profile_rating=Rating(
                id="pr-3",
                score=3,
                review="Arrived late but did the job",
                tags=(RatedTag(tag_id=5, sentiment=Sentiment.DISLIKE),),
            ),
            client_user_rating=Rating(id="ur-3", score=4, review="Polite and on time"),
            created_at=BASE_TS + timedelta(hours=2),
        )
    )
    return store


def principal_headers(user_id: str, tier: str | Tier) -> dict[str, str]:
    tier_value = tier.value if isinstance(tier, Tier) else tier
    return {"x-principal-id": user_id, "x-principal-tier": tier_value}


def headers_for(user_id: str) -> dict[str, str]:
    tiers = dict(SEED_USERS)
    return principal_headers(user_id, tiers[user_id])


@contextmanager
def api_test_client(
    *,
    config: ApiConfig | None = None,
    store: InMemoryRecordStore | None = None,
    engine: AccessPolicyEngine | None = None,
) -> Iterator[TestClient]:
    """Yield a TestClient with scoped dependency overrides."""

    resolved_config = config or build_test_config()
    resolved_store = store if store is not None else seeded_store()
    resolved_engine = engine or load_access_policy_engine()

    app.dependency_overrides[get_config] = lambda: resolved_config
    app.dependency_overrides[get_record_store] = lambda: resolved_store
    app.dependency_overrides[get_policy_engine] = lambda: resolved_engine

    try:
        with TestClient(app) as client:
            yield client
    finally:
        app.dependency_overrides.clear()
