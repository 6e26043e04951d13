# This file provides shared builders for access policy tests.
# It exists so every suite projects and gates the same realistic service records.
# Coordinates mirror a real service: the two parties stand roughly 53 m apart.

from __future__ import annotations

from datetime import UTC, datetime

from src.access_policy.engine import AccessPolicyEngine
from src.access_policy.geo_trust import Coordinate
from src.access_policy.policy_config import load_access_policy_config
from src.access_policy.policy_loader import load_access_policy_engine
from src.access_policy.records import Principal, RatedTag, Rating, Sentiment, ServiceRecord
from src.access_policy.tiers import Tier

CLIENT_ID = "client-1"
PROFILE_OWNER_ID = "owner-1"
VIEWER_ID = "viewer-1"

CLIENT_COORDINATE = Coordinate(latitude=43.259769, longitude=76.935246)
NEARBY_PROFILE_COORDINATE = Coordinate(latitude=43.259879, longitude=76.934604)
# ~110 m due north of the client.
DISTANT_PROFILE_COORDINATE = Coordinate(latitude=43.259769 + 0.00099, longitude=76.935246)

PROFILE_REVIEW = "I like the service! It's very good"
CLIENT_REVIEW = "I liked the client! He is very kind"


def default_engine() -> AccessPolicyEngine:
    return load_access_policy_engine(policy_config=load_access_policy_config())


def profile_rating() -> Rating:
    return Rating(
        id="profile-rating-1",
        score=5,
        review=PROFILE_REVIEW,
        tags=(RatedTag(tag_id=1, sentiment=Sentiment.LIKE), RatedTag(tag_id=2, sentiment=Sentiment.LIKE)),
    )


def client_user_rating() -> Rating:
    return Rating(
        id="user-rating-1",
        score=5,
        review=CLIENT_REVIEW,
        tags=(RatedTag(tag_id=11, sentiment=Sentiment.LIKE), RatedTag(tag_id=12, sentiment=Sentiment.DISLIKE)),
    )


def rated_service(
    *,
    profile_coordinate: Coordinate | None = NEARBY_PROFILE_COORDINATE,
    client_coordinate: Coordinate | None = CLIENT_COORDINATE,
    with_ratings: bool = True,
) -> ServiceRecord:
    created = datetime(2026, 3, 1, 12, 0, tzinfo=UTC)
    return ServiceRecord(
        id="service-1",
        client_user_id=CLIENT_ID,
        profile_id="profile-1",
        profile_owner_id=PROFILE_OWNER_ID,
        client_coordinate=client_coordinate,
        profile_coordinate=profile_coordinate,
        profile_rating=profile_rating() if with_ratings else None,
        client_user_rating=client_user_rating() if with_ratings else None,
        created_at=created,
        updated_at=created,
        updated_by=PROFILE_OWNER_ID,
    )


def viewer(tier: Tier, principal_id: str = VIEWER_ID) -> Principal:
    return Principal(id=principal_id, tier=tier)
