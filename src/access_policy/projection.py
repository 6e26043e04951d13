# This module builds the requester-specific view of a service record.
# It exists so handlers never decide field by field what a viewer may see.
# Visibility comes from a per-tier rule matrix loaded from policy files, not from a single
# redaction level, because review text and its visibility flag do not move together across tiers.
# Coordinates are always dropped; only the trusted-distance signal survives projection.

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from types import MappingProxyType
from typing import Any

from src.access_policy.decisions import PolicyConfigError
from src.access_policy.geo_trust import evaluate_trust
from src.access_policy.records import Principal, RatedTag, Rating, ServiceRecord
from src.access_policy.tiers import Tier, TierHierarchy

REVIEW_TEXT_MODES = {"full", "empty"}


class Relationship(str, Enum):
    CLIENT = "client"
    PROFILE_OWNER = "profile_owner"
    THIRD_PARTY = "third_party"


def relationship_of(principal: Principal, record: ServiceRecord) -> Relationship:
    if principal.id == record.client_user_id:
        return Relationship.CLIENT
    if principal.id == record.profile_owner_id:
        return Relationship.PROFILE_OWNER
    return Relationship.THIRD_PARTY


@dataclass(frozen=True)
class RatingRule:
    visible: bool
    include_tags: bool = False
    review_text: str = "full"
    review_text_visible: bool = True

    def __post_init__(self) -> None:
        if self.review_text not in REVIEW_TEXT_MODES:
            raise PolicyConfigError(
                f"review_text must be one of {sorted(REVIEW_TEXT_MODES)}, got {self.review_text!r}"
            )

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any]) -> RatingRule:
        return cls(
            visible=bool(raw.get("visible", False)),
            include_tags=bool(raw.get("include_tags", False)),
            review_text=str(raw.get("review_text", "full")),
            review_text_visible=bool(raw.get("review_text_visible", True)),
        )


HIDDEN_RATING = RatingRule(visible=False)


@dataclass(frozen=True)
class TierProjectionRules:
    profile_rating: RatingRule
    client_user_rating: RatingRule


@dataclass(frozen=True)
class ProjectedRating:
    id: str
    score: int
    review: str
    review_text_visible: bool
    tags: tuple[RatedTag, ...] | None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "score": self.score,
            "review": self.review,
            "review_text_visible": self.review_text_visible,
            "tags": (
                [{"tag_id": tag.tag_id, "type": tag.sentiment.value} for tag in self.tags]
                if self.tags is not None
                else None
            ),
        }


@dataclass(frozen=True)
class ProjectedServiceView:
    id: str
    client_user_id: str
    profile_id: str
    profile_owner_id: str
    profile_rating_id: str | None
    client_user_rating_id: str | None
    profile_rating: ProjectedRating | None
    client_user_rating: ProjectedRating | None
    trusted_distance: bool
    distance_between_users: float | None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    updated_by: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "client_user_id": self.client_user_id,
            "profile_id": self.profile_id,
            "profile_owner_id": self.profile_owner_id,
            "profile_rating_id": self.profile_rating_id,
            "client_user_rating_id": self.client_user_rating_id,
            "profile_rating": self.profile_rating.to_dict() if self.profile_rating else None,
            "client_user_rating": self.client_user_rating.to_dict() if self.client_user_rating else None,
            "trusted_distance": self.trusted_distance,
            "distance_between_users": self.distance_between_users,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
            "updated_by": self.updated_by,
        }


def _project_rating(rating: Rating | None, rule: RatingRule) -> ProjectedRating | None:
    if rating is None or not rule.visible:
        return None
    return ProjectedRating(
        id=rating.id,
        score=rating.score,
        review=rating.review if rule.review_text == "full" else "",
        review_text_visible=rule.review_text_visible,
        tags=tuple(rating.tags) if rule.include_tags else None,
    )


@dataclass(frozen=True)
class ProjectionPolicy:
    hierarchy: TierHierarchy
    rules: Mapping[Tier, TierProjectionRules]
    trusted_distance_m: float
    participant_floor_tier: Tier = Tier.GURU

    def __post_init__(self) -> None:
        missing = set(Tier).difference(self.rules)
        if missing:
            raise PolicyConfigError(
                f"Projection rules missing tiers: {sorted(tier.value for tier in missing)}"
            )
        if self.trusted_distance_m < 0:
            raise PolicyConfigError("trusted_distance_m must be >= 0")
        object.__setattr__(self, "rules", MappingProxyType(dict(self.rules)))

    def effective_tier(self, principal: Principal, relationship: Relationship) -> Tier:
        """Tier whose rules apply; participants never see less than the participant floor."""

        if relationship is Relationship.THIRD_PARTY:
            return principal.tier
        if self.hierarchy.at_least(principal.tier, self.participant_floor_tier):
            return principal.tier
        return self.participant_floor_tier

    def rules_for(self, principal: Principal, relationship: Relationship) -> TierProjectionRules:
        return self.rules[self.effective_tier(principal, relationship)]


def project_service(
    record: ServiceRecord,
    principal: Principal,
    policy: ProjectionPolicy,
) -> ProjectedServiceView:
    """Produce the outward-facing view of `record` for `principal`."""

    relationship = relationship_of(principal, record)
    rules = policy.rules_for(principal, relationship)
    trust = evaluate_trust(
        record.client_coordinate,
        record.profile_coordinate,
        threshold_m=policy.trusted_distance_m,
    )

    return ProjectedServiceView(
        id=record.id,
        client_user_id=record.client_user_id,
        profile_id=record.profile_id,
        profile_owner_id=record.profile_owner_id,
        profile_rating_id=record.profile_rating_id,
        client_user_rating_id=record.client_user_rating_id,
        profile_rating=_project_rating(record.profile_rating, rules.profile_rating),
        client_user_rating=_project_rating(record.client_user_rating, rules.client_user_rating),
        trusted_distance=trust.trusted,
        distance_between_users=trust.exposed_distance,
        created_at=record.created_at,
        updated_at=record.updated_at,
        updated_by=record.updated_by,
    )
