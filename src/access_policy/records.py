# This module defines the already-loaded records the policy engine reasons about.
# Records arrive from the persistence collaborator fully populated, including nested ratings.
# All shapes are frozen so one record can be projected for many requesters concurrently.
# Optional fields stay optional: a missing rating or coordinate is never replaced by a default.

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from src.access_policy.geo_trust import Coordinate
from src.access_policy.tiers import Tier

MIN_SCORE = 1
MAX_SCORE = 5


class Sentiment(str, Enum):
    LIKE = "like"
    DISLIKE = "dislike"


@dataclass(frozen=True)
class Principal:
    id: str
    tier: Tier


@dataclass(frozen=True)
class RatedTag:
    tag_id: int
    sentiment: Sentiment


@dataclass(frozen=True)
class Rating:
    id: str
    score: int
    review: str = ""
    tags: tuple[RatedTag, ...] = ()

    def __post_init__(self) -> None:
        if not MIN_SCORE <= self.score <= MAX_SCORE:
            raise ValueError(f"score must be between {MIN_SCORE} and {MAX_SCORE}, got {self.score}")


@dataclass(frozen=True)
class ServiceRecord:
    id: str
    client_user_id: str
    profile_id: str
    profile_owner_id: str
    client_coordinate: Coordinate | None = None
    profile_coordinate: Coordinate | None = None
    profile_rating: Rating | None = None
    client_user_rating: Rating | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    updated_by: str | None = None

    @property
    def profile_rating_id(self) -> str | None:
        return self.profile_rating.id if self.profile_rating is not None else None

    @property
    def client_user_rating_id(self) -> str | None:
        return self.client_user_rating.id if self.client_user_rating is not None else None


@dataclass(frozen=True)
class UserRecord:
    id: str
    name: str
    tier: Tier
    active: bool = True
    created_at: datetime | None = field(default=None, compare=False)

    def as_principal(self) -> Principal:
        return Principal(id=self.id, tier=self.tier)
