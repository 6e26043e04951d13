# This file defines service record schemas for projected views and list envelopes.
# It exists so projected responses are strongly typed and never carry raw coordinates.
# Hidden ratings and hidden tag lists are serialized as explicit nulls rather than omitted keys.
# Keeping these models explicit helps catch accidental payload drift during development.

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from src.api.schemas.common import EnvelopeFields, PaginationMetadata


class RatedTagV1(BaseModel):
    tag_id: int
    type: str


class RatingViewV1(BaseModel):
    id: str
    score: int = Field(ge=1, le=5)
    review: str
    review_text_visible: bool
    tags: list[RatedTagV1] | None = None


class ServiceViewV1(BaseModel):
    id: str
    client_user_id: str
    profile_id: str
    profile_owner_id: str
    profile_rating_id: str | None = None
    client_user_rating_id: str | None = None
    profile_rating: RatingViewV1 | None = None
    client_user_rating: RatingViewV1 | None = None
    trusted_distance: bool
    distance_between_users: float | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    updated_by: str | None = None


class ServiceViewListResponseV1(EnvelopeFields):
    data: list[ServiceViewV1]
    pagination: PaginationMetadata


class ProfileServicesResponseV1(EnvelopeFields):
    data: list[ServiceViewV1]
    length: int
