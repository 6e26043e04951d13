# This file defines user endpoint schemas for single rows and list envelopes.
# It exists so user responses expose the tier as its external string form only.

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel

from src.api.schemas.common import EnvelopeFields, PaginationMetadata


class UserRowV1(BaseModel):
    id: str
    name: str
    tier: str
    active: bool
    created_at: datetime | None = None


class UserListResponseV1(EnvelopeFields):
    data: list[UserRowV1]
    pagination: PaginationMetadata


class UserResponseV1(EnvelopeFields):
    data: UserRowV1
