# This file provides the record source the API services read users and services from.
# It exists so the policy engine always receives fully loaded records and never issues queries itself.
# The in-memory implementation backs tests and local runs; a database-backed store can replace it
# through the dependency layer without touching routers or services.

from __future__ import annotations

import threading
from collections.abc import Callable, Mapping
from dataclasses import replace
from datetime import UTC, datetime
from typing import Any, Protocol, TypeVar

import yaml

from src.access_policy.geo_trust import Coordinate
from src.access_policy.records import RatedTag, Rating, Sentiment, ServiceRecord, UserRecord
from src.access_policy.tiers import Tier, parse_tier

USER_SORT_FIELDS: set[str] = {"created_at", "name", "id"}
SERVICE_SORT_FIELDS: set[str] = {"created_at", "id", "profile_id"}

RecordT = TypeVar("RecordT")


class RecordStore(Protocol):
    def can_connect(self) -> bool: ...

    def get_user(self, user_id: str) -> UserRecord | None: ...

    def list_users(
        self, *, offset: int, limit: int, sort_field: str, descending: bool
    ) -> tuple[list[UserRecord], int]: ...

    def deactivate_user(self, user_id: str) -> bool: ...

    def list_services(
        self, *, offset: int, limit: int, sort_field: str, descending: bool
    ) -> tuple[list[ServiceRecord], int]: ...

    def services_for_profile(self, profile_id: str) -> list[ServiceRecord]: ...


def _sort_key(field_name: str) -> Callable[[Any], tuple[bool, Any]]:
    def key(record: Any) -> tuple[bool, Any]:
        value = getattr(record, field_name)
        # Missing values sort last in ascending order.
        return (value is None, value if value is not None else "")

    return key


def _page(
    records: list[RecordT], *, offset: int, limit: int, sort_field: str, descending: bool
) -> tuple[list[RecordT], int]:
    ordered = sorted(records, key=_sort_key(sort_field), reverse=descending)
    return ordered[offset : offset + limit], len(ordered)


class InMemoryRecordStore:
    """Thread-safe in-memory store for users and services."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._users: dict[str, UserRecord] = {}
        self._services: dict[str, ServiceRecord] = {}

    def can_connect(self) -> bool:
        return True

    def add_user(self, user: UserRecord) -> None:
        with self._lock:
            self._users[user.id] = user

    def add_service(self, service: ServiceRecord) -> None:
        with self._lock:
            self._services[service.id] = service

    def get_user(self, user_id: str) -> UserRecord | None:
        user = self._users.get(user_id)
        if user is None or not user.active:
            return None
        return user

    def list_users(
        self, *, offset: int, limit: int, sort_field: str, descending: bool
    ) -> tuple[list[UserRecord], int]:
        if sort_field not in USER_SORT_FIELDS:
            raise ValueError(f"Unsupported user sort field: {sort_field!r}")
        active = [user for user in list(self._users.values()) if user.active]
        return _page(active, offset=offset, limit=limit, sort_field=sort_field, descending=descending)

    def deactivate_user(self, user_id: str) -> bool:
        with self._lock:
            user = self._users.get(user_id)
            if user is None or not user.active:
                return False
            self._users[user_id] = replace(user, active=False)
            return True

    def list_services(
        self, *, offset: int, limit: int, sort_field: str, descending: bool
    ) -> tuple[list[ServiceRecord], int]:
        if sort_field not in SERVICE_SORT_FIELDS:
            raise ValueError(f"Unsupported service sort field: {sort_field!r}")
        services = list(self._services.values())
        return _page(services, offset=offset, limit=limit, sort_field=sort_field, descending=descending)

    def services_for_profile(self, profile_id: str) -> list[ServiceRecord]:
        matches = [service for service in list(self._services.values()) if service.profile_id == profile_id]
        return sorted(matches, key=_sort_key("created_at"))

    @classmethod
    def from_seed_file(cls, path: str, *, tier_parser: Callable[[object], Tier] = parse_tier) -> InMemoryRecordStore:
        """Build a store from a YAML seed file with `users` and `services` lists."""

        with open(path, encoding="utf-8") as handle:
            loaded = yaml.safe_load(handle) or {}
        if not isinstance(loaded, dict):
            raise ValueError(f"Seed file {path} must be a YAML mapping")

        store = cls()
        for raw_user in loaded.get("users", []) or []:
            store.add_user(user_from_mapping(raw_user, tier_parser=tier_parser))
        for raw_service in loaded.get("services", []) or []:
            store.add_service(service_from_mapping(raw_service))
        return store


def _coordinate(raw: Mapping[str, Any] | None) -> Coordinate | None:
    if not raw:
        return None
    return Coordinate.from_optional(raw.get("latitude"), raw.get("longitude"))


def _rating(raw: Mapping[str, Any] | None) -> Rating | None:
    if not raw:
        return None
    tags = tuple(
        RatedTag(tag_id=int(item["tag_id"]), sentiment=Sentiment(str(item["type"]).strip().lower()))
        for item in raw.get("tags", []) or []
    )
    return Rating(
        id=str(raw["id"]),
        score=int(raw["score"]),
        review=str(raw.get("review") or ""),
        tags=tags,
    )


def _timestamp(raw: Any) -> datetime | None:
    if raw is None:
        return None
    if isinstance(raw, datetime):
        return raw if raw.tzinfo is not None else raw.replace(tzinfo=UTC)
    parsed = datetime.fromisoformat(str(raw).replace("Z", "+00:00"))
    return parsed if parsed.tzinfo is not None else parsed.replace(tzinfo=UTC)


def user_from_mapping(
    raw: Mapping[str, Any], *, tier_parser: Callable[[object], Tier] = parse_tier
) -> UserRecord:
    return UserRecord(
        id=str(raw["id"]),
        name=str(raw.get("name", "")),
        tier=tier_parser(raw.get("tier", Tier.BASIC.value)),
        active=bool(raw.get("active", True)),
        created_at=_timestamp(raw.get("created_at")),
    )


def service_from_mapping(raw: Mapping[str, Any]) -> ServiceRecord:
    return ServiceRecord(
        id=str(raw["id"]),
        client_user_id=str(raw["client_user_id"]),
        profile_id=str(raw["profile_id"]),
        profile_owner_id=str(raw["profile_owner_id"]),
        client_coordinate=_coordinate(raw.get("client_coordinate")),
        profile_coordinate=_coordinate(raw.get("profile_coordinate")),
        profile_rating=_rating(raw.get("profile_rating")),
        client_user_rating=_rating(raw.get("client_user_rating")),
        created_at=_timestamp(raw.get("created_at")),
        updated_at=_timestamp(raw.get("updated_at")),
        updated_by=str(raw["updated_by"]) if raw.get("updated_by") is not None else None,
    )
