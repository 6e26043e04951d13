# This file tests the in-memory record store that backs the API services.
# It exists to validate seed loading, soft deletion, and deterministic list ordering.

from __future__ import annotations

from pathlib import Path

import pytest

from src.access_policy.decisions import InvalidTierError
from src.access_policy.tiers import Tier
from src.api.record_store import InMemoryRecordStore, service_from_mapping

SEED_PATH = Path(__file__).resolve().parents[2] / "configs" / "seed_records.yaml"


def test_seed_file_loads_users_and_services() -> None:
    store = InMemoryRecordStore.from_seed_file(str(SEED_PATH))

    owner = store.get_user("owner-1")
    assert owner is not None and owner.tier is Tier.OWNER
    services = store.services_for_profile("profile-1")
    assert [service.id for service in services] == ["svc-1", "svc-2"]
    first = services[0]
    assert first.profile_rating is not None
    assert [tag.sentiment.value for tag in first.client_user_rating.tags] == ["like", "dislike"]
    assert first.created_at is not None and first.created_at.tzinfo is not None
    assert services[1].profile_rating_id is None
    assert services[1].client_coordinate is None


def test_seed_file_with_unknown_tier_is_rejected(tmp_path: Path) -> None:
    seed = tmp_path / "seed.yaml"
    seed.write_text("users:\n  - {id: u-1, name: U, tier: superuser}\n", encoding="utf-8")

    with pytest.raises(InvalidTierError):
        InMemoryRecordStore.from_seed_file(str(seed))


def test_deactivated_user_is_hidden_from_lookups_and_lists() -> None:
    store = InMemoryRecordStore.from_seed_file(str(SEED_PATH))

    assert store.deactivate_user("guru-1") is True
    assert store.deactivate_user("guru-1") is False
    assert store.get_user("guru-1") is None
    users, total = store.list_users(offset=0, limit=10, sort_field="id", descending=False)
    assert "guru-1" not in [user.id for user in users]
    assert total == 5


def test_list_users_rejects_unknown_sort_field() -> None:
    with pytest.raises(ValueError):
        InMemoryRecordStore().list_users(offset=0, limit=10, sort_field="tier", descending=False)


def test_list_services_pages_in_order() -> None:
    store = InMemoryRecordStore.from_seed_file(str(SEED_PATH))

    rows, total = store.list_services(offset=1, limit=1, sort_field="created_at", descending=True)

    assert total == 2
    assert [row.id for row in rows] == ["svc-1"]


def test_service_mapping_treats_blank_coordinates_as_missing() -> None:
    record = service_from_mapping(
        {
            "id": "svc-9",
            "client_user_id": "c",
            "profile_id": "p",
            "profile_owner_id": "o",
            "client_coordinate": {"latitude": "", "longitude": "76.9"},
        }
    )

    assert record.client_coordinate is None
