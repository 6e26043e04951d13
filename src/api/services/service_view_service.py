# This file implements service record endpoints on top of the access policy engine.
# It exists so every service record leaves the API only after projection for the requesting principal.
# Listing every service is gated by tier; reading one profile's services is open to any principal,
# with visibility controlled entirely by projection.

from __future__ import annotations

from typing import Any

from src.access_policy.engine import AccessPolicyEngine
from src.access_policy.records import Principal
from src.api.error_handlers import raise_for_decision
from src.api.pagination import ListQuery
from src.api.record_store import RecordStore


class ServiceViewService:
    """Gated retrieval and projection of service records."""

    def __init__(self, *, engine: AccessPolicyEngine, store: RecordStore) -> None:
        self.engine = engine
        self.store = store

    def list_all(
        self,
        *,
        principal: Principal | None,
        query: ListQuery,
    ) -> dict[str, Any]:
        raise_for_decision(self.engine.check(principal, "services", "list"))

        records, total_count = self.store.list_services(
            offset=query.pagination.offset,
            limit=query.pagination.page_size,
            sort_field=query.sort.field,
            descending=query.sort.descending,
        )
        views = self.engine.project_services(records, principal)
        return {"rows": [view.to_dict() for view in views], "total_count": total_count}

    def for_profile(self, *, principal: Principal | None, profile_id: str) -> list[dict[str, Any]]:
        raise_for_decision(self.engine.check(principal, "services", "get"))

        records = self.store.services_for_profile(profile_id)
        return [view.to_dict() for view in self.engine.project_services(records, principal)]
