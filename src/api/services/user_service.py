# This file implements user endpoints on top of the access policy engine.
# It exists so routers stay transport-focused while gate, lookup, and guard ordering live in one layer.
# The `users.delete` gate runs before the target lookup, so principals below the gate never learn
# whether a target account exists; only gate-passing principals can observe not-found.

from __future__ import annotations

import logging
from typing import Any

from src.access_policy.decisions import REASON_NO_PRINCIPAL, Decision, Outcome
from src.access_policy.engine import AccessPolicyEngine
from src.access_policy.records import Principal, UserRecord
from src.api.error_handlers import raise_for_decision
from src.api.pagination import ListQuery
from src.api.record_store import RecordStore

logger = logging.getLogger(__name__)


def user_row(user: UserRecord) -> dict[str, Any]:
    return {
        "id": user.id,
        "name": user.name,
        "tier": user.tier.value,
        "active": user.active,
        "created_at": user.created_at,
    }


class UserService:
    """Gated user lookups and deletions."""

    def __init__(self, *, engine: AccessPolicyEngine, store: RecordStore) -> None:
        self.engine = engine
        self.store = store

    def get_me(self, *, principal: Principal | None) -> dict[str, Any]:
        if principal is None:
            raise_for_decision(Decision.deny(Outcome.UNAUTHENTICATED, REASON_NO_PRINCIPAL))
        user = self.store.get_user(principal.id)
        if user is None:
            raise_for_decision(Decision.deny(Outcome.UNAUTHENTICATED, REASON_NO_PRINCIPAL))
        return user_row(user)

    def list_users(
        self,
        *,
        principal: Principal | None,
        query: ListQuery,
    ) -> dict[str, Any]:
        raise_for_decision(self.engine.check(principal, "users", "list"))

        users, total_count = self.store.list_users(
            offset=query.pagination.offset,
            limit=query.pagination.page_size,
            sort_field=query.sort.field,
            descending=query.sort.descending,
        )
        return {"rows": [user_row(user) for user in users], "total_count": total_count}

    def find_user(self, *, principal: Principal | None, user_id: str) -> dict[str, Any]:
        raise_for_decision(self.engine.check(principal, "users", "get"))

        user = self.store.get_user(user_id)
        if user is None:
            raise_for_decision(Decision.deny(Outcome.NOT_FOUND, "USER_NOT_FOUND"))
        return user_row(user)

    def delete_self(self, *, principal: Principal | None) -> None:
        raise_for_decision(self.engine.check(principal, "users", "delete_self"))

        target = self.store.get_user(principal.id)
        raise_for_decision(self.engine.check_user_delete(principal, target))
        self.store.deactivate_user(principal.id)
        logger.info("User %s deactivated their own account", principal.id)

    def delete_user(self, *, principal: Principal | None, user_id: str) -> None:
        raise_for_decision(self.engine.check(principal, "users", "delete"))

        target = self.store.get_user(user_id)
        raise_for_decision(self.engine.check_user_delete(principal, target))
        self.store.deactivate_user(user_id)
        logger.info("User %s deactivated by %s (tier=%s)", user_id, principal.id, principal.tier.value)
