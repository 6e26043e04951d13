# This file resolves the authenticated principal for a request.
# Token verification happens upstream: the auth gateway forwards the user id and tier as headers.
# The tier string is converted to a `Tier` here, at the boundary, so policy code never sees raw values.
# A principal whose account is missing or deactivated is treated as unauthenticated.

from __future__ import annotations

import logging

from fastapi import Request

from src.access_policy.engine import AccessPolicyEngine
from src.access_policy.records import Principal
from src.api.api_config import ApiConfig
from src.api.record_store import RecordStore

logger = logging.getLogger(__name__)


def resolve_principal(
    *,
    request: Request,
    config: ApiConfig,
    engine: AccessPolicyEngine,
    store: RecordStore,
) -> Principal | None:
    principal_id = (request.headers.get(config.principal_id_header) or "").strip()
    if not principal_id:
        return None

    if store.get_user(principal_id) is None:
        logger.info("Principal %s has no active account", principal_id)
        return None

    # Raises InvalidTierError under the reject mode; the error handler answers 403.
    tier = engine.resolve_tier(request.headers.get(config.principal_tier_header))
    return Principal(id=principal_id, tier=tier)
