# This module decides whether one user may deactivate another user's account.
# Deletion of another account requires strict dominance in tier rank: ties are always denied.
# Existence is checked before rank so a missing target reports not-found instead of forbidden.
# Self deletion is always allowed for the account holder and does not consult the rank order.

from __future__ import annotations

import logging
from dataclasses import dataclass

from src.access_policy.decisions import (
    REASON_ACTOR_OUTRANKS_TARGET,
    REASON_NO_PRINCIPAL,
    REASON_SELF_DELETE,
    REASON_TARGET_NOT_FOUND,
    REASON_TARGET_NOT_OUTRANKED,
    Decision,
    Outcome,
)
from src.access_policy.records import Principal, UserRecord
from src.access_policy.tiers import TierHierarchy

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DeleteGuard:
    hierarchy: TierHierarchy

    def check(self, actor: Principal | None, target: UserRecord | None) -> Decision:
        if actor is None:
            return Decision.deny(Outcome.UNAUTHENTICATED, REASON_NO_PRINCIPAL)

        if target is None:
            return Decision.deny(Outcome.NOT_FOUND, REASON_TARGET_NOT_FOUND)

        if target.id == actor.id:
            return Decision.allow(REASON_SELF_DELETE)

        if self.hierarchy.outranks(actor.tier, target.tier):
            return Decision.allow(REASON_ACTOR_OUTRANKS_TARGET)

        logger.info(
            "Denied delete of user=%s (tier=%s) by principal=%s (tier=%s)",
            target.id,
            target.tier.value,
            actor.id,
            actor.tier.value,
        )
        return Decision.deny(Outcome.FORBIDDEN, REASON_TARGET_NOT_OUTRANKED)
