# This module gates coarse-grained actions before any data is fetched for a request.
# Each (resource, action) pair maps to an explicit allow-set of tiers loaded from policy files.
# Allow-sets are deliberately not derived from a single rank cutoff because the observed
# thresholds for different resources are independent of each other.

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from src.access_policy.decisions import (
    REASON_NO_PRINCIPAL,
    REASON_TIER_NOT_PERMITTED,
    REASON_UNKNOWN_ACTION,
    Decision,
    Outcome,
)
from src.access_policy.records import Principal
from src.access_policy.tiers import Tier

logger = logging.getLogger(__name__)

PermissionKey = tuple[str, str]


@dataclass(frozen=True)
class PermissionPolicy:
    allow_sets: Mapping[PermissionKey, frozenset[Tier]] = field(default_factory=dict)

    def __post_init__(self) -> None:
        frozen = {key: frozenset(tiers) for key, tiers in self.allow_sets.items()}
        object.__setattr__(self, "allow_sets", MappingProxyType(frozen))

    def knows(self, resource: str, action: str) -> bool:
        return (resource, action) in self.allow_sets

    def allowed_tiers(self, resource: str, action: str) -> frozenset[Tier]:
        return self.allow_sets.get((resource, action), frozenset())

    def is_allowed(self, tier: Tier, resource: str, action: str) -> bool:
        return tier in self.allowed_tiers(resource, action)

    def check(self, principal: Principal | None, resource: str, action: str) -> Decision:
        """Decide whether `principal` may perform `action` on `resource`."""

        if principal is None:
            return Decision.deny(Outcome.UNAUTHENTICATED, REASON_NO_PRINCIPAL)

        if not self.knows(resource, action):
            logger.warning("No allow-set configured for %s.%s; denying", resource, action)
            return Decision.deny(Outcome.FORBIDDEN, REASON_UNKNOWN_ACTION)

        if not self.is_allowed(principal.tier, resource, action):
            logger.info(
                "Denied %s.%s for principal=%s tier=%s",
                resource,
                action,
                principal.id,
                principal.tier.value,
            )
            return Decision.deny(Outcome.FORBIDDEN, REASON_TIER_NOT_PERMITTED)

        return Decision.allow()
