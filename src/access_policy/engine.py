# This module bundles the tier hierarchy, permission gate, delete guard, and projection policy.
# It exists so request handlers receive one read-only object built once from the policy files.
# Every gate and guard decision is counted so denials are visible on the metrics endpoint.
# The engine holds no per-request state and is safe to share across concurrent requests.

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from prometheus_client import Counter

from src.access_policy.decisions import Decision
from src.access_policy.delete_guard import DeleteGuard
from src.access_policy.permissions import PermissionPolicy
from src.access_policy.projection import ProjectedServiceView, ProjectionPolicy, project_service
from src.access_policy.records import Principal, ServiceRecord, UserRecord
from src.access_policy.tiers import Tier, TierHierarchy

ACCESS_POLICY_DECISIONS_TOTAL = Counter(
    "access_policy_decisions_total",
    "Access policy decisions by resource, action, and outcome.",
    ["resource", "action", "outcome"],
)


@dataclass(frozen=True)
class AccessPolicyEngine:
    policy_version: str
    hierarchy: TierHierarchy
    permissions: PermissionPolicy
    delete_guard: DeleteGuard
    projection: ProjectionPolicy
    unknown_tier_mode: str = "reject"

    def resolve_tier(self, raw_value: object) -> Tier:
        return self.hierarchy.resolve(raw_value, mode=self.unknown_tier_mode)

    def check(self, principal: Principal | None, resource: str, action: str) -> Decision:
        decision = self.permissions.check(principal, resource, action)
        ACCESS_POLICY_DECISIONS_TOTAL.labels(
            resource=resource, action=action, outcome=decision.outcome.value
        ).inc()
        return decision

    def check_user_delete(self, actor: Principal | None, target: UserRecord | None) -> Decision:
        decision = self.delete_guard.check(actor, target)
        ACCESS_POLICY_DECISIONS_TOTAL.labels(
            resource="users", action="delete_guard", outcome=decision.outcome.value
        ).inc()
        return decision

    def project_service(self, record: ServiceRecord, principal: Principal) -> ProjectedServiceView:
        return project_service(record, principal, self.projection)

    def project_services(
        self, records: Iterable[ServiceRecord], principal: Principal
    ) -> list[ProjectedServiceView]:
        return [project_service(record, principal, self.projection) for record in records]
