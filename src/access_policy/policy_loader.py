# This module loads and validates the access policy files used by the request gates.
# It exists to keep access behavior config-driven and prevent silent drift across environments.
# The loader performs schema checks and version pinning before any request is served.
# Tier names in allow-sets and projection rules are converted to `Tier` here, once.

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

import yaml

from src.access_policy.decisions import InvalidTierError, PolicyConfigError
from src.access_policy.delete_guard import DeleteGuard
from src.access_policy.engine import AccessPolicyEngine
from src.access_policy.permissions import PermissionKey, PermissionPolicy
from src.access_policy.policy_config import AccessPolicyConfig, load_access_policy_config
from src.access_policy.projection import (
    HIDDEN_RATING,
    ProjectionPolicy,
    RatingRule,
    TierProjectionRules,
)
from src.access_policy.tiers import Tier, TierHierarchy, parse_tier

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PolicyBundle:
    policy_version: str
    access_policy: dict[str, Any]
    projection_rules: dict[str, Any]


REQUIRED_ACCESS_POLICY_KEYS = {"policy_version", "tiers", "permissions", "geo_trust"}
REQUIRED_PROJECTION_RULE_KEYS = {"policy_version", "tiers"}
RATING_KINDS = ("profile_rating", "client_user_rating")


def _load_yaml(path: str) -> dict[str, Any]:
    with open(path, encoding="utf-8") as handle:
        loaded = yaml.safe_load(handle) or {}
    if not isinstance(loaded, dict):
        raise PolicyConfigError(f"Policy file {path} must be a YAML mapping")
    return dict(loaded)


def _validate_required(config: Mapping[str, Any], required: set[str], path: str) -> None:
    missing = required.difference(config.keys())
    if missing:
        raise PolicyConfigError(f"Policy file {path} missing required keys: {sorted(missing)}")


def _mapping_or_error(raw: object, *, context: str) -> dict[str, Any]:
    if not isinstance(raw, Mapping):
        raise PolicyConfigError(f"{context} must be a mapping, got {type(raw).__name__}")
    return dict(raw)


def _parse_tier_name(raw_value: object, *, context: str) -> Tier:
    try:
        return parse_tier(raw_value)
    except InvalidTierError as exc:
        raise PolicyConfigError(f"{context} references unknown tier {raw_value!r}") from exc


def load_policy_bundle(*, policy_config: AccessPolicyConfig) -> PolicyBundle:
    access_policy = _load_yaml(policy_config.access_policy_path)
    projection_rules = _load_yaml(policy_config.projection_rules_path)

    _validate_required(access_policy, REQUIRED_ACCESS_POLICY_KEYS, policy_config.access_policy_path)
    _validate_required(projection_rules, REQUIRED_PROJECTION_RULE_KEYS, policy_config.projection_rules_path)

    bundle = PolicyBundle(
        policy_version=policy_config.policy_version,
        access_policy=access_policy,
        projection_rules=projection_rules,
    )
    validate_policy_bundle(bundle=bundle, policy_config=policy_config)
    return bundle


def validate_policy_bundle(*, bundle: PolicyBundle, policy_config: AccessPolicyConfig) -> None:
    policy_versions = {
        str(bundle.access_policy.get("policy_version", "")),
        str(bundle.projection_rules.get("policy_version", "")),
    }
    if len(policy_versions) != 1:
        raise PolicyConfigError(f"Policy files disagree on version: {sorted(policy_versions)}")

    policy_version = next(iter(policy_versions))
    if policy_version != policy_config.policy_version:
        raise PolicyConfigError(
            "Configured ACCESS_POLICY_VERSION does not match policy YAML version: "
            f"configured={policy_config.policy_version!r} file_version={policy_version!r}"
        )

    permissions = bundle.access_policy.get("permissions", {})
    if not isinstance(permissions, dict) or not permissions:
        raise PolicyConfigError("access_policy.yaml must define at least one permission")

    rule_tiers = bundle.projection_rules.get("tiers", {})
    if not isinstance(rule_tiers, dict):
        raise PolicyConfigError("projection_rules.yaml `tiers` must be a mapping")
    covered = {_parse_tier_name(name, context="projection_rules.yaml") for name in rule_tiers}
    missing = set(Tier).difference(covered)
    if missing:
        raise PolicyConfigError(
            f"projection_rules.yaml missing tiers: {sorted(tier.value for tier in missing)}"
        )


def build_permission_policy(permissions: Mapping[str, Any]) -> PermissionPolicy:
    allow_sets: dict[PermissionKey, frozenset[Tier]] = {}
    for resource, actions in permissions.items():
        if not isinstance(actions, dict):
            raise PolicyConfigError(f"permissions.{resource} must be a mapping of action -> tiers")
        for action, tier_names in actions.items():
            if not isinstance(tier_names, list):
                raise PolicyConfigError(f"permissions.{resource}.{action} must be a list of tiers")
            context = f"permissions.{resource}.{action}"
            allow_sets[(str(resource), str(action))] = frozenset(
                _parse_tier_name(name, context=context) for name in tier_names
            )
    return PermissionPolicy(allow_sets=allow_sets)


def build_projection_rules(rule_tiers: Mapping[str, Any]) -> dict[Tier, TierProjectionRules]:
    rules: dict[Tier, TierProjectionRules] = {}
    for tier_name, tier_rules in rule_tiers.items():
        tier = _parse_tier_name(tier_name, context="projection_rules.yaml")
        tier_rules = _mapping_or_error(tier_rules or {}, context=f"projection_rules.{tier_name}")
        parsed = {
            kind: (
                RatingRule.from_mapping(
                    _mapping_or_error(tier_rules[kind], context=f"projection_rules.{tier_name}.{kind}")
                )
                if kind in tier_rules
                else HIDDEN_RATING
            )
            for kind in RATING_KINDS
        }
        rules[tier] = TierProjectionRules(**parsed)
    return rules


def build_engine(*, bundle: PolicyBundle, policy_config: AccessPolicyConfig) -> AccessPolicyEngine:
    tiers_cfg = _mapping_or_error(bundle.access_policy.get("tiers") or {}, context="access_policy.tiers")
    hierarchy = TierHierarchy.from_names(tiers_cfg.get("order", [tier.value for tier in Tier]))

    projection = ProjectionPolicy(
        hierarchy=hierarchy,
        rules=build_projection_rules(bundle.projection_rules["tiers"]),
        trusted_distance_m=policy_config.trusted_distance_m,
        participant_floor_tier=_parse_tier_name(
            policy_config.participant_floor_tier, context="participant_floor_tier"
        ),
    )

    return AccessPolicyEngine(
        policy_version=bundle.policy_version,
        hierarchy=hierarchy,
        permissions=build_permission_policy(bundle.access_policy["permissions"]),
        delete_guard=DeleteGuard(hierarchy=hierarchy),
        projection=projection,
        unknown_tier_mode=policy_config.unknown_tier_mode,
    )


def load_access_policy_engine(*, policy_config: AccessPolicyConfig | None = None) -> AccessPolicyEngine:
    """Load, validate, and assemble the access policy engine from configured files."""

    resolved_config = policy_config or load_access_policy_config()
    bundle = load_policy_bundle(policy_config=resolved_config)
    engine = build_engine(bundle=bundle, policy_config=resolved_config)
    logger.info(
        "Loaded access policy version=%s tiers=%s trusted_distance_m=%s",
        engine.policy_version,
        ",".join(engine.hierarchy.names()),
        resolved_config.trusted_distance_m,
    )
    return engine
