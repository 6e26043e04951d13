# This file defines runtime configuration for the access policy engine.
# It exists so the API process and offline audits resolve the same policy files and overrides.
# The loader merges YAML defaults with environment overrides and validates the safety-relevant knobs.
# Keeping these settings in one place makes access decisions reproducible and easier to review.

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from src.access_policy.decisions import PolicyConfigError
from src.access_policy.tiers import UNKNOWN_TIER_MODES

DEFAULT_CONFIG_DIR = Path(__file__).resolve().parents[2] / "configs"
DEFAULT_ACCESS_POLICY_PATH = str(DEFAULT_CONFIG_DIR / "access_policy.yaml")
DEFAULT_PROJECTION_RULES_PATH = str(DEFAULT_CONFIG_DIR / "projection_rules.yaml")


def _load_yaml(path: str) -> dict[str, Any]:
    with open(path, encoding="utf-8") as handle:
        loaded = yaml.safe_load(handle) or {}
    if not isinstance(loaded, dict):
        raise PolicyConfigError(f"Config at {path} must be a mapping, got: {type(loaded).__name__}")
    return dict(loaded)


def _env_str(name: str, default: str | None = None) -> str | None:
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return default
    return value


def _env_float(name: str, default: float | None = None) -> float | None:
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return default
    return float(value)


@dataclass(frozen=True)
class AccessPolicyConfig:
    policy_version: str
    access_policy_path: str
    projection_rules_path: str
    trusted_distance_m: float
    unknown_tier_mode: str
    participant_floor_tier: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "policy_version": self.policy_version,
            "access_policy_path": self.access_policy_path,
            "projection_rules_path": self.projection_rules_path,
            "trusted_distance_m": self.trusted_distance_m,
            "unknown_tier_mode": self.unknown_tier_mode,
            "participant_floor_tier": self.participant_floor_tier,
        }


def load_access_policy_config(*, config_path: str | None = None) -> AccessPolicyConfig:
    access_policy_path = config_path or str(_env_str("ACCESS_POLICY_PATH", DEFAULT_ACCESS_POLICY_PATH))
    cfg = _load_yaml(access_policy_path)
    tiers_cfg = dict(cfg.get("tiers", {}))
    geo_cfg = dict(cfg.get("geo_trust", {}))
    projection_cfg = dict(cfg.get("projection", {}))

    policy_version = str(_env_str("ACCESS_POLICY_VERSION", str(cfg.get("policy_version", "ap1"))))
    projection_rules_path = str(_env_str("ACCESS_PROJECTION_RULES_PATH", DEFAULT_PROJECTION_RULES_PATH))
    trusted_distance_m = float(
        _env_float("ACCESS_POLICY_TRUSTED_DISTANCE_M", float(geo_cfg.get("trusted_distance_m", 100.0)))
    )
    unknown_tier_mode = str(
        _env_str("ACCESS_POLICY_UNKNOWN_TIER_MODE", str(tiers_cfg.get("unknown_tier_mode", "reject")))
    ).strip().lower()
    participant_floor_tier = str(
        _env_str(
            "ACCESS_POLICY_PARTICIPANT_FLOOR_TIER",
            str(projection_cfg.get("participant_floor_tier", "guru")),
        )
    ).strip().lower()

    if trusted_distance_m < 0:
        raise PolicyConfigError("trusted_distance_m must be >= 0")
    if unknown_tier_mode not in UNKNOWN_TIER_MODES:
        raise PolicyConfigError(
            f"unknown_tier_mode must be one of {sorted(UNKNOWN_TIER_MODES)}, got {unknown_tier_mode!r}"
        )

    return AccessPolicyConfig(
        policy_version=policy_version,
        access_policy_path=access_policy_path,
        projection_rules_path=projection_rules_path,
        trusted_distance_m=trusted_distance_m,
        unknown_tier_mode=unknown_tier_mode,
        participant_floor_tier=participant_floor_tier,
    )
