# This module defines the outcome vocabulary shared by the permission gate and the delete guard.
# Denials are ordinary return values so handlers can branch without exception plumbing.
# Exceptions are reserved for programmer and configuration errors such as unknown tiers.
# Reason codes are machine-readable so logs and metrics can explain every decision.

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Outcome(str, Enum):
    ALLOWED = "allowed"
    UNAUTHENTICATED = "unauthenticated"
    FORBIDDEN = "forbidden"
    NOT_FOUND = "not_found"


REASON_ALLOWED_BY_POLICY = "ALLOWED_BY_POLICY"
REASON_NO_PRINCIPAL = "NO_PRINCIPAL"
REASON_TIER_NOT_PERMITTED = "TIER_NOT_PERMITTED"
REASON_UNKNOWN_ACTION = "UNKNOWN_RESOURCE_ACTION"
REASON_TARGET_NOT_FOUND = "TARGET_NOT_FOUND"
REASON_SELF_DELETE = "SELF_DELETE"
REASON_ACTOR_OUTRANKS_TARGET = "ACTOR_OUTRANKS_TARGET"
REASON_TARGET_NOT_OUTRANKED = "TARGET_NOT_OUTRANKED"


class InvalidTierError(ValueError):
    """Raised when a tier value outside the closed tier set reaches the policy boundary."""

    def __init__(self, raw_value: object) -> None:
        self.raw_value = raw_value
        super().__init__(f"Unrecognized tier value: {raw_value!r}")


class PolicyConfigError(ValueError):
    """Raised when policy files or overrides describe an inconsistent policy."""


@dataclass(frozen=True)
class Decision:
    outcome: Outcome
    reason_code: str

    @property
    def allowed(self) -> bool:
        return self.outcome is Outcome.ALLOWED

    @classmethod
    def allow(cls, reason_code: str = REASON_ALLOWED_BY_POLICY) -> Decision:
        return cls(outcome=Outcome.ALLOWED, reason_code=reason_code)

    @classmethod
    def deny(cls, outcome: Outcome, reason_code: str) -> Decision:
        if outcome is Outcome.ALLOWED:
            raise ValueError("deny() requires a non-allowed outcome")
        return cls(outcome=outcome, reason_code=reason_code)
