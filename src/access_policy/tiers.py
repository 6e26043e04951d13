# This module defines the closed set of privilege tiers and the rank order between them.
# External strings are converted to `Tier` once at the boundary so policy code never sees raw values.
# Rank comes from an explicit configured order rather than enum declaration side effects.
# Unknown tier strings fail closed: they are rejected or downgraded to the lowest tier.

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from enum import Enum

from src.access_policy.decisions import InvalidTierError, PolicyConfigError

logger = logging.getLogger(__name__)

UNKNOWN_TIER_MODES = {"reject", "lowest"}


class Tier(str, Enum):
    BASIC = "basic"
    EXPERT = "expert"
    GURU = "guru"
    MODERATOR = "moderator"
    ADMIN = "admin"
    OWNER = "owner"


DEFAULT_TIER_ORDER: tuple[Tier, ...] = (
    Tier.BASIC,
    Tier.EXPERT,
    Tier.GURU,
    Tier.MODERATOR,
    Tier.ADMIN,
    Tier.OWNER,
)


def parse_tier(raw_value: object) -> Tier:
    """Convert an external tier representation into a `Tier`, raising on anything unknown."""

    if isinstance(raw_value, Tier):
        return raw_value
    if not isinstance(raw_value, str):
        raise InvalidTierError(raw_value)
    normalized = raw_value.strip().lower()
    try:
        return Tier(normalized)
    except ValueError as exc:
        raise InvalidTierError(raw_value) from exc


@dataclass(frozen=True)
class TierHierarchy:
    order: tuple[Tier, ...] = DEFAULT_TIER_ORDER
    _ranks: dict[Tier, int] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if len(set(self.order)) != len(self.order):
            raise PolicyConfigError(f"Tier order contains duplicates: {[t.value for t in self.order]}")
        missing = set(Tier).difference(self.order)
        if missing:
            raise PolicyConfigError(f"Tier order is missing tiers: {sorted(t.value for t in missing)}")
        object.__setattr__(self, "_ranks", {tier: index for index, tier in enumerate(self.order)})

    @classmethod
    def from_names(cls, names: Iterable[object]) -> TierHierarchy:
        try:
            order = tuple(parse_tier(name) for name in names)
        except InvalidTierError as exc:
            raise PolicyConfigError(f"Tier order references unknown tier {exc.raw_value!r}") from exc
        return cls(order=order)

    @property
    def lowest(self) -> Tier:
        return self.order[0]

    @property
    def highest(self) -> Tier:
        return self.order[-1]

    def rank(self, tier: Tier) -> int:
        return self._ranks[tier]

    def outranks(self, actor: Tier, target: Tier) -> bool:
        return self._ranks[actor] > self._ranks[target]

    def at_least(self, tier: Tier, floor: Tier) -> bool:
        return self._ranks[tier] >= self._ranks[floor]

    def tiers_at_or_above(self, floor: Tier) -> frozenset[Tier]:
        return frozenset(tier for tier in self.order if self.at_least(tier, floor))

    def names(self) -> Sequence[str]:
        return [tier.value for tier in self.order]

    def resolve(self, raw_value: object, *, mode: str = "reject") -> Tier:
        """Parse a tier at the system boundary under the configured unknown-tier mode."""

        if mode not in UNKNOWN_TIER_MODES:
            raise PolicyConfigError(f"Unsupported unknown tier mode: {mode!r}")
        try:
            return parse_tier(raw_value)
        except InvalidTierError:
            if mode == "reject":
                raise
            logger.warning("Unrecognized tier %r downgraded to %s", raw_value, self.lowest.value)
            return self.lowest
