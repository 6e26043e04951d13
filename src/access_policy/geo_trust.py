# This module classifies the distance between the two parties of a service as trusted or not.
# It exists so precise locations never leave the backend: only a boolean and a bounded distance do.
# Distances use the haversine formula on a spherical earth, which is plenty for a 100 m threshold.
# Missing coordinates are a normal case and always produce an untrusted result without a distance.

from __future__ import annotations

import math
from dataclasses import dataclass

EARTH_RADIUS_M = 6_371_000.0


@dataclass(frozen=True)
class Coordinate:
    latitude: float
    longitude: float

    def __post_init__(self) -> None:
        if not -90.0 <= self.latitude <= 90.0:
            raise ValueError(f"latitude out of range: {self.latitude}")
        if not -180.0 <= self.longitude <= 180.0:
            raise ValueError(f"longitude out of range: {self.longitude}")

    @classmethod
    def from_optional(cls, latitude: float | str | None, longitude: float | str | None) -> Coordinate | None:
        """Build a coordinate from raw values, returning None when either half is absent."""

        if latitude is None or longitude is None:
            return None
        if isinstance(latitude, str) and latitude.strip() == "":
            return None
        if isinstance(longitude, str) and longitude.strip() == "":
            return None
        return cls(latitude=float(latitude), longitude=float(longitude))


@dataclass(frozen=True)
class TrustResult:
    trusted: bool
    distance_m: float | None

    @property
    def exposed_distance(self) -> float | None:
        # Untrusted distances stay internal.
        return self.distance_m if self.trusted else None


def haversine_distance_m(
    first: Coordinate,
    second: Coordinate,
    *,
    radius_m: float = EARTH_RADIUS_M,
) -> float:
    lat1 = math.radians(first.latitude)
    lat2 = math.radians(second.latitude)
    d_lat = lat2 - lat1
    d_lon = math.radians(second.longitude - first.longitude)

    a = math.sin(d_lat / 2.0) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(d_lon / 2.0) ** 2
    c = 2.0 * math.atan2(math.sqrt(a), math.sqrt(max(0.0, 1.0 - a)))
    return radius_m * c


def evaluate_trust(
    requester_side: Coordinate | None,
    target_side: Coordinate | None,
    *,
    threshold_m: float,
) -> TrustResult:
    if requester_side is None or target_side is None:
        return TrustResult(trusted=False, distance_m=None)

    distance = haversine_distance_m(requester_side, target_side)
    return TrustResult(trusted=distance <= threshold_m, distance_m=distance)
