"""Geospatial value objects and distance helpers.

Distances use the Haversine formula on a sphere of radius 6371 km. The Earth
is an ellipsoid, so results can differ from geodesic distances by up to ~0.5%;
this is accepted for radius searches and notification matching.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from decimal import Decimal
from numbers import Real
from typing import Any

from geoevents.domain.errors import InvalidCoordinate

EARTH_RADIUS_KM = 6371.0
_BBOX_PADDING_DEG = 1e-6


def _coerce_coordinate(value: Any, *, name: str, limit: float) -> float:
    if isinstance(value, bool):
        raise InvalidCoordinate(f"{name} must be a number")
    if isinstance(value, str):
        value = value.strip()
        if not value:
            raise InvalidCoordinate(f"{name} must be a number")
    elif not isinstance(value, (Real, Decimal)):
        raise InvalidCoordinate(f"{name} must be a number")
    try:
        number = float(value)
    except (TypeError, ValueError) as exc:
        raise InvalidCoordinate(f"{name} must be a number") from exc
    if not math.isfinite(number):
        raise InvalidCoordinate(f"{name} must be finite")
    if not -limit <= number <= limit:
        raise InvalidCoordinate(f"{name} must be between {-limit:g} and {limit:g}")
    return number


@dataclass(frozen=True)
class GeoPoint:
    """A latitude/longitude pair in decimal degrees."""

    latitude: float
    longitude: float

    def __post_init__(self) -> None:
        object.__setattr__(
            self,
            "latitude",
            _coerce_coordinate(self.latitude, name="latitude", limit=90.0),
        )
        object.__setattr__(
            self,
            "longitude",
            _coerce_coordinate(self.longitude, name="longitude", limit=180.0),
        )

    @classmethod
    def create(cls, latitude: Any, longitude: Any) -> "GeoPoint":
        """Build a validated point or raise :class:`InvalidCoordinate`."""

        return cls(latitude=latitude, longitude=longitude)

    def distance_to(self, other: "GeoPoint") -> float:
        return distance_km(self, other)


def distance_km(a: GeoPoint, b: GeoPoint) -> float:
    """Compute great-circle distance in kilometres between two points."""

    lat1 = math.radians(a.latitude)
    lat2 = math.radians(b.latitude)
    dlat = lat2 - lat1
    dlon = math.radians(b.longitude - a.longitude)

    h = math.sin(dlat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(dlon / 2) ** 2
    # Rounding can push h marginally outside [0, 1] for antipodal points.
    h = min(1.0, max(0.0, h))
    c = 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))
    return EARTH_RADIUS_KM * c


def bounding_box(
    anchor: GeoPoint, radius_km: float
) -> tuple[float, float, float | None, float | None]:
    """Return ``(min_lat, max_lat, min_lon, max_lon)`` enclosing a radius.

    Longitude bounds are ``None`` when the circle touches a pole or crosses
    the antimeridian; callers then rely on the exact distance check alone.
    """

    delta_lat = math.degrees(radius_km / EARTH_RADIUS_KM) + _BBOX_PADDING_DEG
    min_lat = anchor.latitude - delta_lat
    max_lat = anchor.latitude + delta_lat
    if min_lat <= -90.0 or max_lat >= 90.0:
        return max(min_lat, -90.0), min(max_lat, 90.0), None, None

    # Widest longitude span of the circle, reached at the tangent latitude.
    ratio = math.sin(radius_km / EARTH_RADIUS_KM) / math.cos(math.radians(anchor.latitude))
    if ratio >= 1.0:
        return min_lat, max_lat, None, None
    delta_lon = math.degrees(math.asin(ratio)) + _BBOX_PADDING_DEG
    min_lon = anchor.longitude - delta_lon
    max_lon = anchor.longitude + delta_lon
    if min_lon < -180.0 or max_lon > 180.0:
        return min_lat, max_lat, None, None
    return min_lat, max_lat, min_lon, max_lon


__all__ = ["EARTH_RADIUS_KM", "GeoPoint", "bounding_box", "distance_km"]
