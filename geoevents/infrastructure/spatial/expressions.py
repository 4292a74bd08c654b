"""SQL expressions for great-circle distances."""

from __future__ import annotations

import math

from sqlalchemy import Float, case, func, literal
from sqlalchemy.sql.elements import ColumnElement

from geoevents.domain.geo import EARTH_RADIUS_KM, GeoPoint


def _float(value: float) -> ColumnElement[float]:
    return literal(float(value), Float)


def haversine_distance_km(
    latitude: ColumnElement[float],
    longitude: ColumnElement[float],
    anchor: GeoPoint,
) -> ColumnElement[float]:
    """Return a SQL expression computing the distance from ``anchor`` in km.

    Mirrors :func:`geoevents.domain.geo.distance_km` so rows selected by the
    database and distances computed in Python agree.
    """

    half_dlat = func.radians(latitude - _float(anchor.latitude), type_=Float) / 2.0
    half_dlon = func.radians(longitude - _float(anchor.longitude), type_=Float) / 2.0
    sin_dlat = func.sin(half_dlat, type_=Float)
    sin_dlon = func.sin(half_dlon, type_=Float)
    cos_row_lat = func.cos(func.radians(latitude, type_=Float), type_=Float)
    cos_anchor_lat = _float(math.cos(math.radians(anchor.latitude)))

    h = sin_dlat * sin_dlat + cos_row_lat * cos_anchor_lat * sin_dlon * sin_dlon
    clamped = case((h > 1.0, 1.0), (h < 0.0, 0.0), else_=h)
    return (
        2.0
        * EARTH_RADIUS_KM
        * func.atan2(
            func.sqrt(clamped, type_=Float),
            func.sqrt(1.0 - clamped, type_=Float),
            type_=Float,
        )
    )


__all__ = ["haversine_distance_km"]
