"""Geospatial query layer."""

from .expressions import haversine_distance_km
from .predicates import (
    AtOrAfter,
    AtOrBefore,
    ContainsText,
    Excludes,
    HasAnyCategory,
    HasLocation,
    Predicate,
    PredicateSet,
    WithinRadius,
)
from .store import SpatialEventStore, event_filter_predicates

__all__ = [
    "AtOrAfter",
    "AtOrBefore",
    "ContainsText",
    "Excludes",
    "HasAnyCategory",
    "HasLocation",
    "Predicate",
    "PredicateSet",
    "SpatialEventStore",
    "WithinRadius",
    "event_filter_predicates",
    "haversine_distance_km",
]
