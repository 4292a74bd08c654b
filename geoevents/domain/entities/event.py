"""Domain entity representing a geotagged event."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from geoevents.domain.geo import GeoPoint


@dataclass
class Event:
    """A happening at a location and time, tagged with categories."""

    id: int | None
    title: str
    description: str | None
    location: GeoPoint
    address: str | None
    start_time: datetime
    end_time: datetime
    creator_id: int
    category_ids: frozenset[int] = field(default_factory=frozenset)
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass(frozen=True)
class EventHit:
    """An event paired with its distance from the query anchor."""

    event: Event
    distance_km: float | None = None


@dataclass(frozen=True)
class SavedEvent:
    """An event bookmarked by a user."""

    event: Event
    saved_at: datetime | None = None


__all__ = ["Event", "EventHit", "SavedEvent"]
