"""Domain entity representing a user's matching profile."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from geoevents.domain.geo import GeoPoint


@dataclass(frozen=True)
class UserProfile:
    """Location and category preferences used for search and matching."""

    id: int
    username: str
    email: str
    location: GeoPoint | None = None
    category_preferences: frozenset[int] = field(default_factory=frozenset)
    preferred_language: str = "en"
    created_at: datetime | None = None

    def has_location(self) -> bool:
        return self.location is not None


__all__ = ["UserProfile"]
