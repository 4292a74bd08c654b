"""Value objects describing event searches and their results."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from geoevents.domain.errors import InvalidPagination
from geoevents.domain.geo import GeoPoint

from .event import EventHit


class EventOrdering(str, Enum):
    """Explicit orderings for listings without an anchor."""

    NEWEST_FIRST = "newest_first"
    START_TIME_ASC = "start_time_asc"


@dataclass(frozen=True)
class SearchFilters:
    """Optional relational filters combined with AND semantics."""

    category_ids: frozenset[int] | None = None
    start_date: datetime | None = None
    end_date: datetime | None = None
    text: str | None = None


@dataclass(frozen=True)
class PageRequest:
    """1-indexed page selection."""

    page: int
    page_size: int

    def __post_init__(self) -> None:
        for name in ("page", "page_size"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
                raise InvalidPagination(f"{name} must be a positive integer")

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size


@dataclass(frozen=True)
class SearchQuery:
    """Fully resolved search request; never persisted."""

    anchor: GeoPoint
    radius_km: float
    filters: SearchFilters = field(default_factory=SearchFilters)
    page: PageRequest = field(default_factory=lambda: PageRequest(1, 10))


@dataclass(frozen=True)
class Pagination:
    """Pagination metadata reported with every result page."""

    total: int
    page: int
    page_size: int
    page_count: int

    @classmethod
    def build(cls, total: int, page: PageRequest) -> "Pagination":
        return cls(
            total=total,
            page=page.page,
            page_size=page.page_size,
            page_count=math.ceil(total / page.page_size) if total else 0,
        )


@dataclass(frozen=True)
class SearchResult:
    """A page of events plus the pagination for the whole match set."""

    events: tuple[EventHit, ...]
    pagination: Pagination

    @classmethod
    def empty(cls, page: PageRequest) -> "SearchResult":
        return cls(events=(), pagination=Pagination.build(0, page))

    @property
    def total(self) -> int:
        return self.pagination.total


__all__ = [
    "EventOrdering",
    "PageRequest",
    "Pagination",
    "SearchFilters",
    "SearchQuery",
    "SearchResult",
]
