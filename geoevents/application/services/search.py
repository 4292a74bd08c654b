"""Event search: anchor resolution, filter normalization and pagination."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from sqlalchemy.orm import Session

from geoevents.domain.entities import (
    EventOrdering,
    PageRequest,
    Pagination,
    SearchFilters,
    SearchQuery,
    SearchResult,
    UserProfile,
)
from geoevents.domain.errors import InvalidCoordinate, LocationRequired, UserNotFound
from geoevents.domain.geo import GeoPoint
from geoevents.infrastructure.database import session_scope
from geoevents.infrastructure.repositories import UserProfileRepository
from geoevents.infrastructure.spatial import SpatialEventStore

from .search_params import (
    normalize_category_ids,
    normalize_date_range,
    normalize_page,
    normalize_radius,
    normalize_text,
)

logger = logging.getLogger(__name__)


class EventSearchEngine:
    """Turn raw search parameters into store queries.

    Explicit coordinates take precedence over the stored location of the
    requesting user. All parameters are validated before the store is touched.
    """

    def __init__(
        self,
        session_factory: Callable[[], Session],
        *,
        default_radius_km: float,
        default_page_size: int = 10,
        max_page_size: int = 100,
    ) -> None:
        self._session_factory = session_factory
        self._default_radius_km = default_radius_km
        self._default_page_size = default_page_size
        self._max_page_size = max_page_size

    def build_query(
        self,
        *,
        latitude: Any = None,
        longitude: Any = None,
        user_id: int | None = None,
        radius_km: Any = None,
        category_ids: Any = None,
        start_date: Any = None,
        end_date: Any = None,
        text: Any = None,
        page: Any = None,
        page_size: Any = None,
    ) -> SearchQuery:
        """Normalize raw inputs into a :class:`SearchQuery`.

        Raises a validation error for malformed input and
        :class:`LocationRequired` when neither coordinates nor a stored user
        location are available.
        """

        explicit_anchor = self._explicit_anchor(latitude, longitude)
        radius = normalize_radius(radius_km, default=self._default_radius_km)
        categories = normalize_category_ids(category_ids)
        start, end = normalize_date_range(start_date, end_date)
        page_request = self._page(page, page_size)
        filters = SearchFilters(
            category_ids=categories,
            start_date=start,
            end_date=end,
            text=normalize_text(text),
        )

        anchor = explicit_anchor or self._stored_location(user_id)
        return SearchQuery(anchor=anchor, radius_km=radius, filters=filters, page=page_request)

    def search(self, query: SearchQuery) -> SearchResult:
        """Return the page of events within the query radius, nearest first."""

        with session_scope(self._session_factory) as session:
            hits, total = SpatialEventStore(session).find_within_radius(
                query.anchor,
                query.radius_km,
                query.filters,
                page=query.page.page,
                page_size=query.page.page_size,
            )
        return SearchResult(events=tuple(hits), pagination=Pagination.build(total, query.page))

    def nearby(
        self,
        anchor: GeoPoint | None = None,
        radius_km: Any = None,
        page: Any = None,
        page_size: Any = None,
        *,
        user_id: int | None = None,
    ) -> SearchResult:
        """Events around ``anchor`` (or the user's stored location) without other filters."""

        radius = normalize_radius(radius_km, default=self._default_radius_km)
        page_request = self._page(page, page_size)
        resolved = anchor or self._stored_location(user_id)
        return self.search(SearchQuery(anchor=resolved, radius_km=radius, page=page_request))

    def recommended(
        self,
        user_id: int,
        radius_km: Any = None,
        page: Any = None,
        page_size: Any = None,
    ) -> SearchResult:
        """Events near the user matching any of their stored category preferences.

        A user without preferences gets an empty result; the store is not
        queried with an unconstrained category filter.
        """

        radius = normalize_radius(radius_km, default=self._default_radius_km)
        page_request = self._page(page, page_size)
        profile = self._load_profile(user_id)
        if profile.location is None:
            raise LocationRequired("Set your location to get recommendations")
        if not profile.category_preferences:
            logger.debug("User %s has no category preferences; nothing to recommend", user_id)
            return SearchResult.empty(page_request)
        return self.search(
            SearchQuery(
                anchor=profile.location,
                radius_km=radius,
                filters=SearchFilters(category_ids=profile.category_preferences),
                page=page_request,
            )
        )

    def latest(
        self,
        page: Any = None,
        page_size: Any = None,
        *,
        text: Any = None,
        category_ids: Any = None,
        ordering: EventOrdering = EventOrdering.NEWEST_FIRST,
    ) -> SearchResult:
        """Unanchored listing of events in an explicit ``ordering``."""

        page_request = self._page(page, page_size)
        filters = SearchFilters(
            category_ids=normalize_category_ids(category_ids),
            text=normalize_text(text),
        )
        with session_scope(self._session_factory) as session:
            hits, total = SpatialEventStore(session).list_events(
                ordering,
                filters,
                page=page_request.page,
                page_size=page_request.page_size,
            )
        return SearchResult(events=tuple(hits), pagination=Pagination.build(total, page_request))

    def _page(self, page: Any, page_size: Any) -> PageRequest:
        return normalize_page(
            page,
            page_size,
            default_size=self._default_page_size,
            max_size=self._max_page_size,
        )

    @staticmethod
    def _explicit_anchor(latitude: Any, longitude: Any) -> GeoPoint | None:
        if latitude is None and longitude is None:
            return None
        if latitude is None or longitude is None:
            raise InvalidCoordinate("latitude and longitude must be provided together")
        return GeoPoint.create(latitude, longitude)

    def _stored_location(self, user_id: int | None) -> GeoPoint:
        if user_id is None:
            raise LocationRequired("Location is required: provide coordinates or set your location")
        profile = self._load_profile(user_id)
        if profile.location is None:
            raise LocationRequired("Location is required: provide coordinates or set your location")
        return profile.location

    def _load_profile(self, user_id: int) -> UserProfile:
        with session_scope(self._session_factory) as session:
            profile = UserProfileRepository(session).get(user_id)
        if profile is None:
            raise UserNotFound(f"User with id {user_id} not found")
        return profile


__all__ = ["EventSearchEngine"]
