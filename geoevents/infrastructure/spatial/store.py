"""Spatial queries over events and user profiles."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from sqlalchemy import func, select

from geoevents.domain.entities import (
    EventHit,
    EventOrdering,
    PageRequest,
    SearchFilters,
    UserProfile,
)
from geoevents.domain.geo import GeoPoint
from geoevents.infrastructure.models import (
    EventCategoryModel,
    EventModel,
    UserCategoryPreferenceModel,
    UserModel,
)
from geoevents.infrastructure.repositories import EventRepository, UserProfileRepository
from geoevents.infrastructure.repositories.base import SQLAlchemyRepository

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

logger = logging.getLogger(__name__)


def event_filter_predicates(filters: SearchFilters) -> list[Predicate]:
    """Translate relational event filters into predicates."""

    predicates: list[Predicate] = []
    if filters.category_ids:
        predicates.append(
            HasAnyCategory(
                owner_id=EventModel.id,
                link_owner_id=EventCategoryModel.event_id,
                link_category_id=EventCategoryModel.category_id,
                category_ids=frozenset(filters.category_ids),
            )
        )
    if filters.start_date is not None:
        predicates.append(AtOrAfter(EventModel.start_time, filters.start_date))
    if filters.end_date is not None:
        predicates.append(AtOrBefore(EventModel.end_time, filters.end_date))
    if filters.text:
        predicates.append(ContainsText((EventModel.title, EventModel.description), filters.text))
    return predicates


class SpatialEventStore(SQLAlchemyRepository):
    """Radius containment, relational filters, ordering and pagination.

    Every query is described as a :class:`PredicateSet`; the page of rows and
    the total count are compiled from that same set.
    """

    def find_within_radius(
        self,
        anchor: GeoPoint,
        radius_km: float,
        filters: SearchFilters | None = None,
        page: int = 1,
        page_size: int = 10,
    ) -> tuple[list[EventHit], int]:
        """Return the requested page of events within ``radius_km`` and the total.

        Rows are ordered by ascending distance from ``anchor``; ties keep a
        stable order by event id.
        """

        page_request = PageRequest(page, page_size)
        radius = WithinRadius(EventModel.latitude, EventModel.longitude, anchor, radius_km)
        predicates = PredicateSet([radius, *event_filter_predicates(filters or SearchFilters())])

        distance = radius.distance().label("distance_km")
        rows_statement = (
            predicates.apply(select(EventModel, distance))
            .order_by(distance.asc(), EventModel.id.asc())
            .offset(page_request.offset)
            .limit(page_request.page_size)
        )
        hits = [
            EventHit(event=EventRepository.to_entity(model), distance_km=float(distance_km))
            for model, distance_km in self._execute(rows_statement).all()
        ]
        total = self._count(predicates)
        logger.debug(
            "Radius search around (%s, %s) r=%skm matched %s events",
            anchor.latitude,
            anchor.longitude,
            radius_km,
            total,
        )
        return hits, total

    def list_events(
        self,
        ordering: EventOrdering,
        filters: SearchFilters | None = None,
        page: int = 1,
        page_size: int = 10,
    ) -> tuple[list[EventHit], int]:
        """Return a page of events without an anchor, in the caller's ``ordering``."""

        page_request = PageRequest(page, page_size)
        predicates = PredicateSet(event_filter_predicates(filters or SearchFilters()))
        if ordering is EventOrdering.NEWEST_FIRST:
            order_by = (EventModel.created_at.desc(), EventModel.id.desc())
        elif ordering is EventOrdering.START_TIME_ASC:
            order_by = (EventModel.start_time.asc(), EventModel.id.asc())
        else:
            raise ValueError(f"Unsupported ordering: {ordering!r}")

        rows_statement = (
            predicates.apply(select(EventModel))
            .order_by(*order_by)
            .offset(page_request.offset)
            .limit(page_request.page_size)
        )
        hits = [
            EventHit(event=EventRepository.to_entity(model))
            for model in self._execute(rows_statement).scalars()
        ]
        return hits, self._count(predicates)

    def find_users_within_radius(
        self,
        anchor: GeoPoint,
        radius_km: float,
        *,
        category_ids: Iterable[int],
        exclude_user_id: int | None = None,
    ) -> list[UserProfile]:
        """Return users located within ``radius_km`` who prefer any of ``category_ids``."""

        wanted = frozenset(category_ids)
        if not wanted:
            return []
        predicates: list[Predicate] = [
            HasLocation(UserModel.latitude, UserModel.longitude),
            WithinRadius(UserModel.latitude, UserModel.longitude, anchor, radius_km),
            HasAnyCategory(
                owner_id=UserModel.id,
                link_owner_id=UserCategoryPreferenceModel.user_id,
                link_category_id=UserCategoryPreferenceModel.category_id,
                category_ids=wanted,
            ),
        ]
        if exclude_user_id is not None:
            predicates.append(Excludes(UserModel.id, exclude_user_id))
        statement = PredicateSet(predicates).apply(select(UserModel)).order_by(UserModel.id)
        return [
            UserProfileRepository.to_entity(model)
            for model in self._execute(statement).scalars()
        ]

    def _count(self, predicates: PredicateSet) -> int:
        statement = predicates.apply(select(func.count()).select_from(EventModel))
        return int(self._execute(statement).scalar_one())


__all__ = ["SpatialEventStore", "event_filter_predicates"]
