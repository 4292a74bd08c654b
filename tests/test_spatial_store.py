"""Tests for radius containment, filters, ordering and pagination in SQL."""

from __future__ import annotations

import math
from datetime import timedelta

import pytest

from geoevents.domain.entities import EventOrdering, SearchFilters
from geoevents.domain.errors import InvalidPagination
from geoevents.domain.geo import GeoPoint, distance_km
from geoevents.infrastructure.spatial import SpatialEventStore

from .conftest import FIXED_NOW, point_north_of

ORIGIN = GeoPoint(0.0, 0.0)


def test_radius_search_returns_events_in_distance_order(session, make_event) -> None:
    """Three events at 2, 8 and 15 km: only the first two fall inside 10 km."""

    far = make_event(point_north_of(ORIGIN, 15), title="far")
    near = make_event(point_north_of(ORIGIN, 2), title="near")
    middle = make_event(point_north_of(ORIGIN, 8), title="middle")

    hits, total = SpatialEventStore(session).find_within_radius(ORIGIN, 10, page=1, page_size=10)

    assert [hit.event.id for hit in hits] == [near.id, middle.id]
    assert total == 2
    assert far.id not in {hit.event.id for hit in hits}
    assert hits[0].distance_km == pytest.approx(2, abs=1e-6)
    assert hits[1].distance_km == pytest.approx(8, abs=1e-6)


def test_sql_distance_matches_python_haversine(session, make_event) -> None:
    anchor = GeoPoint(40.7128, -74.0060)
    location = GeoPoint(40.73, -74.00)
    make_event(location)

    hits, _ = SpatialEventStore(session).find_within_radius(anchor, 5)

    assert hits[0].distance_km == pytest.approx(distance_km(anchor, location), rel=1e-9)


def test_event_on_the_radius_boundary_is_included(session, make_event) -> None:
    event = make_event(point_north_of(ORIGIN, 5))
    radius = distance_km(ORIGIN, event.location) + 1e-9

    hits, total = SpatialEventStore(session).find_within_radius(ORIGIN, radius)

    assert total == 1
    assert hits[0].event.id == event.id


def test_larger_radius_never_returns_fewer_events(session, make_event) -> None:
    for km in (1, 3, 6, 12, 25, 40):
        make_event(point_north_of(ORIGIN, km))
    store = SpatialEventStore(session)

    totals = [store.find_within_radius(ORIGIN, radius)[1] for radius in (2, 5, 10, 20, 50)]

    assert totals == sorted(totals)
    assert totals == [1, 2, 3, 4, 6]


def test_search_across_the_antimeridian(session, make_event) -> None:
    west = make_event(GeoPoint(0.0, 179.95))
    east = make_event(GeoPoint(0.0, -179.95))

    hits, total = SpatialEventStore(session).find_within_radius(GeoPoint(0.0, 180.0), 10)

    assert total == 2
    assert {hit.event.id for hit in hits} == {west.id, east.id}


def test_total_is_consistent_across_pages(session, make_event) -> None:
    for km in range(1, 8):
        make_event(point_north_of(ORIGIN, km))
    store = SpatialEventStore(session)

    pages = [store.find_within_radius(ORIGIN, 10, page=page, page_size=3) for page in (1, 2, 3, 4)]

    assert {total for _, total in pages} == {7}
    assert [len(hits) for hits, _ in pages] == [3, 3, 1, 0]
    ids = [hit.event.id for hits, _ in pages for hit in hits]
    assert len(ids) == len(set(ids)) == 7
    distances = [hit.distance_km for hits, _ in pages for hit in hits]
    assert distances == sorted(distances)


def test_category_filter_uses_or_semantics_without_duplicates(
    session, make_category, make_event
) -> None:
    music = make_category("music")
    food = make_category("food")
    sport = make_category("sport")
    both = make_event(point_north_of(ORIGIN, 1), (music.id, food.id))
    only_food = make_event(point_north_of(ORIGIN, 2), (food.id,))
    make_event(point_north_of(ORIGIN, 3), (sport.id,))
    make_event(point_north_of(ORIGIN, 4))

    hits, total = SpatialEventStore(session).find_within_radius(
        ORIGIN, 10, SearchFilters(category_ids=frozenset({music.id, food.id}))
    )

    assert [hit.event.id for hit in hits] == [both.id, only_food.id]
    assert total == 2


def test_date_filters_bound_start_and_end_independently(session, make_event) -> None:
    early = make_event(point_north_of(ORIGIN, 1), start_time=FIXED_NOW + timedelta(days=1))
    late = make_event(point_north_of(ORIGIN, 2), start_time=FIXED_NOW + timedelta(days=10))
    store = SpatialEventStore(session)

    after, _ = store.find_within_radius(
        ORIGIN, 10, SearchFilters(start_date=FIXED_NOW + timedelta(days=5))
    )
    before, _ = store.find_within_radius(
        ORIGIN, 10, SearchFilters(end_date=FIXED_NOW + timedelta(days=5))
    )

    assert [hit.event.id for hit in after] == [late.id]
    assert [hit.event.id for hit in before] == [early.id]


def test_text_filter_matches_title_or_description(session, make_event) -> None:
    jazz = make_event(point_north_of(ORIGIN, 1), title="Jazz night")
    described = make_event(point_north_of(ORIGIN, 2), title="Evening", description="Live JAZZ band")
    make_event(point_north_of(ORIGIN, 3), title="Chess club")

    hits, total = SpatialEventStore(session).find_within_radius(
        ORIGIN, 10, SearchFilters(text="jazz")
    )

    assert [hit.event.id for hit in hits] == [jazz.id, described.id]
    assert total == 2


def test_text_filter_escapes_like_wildcards(session, make_event) -> None:
    make_event(point_north_of(ORIGIN, 1), title="100 percent")
    discount = make_event(point_north_of(ORIGIN, 2), title="50% off")

    hits, _ = SpatialEventStore(session).find_within_radius(ORIGIN, 10, SearchFilters(text="%"))

    assert [hit.event.id for hit in hits] == [discount.id]


@pytest.mark.parametrize(("page", "page_size"), [(0, 10), (1, 0), (-1, 5), (1, -3)])
def test_non_positive_pagination_is_rejected(session, page, page_size) -> None:
    with pytest.raises(InvalidPagination):
        SpatialEventStore(session).find_within_radius(ORIGIN, 10, page=page, page_size=page_size)


def test_list_events_orders_explicitly(session, make_event) -> None:
    later_start = make_event(point_north_of(ORIGIN, 1), start_time=FIXED_NOW + timedelta(days=9))
    sooner_start = make_event(point_north_of(ORIGIN, 50), start_time=FIXED_NOW + timedelta(days=2))
    store = SpatialEventStore(session)

    newest, total = store.list_events(EventOrdering.NEWEST_FIRST)
    by_start, _ = store.list_events(EventOrdering.START_TIME_ASC)

    assert total == 2
    assert [hit.event.id for hit in newest] == [sooner_start.id, later_start.id]
    assert [hit.event.id for hit in by_start] == [sooner_start.id, later_start.id]
    assert all(hit.distance_km is None for hit in newest)


def test_list_events_paginates_with_consistent_total(session, make_event) -> None:
    created = [make_event(point_north_of(ORIGIN, km)) for km in range(1, 6)]
    store = SpatialEventStore(session)

    first, total_first = store.list_events(EventOrdering.NEWEST_FIRST, page=1, page_size=2)
    last, total_last = store.list_events(EventOrdering.NEWEST_FIRST, page=3, page_size=2)

    assert total_first == total_last == 5
    assert [hit.event.id for hit in first] == [created[4].id, created[3].id]
    assert [hit.event.id for hit in last] == [created[0].id]


def test_find_users_within_radius_requires_location_and_preferences(
    session, make_category, make_user
) -> None:
    music = make_category("music")
    nearby = make_user(point_north_of(ORIGIN, 3), (music.id,))
    make_user(None, (music.id,))
    make_user(point_north_of(ORIGIN, 3))
    make_user(point_north_of(ORIGIN, 30), (music.id,))

    users = SpatialEventStore(session).find_users_within_radius(
        ORIGIN, 20, category_ids={music.id}
    )

    assert [user.id for user in users] == [nearby.id]


def test_find_users_within_radius_excludes_a_user(session, make_category, make_user) -> None:
    music = make_category("music")
    first = make_user(point_north_of(ORIGIN, 1), (music.id,))
    second = make_user(point_north_of(ORIGIN, 2), (music.id,))
    store = SpatialEventStore(session)

    users = store.find_users_within_radius(
        ORIGIN, 20, category_ids={music.id}, exclude_user_id=first.id
    )

    assert [user.id for user in users] == [second.id]
    assert store.find_users_within_radius(ORIGIN, 20, category_ids=set()) == []


def test_radius_in_degrees_is_not_confused_with_kilometres(session, make_event) -> None:
    # About 0.1 degree of latitude is 11.1 km.
    make_event(GeoPoint(0.1, 0.0))

    _, inside = SpatialEventStore(session).find_within_radius(ORIGIN, 11.2)
    _, outside = SpatialEventStore(session).find_within_radius(ORIGIN, 11.0)

    assert (inside, outside) == (1, 0)
    assert math.isclose(distance_km(ORIGIN, GeoPoint(0.1, 0.0)), 11.1195, rel_tol=1e-4)
