"""Tests for anchor resolution, parameter validation and result pagination."""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone

import pytest

from geoevents.domain.entities import SearchFilters
from geoevents.domain.errors import (
    InvalidCategoryIds,
    InvalidCoordinate,
    InvalidDateRange,
    InvalidPagination,
    InvalidSearchRadius,
    LocationRequired,
    UserNotFound,
)
from geoevents.domain.geo import GeoPoint
from geoevents.infrastructure.spatial import SpatialEventStore

from .conftest import FIXED_NOW, point_north_of

ORIGIN = GeoPoint(0.0, 0.0)


def test_search_at_origin_returns_nearest_events_first(search_engine, make_event) -> None:
    make_event(point_north_of(ORIGIN, 15))
    two = make_event(point_north_of(ORIGIN, 2))
    eight = make_event(point_north_of(ORIGIN, 8))

    query = search_engine.build_query(latitude=0, longitude=0, radius_km=10, page=1, page_size=10)
    result = search_engine.search(query)

    assert [hit.event.id for hit in result.events] == [two.id, eight.id]
    assert result.pagination.total == 2
    assert result.pagination.page_count == 1
    assert result.pagination.page == 1
    assert result.pagination.page_size == 10


def test_build_query_applies_defaults(search_engine) -> None:
    query = search_engine.build_query(latitude="10.5", longitude="-3")

    assert query.anchor == GeoPoint(10.5, -3.0)
    assert query.radius_km == 10.0
    assert query.filters == SearchFilters()
    assert (query.page.page, query.page.page_size) == (1, 10)


def test_build_query_normalizes_filters(search_engine) -> None:
    query = search_engine.build_query(
        latitude=1,
        longitude=2,
        radius_km="25",
        category_ids="3, 4,3",
        start_date="2030-01-01T10:00:00+00:00",
        end_date=date(2030, 1, 31),
        text="  jazz ",
        page="2",
        page_size=5,
    )

    assert query.radius_km == 25.0
    assert query.filters.category_ids == frozenset({3, 4})
    assert query.filters.start_date == datetime(2030, 1, 1, 10, tzinfo=timezone.utc)
    assert query.filters.end_date.date() == date(2030, 1, 31)
    assert query.filters.end_date.hour == 23
    assert query.filters.text == "jazz"
    assert (query.page.page, query.page.page_size) == (2, 5)


def test_explicit_coordinates_win_over_stored_location(search_engine, make_user) -> None:
    user = make_user(GeoPoint(50, 50))

    query = search_engine.build_query(latitude=1, longitude=1, user_id=user.id)

    assert query.anchor == GeoPoint(1, 1)


def test_stored_location_is_used_without_coordinates(search_engine, make_user) -> None:
    user = make_user(GeoPoint(50, 50))

    query = search_engine.build_query(user_id=user.id)

    assert query.anchor == GeoPoint(50, 50)


def test_missing_location_fails_closed(search_engine, make_user) -> None:
    user = make_user(None)

    with pytest.raises(LocationRequired):
        search_engine.build_query(user_id=user.id)
    with pytest.raises(LocationRequired):
        search_engine.build_query()
    with pytest.raises(LocationRequired):
        search_engine.nearby(user_id=user.id)


def test_unknown_user_is_reported(search_engine) -> None:
    with pytest.raises(UserNotFound):
        search_engine.build_query(user_id=12345)


@pytest.mark.parametrize(
    ("params", "error"),
    [
        ({"latitude": 91, "longitude": 0}, InvalidCoordinate),
        ({"latitude": 10}, InvalidCoordinate),
        ({"latitude": 0, "longitude": 0, "radius_km": 0}, InvalidSearchRadius),
        ({"latitude": 0, "longitude": 0, "radius_km": -5}, InvalidSearchRadius),
        ({"latitude": 0, "longitude": 0, "radius_km": float("inf")}, InvalidSearchRadius),
        ({"latitude": 0, "longitude": 0, "radius_km": "wide"}, InvalidSearchRadius),
        ({"latitude": 0, "longitude": 0, "category_ids": "1,x"}, InvalidCategoryIds),
        ({"latitude": 0, "longitude": 0, "category_ids": [0]}, InvalidCategoryIds),
        ({"latitude": 0, "longitude": 0, "category_ids": [True]}, InvalidCategoryIds),
        ({"latitude": 0, "longitude": 0, "start_date": "yesterday"}, InvalidDateRange),
        (
            {"latitude": 0, "longitude": 0, "start_date": "2030-02-01", "end_date": "2030-01-01"},
            InvalidDateRange,
        ),
        ({"latitude": 0, "longitude": 0, "page": 0}, InvalidPagination),
        ({"latitude": 0, "longitude": 0, "page_size": 1000}, InvalidPagination),
    ],
)
def test_invalid_parameters_are_rejected_before_the_store(
    search_engine, monkeypatch, params, error
) -> None:
    def fail(*_args, **_kwargs):
        raise AssertionError("store must not be queried")

    monkeypatch.setattr(SpatialEventStore, "find_within_radius", fail)

    with pytest.raises(error):
        search_engine.build_query(**params)


def test_nearby_ignores_category_and_date_filters(search_engine, make_category, make_event) -> None:
    music = make_category("music")
    tagged = make_event(point_north_of(ORIGIN, 1), (music.id,))
    untagged = make_event(point_north_of(ORIGIN, 2))

    result = search_engine.nearby(ORIGIN, radius_km=5)

    assert [hit.event.id for hit in result.events] == [tagged.id, untagged.id]


def test_recommended_uses_stored_location_and_preferences(
    search_engine, make_category, make_user, make_event
) -> None:
    music = make_category("music")
    food = make_category("food")
    user = make_user(ORIGIN, (music.id,))
    match = make_event(point_north_of(ORIGIN, 3), (music.id, food.id))
    make_event(point_north_of(ORIGIN, 1), (food.id,))
    make_event(point_north_of(ORIGIN, 40), (music.id,))

    result = search_engine.recommended(user.id)

    assert [hit.event.id for hit in result.events] == [match.id]
    assert result.total == 1


def test_recommended_without_preferences_is_empty_and_skips_the_store(
    search_engine, make_user, make_event, monkeypatch
) -> None:
    user = make_user(ORIGIN)
    make_event(point_north_of(ORIGIN, 1))

    def fail(*_args, **_kwargs):
        raise AssertionError("store must not be queried without preferences")

    monkeypatch.setattr(SpatialEventStore, "find_within_radius", fail)

    result = search_engine.recommended(user.id)

    assert result.events == ()
    assert result.pagination.total == 0
    assert result.pagination.page_count == 0


def test_recommended_requires_a_location(search_engine, make_category, make_user) -> None:
    music = make_category("music")
    user = make_user(None, (music.id,))

    with pytest.raises(LocationRequired):
        search_engine.recommended(user.id)


def test_search_pagination_reports_page_count(search_engine, make_event) -> None:
    for km in range(1, 8):
        make_event(point_north_of(ORIGIN, km))

    result = search_engine.search(
        search_engine.build_query(latitude=0, longitude=0, page=3, page_size=3)
    )

    assert len(result.events) == 1
    assert result.pagination.total == 7
    assert result.pagination.page_count == 3


def test_date_filters_apply_to_search(search_engine, make_event) -> None:
    make_event(point_north_of(ORIGIN, 1), start_time=FIXED_NOW + timedelta(days=1))
    later = make_event(point_north_of(ORIGIN, 2), start_time=FIXED_NOW + timedelta(days=20))

    result = search_engine.search(
        search_engine.build_query(
            latitude=0,
            longitude=0,
            start_date=(FIXED_NOW + timedelta(days=10)).isoformat(),
        )
    )

    assert [hit.event.id for hit in result.events] == [later.id]


def test_latest_lists_newest_first_with_text_filter(search_engine, make_event) -> None:
    first = make_event(point_north_of(ORIGIN, 1), title="Jazz brunch")
    make_event(point_north_of(ORIGIN, 500), title="Marathon")
    second = make_event(point_north_of(ORIGIN, 900), title="Late jazz")

    result = search_engine.latest(text="JAZZ")

    assert [hit.event.id for hit in result.events] == [second.id, first.id]
    assert result.total == 2
