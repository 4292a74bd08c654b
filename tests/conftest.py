"""Shared fixtures: a fresh SQLite database per test and component factories."""

from __future__ import annotations

import math
from collections.abc import Callable, Iterator
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from geoevents.application.services import (
    EventSearchEngine,
    InterestMatcher,
    NotificationDispatcher,
)
from geoevents.config import reset_settings_cache
from geoevents.domain.entities import Category, Event, UserProfile
from geoevents.domain.geo import EARTH_RADIUS_KM, GeoPoint
from geoevents.infrastructure.database import (
    create_database_engine,
    create_session_factory,
    initialize_database,
)
from geoevents.infrastructure.notifications import (
    InboxConsumer,
    InMemoryNotificationChannel,
    NotificationScheduler,
)
from geoevents.infrastructure.repositories import (
    CategoryRepository,
    EventRepository,
    UserProfileRepository,
)
from geoevents.utils import get_app_timezone

FIXED_NOW = datetime(2030, 6, 1, 12, 0, tzinfo=timezone.utc)


def point_north_of(origin: GeoPoint, km: float) -> GeoPoint:
    """Return the point ``km`` kilometres due north of ``origin``."""

    return GeoPoint(origin.latitude + math.degrees(km / EARTH_RADIUS_KM), origin.longitude)


@pytest.fixture(autouse=True)
def _isolated_settings(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Ignore any local ``.env`` and keep timestamps in UTC."""

    monkeypatch.setenv("APP_TIMEZONE", "UTC")
    reset_settings_cache()
    get_app_timezone.cache_clear()
    yield
    reset_settings_cache()
    get_app_timezone.cache_clear()


@pytest.fixture()
def engine(tmp_path: Path) -> Iterator[Engine]:
    engine = create_database_engine(f"sqlite:///{tmp_path / 'geoevents.db'}")
    initialize_database(engine)
    yield engine
    engine.dispose()


@pytest.fixture()
def session_factory(engine: Engine) -> sessionmaker[Session]:
    return create_session_factory(engine)


@pytest.fixture()
def session(session_factory: sessionmaker[Session]) -> Iterator[Session]:
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def clock() -> Callable[[], datetime]:
    return lambda: FIXED_NOW


@pytest.fixture()
def channel() -> Iterator[InMemoryNotificationChannel]:
    channel = InMemoryNotificationChannel()
    yield channel
    channel.close()


@pytest.fixture()
def published(channel: InMemoryNotificationChannel) -> list[tuple[str, dict]]:
    """Collect every message published on the notification topics."""

    messages: list[tuple[str, dict]] = []
    for topic in ("event:new", "event:update", "event:reminder"):
        channel.subscribe(topic, lambda topic, message: messages.append((topic, message)))
    return messages


@pytest.fixture()
def scheduler(session_factory, channel, clock) -> NotificationScheduler:
    return NotificationScheduler(session_factory, channel, clock=clock)


@pytest.fixture()
def matcher(session_factory) -> InterestMatcher:
    return InterestMatcher(session_factory, notification_radius_km=20.0)


@pytest.fixture()
def dispatcher(matcher, channel, scheduler, clock) -> NotificationDispatcher:
    return NotificationDispatcher(matcher, channel, scheduler, clock=clock)


@pytest.fixture()
def search_engine(session_factory) -> EventSearchEngine:
    return EventSearchEngine(
        session_factory, default_radius_km=10.0, default_page_size=10, max_page_size=100
    )


@pytest.fixture()
def inbox(session_factory, clock) -> InboxConsumer:
    return InboxConsumer(session_factory, clock=clock)


@pytest.fixture()
def make_category(session: Session) -> Callable[..., Category]:
    repository = CategoryRepository(session)
    counter = iter(range(1, 10_000))

    def factory(name: str | None = None) -> Category:
        return repository.create(Category(id=None, name=name or f"category-{next(counter)}"))

    return factory


@pytest.fixture()
def make_user(session: Session) -> Callable[..., UserProfile]:
    repository = UserProfileRepository(session)
    counter = iter(range(1, 10_000))

    def factory(
        location: GeoPoint | None = None,
        categories: tuple[int, ...] = (),
        username: str | None = None,
    ) -> UserProfile:
        index = next(counter)
        name = username or f"user{index}"
        return repository.create(
            username=name,
            email=f"{name}@example.com",
            location=location,
            category_ids=categories,
        )

    return factory


@pytest.fixture()
def make_event(session: Session, make_user) -> Callable[..., Event]:
    repository = EventRepository(session)
    default_creator: list[UserProfile] = []

    def factory(
        location: GeoPoint,
        categories: tuple[int, ...] = (),
        *,
        creator_id: int | None = None,
        title: str = "Event",
        description: str | None = None,
        start_time: datetime | None = None,
        duration: timedelta = timedelta(hours=2),
    ) -> Event:
        if creator_id is None:
            if not default_creator:
                default_creator.append(make_user(username="organizer"))
            creator_id = default_creator[0].id
        start = start_time or FIXED_NOW + timedelta(days=3)
        return repository.create(
            Event(
                id=None,
                title=title,
                description=description,
                location=location,
                address=None,
                start_time=start,
                end_time=start + duration,
                creator_id=creator_id,
                category_ids=frozenset(categories),
            )
        )

    return factory
