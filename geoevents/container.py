"""Build the process-wide resources and the services that use them.

The engine, session factory and notification channel are created once and
passed to every component; :meth:`Container.shutdown` releases them.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime

from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from geoevents.application.services import (
    EventSearchEngine,
    InterestMatcher,
    NotificationDispatcher,
)
from geoevents.config import Settings, get_settings
from geoevents.infrastructure.database import (
    create_database_engine,
    create_session_factory,
    initialize_database,
    session_scope,
)
from geoevents.infrastructure.notifications import (
    InboxConsumer,
    InMemoryNotificationChannel,
    NotificationChannel,
    NotificationScheduler,
)
from geoevents.utils import now_in_app_timezone

logger = logging.getLogger(__name__)


@dataclass
class Container:
    settings: Settings
    engine: Engine
    session_factory: sessionmaker[Session]
    channel: NotificationChannel
    scheduler: NotificationScheduler
    matcher: InterestMatcher
    dispatcher: NotificationDispatcher
    search_engine: EventSearchEngine
    inbox: InboxConsumer

    @classmethod
    def build(
        cls,
        settings: Settings | None = None,
        *,
        channel: NotificationChannel | None = None,
        clock: Callable[[], datetime] = now_in_app_timezone,
        create_schema: bool = True,
    ) -> "Container":
        """Create every component from ``settings`` (environment by default)."""

        settings = settings or get_settings()
        engine = create_database_engine(settings.database_url)
        if create_schema:
            initialize_database(engine)
        session_factory = create_session_factory(engine)
        channel = channel or InMemoryNotificationChannel()

        scheduler = NotificationScheduler(
            session_factory,
            channel,
            clock=clock,
            batch_size=settings.reminder_sweep_batch_size,
        )
        matcher = InterestMatcher(
            session_factory, notification_radius_km=settings.notification_radius
        )
        dispatcher = NotificationDispatcher(matcher, channel, scheduler, clock=clock)
        search_engine = EventSearchEngine(
            session_factory,
            default_radius_km=settings.default_search_radius,
            default_page_size=settings.default_page_size,
            max_page_size=settings.max_page_size,
        )
        inbox = InboxConsumer(session_factory, clock=clock)
        logger.info("Components created for database dialect %s", engine.dialect.name)
        return cls(
            settings=settings,
            engine=engine,
            session_factory=session_factory,
            channel=channel,
            scheduler=scheduler,
            matcher=matcher,
            dispatcher=dispatcher,
            search_engine=search_engine,
            inbox=inbox,
        )

    @contextmanager
    def session(self) -> Iterator[Session]:
        with session_scope(self.session_factory) as session:
            yield session

    def shutdown(self) -> None:
        self.channel.close()
        self.engine.dispose()
        logger.info("Container resources released")


__all__ = ["Container"]
