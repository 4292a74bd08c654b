"""Use case for publishing a new event."""

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy.orm import Session

from geoevents.application.services import NotificationDispatcher
from geoevents.domain.entities import Event
from geoevents.domain.errors import UserNotFound
from geoevents.domain.geo import GeoPoint
from geoevents.infrastructure.repositories import EventRepository, UserProfileRepository
from geoevents.utils import now_in_app_timezone

from .dispatching import dispatch_after_commit
from .validators import category_set, ensure_schedule, require_instant, require_title

logger = logging.getLogger(__name__)


def create_event(
    session: Session,
    *,
    creator_id: int,
    title: str,
    latitude: Any,
    longitude: Any,
    start_time: Any,
    end_time: Any,
    description: str | None = None,
    address: str | None = None,
    category_ids: Any = None,
    dispatcher: NotificationDispatcher | None = None,
) -> Event:
    """Store a new event and notify nearby interested users.

    The event and its category links are committed together before any
    notification is published.
    """

    location = GeoPoint.create(latitude, longitude)
    start = require_instant(start_time, "start_time")
    end = require_instant(end_time, "end_time")
    ensure_schedule(start, end)

    if UserProfileRepository(session).get(creator_id) is None:
        raise UserNotFound(f"User with id {creator_id} not found")

    event = EventRepository(session).create(
        Event(
            id=None,
            title=require_title(title),
            description=description,
            location=location,
            address=address,
            start_time=start,
            end_time=end,
            creator_id=creator_id,
            category_ids=category_set(category_ids),
            created_at=now_in_app_timezone(),
        )
    )
    logger.info("Event %s created by user %s", event.id, creator_id)

    if dispatcher is not None:
        dispatch_after_commit(dispatcher.notify_new_event, event)
    return event


__all__ = ["create_event"]
