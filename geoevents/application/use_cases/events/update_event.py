"""Use case for updating an existing event."""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any

from sqlalchemy.orm import Session

from geoevents.application.services import NotificationDispatcher
from geoevents.application.services.search_params import parse_instant
from geoevents.domain.entities import Event
from geoevents.domain.errors import EventNotFound, PermissionDenied
from geoevents.domain.geo import GeoPoint
from geoevents.infrastructure.repositories import EventRepository
from geoevents.utils import now_in_app_timezone

from .dispatching import dispatch_after_commit
from .validators import category_set, ensure_schedule, require_title

logger = logging.getLogger(__name__)


def update_event(
    session: Session,
    *,
    event_id: int,
    acting_user_id: int,
    title: str | None = None,
    description: str | None = None,
    latitude: Any = None,
    longitude: Any = None,
    address: str | None = None,
    start_time: Any = None,
    end_time: Any = None,
    category_ids: Any = None,
    dispatcher: NotificationDispatcher | None = None,
) -> Event:
    """Apply a partial update; only the event creator may change it.

    Categories are replaced when ``category_ids`` is given. Users who saved
    the event are notified once the change is committed.
    """

    repository = EventRepository(session)
    current = repository.get(event_id)
    if current is None:
        raise EventNotFound(f"Event with id {event_id} not found")
    if current.creator_id != acting_user_id:
        raise PermissionDenied("Only the creator can update this event")

    location = current.location
    if latitude is not None or longitude is not None:
        location = GeoPoint.create(
            latitude if latitude is not None else current.location.latitude,
            longitude if longitude is not None else current.location.longitude,
        )
    start = parse_instant(start_time, name="start_time") or current.start_time
    end = parse_instant(end_time, name="end_time") or current.end_time
    ensure_schedule(start, end)

    updated = replace(
        current,
        title=require_title(title) if title is not None else current.title,
        description=description if description is not None else current.description,
        location=location,
        address=address if address is not None else current.address,
        start_time=start,
        end_time=end,
        category_ids=category_set(category_ids) if category_ids is not None else current.category_ids,
        updated_at=now_in_app_timezone(),
    )
    event = repository.update(updated, replace_categories=category_ids is not None)
    logger.info("Event %s updated by user %s", event.id, acting_user_id)

    if dispatcher is not None:
        dispatch_after_commit(dispatcher.notify_event_update, event)
    return event


__all__ = ["update_event"]
