"""Use case for deleting events."""

from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from geoevents.domain.errors import EventNotFound, PermissionDenied
from geoevents.infrastructure.repositories import EventRepository

logger = logging.getLogger(__name__)


def delete_event(session: Session, event_id: int, *, acting_user_id: int) -> None:
    """Delete an event together with its favorites and pending reminders."""

    repository = EventRepository(session)
    event = repository.get(event_id)
    if event is None:
        raise EventNotFound(f"Event with id {event_id} not found")
    if event.creator_id != acting_user_id:
        raise PermissionDenied("Only the creator can delete this event")

    repository.delete(event_id)
    logger.info("Event %s deleted by user %s", event_id, acting_user_id)


__all__ = ["delete_event"]
