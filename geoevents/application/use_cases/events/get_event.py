"""Use case for retrieving a single event."""

from sqlalchemy.orm import Session

from geoevents.domain.entities import Event
from geoevents.domain.errors import EventNotFound
from geoevents.infrastructure.repositories import EventRepository


def get_event(session: Session, event_id: int) -> Event:
    """Return the event identified by ``event_id``."""

    event = EventRepository(session).get(event_id)
    if event is None:
        raise EventNotFound(f"Event with id {event_id} not found")
    return event


__all__ = ["get_event"]
