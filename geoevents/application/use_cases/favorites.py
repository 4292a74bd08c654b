"""Use cases for saving events as favorites."""

from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from geoevents.domain.entities import PageRequest, Pagination, SavedEvent
from geoevents.domain.errors import EventNotFound, UserNotFound
from geoevents.infrastructure.repositories import (
    EventRepository,
    SavedEventRepository,
    UserProfileRepository,
)

logger = logging.getLogger(__name__)


def save_event(session: Session, *, user_id: int, event_id: int) -> bool:
    """Add ``event_id`` to the user's favorites.

    Saving an already saved event is a no-op and returns ``False``.
    """

    _require_user(session, user_id)
    if EventRepository(session).get(event_id) is None:
        raise EventNotFound(f"Event with id {event_id} not found")
    saved = SavedEventRepository(session).save(user_id, event_id)
    if saved:
        logger.debug("User %s saved event %s", user_id, event_id)
    return saved


def unsave_event(session: Session, *, user_id: int, event_id: int) -> bool:
    """Remove ``event_id`` from the user's favorites; ``False`` if it was not saved."""

    return SavedEventRepository(session).remove(user_id, event_id)


def list_saved_events(
    session: Session,
    *,
    user_id: int,
    page: int = 1,
    page_size: int = 10,
) -> tuple[list[SavedEvent], Pagination]:
    """Return the user's favorites, most recently saved first."""

    page_request = PageRequest(page, page_size)
    _require_user(session, user_id)
    rows, total = SavedEventRepository(session).list_for_user(user_id, page_request)
    items = [SavedEvent(event=event, saved_at=saved_at) for event, saved_at in rows]
    return items, Pagination.build(total, page_request)


def _require_user(session: Session, user_id: int) -> None:
    if UserProfileRepository(session).get(user_id) is None:
        raise UserNotFound(f"User with id {user_id} not found")


__all__ = ["list_saved_events", "save_event", "unsave_event"]
