"""Use cases for the user notification inbox."""

from __future__ import annotations

from collections.abc import Iterable

from sqlalchemy.orm import Session

from geoevents.domain.entities import InboxNotification, PageRequest, Pagination
from geoevents.infrastructure.repositories import NotificationRepository


def list_notifications(
    session: Session,
    *,
    user_id: int,
    page: int = 1,
    page_size: int = 20,
    unread_only: bool = False,
) -> tuple[list[InboxNotification], Pagination]:
    """Return the user's notifications, newest first."""

    page_request = PageRequest(page, page_size)
    items, total = NotificationRepository(session).list_for_user(
        user_id, page_request, unread_only=unread_only
    )
    return items, Pagination.build(total, page_request)


def count_unread(session: Session, *, user_id: int) -> int:
    return NotificationRepository(session).count_unread(user_id)


def mark_as_read(session: Session, *, user_id: int, notification_ids: Iterable[int]) -> int:
    """Mark the given notifications as read; ids owned by other users are ignored."""

    return NotificationRepository(session).mark_as_read(notification_ids, user_id=user_id)


def mark_all_as_read(session: Session, *, user_id: int) -> int:
    return NotificationRepository(session).mark_all_as_read(user_id)


__all__ = [
    "count_unread",
    "list_notifications",
    "mark_all_as_read",
    "mark_as_read",
]
