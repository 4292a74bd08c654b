"""Durable delayed delivery of notifications."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from datetime import datetime

from sqlalchemy.orm import Session

from geoevents.domain.entities import MatchNotification, ScheduledNotification
from geoevents.domain.errors import NotificationChannelUnavailable, PersistenceError
from geoevents.infrastructure.database import session_scope
from geoevents.infrastructure.repositories import ScheduledNotificationRepository
from geoevents.utils import ensure_app_timezone, now_in_app_timezone

from .channel import NotificationChannel
from .serialization import serialize_notification

logger = logging.getLogger(__name__)


class NotificationScheduler:
    """Persist notifications for a future instant and publish them once due.

    Entries live in the ``scheduled_notification`` table so they survive a
    restart. :meth:`sweep` claims due entries, publishes them and returns an
    entry to the queue when the channel rejects it.
    """

    def __init__(
        self,
        session_factory: Callable[[], Session],
        channel: NotificationChannel,
        *,
        clock: Callable[[], datetime] = now_in_app_timezone,
        batch_size: int = 500,
    ) -> None:
        self._session_factory = session_factory
        self._channel = channel
        self._clock = clock
        self._batch_size = batch_size

    def schedule_at(
        self, instant: datetime, notification: MatchNotification
    ) -> ScheduledNotification:
        """Arrange for ``notification`` to be published at ``instant``."""

        return self.schedule_many([(notification, instant)])[0]

    def schedule_many(
        self, entries: Sequence[tuple[MatchNotification, datetime]]
    ) -> list[ScheduledNotification]:
        if not entries:
            return []
        try:
            with session_scope(self._session_factory) as session:
                scheduled = ScheduledNotificationRepository(session).create_many(
                    [(notification, ensure_app_timezone(due_at)) for notification, due_at in entries]
                )
        except PersistenceError as exc:
            raise NotificationChannelUnavailable(
                "Unable to schedule notifications for later delivery"
            ) from exc
        logger.debug("Scheduled %s notifications", len(scheduled))
        return scheduled

    def sweep(self, now: datetime | None = None) -> int:
        """Publish every entry due at ``now`` and return how many were published.

        The sweep stops at the first channel failure; the failing entry and the
        ones after it remain scheduled.
        """

        now = ensure_app_timezone(now) if now is not None else self._clock()
        published = 0
        with session_scope(self._session_factory) as session:
            repository = ScheduledNotificationRepository(session)
            for entry in repository.list_due(now, limit=self._batch_size):
                if entry.id is None or not repository.mark_published(entry.id, at=now):
                    # Claimed by a concurrent sweep.
                    continue
                message = serialize_notification(entry.notification, scheduled_id=entry.id)
                try:
                    self._channel.publish(entry.notification.topic, message)
                except NotificationChannelUnavailable:
                    repository.release(entry.id)
                    logger.warning(
                        "Notification channel unavailable; deferring scheduled notification %s",
                        entry.id,
                    )
                    break
                published += 1
        if published:
            logger.info("Published %s scheduled notifications", published)
        return published


__all__ = ["NotificationScheduler"]
