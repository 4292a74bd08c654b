"""Channel consumer that stores delivered notifications in the user inbox."""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime
from typing import Any

from sqlalchemy.orm import Session

from geoevents.domain.entities import (
    InboxNotification,
    MatchNotification,
    NOTIFICATION_TOPICS,
    NotificationKind,
)
from geoevents.infrastructure.database import session_scope
from geoevents.infrastructure.repositories import (
    NotificationRepository,
    ScheduledNotificationRepository,
)
from geoevents.utils import now_in_app_timezone

from .channel import NotificationChannel
from .serialization import deserialize_notification

logger = logging.getLogger(__name__)

_MESSAGE_TEMPLATES: dict[NotificationKind, str] = {
    NotificationKind.NEW_EVENT: 'New event "{title}" matching your interests is happening near you.',
    NotificationKind.EVENT_UPDATED: 'Event "{title}" that you saved has been updated.',
    NotificationKind.REMINDER_DAY: 'Reminder: Event "{title}" is happening tomorrow.',
    NotificationKind.REMINDER_HOUR: 'Reminder: Event "{title}" is starting in an hour.',
}


def render_message(notification: MatchNotification) -> str:
    """Return the inbox text for ``notification``."""

    title = notification.payload.get("title") or f"#{notification.event_id}"
    return _MESSAGE_TEMPLATES[notification.kind].format(title=title)


class InboxConsumer:
    """Persist every message received on the notification topics."""

    def __init__(
        self,
        session_factory: Callable[[], Session],
        *,
        clock: Callable[[], datetime] = now_in_app_timezone,
    ) -> None:
        self._session_factory = session_factory
        self._clock = clock

    def register(self, channel: NotificationChannel) -> list[Callable[[], None]]:
        """Subscribe to every notification topic and return the unsubscribe callbacks."""

        return [channel.subscribe(topic, self.handle) for topic in sorted(set(NOTIFICATION_TOPICS.values()))]

    def handle(self, topic: str, message: dict[str, Any]) -> InboxNotification:
        notification = deserialize_notification(message)
        if notification.topic != topic:
            logger.warning(
                "Notification of kind %s received on unexpected topic %s",
                notification.kind.value,
                topic,
            )
        now = self._clock()
        with session_scope(self._session_factory) as session:
            stored = NotificationRepository(session).create(
                InboxNotification(
                    id=None,
                    user_id=notification.user_id,
                    event_id=notification.event_id,
                    kind=notification.kind,
                    message=render_message(notification),
                    payload=dict(notification.payload),
                    created_at=now,
                )
            )
            scheduled_id = message.get("scheduled_id")
            if scheduled_id is not None:
                ScheduledNotificationRepository(session).mark_consumed(int(scheduled_id), at=now)
        logger.debug(
            "Stored %s notification for user %s", notification.kind.value, notification.user_id
        )
        return stored


__all__ = ["InboxConsumer", "render_message"]
