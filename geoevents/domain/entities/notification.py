"""Domain entities for match notifications and the user inbox."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any


class NotificationKind(str, Enum):
    """Reasons a user is told about an event."""

    NEW_EVENT = "new_event"
    EVENT_UPDATED = "event_updated"
    REMINDER_DAY = "reminder_day"
    REMINDER_HOUR = "reminder_hour"

    @property
    def topic(self) -> str:
        return NOTIFICATION_TOPICS[self]


NOTIFICATION_TOPICS: dict[NotificationKind, str] = {
    NotificationKind.NEW_EVENT: "event:new",
    NotificationKind.EVENT_UPDATED: "event:update",
    NotificationKind.REMINDER_DAY: "event:reminder",
    NotificationKind.REMINDER_HOUR: "event:reminder",
}


class DeliveryStatus(str, Enum):
    """Lifecycle of a notification between dispatch and consumption."""

    PENDING = "pending"
    SCHEDULED = "scheduled"
    PUBLISHED = "published"
    CONSUMED = "consumed"


@dataclass(frozen=True)
class MatchNotification:
    """Message telling one user about one event."""

    user_id: int
    event_id: int
    kind: NotificationKind
    payload: dict[str, Any] = field(default_factory=dict, hash=False, compare=False)
    scheduled_at: datetime | None = None

    @property
    def topic(self) -> str:
        return self.kind.topic


@dataclass
class ScheduledNotification:
    """A notification persisted for delivery at ``due_at``."""

    id: int | None
    notification: MatchNotification
    due_at: datetime
    status: DeliveryStatus = DeliveryStatus.SCHEDULED
    created_at: datetime | None = None
    published_at: datetime | None = None


@dataclass
class InboxNotification:
    """Notification stored for a user after it was consumed from the channel."""

    id: int | None
    user_id: int
    event_id: int | None
    kind: NotificationKind
    message: str
    payload: dict[str, Any] = field(default_factory=dict)
    created_at: datetime | None = None
    read_at: datetime | None = None

    @property
    def is_read(self) -> bool:
        return self.read_at is not None


__all__ = [
    "DeliveryStatus",
    "InboxNotification",
    "MatchNotification",
    "NOTIFICATION_TOPICS",
    "NotificationKind",
    "ScheduledNotification",
]
