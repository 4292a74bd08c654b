"""Repository implementations for infrastructure layer."""

from .category_repository import CategoryRepository
from .event_repository import EventRepository
from .notification_repository import NotificationRepository
from .saved_event_repository import SavedEventRepository
from .scheduled_notification_repository import ScheduledNotificationRepository
from .user_repository import UserProfileRepository

__all__ = [
    "CategoryRepository",
    "EventRepository",
    "NotificationRepository",
    "SavedEventRepository",
    "ScheduledNotificationRepository",
    "UserProfileRepository",
]
