"""ORM models used by the application infrastructure."""

from .category import CategoryModel, EventCategoryModel, UserCategoryPreferenceModel
from .event import EventModel, SavedEventModel
from .notification import NotificationModel, ScheduledNotificationModel
from .user import UserModel

__all__ = [
    "CategoryModel",
    "EventCategoryModel",
    "UserCategoryPreferenceModel",
    "EventModel",
    "SavedEventModel",
    "NotificationModel",
    "ScheduledNotificationModel",
    "UserModel",
]
