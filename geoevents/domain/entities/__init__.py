"""Domain entities exposed by the application."""

from .category import Category
from .event import Event, EventHit, SavedEvent
from .notification import (
    NOTIFICATION_TOPICS,
    DeliveryStatus,
    InboxNotification,
    MatchNotification,
    NotificationKind,
    ScheduledNotification,
)
from .search import (
    EventOrdering,
    PageRequest,
    Pagination,
    SearchFilters,
    SearchQuery,
    SearchResult,
)
from .user_profile import UserProfile

__all__ = [
    "Category",
    "Event",
    "EventHit",
    "EventOrdering",
    "SavedEvent",
    "PageRequest",
    "Pagination",
    "SearchFilters",
    "SearchQuery",
    "SearchResult",
    "UserProfile",
    "DeliveryStatus",
    "InboxNotification",
    "MatchNotification",
    "NOTIFICATION_TOPICS",
    "NotificationKind",
    "ScheduledNotification",
]
