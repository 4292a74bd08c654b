"""Application use cases."""

from .categories import create_category, list_categories
from .events import create_event, delete_event, get_event, update_event
from .favorites import list_saved_events, save_event, unsave_event
from .notifications import count_unread, list_notifications, mark_all_as_read, mark_as_read
from .users import (
    get_user_profile,
    register_user,
    set_category_preferences,
    update_user_location,
)

__all__ = [
    "count_unread",
    "create_category",
    "create_event",
    "delete_event",
    "get_event",
    "get_user_profile",
    "list_categories",
    "list_notifications",
    "list_saved_events",
    "mark_all_as_read",
    "mark_as_read",
    "register_user",
    "save_event",
    "set_category_preferences",
    "unsave_event",
    "update_event",
    "update_user_location",
]
