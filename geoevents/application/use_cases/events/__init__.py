"""Use cases for managing events."""

from .create_event import create_event
from .delete_event import delete_event
from .get_event import get_event
from .update_event import update_event

__all__ = [
    "create_event",
    "delete_event",
    "get_event",
    "update_event",
]
