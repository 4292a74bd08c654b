"""Core services: search, interest matching and notification dispatch."""

from .deadlines import run_with_deadline
from .dispatch import REMINDER_OFFSETS, DispatchReport, NotificationDispatcher
from .matching import InterestMatcher
from .search import EventSearchEngine

__all__ = [
    "DispatchReport",
    "EventSearchEngine",
    "InterestMatcher",
    "NotificationDispatcher",
    "REMINDER_OFFSETS",
    "run_with_deadline",
]
