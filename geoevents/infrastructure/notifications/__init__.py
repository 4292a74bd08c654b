"""Notification delivery infrastructure."""

from .channel import (
    InMemoryNotificationChannel,
    Message,
    MessageHandler,
    NotificationChannel,
)
from .inbox import InboxConsumer, render_message
from .scheduler import NotificationScheduler
from .serialization import deserialize_notification, serialize_notification

__all__ = [
    "InMemoryNotificationChannel",
    "InboxConsumer",
    "Message",
    "MessageHandler",
    "NotificationChannel",
    "NotificationScheduler",
    "deserialize_notification",
    "render_message",
    "serialize_notification",
]
