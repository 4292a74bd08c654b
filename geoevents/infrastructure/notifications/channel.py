"""Publish/subscribe channel used to hand notifications to their consumers."""

from __future__ import annotations

import asyncio
import copy
import inspect
import logging
import threading
from abc import ABC, abstractmethod
from collections import defaultdict
from collections.abc import Awaitable, Callable
from typing import Any, DefaultDict, Union

import anyio
from anyio import from_thread

from geoevents.domain.errors import NotificationChannelUnavailable

logger = logging.getLogger(__name__)

Message = dict[str, Any]
MessageHandler = Union[
    Callable[[str, Message], None],
    Callable[[str, Message], Awaitable[None]],
]


class NotificationChannel(ABC):
    """Fire-and-forget topic based messaging."""

    @abstractmethod
    def publish(self, topic: str, message: Message) -> None:
        """Deliver ``message`` to the subscribers of ``topic``.

        Raises :class:`NotificationChannelUnavailable` when the channel cannot
        accept messages.
        """

    @abstractmethod
    def subscribe(self, topic: str, handler: MessageHandler) -> Callable[[], None]:
        """Register ``handler`` for ``topic`` and return an unsubscribe callback."""

    def close(self) -> None:
        """Release the resources held by the channel."""


class InMemoryNotificationChannel(NotificationChannel):
    """Process-local channel delivering messages to handlers grouped by topic.

    A failing handler is logged and does not affect the publisher or the other
    subscribers. Coroutine handlers are scheduled on the running event loop
    when there is one.
    """

    def __init__(self) -> None:
        self._handlers: DefaultDict[str, list[MessageHandler]] = defaultdict(list)
        self._lock = threading.Lock()
        self._closed = False

    def publish(self, topic: str, message: Message) -> None:
        with self._lock:
            if self._closed:
                raise NotificationChannelUnavailable("Notification channel is closed")
            handlers = list(self._handlers.get(topic, ()))
        if not handlers:
            logger.debug("No subscribers for topic %s", topic)
        for handler in handlers:
            try:
                self._deliver(handler, topic, copy.deepcopy(message))
            except Exception:
                logger.exception("Subscriber for topic %s failed", topic)

    def subscribe(self, topic: str, handler: MessageHandler) -> Callable[[], None]:
        with self._lock:
            if self._closed:
                raise NotificationChannelUnavailable("Notification channel is closed")
            self._handlers[topic].append(handler)

        def unsubscribe() -> None:
            with self._lock:
                handlers = self._handlers.get(topic)
                if handlers is None:
                    return
                if handler in handlers:
                    handlers.remove(handler)
                if not handlers:
                    self._handlers.pop(topic, None)

        return unsubscribe

    def close(self) -> None:
        with self._lock:
            self._closed = True
            self._handlers.clear()

    @property
    def closed(self) -> bool:
        return self._closed

    @staticmethod
    def _deliver(handler: MessageHandler, topic: str, message: Message) -> None:
        if not inspect.iscoroutinefunction(handler):
            handler(topic, message)
            return
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            try:
                from_thread.run(handler, topic, message)
            except RuntimeError:
                # Neither inside an event loop nor in an AnyIO worker thread.
                anyio.run(handler, topic, message)
        else:
            loop.create_task(handler(topic, message))


__all__ = [
    "InMemoryNotificationChannel",
    "Message",
    "MessageHandler",
    "NotificationChannel",
]
