"""Convert match notifications to and from channel messages."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from geoevents.domain.entities import MatchNotification, NotificationKind


def serialize_notification(
    notification: MatchNotification, *, scheduled_id: int | None = None
) -> dict[str, Any]:
    """Return a JSON-serializable representation of ``notification``."""

    payload = dict(notification.payload or {})
    _normalize_datetime_values(payload)
    message: dict[str, Any] = {
        "type": notification.kind.value,
        "user_id": notification.user_id,
        "event_id": notification.event_id,
        "payload": payload,
        "scheduled_at": notification.scheduled_at.isoformat()
        if notification.scheduled_at
        else None,
    }
    if scheduled_id is not None:
        message["scheduled_id"] = scheduled_id
    return message


def deserialize_notification(message: dict[str, Any]) -> MatchNotification:
    """Rebuild a :class:`MatchNotification` from a channel message."""

    try:
        kind = NotificationKind(message["type"])
        user_id = int(message["user_id"])
        event_id = int(message["event_id"])
    except (KeyError, TypeError, ValueError) as exc:
        raise ValueError(f"Malformed notification message: {message!r}") from exc
    scheduled_at = message.get("scheduled_at")
    return MatchNotification(
        user_id=user_id,
        event_id=event_id,
        kind=kind,
        payload=dict(message.get("payload") or {}),
        scheduled_at=datetime.fromisoformat(scheduled_at) if scheduled_at else None,
    )


def _normalize_datetime_values(data: dict[str, Any] | list[Any]) -> None:
    """Convert ``datetime`` instances nested inside ``data`` into ISO strings."""

    if isinstance(data, dict):
        for key, value in data.items():
            if isinstance(value, datetime):
                data[key] = value.isoformat()
            elif isinstance(value, (dict, list)):
                _normalize_datetime_values(value)
    elif isinstance(data, list):
        for index, item in enumerate(data):
            if isinstance(item, datetime):
                data[index] = item.isoformat()
            elif isinstance(item, (dict, list)):
                _normalize_datetime_values(item)


__all__ = ["deserialize_notification", "serialize_notification"]
