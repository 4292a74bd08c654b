"""Validation helpers shared by the event use cases."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from geoevents.application.services.search_params import normalize_category_ids, parse_instant
from geoevents.domain.errors import InvalidEventSchedule, ValidationError
from geoevents.utils import ensure_app_timezone


def require_instant(value: Any, name: str) -> datetime:
    instant = parse_instant(value, name=name)
    if instant is None:
        raise InvalidEventSchedule(f"{name} is required")
    return instant


def ensure_schedule(start_time: datetime, end_time: datetime) -> None:
    """Reject events that end before or when they start."""

    if ensure_app_timezone(start_time) >= ensure_app_timezone(end_time):
        raise InvalidEventSchedule("end_time must be after start_time")


def require_title(title: Any) -> str:
    cleaned = str(title).strip() if title is not None else ""
    if not cleaned:
        raise ValidationError("title is required")
    return cleaned


def category_set(value: Any) -> frozenset[int]:
    return normalize_category_ids(value) or frozenset()


__all__ = ["category_set", "ensure_schedule", "require_instant", "require_title"]
