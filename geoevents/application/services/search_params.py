"""Normalization of raw search parameters.

Every helper raises a :class:`~geoevents.domain.errors.ValidationError`
subclass so malformed input is rejected before any store access.
"""

from __future__ import annotations

import math
from collections.abc import Iterable
from datetime import date, datetime, time
from decimal import Decimal
from numbers import Real
from typing import Any

from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from geoevents.domain.errors import (
    InvalidCategoryIds,
    InvalidDateRange,
    InvalidPagination,
    InvalidSearchRadius,
)
from geoevents.domain.entities import PageRequest
from geoevents.utils import ensure_app_timezone

_DATETIME_ADAPTER = TypeAdapter(datetime)


def normalize_radius(value: Any, *, default: float) -> float:
    """Return ``value`` as a finite positive radius in kilometres."""

    if value is None or (isinstance(value, str) and not value.strip()):
        return float(default)
    if isinstance(value, bool) or not isinstance(value, (Real, Decimal, str)):
        raise InvalidSearchRadius("radius must be a number")
    try:
        radius = float(value)
    except (TypeError, ValueError) as exc:
        raise InvalidSearchRadius("radius must be a number") from exc
    if not math.isfinite(radius) or radius <= 0:
        raise InvalidSearchRadius("radius must be a finite positive number")
    return radius


def normalize_category_ids(value: Any) -> frozenset[int] | None:
    """Parse category ids from an iterable or a comma separated string.

    Returns ``None`` when no categories were given so the filter stays unset.
    """

    if value is None:
        return None
    if isinstance(value, str):
        items: Iterable[Any] = [item.strip() for item in value.split(",") if item.strip()]
    elif isinstance(value, (int, bool)):
        items = [value]
    elif isinstance(value, Iterable):
        items = value
    else:
        raise InvalidCategoryIds("category ids must be a list of positive integers")

    parsed: set[int] = set()
    for item in items:
        if isinstance(item, bool):
            raise InvalidCategoryIds("category ids must be positive integers")
        if isinstance(item, int):
            category_id = item
        elif isinstance(item, str) and item.strip().isdigit():
            category_id = int(item.strip())
        else:
            raise InvalidCategoryIds(f"Invalid category id: {item!r}")
        if category_id <= 0:
            raise InvalidCategoryIds(f"Invalid category id: {item!r}")
        parsed.add(category_id)
    return frozenset(parsed) or None


def parse_instant(value: Any, *, name: str, end_of_day: bool = False) -> datetime | None:
    """Parse ``value`` into an aware datetime in the application timezone.

    Plain dates cover the whole day: midnight for a start bound and the last
    microsecond for an end bound.
    """

    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    if isinstance(value, bool):
        raise InvalidDateRange(f"{name} must be a date or datetime")
    if isinstance(value, date) and not isinstance(value, datetime):
        return ensure_app_timezone(datetime.combine(value, time.max if end_of_day else time.min))
    if isinstance(value, str):
        text = value.strip()
        try:
            day = date.fromisoformat(text)
        except ValueError:
            pass
        else:
            return ensure_app_timezone(datetime.combine(day, time.max if end_of_day else time.min))
        value = text
    try:
        parsed = _DATETIME_ADAPTER.validate_python(value)
    except PydanticValidationError as exc:
        raise InvalidDateRange(f"{name} is not a valid date: {value!r}") from exc
    return ensure_app_timezone(parsed)


def normalize_date_range(start: Any, end: Any) -> tuple[datetime | None, datetime | None]:
    start_date = parse_instant(start, name="start_date")
    end_date = parse_instant(end, name="end_date", end_of_day=True)
    if start_date is not None and end_date is not None and start_date > end_date:
        raise InvalidDateRange("start_date must not be after end_date")
    return start_date, end_date


def normalize_page(page: Any, page_size: Any, *, default_size: int, max_size: int) -> PageRequest:
    """Build a :class:`PageRequest`, filling in the default page size."""

    page_value = 1 if page is None else _coerce_positive_int(page, "page")
    size_value = default_size if page_size is None else _coerce_positive_int(page_size, "page_size")
    if size_value > max_size:
        raise InvalidPagination(f"page_size must not exceed {max_size}")
    return PageRequest(page_value, size_value)


def normalize_text(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _coerce_positive_int(value: Any, name: str) -> int:
    if isinstance(value, bool):
        raise InvalidPagination(f"{name} must be a positive integer")
    if isinstance(value, str) and value.strip().isdigit():
        value = int(value.strip())
    if not isinstance(value, int) or value <= 0:
        raise InvalidPagination(f"{name} must be a positive integer")
    return value


__all__ = [
    "normalize_category_ids",
    "normalize_date_range",
    "normalize_page",
    "normalize_radius",
    "normalize_text",
    "parse_instant",
]
