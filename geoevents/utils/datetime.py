"""Timezone handling for event schedules and stored timestamps.

Domain objects always carry aware datetimes. Columns store the same instant as
a naive value in ``APP_TIMEZONE`` so SQL comparisons against ``start_time`` and
``end_time`` never mix offsets.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone, tzinfo
from functools import lru_cache

from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from geoevents.config import get_settings

logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def get_app_timezone() -> tzinfo:
    """Timezone used for naive inputs and for stored timestamps.

    An unknown ``APP_TIMEZONE`` name falls back to UTC with a warning.
    """

    name = (get_settings().app_timezone or "").strip()
    if not name or name.upper() == "UTC":
        return timezone.utc
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning("Unknown APP_TIMEZONE %r, using UTC", name)
        return timezone.utc


def now_in_app_timezone() -> datetime:
    return datetime.now(tz=get_app_timezone())


def now_in_app_naive_datetime() -> datetime:
    """Current time as it is written to ``created_at`` columns."""

    return now_in_app_timezone().replace(tzinfo=None)


def ensure_app_timezone(value: datetime | None) -> datetime | None:
    """Express ``value`` in the app timezone; naive values are taken as local."""

    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=get_app_timezone())
    return value.astimezone(get_app_timezone())


def ensure_app_naive_datetime(value: datetime | None) -> datetime | None:
    """Column representation of ``value``: app-local wall time, no offset."""

    if value is None:
        return None
    return ensure_app_timezone(value).replace(tzinfo=None)
