"""Domain specific exception classes.

Every error carries a ``status_class`` so the calling layer can map it to a
client (4xx) or server (5xx) response without inspecting the concrete type.
"""

from __future__ import annotations

from typing import Any


class GeoEventsError(Exception):
    """Base error raised by the search, matching and notification core."""

    status_class = "server"


class ValidationError(GeoEventsError, ValueError):
    """Input rejected before reaching the store."""

    status_class = "client"


class InvalidCoordinate(ValidationError):
    """Latitude/longitude is out of range, non-finite or not numeric."""


class InvalidDateRange(ValidationError):
    """A date could not be parsed or ``start`` comes after ``end``."""


class InvalidPagination(ValidationError):
    """Page or page size is not a positive integer."""


class InvalidSearchRadius(ValidationError):
    """Search radius is not a finite positive number."""


class InvalidCategoryIds(ValidationError):
    """Category identifiers are not positive integers."""


class InvalidEventSchedule(ValidationError):
    """An event would end before (or when) it starts."""


class LocationRequired(GeoEventsError):
    """No anchor could be resolved for a location-dependent operation."""

    status_class = "client"


class NotFoundError(GeoEventsError):
    """The requested resource does not exist."""

    status_class = "client"


class EventNotFound(NotFoundError):
    """No event with the given identifier."""


class UserNotFound(NotFoundError):
    """No user with the given identifier."""


class PermissionDenied(GeoEventsError):
    """The acting user is not allowed to mutate the resource."""

    status_class = "client"


class NotificationChannelUnavailable(GeoEventsError):
    """The publish or schedule primitive could not be reached.

    When raised by the dispatcher, ``report`` holds the work that did go
    through before the failure was surfaced.
    """

    def __init__(self, message: str = "", *, report: Any = None) -> None:
        super().__init__(message)
        self.report = report


class PersistenceError(GeoEventsError):
    """The store failed; the original exception is kept as ``__cause__``."""


class OperationCancelled(GeoEventsError):
    """The caller's deadline expired or the operation was cancelled."""


__all__ = [
    "GeoEventsError",
    "ValidationError",
    "InvalidCoordinate",
    "InvalidDateRange",
    "InvalidPagination",
    "InvalidSearchRadius",
    "InvalidCategoryIds",
    "InvalidEventSchedule",
    "LocationRequired",
    "NotFoundError",
    "EventNotFound",
    "UserNotFound",
    "PermissionDenied",
    "NotificationChannelUnavailable",
    "PersistenceError",
    "OperationCancelled",
]
