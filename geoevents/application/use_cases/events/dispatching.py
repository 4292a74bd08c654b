"""Run notification dispatch after an event write has committed."""

from __future__ import annotations

import logging
from collections.abc import Callable

from geoevents.application.services import DispatchReport
from geoevents.domain.entities import Event
from geoevents.domain.errors import GeoEventsError, NotificationChannelUnavailable

logger = logging.getLogger(__name__)


def dispatch_after_commit(
    action: Callable[[Event], DispatchReport], event: Event
) -> DispatchReport | None:
    """Invoke ``action`` and log dispatch failures instead of raising them.

    The event is already stored at this point; neither a channel outage nor a
    failed recipient lookup may be reported as a failed write. A partial
    dispatch still returns its report.
    """

    try:
        return action(event)
    except NotificationChannelUnavailable as exc:
        logger.warning("Notification dispatch incomplete for event %s: %s", event.id, exc)
        return exc.report
    except GeoEventsError:
        logger.exception("Notification dispatch failed for event %s", event.id)
        return None


__all__ = ["dispatch_after_commit"]
