"""Publish match notifications and schedule event reminders."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any

from geoevents.domain.entities import (
    DeliveryStatus,
    Event,
    MatchNotification,
    NotificationKind,
    ScheduledNotification,
)
from geoevents.domain.errors import NotificationChannelUnavailable
from geoevents.infrastructure.notifications import (
    NotificationChannel,
    NotificationScheduler,
    serialize_notification,
)
from geoevents.utils import ensure_app_timezone, now_in_app_timezone

from .matching import InterestMatcher

logger = logging.getLogger(__name__)

REMINDER_OFFSETS: dict[NotificationKind, timedelta] = {
    NotificationKind.REMINDER_DAY: timedelta(hours=24),
    NotificationKind.REMINDER_HOUR: timedelta(hours=1),
}


@dataclass
class DispatchReport:
    """Outcome of one dispatch call."""

    event_id: int | None
    kind: NotificationKind
    recipients: frozenset[int] = frozenset()
    published: int = 0
    scheduled: int = 0
    failed: int = 0
    skipped_reminders: list[NotificationKind] = field(default_factory=list)

    @property
    def status(self) -> DeliveryStatus:
        if self.scheduled:
            return DeliveryStatus.SCHEDULED
        if self.published:
            return DeliveryStatus.PUBLISHED
        return DeliveryStatus.PENDING


class NotificationDispatcher:
    """Turn event changes into immediate notifications and delayed reminders.

    The dispatcher runs after the triggering write has committed. Each publish
    is attempted on its own and reminders are stored whatever the channel
    does; only once all of that is done is a failure surfaced, as a
    :class:`NotificationChannelUnavailable` whose ``report`` records what went
    through.
    """

    def __init__(
        self,
        matcher: InterestMatcher,
        channel: NotificationChannel,
        scheduler: NotificationScheduler,
        *,
        clock: Callable[[], datetime] = now_in_app_timezone,
    ) -> None:
        self._matcher = matcher
        self._channel = channel
        self._scheduler = scheduler
        self._clock = clock

    def publish(self, notification: MatchNotification) -> None:
        self._channel.publish(notification.topic, serialize_notification(notification))

    def schedule_at(
        self, instant: datetime, notification: MatchNotification
    ) -> ScheduledNotification:
        return self._scheduler.schedule_at(instant, notification)

    def notify_new_event(self, event: Event) -> DispatchReport:
        """Notify interested users now and schedule the day/hour reminders."""

        users = self._matcher.find_interested_users(event)
        recipients = frozenset(user.id for user in users)
        report = DispatchReport(
            event_id=event.id, kind=NotificationKind.NEW_EVENT, recipients=recipients
        )
        if not recipients:
            return report

        self._publish_all(recipients, event, NotificationKind.NEW_EVENT, report)

        payload = _event_payload(event)
        now = self._clock()
        start_time = ensure_app_timezone(event.start_time)
        entries: list[tuple[MatchNotification, datetime]] = []
        for kind, offset in REMINDER_OFFSETS.items():
            due_at = start_time - offset
            if due_at <= now:
                report.skipped_reminders.append(kind)
                continue
            entries.extend(
                (
                    MatchNotification(
                        user_id=user_id,
                        event_id=event.id,
                        kind=kind,
                        payload=payload,
                        scheduled_at=due_at,
                    ),
                    due_at,
                )
                for user_id in sorted(recipients)
            )
        try:
            report.scheduled = len(self._scheduler.schedule_many(entries))
        except NotificationChannelUnavailable as exc:
            raise NotificationChannelUnavailable(str(exc), report=report) from exc
        logger.info(
            "Event %s: published %s notifications, scheduled %s reminders",
            event.id,
            report.published,
            report.scheduled,
        )
        _raise_if_failed(report)
        return report

    def notify_event_update(self, event: Event) -> DispatchReport:
        """Tell users who saved ``event`` that it changed."""

        recipients = frozenset(self._matcher.find_saved_users(event.id))
        report = DispatchReport(
            event_id=event.id, kind=NotificationKind.EVENT_UPDATED, recipients=recipients
        )
        self._publish_all(recipients, event, NotificationKind.EVENT_UPDATED, report)
        if report.published:
            logger.info("Event %s: notified %s users of an update", event.id, report.published)
        _raise_if_failed(report)
        return report

    def _publish_all(
        self,
        user_ids: Iterable[int],
        event: Event,
        kind: NotificationKind,
        report: DispatchReport,
    ) -> None:
        payload = _event_payload(event)
        for user_id in sorted(user_ids):
            notification = MatchNotification(
                user_id=user_id, event_id=event.id, kind=kind, payload=payload
            )
            try:
                self.publish(notification)
            except NotificationChannelUnavailable:
                logger.warning(
                    "Could not publish %s for event %s to user %s",
                    kind.value,
                    event.id,
                    user_id,
                )
                report.failed += 1
            else:
                report.published += 1


def _raise_if_failed(report: DispatchReport) -> None:
    if report.failed:
        raise NotificationChannelUnavailable(
            f"{report.failed} of {len(report.recipients)} notifications for event "
            f"{report.event_id} were not published",
            report=report,
        )


def _event_payload(event: Event) -> dict[str, Any]:
    return {
        "title": event.title,
        "start_time": ensure_app_timezone(event.start_time).isoformat(),
        "latitude": event.location.latitude,
        "longitude": event.location.longitude,
        "address": event.address,
    }


__all__ = ["DispatchReport", "NotificationDispatcher", "REMINDER_OFFSETS"]
