"""Tests for immediate notifications and reminder scheduling."""

from __future__ import annotations

from datetime import timedelta

import pytest

from geoevents.application.services import NotificationDispatcher
from geoevents.domain.entities import DeliveryStatus, NotificationKind
from geoevents.domain.errors import NotificationChannelUnavailable
from geoevents.domain.geo import GeoPoint
from geoevents.infrastructure.notifications import (
    InMemoryNotificationChannel,
    NotificationScheduler,
)
from geoevents.infrastructure.repositories import (
    EventRepository,
    SavedEventRepository,
    ScheduledNotificationRepository,
)

from .conftest import FIXED_NOW

NEW_YORK = GeoPoint(40.7128, -74.0060)


class FailingOnNthPublish(InMemoryNotificationChannel):
    """Channel that drops exactly one publish, counted from 1."""

    def __init__(self, fail_on: int) -> None:
        super().__init__()
        self._fail_on = fail_on
        self._calls = 0

    def publish(self, topic, message) -> None:
        self._calls += 1
        if self._calls == self._fail_on:
            raise NotificationChannelUnavailable("broker dropped the connection")
        super().publish(topic, message)


@pytest.fixture()
def interested_setup(make_category, make_user):
    music = make_category("music")
    users = [make_user(GeoPoint(40.72, -74.0), (music.id,)) for _ in range(2)]
    return music, users


def test_new_event_publishes_and_schedules_both_reminders(
    session, dispatcher, published, interested_setup, make_event
) -> None:
    music, users = interested_setup
    start = FIXED_NOW + timedelta(days=3)
    event = make_event(NEW_YORK, (music.id,), start_time=start, title="Concert")

    report = dispatcher.notify_new_event(event)

    assert report.recipients == frozenset(user.id for user in users)
    assert report.published == 2
    assert report.scheduled == 4
    assert report.skipped_reminders == []
    assert report.status is DeliveryStatus.SCHEDULED
    assert [topic for topic, _ in published] == ["event:new", "event:new"]
    assert published[0][1]["payload"]["title"] == "Concert"

    scheduled = ScheduledNotificationRepository(session).list_for_event(event.id)
    due = {(entry.notification.user_id, entry.notification.kind): entry.due_at for entry in scheduled}
    for user in users:
        assert due[(user.id, NotificationKind.REMINDER_DAY)] == start - timedelta(hours=24)
        assert due[(user.id, NotificationKind.REMINDER_HOUR)] == start - timedelta(hours=1)
    assert {entry.status for entry in scheduled} == {DeliveryStatus.SCHEDULED}


def test_reminders_in_the_past_are_skipped(
    session, dispatcher, published, interested_setup, make_event
) -> None:
    music, _ = interested_setup
    event = make_event(NEW_YORK, (music.id,), start_time=FIXED_NOW + timedelta(hours=5))

    report = dispatcher.notify_new_event(event)

    assert report.published == 2
    assert report.scheduled == 2
    assert report.skipped_reminders == [NotificationKind.REMINDER_DAY]
    kinds = {
        entry.notification.kind
        for entry in ScheduledNotificationRepository(session).list_for_event(event.id)
    }
    assert kinds == {NotificationKind.REMINDER_HOUR}


def test_event_starting_within_the_hour_gets_no_reminders(
    session, dispatcher, interested_setup, make_event
) -> None:
    music, _ = interested_setup
    event = make_event(NEW_YORK, (music.id,), start_time=FIXED_NOW + timedelta(minutes=30))

    report = dispatcher.notify_new_event(event)

    assert report.scheduled == 0
    assert report.skipped_reminders == [NotificationKind.REMINDER_DAY, NotificationKind.REMINDER_HOUR]
    assert ScheduledNotificationRepository(session).list_for_event(event.id) == []


def test_no_interested_users_means_no_work(dispatcher, published, make_event) -> None:
    event = make_event(NEW_YORK)

    report = dispatcher.notify_new_event(event)

    assert report.recipients == frozenset()
    assert (report.published, report.scheduled) == (0, 0)
    assert report.status is DeliveryStatus.PENDING
    assert published == []


def test_event_update_notifies_saved_users_only(
    session, dispatcher, published, make_user, make_event
) -> None:
    event = make_event(NEW_YORK)
    saver = make_user()
    make_user(NEW_YORK)
    SavedEventRepository(session).save(saver.id, event.id)

    report = dispatcher.notify_event_update(event)

    assert report.kind is NotificationKind.EVENT_UPDATED
    assert report.recipients == frozenset({saver.id})
    assert report.scheduled == 0
    assert [topic for topic, _ in published] == ["event:update"]
    assert published[0][1]["user_id"] == saver.id


def test_channel_outage_still_stores_reminders(
    session, dispatcher, channel, interested_setup, make_event
) -> None:
    music, users = interested_setup
    event = make_event(NEW_YORK, (music.id,), start_time=FIXED_NOW + timedelta(days=3))
    channel.close()

    with pytest.raises(NotificationChannelUnavailable) as excinfo:
        dispatcher.notify_new_event(event)

    report = excinfo.value.report
    assert report.recipients == frozenset(user.id for user in users)
    assert (report.published, report.failed, report.scheduled) == (0, 2, 4)
    assert report.status is DeliveryStatus.SCHEDULED
    assert len(ScheduledNotificationRepository(session).list_for_event(event.id)) == 4
    assert EventRepository(session).get(event.id) is not None


def test_one_failed_publish_does_not_stop_the_others(
    session, session_factory, matcher, clock, make_category, make_user, make_event
) -> None:
    music = make_category("music")
    users = [make_user(GeoPoint(40.72, -74.0), (music.id,)) for _ in range(3)]
    channel = FailingOnNthPublish(2)
    received: list[int] = []
    channel.subscribe("event:new", lambda topic, message: received.append(message["user_id"]))
    dispatcher = NotificationDispatcher(
        matcher, channel, NotificationScheduler(session_factory, channel, clock=clock), clock=clock
    )
    event = make_event(NEW_YORK, (music.id,), start_time=FIXED_NOW + timedelta(days=3))

    with pytest.raises(NotificationChannelUnavailable) as excinfo:
        dispatcher.notify_new_event(event)

    ids = sorted(user.id for user in users)
    assert received == [ids[0], ids[2]]
    report = excinfo.value.report
    assert (report.published, report.failed, report.scheduled) == (2, 1, 6)
    scheduled = ScheduledNotificationRepository(session).list_for_event(event.id)
    assert {entry.notification.user_id for entry in scheduled} == set(ids)
    channel.close()


def test_update_to_a_closed_channel_reports_the_failures(
    session, dispatcher, channel, make_user, make_event
) -> None:
    event = make_event(NEW_YORK)
    saver = make_user()
    SavedEventRepository(session).save(saver.id, event.id)
    channel.close()

    with pytest.raises(NotificationChannelUnavailable) as excinfo:
        dispatcher.notify_event_update(event)

    report = excinfo.value.report
    assert report.recipients == frozenset({saver.id})
    assert (report.published, report.failed) == (0, 1)
    assert report.status is DeliveryStatus.PENDING


def test_subscriber_errors_do_not_reach_the_publisher(
    dispatcher, channel, interested_setup, make_event
) -> None:
    music, _ = interested_setup

    def broken(topic, message):
        raise RuntimeError("consumer crashed")

    channel.subscribe("event:new", broken)
    event = make_event(NEW_YORK, (music.id,))

    report = dispatcher.notify_new_event(event)

    assert report.published == 2
