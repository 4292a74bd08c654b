"""Persistence helpers for notifications scheduled for later delivery."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime

from sqlalchemy import select, update

from geoevents.domain.entities import (
    DeliveryStatus,
    MatchNotification,
    NotificationKind,
    ScheduledNotification,
)
from geoevents.infrastructure.models import ScheduledNotificationModel
from geoevents.utils import (
    ensure_app_naive_datetime,
    ensure_app_timezone,
    now_in_app_timezone,
)

from .base import SQLAlchemyRepository


class ScheduledNotificationRepository(SQLAlchemyRepository):
    """Durable queue of notifications keyed by their due time."""

    def create_many(
        self, entries: Sequence[tuple[MatchNotification, datetime]]
    ) -> list[ScheduledNotification]:
        """Persist every ``(notification, due_at)`` pair in one transaction."""

        if not entries:
            return []
        now = ensure_app_naive_datetime(now_in_app_timezone())
        models = [
            ScheduledNotificationModel(
                user_id=notification.user_id,
                event_id=notification.event_id,
                kind=notification.kind.value,
                payload=notification.payload or {},
                due_at=ensure_app_naive_datetime(due_at),
                status=DeliveryStatus.SCHEDULED.value,
                created_at=now,
            )
            for notification, due_at in entries
        ]
        self.session.add_all(models)
        self._commit()
        for model in models:
            self.session.refresh(model)
        return [self._to_entity(model) for model in models]

    def get(self, scheduled_id: int) -> ScheduledNotification | None:
        model = self.session.get(ScheduledNotificationModel, scheduled_id)
        return self._to_entity(model) if model else None

    def list_due(self, now: datetime, *, limit: int | None = None) -> list[ScheduledNotification]:
        statement = (
            select(ScheduledNotificationModel)
            .where(
                ScheduledNotificationModel.status == DeliveryStatus.SCHEDULED.value,
                ScheduledNotificationModel.due_at <= ensure_app_naive_datetime(now),
            )
            .order_by(ScheduledNotificationModel.due_at, ScheduledNotificationModel.id)
        )
        if limit is not None:
            statement = statement.limit(limit)
        return [self._to_entity(model) for model in self._execute(statement).scalars()]

    def list_for_event(self, event_id: int) -> list[ScheduledNotification]:
        statement = (
            select(ScheduledNotificationModel)
            .where(ScheduledNotificationModel.event_id == event_id)
            .order_by(ScheduledNotificationModel.due_at, ScheduledNotificationModel.id)
        )
        return [self._to_entity(model) for model in self._execute(statement).scalars()]

    def mark_published(self, scheduled_id: int, *, at: datetime) -> bool:
        return self._transition(
            scheduled_id,
            expected=DeliveryStatus.SCHEDULED,
            target=DeliveryStatus.PUBLISHED,
            values={"published_at": ensure_app_naive_datetime(at)},
        )

    def release(self, scheduled_id: int) -> bool:
        """Return a claimed entry to the queue so a later sweep retries it."""

        return self._transition(
            scheduled_id,
            expected=DeliveryStatus.PUBLISHED,
            target=DeliveryStatus.SCHEDULED,
            values={"published_at": None},
        )

    def mark_consumed(self, scheduled_id: int, *, at: datetime) -> bool:
        return self._transition(
            scheduled_id,
            expected=DeliveryStatus.PUBLISHED,
            target=DeliveryStatus.CONSUMED,
            values={"consumed_at": ensure_app_naive_datetime(at)},
        )

    def _transition(
        self,
        scheduled_id: int,
        *,
        expected: DeliveryStatus,
        target: DeliveryStatus,
        values: dict[str, object],
    ) -> bool:
        result = self._execute(
            update(ScheduledNotificationModel)
            .where(
                ScheduledNotificationModel.id == scheduled_id,
                ScheduledNotificationModel.status == expected.value,
            )
            .values(status=target.value, **values)
        )
        self._commit()
        return bool(result.rowcount)

    @staticmethod
    def _to_entity(model: ScheduledNotificationModel) -> ScheduledNotification:
        due_at = ensure_app_timezone(model.due_at)
        return ScheduledNotification(
            id=model.id,
            notification=MatchNotification(
                user_id=model.user_id,
                event_id=model.event_id,
                kind=NotificationKind(model.kind),
                payload=model.payload or {},
                scheduled_at=due_at,
            ),
            due_at=due_at,
            status=DeliveryStatus(model.status),
            created_at=ensure_app_timezone(model.created_at),
            published_at=ensure_app_timezone(model.published_at),
        )


__all__ = ["ScheduledNotificationRepository"]
