"""Persistence helpers for inbox notifications."""

from __future__ import annotations

from typing import Iterable

from sqlalchemy import func, select, update

from geoevents.domain.entities import InboxNotification, NotificationKind, PageRequest
from geoevents.infrastructure.models import NotificationModel
from geoevents.utils import (
    ensure_app_naive_datetime,
    ensure_app_timezone,
    now_in_app_timezone,
)

from .base import SQLAlchemyRepository


class NotificationRepository(SQLAlchemyRepository):
    """Provide CRUD operations for :class:`InboxNotification` objects."""

    def create(self, notification: InboxNotification) -> InboxNotification:
        model = NotificationModel(
            user_id=notification.user_id,
            event_id=notification.event_id,
            kind=notification.kind.value,
            message=notification.message,
            payload=notification.payload or {},
            created_at=ensure_app_naive_datetime(
                notification.created_at or now_in_app_timezone()
            ),
            read_at=ensure_app_naive_datetime(notification.read_at),
        )
        self.session.add(model)
        self._commit()
        self.session.refresh(model)
        return self._to_entity(model)

    def list_for_user(
        self, user_id: int, page: PageRequest, *, unread_only: bool = False
    ) -> tuple[list[InboxNotification], int]:
        conditions = [NotificationModel.user_id == user_id]
        if unread_only:
            conditions.append(NotificationModel.read_at.is_(None))
        statement = (
            select(NotificationModel)
            .where(*conditions)
            .order_by(NotificationModel.created_at.desc(), NotificationModel.id.desc())
            .offset(page.offset)
            .limit(page.page_size)
        )
        items = [self._to_entity(model) for model in self._execute(statement).scalars()]
        total = self._execute(
            select(func.count()).select_from(NotificationModel).where(*conditions)
        ).scalar_one()
        return items, int(total)

    def count_unread(self, user_id: int) -> int:
        return int(
            self._execute(
                select(func.count())
                .select_from(NotificationModel)
                .where(
                    NotificationModel.user_id == user_id,
                    NotificationModel.read_at.is_(None),
                )
            ).scalar_one()
        )

    def mark_as_read(self, notification_ids: Iterable[int], *, user_id: int) -> int:
        ids = [notification_id for notification_id in notification_ids if notification_id is not None]
        if not ids:
            return 0
        result = self._execute(
            update(NotificationModel)
            .where(
                NotificationModel.id.in_(ids),
                NotificationModel.user_id == user_id,
                NotificationModel.read_at.is_(None),
            )
            .values(read_at=ensure_app_naive_datetime(now_in_app_timezone()))
        )
        self._commit()
        return int(result.rowcount or 0)

    def mark_all_as_read(self, user_id: int) -> int:
        result = self._execute(
            update(NotificationModel)
            .where(
                NotificationModel.user_id == user_id,
                NotificationModel.read_at.is_(None),
            )
            .values(read_at=ensure_app_naive_datetime(now_in_app_timezone()))
        )
        self._commit()
        return int(result.rowcount or 0)

    @staticmethod
    def _to_entity(model: NotificationModel) -> InboxNotification:
        return InboxNotification(
            id=model.id,
            user_id=model.user_id,
            event_id=model.event_id,
            kind=NotificationKind(model.kind),
            message=model.message,
            payload=model.payload or {},
            created_at=ensure_app_timezone(model.created_at),
            read_at=ensure_app_timezone(model.read_at),
        )


__all__ = ["NotificationRepository"]
