"""Persistence helpers for favorite (saved) events."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import delete, func, select

from geoevents.domain.entities import Event, PageRequest
from geoevents.infrastructure.models import EventModel, SavedEventModel
from geoevents.utils import ensure_app_naive_datetime, ensure_app_timezone, now_in_app_timezone

from .base import SQLAlchemyRepository
from .event_repository import EventRepository


class SavedEventRepository(SQLAlchemyRepository):
    """Store which users saved which events."""

    def save(self, user_id: int, event_id: int) -> bool:
        """Save ``event_id`` for ``user_id``; return ``False`` when already saved."""

        existing = self.session.get(SavedEventModel, (user_id, event_id))
        if existing is not None:
            return False
        self.session.add(
            SavedEventModel(
                user_id=user_id,
                event_id=event_id,
                created_at=ensure_app_naive_datetime(now_in_app_timezone()),
            )
        )
        self._commit()
        return True

    def remove(self, user_id: int, event_id: int) -> bool:
        result = self._execute(
            delete(SavedEventModel).where(
                SavedEventModel.user_id == user_id,
                SavedEventModel.event_id == event_id,
            )
        )
        self._commit()
        return bool(result.rowcount)

    def list_user_ids(self, event_id: int) -> set[int]:
        return set(
            self._execute(
                select(SavedEventModel.user_id).where(SavedEventModel.event_id == event_id)
            ).scalars()
        )

    def list_for_user(
        self, user_id: int, page: PageRequest
    ) -> tuple[list[tuple[Event, datetime | None]], int]:
        """Return one page of saved events (most recent first) and the total."""

        statement = (
            select(EventModel, SavedEventModel.created_at)
            .join(SavedEventModel, SavedEventModel.event_id == EventModel.id)
            .where(SavedEventModel.user_id == user_id)
            .order_by(SavedEventModel.created_at.desc(), EventModel.id.desc())
            .offset(page.offset)
            .limit(page.page_size)
        )
        rows = [
            (EventRepository.to_entity(model), ensure_app_timezone(saved_at))
            for model, saved_at in self._execute(statement).all()
        ]
        total = self._execute(
            select(func.count())
            .select_from(SavedEventModel)
            .where(SavedEventModel.user_id == user_id)
        ).scalar_one()
        return rows, int(total)


__all__ = ["SavedEventRepository"]
