"""Persistence layer for events and their category links."""

from __future__ import annotations

from collections.abc import Iterable

from sqlalchemy import select

from geoevents.domain.entities import Event
from geoevents.domain.errors import InvalidCategoryIds
from geoevents.domain.geo import GeoPoint
from geoevents.infrastructure.models import CategoryModel, EventCategoryModel, EventModel
from geoevents.utils import (
    ensure_app_naive_datetime,
    ensure_app_timezone,
    now_in_app_timezone,
)

from .base import SQLAlchemyRepository


class EventRepository(SQLAlchemyRepository):
    """Provide CRUD operations for :class:`Event` objects.

    Writes touching an event and its category links are committed in a single
    transaction; a failure rolls every step back.
    """

    def get(self, event_id: int) -> Event | None:
        model = self._get_model(event_id)
        return self.to_entity(model) if model else None

    def create(self, event: Event) -> Event:
        self.ensure_categories_exist(event.category_ids)
        model = EventModel()
        self._apply_entity_to_model(model, event)
        model.created_at = ensure_app_naive_datetime(
            event.created_at or now_in_app_timezone()
        )
        model.category_links = [
            EventCategoryModel(category_id=category_id)
            for category_id in sorted(event.category_ids)
        ]
        self.session.add(model)
        self._commit()
        self.session.refresh(model)
        return self.to_entity(model)

    def update(self, event: Event, *, replace_categories: bool = True) -> Event:
        if event.id is None:
            raise ValueError("Event id is required for updates")
        model = self._get_model(event.id)
        if model is None:
            msg = f"Event with id {event.id} not found"
            raise ValueError(msg)
        if replace_categories:
            self.ensure_categories_exist(event.category_ids)
        self._apply_entity_to_model(model, event)
        model.updated_at = ensure_app_naive_datetime(
            event.updated_at or now_in_app_timezone()
        )
        if replace_categories:
            wanted = set(event.category_ids)
            model.category_links = [
                link for link in model.category_links if link.category_id in wanted
            ]
            present = {link.category_id for link in model.category_links}
            for category_id in sorted(wanted - present):
                model.category_links.append(EventCategoryModel(category_id=category_id))
        self.session.add(model)
        self._commit()
        self.session.refresh(model)
        return self.to_entity(model)

    def delete(self, event_id: int) -> bool:
        """Delete the event with its category links, favorites and pending reminders."""

        model = self._get_model(event_id)
        if model is None:
            return False
        self.session.delete(model)
        self._commit()
        return True

    def ensure_categories_exist(self, category_ids: Iterable[int]) -> None:
        wanted = set(category_ids)
        if not wanted:
            return
        found = set(
            self._execute(
                select(CategoryModel.id).where(CategoryModel.id.in_(sorted(wanted)))
            ).scalars()
        )
        missing = wanted - found
        if missing:
            ids = ", ".join(str(category_id) for category_id in sorted(missing))
            raise InvalidCategoryIds(f"Unknown category ids: {ids}")

    def _get_model(self, event_id: int) -> EventModel | None:
        return self._execute(
            select(EventModel).where(EventModel.id == event_id)
        ).scalar_one_or_none()

    @staticmethod
    def _apply_entity_to_model(model: EventModel, event: Event) -> None:
        model.title = event.title
        model.description = event.description
        model.latitude = event.location.latitude
        model.longitude = event.location.longitude
        model.address = event.address
        model.start_time = ensure_app_naive_datetime(event.start_time)
        model.end_time = ensure_app_naive_datetime(event.end_time)
        model.creator_id = event.creator_id

    @staticmethod
    def to_entity(model: EventModel) -> Event:
        return Event(
            id=model.id,
            title=model.title,
            description=model.description,
            location=GeoPoint(latitude=model.latitude, longitude=model.longitude),
            address=model.address,
            start_time=ensure_app_timezone(model.start_time),
            end_time=ensure_app_timezone(model.end_time),
            creator_id=model.creator_id,
            category_ids=frozenset(link.category_id for link in model.category_links),
            created_at=ensure_app_timezone(model.created_at),
            updated_at=ensure_app_timezone(model.updated_at),
        )


__all__ = ["EventRepository"]
