"""Persistence layer for user profiles and category preferences."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from sqlalchemy import select

from geoevents.domain.entities import UserProfile
from geoevents.domain.geo import GeoPoint
from geoevents.infrastructure.models import UserCategoryPreferenceModel, UserModel
from geoevents.utils import ensure_app_timezone

from .base import SQLAlchemyRepository
from .event_repository import EventRepository


class UserProfileRepository(SQLAlchemyRepository):
    """Provide CRUD operations for :class:`UserProfile` entities."""

    def get(self, user_id: int) -> UserProfile | None:
        model = self._get_model(user_id)
        return self.to_entity(model) if model else None

    def get_by_email(self, email: str) -> UserProfile | None:
        model = self._execute(
            select(UserModel).where(UserModel.email == email)
        ).scalar_one_or_none()
        return self.to_entity(model) if model else None

    def get_map_by_ids(self, user_ids: Sequence[int]) -> dict[int, UserProfile]:
        if not user_ids:
            return {}
        unique_ids = sorted({int(user_id) for user_id in user_ids})
        models = self._execute(
            select(UserModel).where(UserModel.id.in_(unique_ids))
        ).scalars()
        return {model.id: self.to_entity(model) for model in models}

    def create(
        self,
        *,
        username: str,
        email: str,
        location: GeoPoint | None = None,
        preferred_language: str = "en",
        category_ids: Iterable[int] = (),
    ) -> UserProfile:
        wanted = sorted(set(category_ids))
        EventRepository(self.session).ensure_categories_exist(wanted)
        model = UserModel(
            username=username,
            email=email,
            latitude=location.latitude if location else None,
            longitude=location.longitude if location else None,
            preferred_language=preferred_language,
        )
        model.preferences = [
            UserCategoryPreferenceModel(category_id=category_id) for category_id in wanted
        ]
        self.session.add(model)
        self._commit()
        self.session.refresh(model)
        return self.to_entity(model)

    def update_location(self, user_id: int, location: GeoPoint | None) -> UserProfile:
        model = self._require_model(user_id)
        model.latitude = location.latitude if location else None
        model.longitude = location.longitude if location else None
        self.session.add(model)
        self._commit()
        self.session.refresh(model)
        return self.to_entity(model)

    def replace_preferences(self, user_id: int, category_ids: Iterable[int]) -> UserProfile:
        """Replace the stored preference set in a single transaction."""

        wanted = set(category_ids)
        EventRepository(self.session).ensure_categories_exist(wanted)
        model = self._require_model(user_id)
        model.preferences = [
            preference for preference in model.preferences if preference.category_id in wanted
        ]
        present = {preference.category_id for preference in model.preferences}
        for category_id in sorted(wanted - present):
            model.preferences.append(UserCategoryPreferenceModel(category_id=category_id))
        self.session.add(model)
        self._commit()
        self.session.refresh(model)
        return self.to_entity(model)

    def _get_model(self, user_id: int) -> UserModel | None:
        return self._execute(
            select(UserModel).where(UserModel.id == user_id)
        ).scalar_one_or_none()

    def _require_model(self, user_id: int) -> UserModel:
        model = self._get_model(user_id)
        if model is None:
            msg = f"User with id {user_id} not found"
            raise ValueError(msg)
        return model

    @staticmethod
    def to_entity(model: UserModel) -> UserProfile:
        location = None
        if model.latitude is not None and model.longitude is not None:
            location = GeoPoint(latitude=model.latitude, longitude=model.longitude)
        return UserProfile(
            id=model.id,
            username=model.username,
            email=model.email,
            location=location,
            category_preferences=frozenset(
                preference.category_id for preference in model.preferences
            ),
            preferred_language=model.preferred_language,
            created_at=ensure_app_timezone(model.created_at),
        )


__all__ = ["UserProfileRepository"]
