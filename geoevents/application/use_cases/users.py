"""Use cases for user profiles: home location and category preferences."""

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy.orm import Session

from geoevents.application.services.search_params import normalize_category_ids
from geoevents.domain.entities import UserProfile
from geoevents.domain.errors import UserNotFound, ValidationError
from geoevents.domain.geo import GeoPoint
from geoevents.infrastructure.repositories import UserProfileRepository

logger = logging.getLogger(__name__)


def register_user(
    session: Session,
    *,
    username: str,
    email: str,
    latitude: Any = None,
    longitude: Any = None,
    preferred_language: str = "en",
    category_ids: Any = None,
) -> UserProfile:
    """Create a user profile, optionally with a home location and preferences."""

    username = (username or "").strip()
    email = (email or "").strip().lower()
    if not username:
        raise ValidationError("username is required")
    if not email or "@" not in email:
        raise ValidationError("A valid email is required")

    location = _optional_location(latitude, longitude)
    repository = UserProfileRepository(session)
    if repository.get_by_email(email) is not None:
        raise ValidationError("A user with this email already exists")

    user = repository.create(
        username=username,
        email=email,
        location=location,
        preferred_language=preferred_language,
        category_ids=normalize_category_ids(category_ids) or (),
    )
    logger.info("Registered user %s", user.id)
    return user


def get_user_profile(session: Session, user_id: int) -> UserProfile:
    user = UserProfileRepository(session).get(user_id)
    if user is None:
        raise UserNotFound(f"User with id {user_id} not found")
    return user


def update_user_location(
    session: Session, user_id: int, *, latitude: Any, longitude: Any
) -> UserProfile:
    """Set (or clear, when both coordinates are ``None``) the user's home location."""

    location = _optional_location(latitude, longitude)
    get_user_profile(session, user_id)
    return UserProfileRepository(session).update_location(user_id, location)


def set_category_preferences(session: Session, user_id: int, category_ids: Any) -> UserProfile:
    """Replace the user's category preferences atomically."""

    wanted = normalize_category_ids(category_ids) or frozenset()
    get_user_profile(session, user_id)
    return UserProfileRepository(session).replace_preferences(user_id, wanted)


def _optional_location(latitude: Any, longitude: Any) -> GeoPoint | None:
    if latitude is None and longitude is None:
        return None
    return GeoPoint.create(latitude, longitude)


__all__ = [
    "get_user_profile",
    "register_user",
    "set_category_preferences",
    "update_user_location",
]
