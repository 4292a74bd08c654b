"""Find the users who should hear about an event."""

from __future__ import annotations

import logging
from collections.abc import Callable

from sqlalchemy.orm import Session

from geoevents.domain.entities import Event, UserProfile
from geoevents.infrastructure.database import session_scope
from geoevents.infrastructure.repositories import SavedEventRepository
from geoevents.infrastructure.spatial import SpatialEventStore

logger = logging.getLogger(__name__)


class InterestMatcher:
    """Match events against user locations and category preferences."""

    def __init__(
        self,
        session_factory: Callable[[], Session],
        *,
        notification_radius_km: float,
    ) -> None:
        self._session_factory = session_factory
        self._notification_radius_km = notification_radius_km

    @property
    def notification_radius_km(self) -> float:
        return self._notification_radius_km

    def find_interested_users(self, event: Event) -> set[UserProfile]:
        """Users near ``event`` who prefer at least one of its categories.

        The event creator and users without a stored location never match.
        """

        if not event.category_ids:
            return set()
        with session_scope(self._session_factory) as session:
            users = SpatialEventStore(session).find_users_within_radius(
                event.location,
                self._notification_radius_km,
                category_ids=event.category_ids,
                exclude_user_id=event.creator_id,
            )
        logger.debug("Event %s matched %s interested users", event.id, len(users))
        return set(users)

    def find_saved_users(self, event_id: int) -> set[int]:
        with session_scope(self._session_factory) as session:
            return SavedEventRepository(session).list_user_ids(event_id)


__all__ = ["InterestMatcher"]
