"""SQLAlchemy models for events and favorites."""

from sqlalchemy import Column, DateTime, Float, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import relationship

from geoevents.infrastructure.database import Base
from geoevents.utils import now_in_app_naive_datetime


class EventModel(Base):
    """Database representation of a geotagged event."""

    __tablename__ = "event"
    __table_args__ = (Index("ix_event_lat_lon", "latitude", "longitude"),)

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    latitude = Column(Float, nullable=False)
    longitude = Column(Float, nullable=False)
    address = Column(String(300), nullable=True)
    start_time = Column(DateTime(), nullable=False, index=True)
    end_time = Column(DateTime(), nullable=False)
    creator_id = Column(
        Integer,
        ForeignKey("user_profile.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    created_at = Column(DateTime(), nullable=False, default=now_in_app_naive_datetime)
    updated_at = Column(DateTime(), nullable=True)

    category_links = relationship(
        "EventCategoryModel",
        cascade="all, delete-orphan",
        passive_deletes=True,
        lazy="selectin",
    )
    saved_entries = relationship(
        "SavedEventModel",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    scheduled_notifications = relationship(
        "ScheduledNotificationModel",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )


class SavedEventModel(Base):
    """A user's favorite event."""

    __tablename__ = "saved_event"

    user_id = Column(
        Integer, ForeignKey("user_profile.id", ondelete="CASCADE"), primary_key=True
    )
    event_id = Column(
        Integer,
        ForeignKey("event.id", ondelete="CASCADE"),
        primary_key=True,
        index=True,
    )
    created_at = Column(DateTime(), nullable=False, default=now_in_app_naive_datetime)


__all__ = ["EventModel", "SavedEventModel"]
