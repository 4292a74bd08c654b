"""SQLAlchemy models for scheduled and delivered notifications."""

from sqlalchemy import Column, DateTime, ForeignKey, Index, Integer, JSON, String, Text

from geoevents.infrastructure.database import Base
from geoevents.utils import now_in_app_naive_datetime


class ScheduledNotificationModel(Base):
    """Notification waiting for its due time before being published."""

    __tablename__ = "scheduled_notification"
    __table_args__ = (Index("ix_scheduled_notification_status_due", "status", "due_at"),)

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(
        Integer,
        ForeignKey("user_profile.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    event_id = Column(
        Integer,
        ForeignKey("event.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    kind = Column(String(30), nullable=False)
    payload = Column(JSON, nullable=False, default=dict)
    due_at = Column(DateTime(), nullable=False)
    status = Column(String(20), nullable=False)
    created_at = Column(DateTime(), nullable=False, default=now_in_app_naive_datetime)
    published_at = Column(DateTime(), nullable=True)
    consumed_at = Column(DateTime(), nullable=True)


class NotificationModel(Base):
    """Notification delivered to a user's inbox."""

    __tablename__ = "notification"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(
        Integer,
        ForeignKey("user_profile.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    event_id = Column(
        Integer, ForeignKey("event.id", ondelete="SET NULL"), nullable=True, index=True
    )
    kind = Column(String(30), nullable=False)
    message = Column(Text, nullable=False)
    payload = Column(JSON, nullable=False, default=dict)
    created_at = Column(DateTime(), nullable=False, default=now_in_app_naive_datetime)
    read_at = Column(DateTime(), nullable=True)


__all__ = ["NotificationModel", "ScheduledNotificationModel"]
