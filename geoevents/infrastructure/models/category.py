"""SQLAlchemy models for categories and their link tables."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text

from geoevents.infrastructure.database import Base
from geoevents.utils import now_in_app_naive_datetime


class CategoryModel(Base):
    """Database representation of an event category."""

    __tablename__ = "category"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False, unique=True)
    description = Column(Text, nullable=True)


class EventCategoryModel(Base):
    """Many-to-many link between events and categories."""

    __tablename__ = "event_category"

    event_id = Column(
        Integer, ForeignKey("event.id", ondelete="CASCADE"), primary_key=True
    )
    category_id = Column(
        Integer,
        ForeignKey("category.id", ondelete="CASCADE"),
        primary_key=True,
        index=True,
    )


class UserCategoryPreferenceModel(Base):
    """Category a user wants to hear about."""

    __tablename__ = "user_category_preference"

    user_id = Column(
        Integer, ForeignKey("user_profile.id", ondelete="CASCADE"), primary_key=True
    )
    category_id = Column(
        Integer,
        ForeignKey("category.id", ondelete="CASCADE"),
        primary_key=True,
        index=True,
    )
    created_at = Column(DateTime(), nullable=False, default=now_in_app_naive_datetime)


__all__ = ["CategoryModel", "EventCategoryModel", "UserCategoryPreferenceModel"]
