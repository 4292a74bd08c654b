"""SQLAlchemy model for the user profile table."""

from sqlalchemy import Column, DateTime, Float, Integer, String, func
from sqlalchemy.orm import relationship

from geoevents.infrastructure.database import Base


class UserModel(Base):
    """Database representation of a user and their home location."""

    __tablename__ = "user_profile"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String(50), nullable=False, unique=True)
    email = Column(String(120), nullable=False, unique=True, index=True)
    latitude = Column(Float, nullable=True, index=True)
    longitude = Column(Float, nullable=True, index=True)
    preferred_language = Column(String(10), nullable=False, default="en")
    created_at = Column(DateTime, nullable=False, server_default=func.now())
    updated_at = Column(DateTime, nullable=True, onupdate=func.now())

    preferences = relationship(
        "UserCategoryPreferenceModel",
        cascade="all, delete-orphan",
        passive_deletes=True,
        lazy="selectin",
    )


__all__ = ["UserModel"]
