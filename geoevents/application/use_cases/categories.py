"""Use cases for event categories."""

from sqlalchemy.orm import Session

from geoevents.domain.entities import Category
from geoevents.domain.errors import ValidationError
from geoevents.infrastructure.repositories import CategoryRepository


def create_category(session: Session, *, name: str, description: str | None = None) -> Category:
    """Create a category with a unique name."""

    name = (name or "").strip()
    if not name:
        raise ValidationError("Category name is required")
    repository = CategoryRepository(session)
    if repository.get_by_name(name) is not None:
        raise ValidationError(f"Category '{name}' already exists")
    return repository.create(Category(id=None, name=name, description=description))


def list_categories(session: Session) -> list[Category]:
    return CategoryRepository(session).list_all()


__all__ = ["create_category", "list_categories"]
