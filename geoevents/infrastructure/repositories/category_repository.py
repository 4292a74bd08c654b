"""Persistence helpers for event categories."""

from __future__ import annotations

from sqlalchemy import select

from geoevents.domain.entities import Category
from geoevents.infrastructure.models import CategoryModel

from .base import SQLAlchemyRepository


class CategoryRepository(SQLAlchemyRepository):
    """Provide CRUD operations for :class:`Category` objects."""

    def list_all(self) -> list[Category]:
        statement = select(CategoryModel).order_by(CategoryModel.name, CategoryModel.id)
        return [self._to_entity(model) for model in self._execute(statement).scalars()]

    def get(self, category_id: int) -> Category | None:
        model = self.session.get(CategoryModel, category_id)
        return self._to_entity(model) if model else None

    def get_by_name(self, name: str) -> Category | None:
        model = self._execute(
            select(CategoryModel).where(CategoryModel.name == name)
        ).scalar_one_or_none()
        return self._to_entity(model) if model else None

    def create(self, category: Category) -> Category:
        model = CategoryModel(name=category.name, description=category.description)
        self.session.add(model)
        self._commit()
        self.session.refresh(model)
        return self._to_entity(model)

    @staticmethod
    def _to_entity(model: CategoryModel) -> Category:
        return Category(id=model.id, name=model.name, description=model.description)


__all__ = ["CategoryRepository"]
