"""Typed filter predicates compiled into SQLAlchemy clauses.

A query is described by a :class:`PredicateSet`; the row statement and the
count statement are both produced from the same set, so their filters cannot
drift apart.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import datetime

from sqlalchemy import Select, and_, exists, or_
from sqlalchemy.sql.elements import ColumnElement

from geoevents.domain.geo import GeoPoint, bounding_box
from geoevents.utils import ensure_app_naive_datetime

from .expressions import haversine_distance_km


class Predicate(ABC):
    """One AND-combined condition of a spatial query."""

    @abstractmethod
    def clause(self) -> ColumnElement[bool]:
        """Return the SQL boolean expression for this condition."""


@dataclass(frozen=True, eq=False)
class WithinRadius(Predicate):
    """Row point lies within ``radius_km`` of ``anchor`` (inclusive)."""

    latitude: ColumnElement[float]
    longitude: ColumnElement[float]
    anchor: GeoPoint
    radius_km: float

    def distance(self) -> ColumnElement[float]:
        return haversine_distance_km(self.latitude, self.longitude, self.anchor)

    def clause(self) -> ColumnElement[bool]:
        min_lat, max_lat, min_lon, max_lon = bounding_box(self.anchor, self.radius_km)
        conditions = [self.latitude.between(min_lat, max_lat)]
        if min_lon is not None and max_lon is not None:
            conditions.append(self.longitude.between(min_lon, max_lon))
        conditions.append(self.distance() <= float(self.radius_km))
        return and_(*conditions)


@dataclass(frozen=True, eq=False)
class HasLocation(Predicate):
    latitude: ColumnElement[float]
    longitude: ColumnElement[float]

    def clause(self) -> ColumnElement[bool]:
        return and_(self.latitude.is_not(None), self.longitude.is_not(None))


@dataclass(frozen=True, eq=False)
class HasAnyCategory(Predicate):
    """Owner row is linked to at least one of ``category_ids``."""

    owner_id: ColumnElement[int]
    link_owner_id: ColumnElement[int]
    link_category_id: ColumnElement[int]
    category_ids: frozenset[int]

    def clause(self) -> ColumnElement[bool]:
        return exists().where(
            self.link_owner_id == self.owner_id,
            self.link_category_id.in_(sorted(self.category_ids)),
        )


@dataclass(frozen=True, eq=False)
class AtOrAfter(Predicate):
    column: ColumnElement[datetime]
    instant: datetime

    def clause(self) -> ColumnElement[bool]:
        return self.column >= ensure_app_naive_datetime(self.instant)


@dataclass(frozen=True, eq=False)
class AtOrBefore(Predicate):
    column: ColumnElement[datetime]
    instant: datetime

    def clause(self) -> ColumnElement[bool]:
        return self.column <= ensure_app_naive_datetime(self.instant)


@dataclass(frozen=True, eq=False)
class ContainsText(Predicate):
    """Case-insensitive substring match on any of ``columns``."""

    columns: tuple[ColumnElement[str], ...]
    text: str

    def clause(self) -> ColumnElement[bool]:
        escaped = (
            self.text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
        )
        pattern = f"%{escaped}%"
        return or_(*(column.ilike(pattern, escape="\\") for column in self.columns))


@dataclass(frozen=True, eq=False)
class Excludes(Predicate):
    column: ColumnElement[int]
    value: int

    def clause(self) -> ColumnElement[bool]:
        return self.column != self.value


class PredicateSet:
    """Ordered, immutable collection of predicates."""

    def __init__(self, predicates: Iterable[Predicate] = ()) -> None:
        self._predicates: tuple[Predicate, ...] = tuple(predicates)

    def __iter__(self):
        return iter(self._predicates)

    def __len__(self) -> int:
        return len(self._predicates)

    @property
    def predicates(self) -> Sequence[Predicate]:
        return self._predicates

    def clauses(self) -> list[ColumnElement[bool]]:
        return [predicate.clause() for predicate in self._predicates]

    def apply(self, statement: Select) -> Select:
        """Return ``statement`` filtered by every predicate of the set."""

        clauses = self.clauses()
        if not clauses:
            return statement
        return statement.where(*clauses)


__all__ = [
    "AtOrAfter",
    "AtOrBefore",
    "ContainsText",
    "Excludes",
    "HasAnyCategory",
    "HasLocation",
    "Predicate",
    "PredicateSet",
    "WithinRadius",
]
