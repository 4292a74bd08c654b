"""Database configuration and session management.

The engine and session factory are created once at process start (see
:mod:`geoevents.container`) and passed to the components that need them.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import Any

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker
from sqlalchemy.pool import StaticPool

from geoevents.domain.errors import PersistenceError

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """Base class for SQLAlchemy models."""


def _null_safe(func: Callable[..., float]) -> Callable[..., float | None]:
    def wrapper(*args: Any) -> float | None:
        if any(arg is None for arg in args):
            return None
        return func(*(float(arg) for arg in args))

    return wrapper


# Functions used by the Haversine expression; SQLite builds without the math
# extension do not provide them.
_SQLITE_MATH_FUNCTIONS: dict[str, tuple[int, Callable[..., float]]] = {
    "radians": (1, math.radians),
    "sin": (1, math.sin),
    "cos": (1, math.cos),
    "sqrt": (1, math.sqrt),
    "atan2": (2, math.atan2),
}


def _configure_sqlite_connection(dbapi_connection: Any, _record: Any) -> None:
    for name, (arity, func) in _SQLITE_MATH_FUNCTIONS.items():
        dbapi_connection.create_function(name, arity, _null_safe(func), deterministic=True)
    cursor = dbapi_connection.cursor()
    try:
        cursor.execute("PRAGMA foreign_keys=ON")
    finally:
        cursor.close()


def create_database_engine(database_url: str, *, echo: bool = False) -> Engine:
    """Create the SQLAlchemy engine for ``database_url``."""

    kwargs: dict[str, Any] = {"echo": echo, "pool_pre_ping": True}
    is_sqlite = database_url.startswith("sqlite")
    if is_sqlite:
        kwargs["connect_args"] = {"check_same_thread": False}
        if database_url in {"sqlite://", "sqlite:///:memory:"}:
            kwargs["poolclass"] = StaticPool

    engine = create_engine(database_url, **kwargs)
    if is_sqlite:
        event.listen(engine, "connect", _configure_sqlite_connection)
    logger.debug("Database engine created for dialect %s", engine.dialect.name)
    return engine


def create_session_factory(engine: Engine) -> sessionmaker[Session]:
    """Return a session factory bound to ``engine``."""

    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def initialize_database(engine: Engine) -> None:
    """Ensure all ORM models have corresponding database tables."""

    from geoevents.infrastructure import models  # noqa: F401  # ensure models are imported

    Base.metadata.create_all(bind=engine, checkfirst=True)


@contextmanager
def session_scope(session_factory: Callable[[], Session]) -> Iterator[Session]:
    """Yield a session, committing on success and rolling back on any error.

    Store failures surface as :class:`PersistenceError` after the rollback.
    """

    session = session_factory()
    try:
        yield session
        session.commit()
    except SQLAlchemyError as exc:
        session.rollback()
        raise PersistenceError(str(exc)) from exc
    except BaseException:
        session.rollback()
        raise
    finally:
        session.close()


__all__ = [
    "Base",
    "create_database_engine",
    "create_session_factory",
    "initialize_database",
    "session_scope",
]
