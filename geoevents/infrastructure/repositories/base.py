"""Shared helpers for SQLAlchemy backed repositories."""

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy.engine import Result
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from sqlalchemy.sql.expression import Executable

from geoevents.domain.errors import PersistenceError

logger = logging.getLogger(__name__)


class SQLAlchemyRepository:
    """Wrap a session and translate driver failures into :class:`PersistenceError`."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def _execute(self, statement: Executable) -> Result[Any]:
        try:
            return self.session.execute(statement)
        except SQLAlchemyError as exc:
            logger.error("Query failed: %s", exc)
            raise PersistenceError(str(exc)) from exc

    def _commit(self) -> None:
        """Commit the current transaction or roll it back entirely."""

        try:
            self.session.commit()
        except SQLAlchemyError as exc:
            self.session.rollback()
            logger.error("Transaction rolled back: %s", exc)
            raise PersistenceError(str(exc)) from exc

    def _flush(self) -> None:
        try:
            self.session.flush()
        except SQLAlchemyError as exc:
            self.session.rollback()
            logger.error("Flush failed, transaction rolled back: %s", exc)
            raise PersistenceError(str(exc)) from exc


__all__ = ["SQLAlchemyRepository"]
