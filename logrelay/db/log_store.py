"""
logrelay — Log store
Single write path into ``log1``: one parametrized INSERT per event, one
commit per row. No idempotency key, so redelivered events produce duplicates.
"""
from __future__ import annotations

import logging
from typing import Any, Callable, Protocol, runtime_checkable

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..utils.errors import PersistenceFailure
from .schema import LogRecord, SessionLocal

logger = logging.getLogger("logrelay.db")


@runtime_checkable
class LogSink(Protocol):
    def append(self, service: str, instance: str, level: Any, message: str) -> None: ...


class SqlLogStore:
    """Appends rows through a SQLAlchemy session factory."""

    def __init__(self, session_factory: Callable[[], Session] = SessionLocal):
        self._session_factory = session_factory

    def append(self, service: str, instance: str, level: Any, message: str) -> None:
        db = self._session_factory()
        try:
            db.add(LogRecord(service=service, instance=instance, level=level, message=message))
            db.commit()
        except SQLAlchemyError as exc:
            db.rollback()
            reason = str(getattr(exc, "orig", None) or exc)
            logger.error("insert into log table failed: %s", reason)
            raise PersistenceFailure(reason) from exc
        finally:
            db.close()


sql_log_store = SqlLogStore()
