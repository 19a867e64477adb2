"""
logrelay — Database Schema
Supports SQLite (dev) / MySQL (production) / MSSQL (enterprise).

The relay only ever appends to ``log1``; nothing here reads rows back.
Column names (c1, c2, i1, t1) are kept from the existing table so the relay
can write into a database that already holds logs.
"""
from __future__ import annotations

from functools import lru_cache

from sqlalchemy import Column, Integer, String, Text, create_engine, event
from sqlalchemy.orm import DeclarativeBase, sessionmaker
from sqlalchemy.pool import NullPool, StaticPool


LOG_TABLE = "log1"


# ── Engine factory ────────────────────────────────────────────────────────────

@lru_cache()
def _make_engine():
    """
    Create the SQLAlchemy engine based on DB_TYPE in settings.
    Cached so the same engine is reused across the process lifetime.
    """
    from ..config import settings

    db_url = settings.database_url
    db_type = settings.db_type

    if db_type == "mysql":
        return create_engine(
            db_url,
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_timeout=settings.db_pool_timeout,
            pool_recycle=settings.db_pool_recycle,
            pool_pre_ping=True,
            future=True,
        )

    if db_type == "mssql":
        return create_engine(db_url, future=True)

    if db_type == "sqlite_memory":
        # StaticPool keeps the single in-memory connection alive across threads
        return create_engine(
            db_url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
            future=True,
        )

    return create_engine(
        db_url,
        connect_args={"check_same_thread": False},
        poolclass=NullPool,
        future=True,
    )


engine = _make_engine()


@event.listens_for(engine, "connect")
def _configure_connection(conn, _record):
    """Apply SQLite PRAGMAs; skipped for MySQL / MSSQL."""
    from ..config import settings
    if settings.db_type in ("sqlite", "sqlite_memory"):
        conn.execute("PRAGMA journal_mode=WAL")
        conn.execute("PRAGMA synchronous=NORMAL")


SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)


class Base(DeclarativeBase):
    pass


class LogRecord(Base):
    __tablename__ = LOG_TABLE
    id         = Column(Integer, primary_key=True, autoincrement=True)
    service    = Column("c1", String(128), nullable=False)
    instance   = Column("c2", String(128), nullable=False)
    level      = Column("i1", Integer, nullable=True)
    message    = Column("t1", Text, nullable=False)


def init_db() -> None:
    """Create the log table if it does not exist yet."""
    Base.metadata.create_all(bind=engine)

