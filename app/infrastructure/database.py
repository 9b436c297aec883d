"""Database configuration and session management."""

from __future__ import annotations

import logging
from collections.abc import Generator, Iterator
from contextlib import contextmanager

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from app.config import get_settings


class Base(DeclarativeBase):
    """Base class for SQLAlchemy models."""


settings = get_settings()

logger = logging.getLogger(__name__)


def build_engine(database_url: str) -> Engine:
    """Create the SQLAlchemy engine for ``database_url``.

    SQLite connections are shared with worker threads because dispatch reads
    run concurrently on separate sessions.
    """

    connect_args: dict[str, object] = {}
    if database_url.startswith("sqlite"):
        connect_args["check_same_thread"] = False
    return create_engine(database_url, pool_pre_ping=True, connect_args=connect_args)


engine = build_engine(settings.database_url)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def initialize_database() -> None:
    """Create missing tables, probe optional schema parts and seed the catalog."""

    from app.infrastructure import models  # noqa: F401  # ensure models are imported
    from app.infrastructure.schema import refresh_schema_capabilities

    Base.metadata.create_all(bind=engine, checkfirst=True)
    refresh_schema_capabilities(engine)

    from app.application.use_cases.notifications.catalog import seed_event_catalog

    session = SessionLocal()
    try:
        inserted = seed_event_catalog(session)
        if inserted:
            logger.info("Seeded %s notification catalog events", inserted)
    finally:
        session.close()


def get_db() -> Generator[Session, None, None]:
    """Yield a database session and close it afterwards."""

    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def separate_session(session: Session) -> Iterator[Session]:
    """Yield a new session on the engine of ``session`` with its own transaction.

    Anything left uncommitted on the new session is rolled back on exit.
    ``session`` itself is neither committed nor rolled back.
    """

    db = Session(bind=session.get_bind(), autoflush=False)
    try:
        yield db
    finally:
        db.close()


__all__ = [
    "Base",
    "SessionLocal",
    "build_engine",
    "engine",
    "get_db",
    "initialize_database",
    "separate_session",
]
