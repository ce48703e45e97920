"""Database handle and session configuration."""

from __future__ import annotations

import logging
from collections.abc import Generator
from typing import Any

from fastapi import Request
from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from blackmessages.core.settings import Settings

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """Declarative base shared by all ORM models."""


# Ensure model modules are imported so that metadata is populated when create_all runs.
import blackmessages.models  # noqa: E402,F401


class Database:
    """Owned storage handle shared by all concurrent requests.

    Created once on startup, handed to request handlers through ``get_db`` and
    disposed on shutdown. The engine's connection pool is safe for concurrent
    use; every request gets its own session.
    """

    def __init__(self, engine: Engine) -> None:
        self.engine = engine
        self.session_factory = sessionmaker(
            autocommit=False,
            autoflush=False,
            expire_on_commit=False,
            bind=engine,
        )

    @classmethod
    def from_settings(cls, settings: Settings, **engine_kwargs: Any) -> Database:
        """Build a handle for the configured database URL."""
        engine = create_engine(
            settings.effective_database_url,
            pool_pre_ping=True,
            echo=settings.sql_debug,
            **engine_kwargs,
        )
        return cls(engine)

    def session(self) -> Session:
        """Return a new session bound to this handle."""
        return self.session_factory()

    def create_tables(self) -> None:
        """Create all database tables."""
        Base.metadata.create_all(bind=self.engine)

    def dispose(self) -> None:
        """Release pooled connections."""
        self.engine.dispose()
        logger.info("Database connections disposed")


def get_db(request: Request) -> Generator[Session, None, None]:
    """Yield a database session for dependency injection."""
    database: Database = request.app.state.database
    db = database.session()
    try:
        yield db
    finally:
        db.close()
