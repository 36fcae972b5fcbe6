"""Database utilities for SQLAlchemy 2.x.

Provides engine/session factories and a convenient session scope context manager.
SQLite (the default `index.db` file) and PostgreSQL (via the psycopg driver)
are supported.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Iterator

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from edaoogle.exceptions import ConfigError, StorageError

from . import models

logger = logging.getLogger(__name__)


def _is_memory_sqlite(url: str) -> bool:
    return url in ("sqlite://", "sqlite:///:memory:") or "mode=memory" in url


def _enable_sqlite_foreign_keys(dbapi_connection: Any, _record: Any) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def get_engine(url: str, *, echo: bool = False) -> Engine:
    """Create a SQLAlchemy engine for the index database.

    Parameters
    ----------
    url:
        SQLAlchemy URL. Either SQLite ("sqlite:///index.db", "sqlite://" for an
        in-memory index) or PostgreSQL. "postgresql://..." is normalized to use
        the psycopg driver.
    echo:
        If True, SQL statements are logged (useful for debugging).
    """
    if url.startswith("sqlite"):
        kwargs: dict[str, Any] = {"echo": echo}
        if _is_memory_sqlite(url):
            # One shared connection, otherwise every session sees an empty database
            kwargs.update(connect_args={"check_same_thread": False}, poolclass=StaticPool)
        engine = create_engine(url, **kwargs)
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)
        return engine

    if url.startswith("postgresql://"):
        url = "postgresql+psycopg://" + url[len("postgresql://") :]
    elif not url.startswith("postgresql+psycopg://"):
        raise ConfigError(
            "Unsupported database URL. Expected 'sqlite:///...' or 'postgresql+psycopg://...'."
        )

    # Enable pre-ping to gracefully handle stale/disconnected connections
    return create_engine(url, echo=echo, pool_pre_ping=True)


def make_session_factory(engine: Engine) -> sessionmaker[Session]:
    """Create a sessionmaker bound to the provided engine."""
    return sessionmaker(bind=engine, autoflush=False, autocommit=False, expire_on_commit=False)


@contextmanager
def session_scope(factory: sessionmaker[Session]) -> Iterator[Session]:
    """Provide a transactional scope around a series of operations.

    Commits on success, rolls back on error, and always closes the session.
    A failing commit is reported as `StorageError`.
    """
    session = factory()
    try:
        yield session
        session.commit()
    except SQLAlchemyError as exc:
        session.rollback()
        raise StorageError(f"Transaction failed: {exc}") from exc
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def init_db(engine: Engine) -> None:
    """Create index tables and their indexes if they do not exist."""
    try:
        models.Base.metadata.create_all(bind=engine)
    except SQLAlchemyError as exc:
        raise StorageError(f"Cannot initialize index schema: {exc}") from exc
    logger.debug("Index schema ready on %s", engine.url.render_as_string(hide_password=True))
