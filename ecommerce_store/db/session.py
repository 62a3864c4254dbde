"""
Database engine/session management.

The engine is built lazily from `Settings.database_url` and cached, so importing
this module never opens a connection. SQLite connections get `PRAGMA
foreign_keys=ON` so on-delete policies are enforced there as well.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Generator, Optional

import structlog
from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.engine.url import make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from ecommerce_store.core.config import get_settings

logger = structlog.get_logger()


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


# PUBLIC_INTERFACE
def build_engine(url: Optional[str] = None, echo: Optional[bool] = None) -> Engine:
    """
    Create an engine for `url` (default: configured DATABASE_URL).

    SQLite engines enforce foreign keys and may be shared across threads.
    """
    settings = get_settings()
    url = url or settings.database_url
    echo = settings.database_echo if echo is None else echo

    connect_args = {}
    is_sqlite = make_url(url).get_backend_name() == "sqlite"
    if is_sqlite:
        connect_args["check_same_thread"] = False

    engine = create_engine(url, echo=echo, pool_pre_ping=True, connect_args=connect_args)
    if is_sqlite:
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)

    logger.debug("Database engine created", backend=engine.dialect.name)
    return engine


@lru_cache
def get_engine() -> Engine:
    """Cached process-wide engine."""
    return build_engine()


@lru_cache
def get_sessionmaker() -> sessionmaker[Session]:
    """Cached session factory bound to `get_engine()`."""
    return sessionmaker(bind=get_engine(), autoflush=False, autocommit=False, expire_on_commit=False)


# PUBLIC_INTERFACE
def get_db() -> Generator[Session, None, None]:
    """FastAPI dependency that yields a SQLAlchemy session and ensures it's closed."""
    db = get_sessionmaker()()
    try:
        yield db
    finally:
        db.close()


# PUBLIC_INTERFACE
def db_healthcheck(engine: Optional[Engine] = None) -> bool:
    """
    Perform a simple DB liveness check.

    Returns:
        bool: True if DB is reachable and responds to `SELECT 1`, else False.
    """
    try:
        engine = engine or get_engine()
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        return True
    except (SQLAlchemyError, ImportError) as exc:
        logger.warning("Database healthcheck failed", error=str(exc))
        return False
