"""Database engine and session factory.

The engine and session factory are built once at process start (see
`warden.api.app.create_app`) and handed to handlers; nothing here is
reconstructed per request.
"""

from __future__ import annotations

from contextlib import contextmanager
from pathlib import Path
from typing import Generator

from sqlalchemy import Engine, create_engine, event, make_url
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from warden.db.schema import Base

SQLITE_BUSY_TIMEOUT = 15.0


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    """Turn on FK enforcement so cascades and bogus targets behave."""
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def _enable_sqlite_wal(dbapi_connection, connection_record) -> None:
    """Let readers proceed while one writer holds the database."""
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA journal_mode=WAL")
    cursor.close()


def is_memory_url(url: str) -> bool:
    """True for SQLite URLs naming an in-memory database."""
    database = make_url(url).database
    return not database or database == ":memory:"


def build_engine(url: str) -> Engine:
    """Create an engine for a database URL.

    In-memory SQLite shares one connection (StaticPool) so every session
    sees the same database. File-backed SQLite keeps the default pool, so
    each session holds its own connection and transaction; concurrent
    writers wait up to SQLITE_BUSY_TIMEOUT seconds for the write lock.
    Every SQLite connection enforces foreign keys.

    Args:
        url: SQLAlchemy database URL, e.g. "sqlite:///data/warden.db"
            or "sqlite://" for an in-memory database.

    Returns:
        SQLAlchemy engine.
    """
    if not url.startswith("sqlite"):
        return create_engine(url, echo=False, pool_pre_ping=True)

    if is_memory_url(url):
        engine = create_engine(
            url,
            echo=False,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    else:
        engine = create_engine(
            url,
            echo=False,
            connect_args={"check_same_thread": False, "timeout": SQLITE_BUSY_TIMEOUT},
        )
        event.listen(engine, "connect", _enable_sqlite_wal)
    event.listen(engine, "connect", _enable_sqlite_foreign_keys)
    return engine


def sqlite_url(db_path: Path) -> str:
    """Return the SQLAlchemy URL for a SQLite file, creating its directory."""
    db_path = Path(db_path)
    db_path.parent.mkdir(parents=True, exist_ok=True)
    return f"sqlite:///{db_path}"


def build_session_factory(engine: Engine) -> sessionmaker:
    """Return a session factory bound to the engine."""
    return sessionmaker(bind=engine, expire_on_commit=False)


@contextmanager
def session_scope(factory: sessionmaker) -> Generator[Session, None, None]:
    """Context manager for sessions with automatic cleanup.

    Commits on successful exit, rolls back on exception, and always
    closes the session.

    Example:
        with session_scope(factory) as session:
            session.add(record)
    """
    session = factory()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def init_db(engine: Engine) -> None:
    """Create all tables. Call once during application startup."""
    Base.metadata.create_all(engine)
