"""Translation of SQLAlchemy failures into service errors."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Generator

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from warden.core.errors import StoreError

logger = logging.getLogger(__name__)

_UNIQUE_SQLSTATE = "23505"


def is_unique_violation(exc: IntegrityError) -> bool:
    """Return True when an IntegrityError comes from a UNIQUE constraint.

    Recognizes the Postgres SQLSTATE (psycopg / asyncpg expose it as
    `sqlstate` or `pgcode`) and SQLite's message text.
    """
    orig = getattr(exc, "orig", None)
    code = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    if code is not None:
        return code == _UNIQUE_SQLSTATE
    message = str(orig if orig is not None else exc).lower()
    return "unique constraint failed" in message or "duplicate key" in message


@contextmanager
def store_errors(session: Session, operation: str) -> Generator[None, None, None]:
    """Roll back and raise StoreError for any database failure in the block.

    Args:
        session: Session to roll back on failure.
        operation: Short description used in the log line and message.

    Raises:
        StoreError: Wrapping the original SQLAlchemyError.
    """
    try:
        yield
    except SQLAlchemyError as e:
        session.rollback()
        logger.error(f"Store failure during {operation}: {e}")
        raise StoreError(f"Failed to {operation}") from e
