"""Ownership-gated update and delete shared by every owner-scoped record.

Both follow the same two steps:
1. read the owner (NotFound if the record is absent)
2. check the Policy Gate, then write with ``WHERE id AND user_id``

A write that matches no row means the record disappeared or changed hands
between the read and the write; that is reported as NotFound.
"""

from __future__ import annotations

import logging
from typing import Any

from warden.core.errors import NotFound, ValidationError
from warden.core.policy import RecordKind, require
from warden.db import repo
from warden.db.errors import store_errors
from warden.db.repo import DbSession, OwnedModel

logger = logging.getLogger(__name__)


def require_text(value: str | None, field_name: str) -> str:
    """Return the trimmed value or raise ValidationError if it is blank."""
    trimmed = (value or "").strip()
    if not trimmed:
        raise ValidationError(f"{field_name} is required")
    return trimmed


def optional_text(value: str | None) -> str | None:
    """Trim optional text, mapping blank to None."""
    if value is None:
        return None
    trimmed = value.strip()
    return trimmed or None


def normalize_tags(tags: list[str] | None) -> list[str]:
    """Trim tags, drop blanks and duplicates, keep first-seen order."""
    seen: list[str] = []
    for tag in tags or []:
        cleaned = tag.strip()
        if cleaned and cleaned not in seen:
            seen.append(cleaned)
    return seen


def _fetch_owner(session: DbSession, model: OwnedModel, record_id: str, label: str) -> str:
    with store_errors(session, f"load {label}"):
        owner_id = repo.get_owner_id(session, model, record_id)
    if owner_id is None:
        raise NotFound(f"{label.capitalize()} not found")
    return owner_id


def update_owned_record(
    session: DbSession,
    model: OwnedModel,
    kind: RecordKind,
    record_id: str,
    actor_id: str,
    values: dict[str, Any],
    label: str,
) -> None:
    """Apply `values` to a record owned by `actor_id`.

    Raises:
        NotFound: Record absent (before or at write time).
        Forbidden: Actor is not the owner.
        StoreError: Database failure.
    """
    owner_id = _fetch_owner(session, model, record_id, label)
    if owner_id != actor_id:
        logger.warning(f"Denied update of {label} {record_id} by {actor_id}")
    require(actor_id, owner_id, "update", kind)

    with store_errors(session, f"update {label}"):
        updated = repo.update_owned(session, model, record_id, actor_id, values)
        if updated == 0:
            repo.rollback(session)
            raise NotFound(f"{label.capitalize()} not found")
        repo.commit(session)
    logger.info(f"Updated {label} {record_id}")


def delete_owned_record(
    session: DbSession,
    model: OwnedModel,
    kind: RecordKind,
    record_id: str,
    actor_id: str,
    label: str,
) -> None:
    """Delete a record owned by `actor_id`.

    On owner mismatch no delete statement is issued at all.

    Raises:
        NotFound: Record absent (before or at write time).
        Forbidden: Actor is not the owner.
        StoreError: Database failure.
    """
    owner_id = _fetch_owner(session, model, record_id, label)
    if owner_id != actor_id:
        logger.warning(f"Denied delete of {label} {record_id} by {actor_id}")
    require(actor_id, owner_id, "delete", kind)

    with store_errors(session, f"delete {label}"):
        deleted = repo.delete_owned(session, model, record_id, actor_id)
        if deleted == 0:
            repo.rollback(session)
            raise NotFound(f"{label.capitalize()} not found")
        repo.commit(session)
    logger.info(f"Deleted {label} {record_id}")
