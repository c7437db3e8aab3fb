"""Journal entry mutations.

Update policy: full replace. Every update carries the complete entry;
omitted optional fields reset to their defaults (title, mood and media to
None, tags to [], is_private to True).

Encrypted entries never store plain text: `content` is dropped and the
ciphertext, salt and IV are required instead.

Every create/update/delete appends to the access log. A failure to write
the log is logged and does not fail the mutation.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from sqlalchemy.exc import SQLAlchemyError

from warden.core.errors import NotFound, ValidationError
from warden.core.identity import new_record_id
from warden.core.policy import RecordKind
from warden.db import repo
from warden.db.errors import store_errors
from warden.db.repo import DbSession
from warden.db.schema import JournalEntry
from warden.models.domain import JournalEntryEntity
from warden.records.ownership import (
    delete_owned_record,
    normalize_tags,
    optional_text,
    require_text,
    update_owned_record,
)

logger = logging.getLogger(__name__)


@dataclass
class JournalInput:
    """Complete journal entry as supplied by the client."""

    content: str | None = None
    title: str | None = None
    mood: str | None = None
    tags: list[str] = field(default_factory=list)
    media_url: str | None = None
    media_type: str | None = None
    is_private: bool = True
    is_encrypted: bool = False
    content_encrypted: str | None = None
    encryption_key_id: str | None = None
    encryption_salt: str | None = None
    encryption_iv: str | None = None


@dataclass
class AccessContext:
    """Where a journal request came from, for the access log."""

    ip_address: str | None = None
    user_agent: str | None = None


def _journal_values(entry: JournalInput) -> dict[str, Any]:
    """Validate a journal input and map it to column values."""
    if entry.is_encrypted:
        if not (entry.content_encrypted and entry.encryption_salt and entry.encryption_iv):
            raise ValidationError("Encrypted content requires salt and IV")
        content = None
    else:
        content = require_text(entry.content, "Content")

    return {
        "title": optional_text(entry.title),
        "content": content,
        "is_encrypted": entry.is_encrypted,
        "content_encrypted": entry.content_encrypted if entry.is_encrypted else None,
        "encryption_key_id": entry.encryption_key_id if entry.is_encrypted else None,
        "encryption_salt": entry.encryption_salt if entry.is_encrypted else None,
        "encryption_iv": entry.encryption_iv if entry.is_encrypted else None,
        "mood": optional_text(entry.mood),
        "tags": normalize_tags(entry.tags),
        "media_url": entry.media_url or None,
        "media_type": entry.media_type or None,
        "is_private": True if entry.is_private is None else entry.is_private,
    }


def record_access(
    session: DbSession,
    entry_id: str,
    actor_id: str,
    action: str,
    context: AccessContext | None = None,
) -> None:
    """Append an access log row; failures are logged, never raised."""
    context = context or AccessContext()
    try:
        repo.create_journal_access_log(
            session,
            log_id=new_record_id(),
            entry_id=entry_id,
            user_id=actor_id,
            action=action,
            ip_address=context.ip_address,
            user_agent=context.user_agent,
        )
        repo.commit(session)
    except SQLAlchemyError as e:
        repo.rollback(session)
        logger.error(f"Failed to log journal access for {entry_id}: {e}")


def create_journal_entry(
    session: DbSession,
    actor_id: str,
    entry: JournalInput,
    context: AccessContext | None = None,
) -> JournalEntryEntity:
    """Create a journal entry, private unless stated otherwise."""
    actor_id = require_text(actor_id, "User ID")
    values = _journal_values(entry)
    entity = JournalEntryEntity(id=new_record_id(), user_id=actor_id, **values)

    with store_errors(session, "create journal entry"):
        created = repo.create_journal_entry(session, entity)
        repo.commit(session)
    logger.info(f"Created journal entry {created.id}")

    record_access(session, created.id, actor_id, "create", context)
    return created


def update_journal_entry(
    session: DbSession,
    entry_id: str,
    actor_id: str,
    entry: JournalInput,
    context: AccessContext | None = None,
) -> JournalEntryEntity:
    """Replace the actor's journal entry with `entry`.

    Raises:
        ValidationError: Missing content or encryption parameters.
        NotFound: No such entry.
        Forbidden: Actor does not own the entry.
    """
    values = _journal_values(entry)
    update_owned_record(
        session,
        JournalEntry,
        RecordKind.JOURNAL_ENTRY,
        entry_id,
        actor_id,
        values,
        "journal entry",
    )
    record_access(session, entry_id, actor_id, "update", context)

    updated = repo.get_journal_entry(session, entry_id)
    if updated is None:
        raise NotFound("Journal entry not found")
    return updated


def delete_journal_entry(
    session: DbSession,
    entry_id: str,
    actor_id: str,
    context: AccessContext | None = None,
) -> None:
    """Delete the actor's journal entry."""
    delete_owned_record(
        session, JournalEntry, RecordKind.JOURNAL_ENTRY, entry_id, actor_id, "journal entry"
    )
    record_access(session, entry_id, actor_id, "delete", context)


def list_own_entries(session: DbSession, actor_id: str) -> list[JournalEntryEntity]:
    """List the actor's own entries, private ones included."""
    actor_id = require_text(actor_id, "User ID")
    with store_errors(session, "load journal entries"):
        return repo.list_journal_entries(session, actor_id)
