"""Archive item mutations.

Update policy: partial, like posts. Only the descriptive fields can change;
the media itself and its content type are fixed at creation.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from warden.core.errors import NotFound, ValidationError
from warden.core.identity import new_record_id
from warden.core.policy import RecordKind
from warden.db import repo
from warden.db.errors import store_errors
from warden.db.repo import DbSession
from warden.db.schema import ArchiveItem
from warden.models.domain import ArchiveItemEntity
from warden.records.ownership import (
    delete_owned_record,
    normalize_tags,
    optional_text,
    require_text,
    update_owned_record,
)

logger = logging.getLogger(__name__)

CONTENT_TYPES = frozenset({"artwork", "video", "zine", "audio"})
UPDATABLE_FIELDS = frozenset({"title", "description", "artist_name", "tags"})


@dataclass
class ArchiveItemInput:
    """Input for archive item creation."""

    actor_id: str
    title: str
    content_type: str
    media_url: str
    description: str | None = None
    artist_name: str | None = None
    tags: list[str] = field(default_factory=list)


def create_archive_item(session: DbSession, item_input: ArchiveItemInput) -> ArchiveItemEntity:
    """Create an archive item owned by the actor.

    Raises:
        ValidationError: Missing title, content type or media URL, or an
            unknown content type.
        StoreError: Database failure.
    """
    actor_id = require_text(item_input.actor_id, "User ID")
    title = require_text(item_input.title, "Title")
    content_type = require_text(item_input.content_type, "Content type")
    media_url = require_text(item_input.media_url, "Media URL")
    if content_type not in CONTENT_TYPES:
        raise ValidationError(
            f"Invalid content type '{content_type}'. "
            f"Expected one of: {', '.join(sorted(CONTENT_TYPES))}"
        )

    entity = ArchiveItemEntity(
        id=new_record_id(),
        user_id=actor_id,
        title=title,
        content_type=content_type,
        media_url=media_url,
        description=optional_text(item_input.description),
        artist_name=optional_text(item_input.artist_name),
        tags=normalize_tags(item_input.tags),
    )
    with store_errors(session, "create archive item"):
        created = repo.create_archive_item(session, entity)
        repo.commit(session)
    logger.info(f"Created archive item {created.id}")
    return created


def _archive_values(changes: dict[str, Any]) -> dict[str, Any]:
    unknown = set(changes) - UPDATABLE_FIELDS
    if unknown:
        raise ValidationError(f"Unknown archive item fields: {', '.join(sorted(unknown))}")

    values: dict[str, Any] = {}
    if "title" in changes:
        values["title"] = require_text(changes["title"], "Title")
    if "description" in changes:
        values["description"] = optional_text(changes["description"])
    if "artist_name" in changes:
        values["artist_name"] = optional_text(changes["artist_name"])
    if "tags" in changes:
        values["tags"] = normalize_tags(changes["tags"])
    return values


def update_archive_item(
    session: DbSession, item_id: str, actor_id: str, changes: dict[str, Any]
) -> ArchiveItemEntity:
    """Apply a partial update to the actor's archive item."""
    values = _archive_values(changes)
    update_owned_record(
        session, ArchiveItem, RecordKind.ARCHIVE_ITEM, item_id, actor_id, values, "archive item"
    )
    item = repo.get_archive_item(session, item_id)
    if item is None:
        raise NotFound("Archive item not found")
    return item


def delete_archive_item(session: DbSession, item_id: str, actor_id: str) -> None:
    """Delete the actor's archive item; likes, comments and album memberships cascade."""
    delete_owned_record(
        session, ArchiveItem, RecordKind.ARCHIVE_ITEM, item_id, actor_id, "archive item"
    )
