"""Album and album membership mutations.

Albums are administrative: the Policy Gate always allows them, and the
caller's id is recorded as provenance (`created_by`, `added_by`) only.

Update policy for albums: full replace. Title is required; every other
field falls back to its default when omitted.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date

from sqlalchemy.exc import IntegrityError

from warden.core.errors import AlreadyExists, NotFound
from warden.core.identity import new_record_id
from warden.core.policy import RecordKind, require
from warden.db import repo
from warden.db.errors import is_unique_violation, store_errors
from warden.db.repo import DbSession
from warden.models.domain import AlbumEntity, AlbumItemEntity
from warden.records.ownership import optional_text, require_text

logger = logging.getLogger(__name__)


@dataclass
class AlbumInput:
    """Complete album as supplied by the client."""

    title: str
    description: str | None = None
    cover_image_url: str | None = None
    event_date: date | None = None
    event_location: str | None = None
    is_featured: bool = False
    sort_order: int = 0


@dataclass
class ItemOrder:
    """New position of one item inside an album."""

    item_id: str
    sort_order: int


def _album_values(album: AlbumInput) -> dict:
    return {
        "title": require_text(album.title, "Title"),
        "description": optional_text(album.description),
        "cover_image_url": album.cover_image_url or None,
        "event_date": album.event_date,
        "event_location": optional_text(album.event_location),
        "is_featured": bool(album.is_featured),
        "sort_order": album.sort_order or 0,
    }


def create_album(session: DbSession, actor_id: str, album: AlbumInput) -> AlbumEntity:
    """Create an album."""
    actor_id = require_text(actor_id, "User ID")
    entity = AlbumEntity(id=new_record_id(), created_by=actor_id, **_album_values(album))
    with store_errors(session, "create album"):
        created = repo.create_album(session, entity)
        repo.commit(session)
    logger.info(f"Created album {created.id}")
    return created


def update_album(
    session: DbSession, album_id: str, actor_id: str, album: AlbumInput
) -> AlbumEntity:
    """Replace an album's fields.

    Raises:
        ValidationError: Missing title.
        NotFound: No such album.
    """
    values = _album_values(album)
    require(actor_id, None, "update", RecordKind.ALBUM)

    with store_errors(session, "update album"):
        if repo.update_album(session, album_id, values) == 0:
            repo.rollback(session)
            raise NotFound("Album not found")
        repo.commit(session)
        updated = repo.get_album(session, album_id)
    logger.info(f"Updated album {album_id}")
    if updated is None:
        raise NotFound("Album not found")
    return updated


def delete_album(session: DbSession, album_id: str, actor_id: str) -> None:
    """Delete an album; its memberships cascade, archive items stay."""
    require(actor_id, None, "delete", RecordKind.ALBUM)
    with store_errors(session, "delete album"):
        if repo.delete_album(session, album_id) == 0:
            repo.rollback(session)
            raise NotFound("Album not found")
        repo.commit(session)
    logger.info(f"Deleted album {album_id}")


# ============================================================================
# Album Membership
# ============================================================================


def add_album_item(
    session: DbSession, album_id: str, item_id: str, actor_id: str, sort_order: int = 0
) -> AlbumItemEntity:
    """Add an archive item to an album.

    Raises:
        NotFound: Album or archive item does not exist.
        AlreadyExists: The item is already in the album.
        StoreError: Database failure.
    """
    actor_id = require_text(actor_id, "User ID")
    album_id = require_text(album_id, "Album ID")
    item_id = require_text(item_id, "Item ID")
    require(actor_id, None, "update", RecordKind.ALBUM_ITEM)

    with store_errors(session, "load album"):
        album = repo.get_album(session, album_id)
        item = repo.get_archive_item(session, item_id)
    if album is None:
        raise NotFound("Album not found")
    if item is None:
        raise NotFound("Archive item not found")

    entity = AlbumItemEntity(
        id=new_record_id(),
        album_id=album_id,
        item_id=item_id,
        added_by=actor_id,
        sort_order=sort_order or 0,
    )
    with store_errors(session, "add item to album"):
        try:
            created = repo.create_album_item(session, entity)
            repo.commit(session)
        except IntegrityError as e:
            if not is_unique_violation(e):
                raise
            repo.rollback(session)
            raise AlreadyExists("Item is already in this album") from e
    logger.info(f"Added item {item_id} to album {album_id}")
    return created


def remove_album_item(session: DbSession, album_id: str, item_id: str) -> None:
    """Remove an archive item from an album."""
    with store_errors(session, "remove album item"):
        if repo.delete_album_item(session, album_id, item_id) == 0:
            repo.rollback(session)
            raise NotFound("Album item not found")
        repo.commit(session)
    logger.info(f"Removed item {item_id} from album {album_id}")


def reorder_album_items(session: DbSession, album_id: str, orders: list[ItemOrder]) -> int:
    """Apply new sort orders to an album's items.

    Item ids not in the album are skipped.

    Returns:
        Number of memberships actually reordered.
    """
    with store_errors(session, "load album"):
        album = repo.get_album(session, album_id)
    if album is None:
        raise NotFound("Album not found")

    moved = 0
    with store_errors(session, "reorder album items"):
        for order in orders:
            moved += repo.update_album_item_order(session, album_id, order.item_id, order.sort_order)
        repo.commit(session)
    logger.info(f"Reordered {moved} items in album {album_id}")
    return moved


def list_album_items(session: DbSession, album_id: str) -> list[AlbumItemEntity]:
    """List an album's memberships in display order."""
    with store_errors(session, "load album items"):
        return repo.list_album_items(session, album_id)
