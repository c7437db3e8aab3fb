"""Repository pattern for database operations.

Encapsulates all SQLAlchemy queries, keeping domain logic pure.
Returns domain models (not SQLAlchemy entities) to external callers.

Ownership-scoped writes take the owner as part of the WHERE clause so the
write itself cannot touch a row owned by someone else, whatever an earlier
read returned.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any

from sqlalchemy import func
from sqlalchemy.orm import Session

from warden.db.schema import (
    Album,
    AlbumItem,
    ArchiveComment,
    ArchiveItem,
    ArchiveLike,
    Comment,
    JournalAccessLog,
    JournalEntry,
    Like,
    Post,
)
from warden.models.domain import (
    AlbumEntity,
    AlbumItemEntity,
    ArchiveItemEntity,
    CommentEntity,
    JournalEntryEntity,
    PostEntity,
    PostSummary,
)

if TYPE_CHECKING:
    from sqlalchemy.orm import Session as DbSession
else:
    DbSession = Session

# Re-export for external use
__all__ = ["DbSession"]

OwnedModel = type[Post] | type[Comment] | type[ArchiveComment] | type[JournalEntry] | type[ArchiveItem]
EdgeModel = type[Like] | type[ArchiveLike]

# Column holding the liked target for each toggle edge table
_EDGE_TARGET_COLUMN = {Like: "post_id", ArchiveLike: "item_id"}


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# ============================================================================
# Converters: SQLAlchemy -> Domain
# ============================================================================


def _post_to_entity(post: Post) -> PostEntity:
    """Convert SQLAlchemy Post to domain entity."""
    return PostEntity(
        id=post.id,
        user_id=post.user_id,
        content=post.content,
        tags=list(post.tags or []),
        has_content_warning=post.has_content_warning,
        content_warning_text=post.content_warning_text,
        media_url=post.media_url,
        media_type=post.media_type,
        created_at=post.created_at,
        updated_at=post.updated_at,
    )


def _comment_to_entity(comment: Comment) -> CommentEntity:
    """Convert SQLAlchemy Comment to domain entity."""
    return CommentEntity(
        id=comment.id,
        target_id=comment.post_id,
        user_id=comment.user_id,
        content=comment.content,
        created_at=comment.created_at,
        updated_at=comment.updated_at,
    )


def _archive_comment_to_entity(comment: ArchiveComment) -> CommentEntity:
    """Convert SQLAlchemy ArchiveComment to domain entity."""
    return CommentEntity(
        id=comment.id,
        target_id=comment.item_id,
        user_id=comment.user_id,
        content=comment.content,
        created_at=comment.created_at,
        updated_at=comment.updated_at,
    )


def _journal_to_entity(entry: JournalEntry) -> JournalEntryEntity:
    """Convert SQLAlchemy JournalEntry to domain entity."""
    return JournalEntryEntity(
        id=entry.id,
        user_id=entry.user_id,
        title=entry.title,
        content=entry.content,
        is_encrypted=entry.is_encrypted,
        content_encrypted=entry.content_encrypted,
        encryption_key_id=entry.encryption_key_id,
        encryption_salt=entry.encryption_salt,
        encryption_iv=entry.encryption_iv,
        mood=entry.mood,
        tags=list(entry.tags or []),
        media_url=entry.media_url,
        media_type=entry.media_type,
        is_private=entry.is_private,
        created_at=entry.created_at,
        updated_at=entry.updated_at,
    )


def _archive_item_to_entity(item: ArchiveItem) -> ArchiveItemEntity:
    """Convert SQLAlchemy ArchiveItem to domain entity."""
    return ArchiveItemEntity(
        id=item.id,
        user_id=item.user_id,
        title=item.title,
        content_type=item.content_type,
        media_url=item.media_url,
        description=item.description,
        artist_name=item.artist_name,
        tags=list(item.tags or []),
        created_at=item.created_at,
        updated_at=item.updated_at,
    )


def _album_to_entity(album: Album) -> AlbumEntity:
    """Convert SQLAlchemy Album to domain entity."""
    return AlbumEntity(
        id=album.id,
        title=album.title,
        created_by=album.created_by,
        description=album.description,
        cover_image_url=album.cover_image_url,
        event_date=album.event_date,
        event_location=album.event_location,
        is_featured=album.is_featured,
        sort_order=album.sort_order,
        created_at=album.created_at,
        updated_at=album.updated_at,
    )


def _album_item_to_entity(row: AlbumItem) -> AlbumItemEntity:
    """Convert SQLAlchemy AlbumItem to domain entity."""
    return AlbumItemEntity(
        id=row.id,
        album_id=row.album_id,
        item_id=row.item_id,
        added_by=row.added_by,
        sort_order=row.sort_order,
    )


# ============================================================================
# Ownership-scoped Operations
# ============================================================================


def get_owner_id(session: DbSession, model: OwnedModel, record_id: str) -> str | None:
    """Return the owner of a record, or None if the record does not exist."""
    row = session.query(model.user_id).filter(model.id == record_id).first()
    return row[0] if row else None


def update_owned(
    session: DbSession,
    model: OwnedModel,
    record_id: str,
    owner_id: str,
    values: dict[str, Any],
) -> int:
    """Update a record only if it still belongs to owner_id.

    Always stamps updated_at.

    Returns:
        Number of rows updated (0 or 1).
    """
    values = {**values, "updated_at": _utcnow()}
    return (
        session.query(model)
        .filter(model.id == record_id, model.user_id == owner_id)
        .update(values, synchronize_session="fetch")
    )


def delete_owned(session: DbSession, model: OwnedModel, record_id: str, owner_id: str) -> int:
    """Delete a record WHERE id AND owner match.

    Returns:
        Number of rows deleted (0 or 1).
    """
    return (
        session.query(model)
        .filter(model.id == record_id, model.user_id == owner_id)
        .delete(synchronize_session="fetch")
    )


# ============================================================================
# Post Repository
# ============================================================================


def create_post(session: DbSession, entity: PostEntity) -> PostEntity:
    """Create a new post."""
    post = Post(
        id=entity.id,
        user_id=entity.user_id,
        content=entity.content,
        tags=list(entity.tags),
        has_content_warning=entity.has_content_warning,
        content_warning_text=entity.content_warning_text,
        media_url=entity.media_url,
        media_type=entity.media_type,
    )
    session.add(post)
    session.flush()
    return _post_to_entity(post)


def get_post(session: DbSession, post_id: str) -> PostEntity | None:
    """Get post by ID."""
    post = session.query(Post).filter(Post.id == post_id).first()
    return _post_to_entity(post) if post else None


def list_posts(
    session: DbSession, actor_id: str | None = None, limit: int = 50
) -> list[PostSummary]:
    """List newest posts with like/comment counts and the actor's like state."""
    posts = session.query(Post).order_by(Post.created_at.desc()).limit(limit).all()
    if not posts:
        return []
    post_ids = [p.id for p in posts]

    like_counts = dict(
        session.query(Like.post_id, func.count(Like.id))
        .filter(Like.post_id.in_(post_ids))
        .group_by(Like.post_id)
        .all()
    )
    comment_counts = dict(
        session.query(Comment.post_id, func.count(Comment.id))
        .filter(Comment.post_id.in_(post_ids))
        .group_by(Comment.post_id)
        .all()
    )
    liked: set[str] = set()
    if actor_id:
        liked = {
            row[0]
            for row in session.query(Like.post_id)
            .filter(Like.user_id == actor_id, Like.post_id.in_(post_ids))
            .all()
        }

    return [
        PostSummary(
            post=_post_to_entity(p),
            like_count=like_counts.get(p.id, 0),
            comment_count=comment_counts.get(p.id, 0),
            liked_by_actor=p.id in liked,
        )
        for p in posts
    ]


# ============================================================================
# Comment Repository
# ============================================================================


def create_comment(session: DbSession, entity: CommentEntity) -> CommentEntity:
    """Create a comment on a post."""
    comment = Comment(
        id=entity.id,
        post_id=entity.target_id,
        user_id=entity.user_id,
        content=entity.content,
    )
    session.add(comment)
    session.flush()
    return _comment_to_entity(comment)


def get_comment(session: DbSession, comment_id: str) -> CommentEntity | None:
    """Get post comment by ID."""
    comment = session.query(Comment).filter(Comment.id == comment_id).first()
    return _comment_to_entity(comment) if comment else None


def list_comments_for_post(session: DbSession, post_id: str) -> list[CommentEntity]:
    """Get comments for a post, oldest first."""
    comments = (
        session.query(Comment)
        .filter(Comment.post_id == post_id)
        .order_by(Comment.created_at.asc())
        .all()
    )
    return [_comment_to_entity(c) for c in comments]


def create_archive_comment(session: DbSession, entity: CommentEntity) -> CommentEntity:
    """Create a comment on an archive item."""
    comment = ArchiveComment(
        id=entity.id,
        item_id=entity.target_id,
        user_id=entity.user_id,
        content=entity.content,
    )
    session.add(comment)
    session.flush()
    return _archive_comment_to_entity(comment)


def get_archive_comment(session: DbSession, comment_id: str) -> CommentEntity | None:
    """Get archive comment by ID."""
    comment = session.query(ArchiveComment).filter(ArchiveComment.id == comment_id).first()
    return _archive_comment_to_entity(comment) if comment else None


def list_comments_for_archive_item(session: DbSession, item_id: str) -> list[CommentEntity]:
    """Get comments for an archive item, oldest first."""
    comments = (
        session.query(ArchiveComment)
        .filter(ArchiveComment.item_id == item_id)
        .order_by(ArchiveComment.created_at.asc())
        .all()
    )
    return [_archive_comment_to_entity(c) for c in comments]


# ============================================================================
# Toggle Edge Repository
# ============================================================================


def find_edge_id(session: DbSession, model: EdgeModel, user_id: str, target_id: str) -> str | None:
    """Return the id of the (user, target) edge, or None."""
    target_column = getattr(model, _EDGE_TARGET_COLUMN[model])
    row = (
        session.query(model.id)
        .filter(model.user_id == user_id, target_column == target_id)
        .first()
    )
    return row[0] if row else None


def insert_edge(
    session: DbSession, model: EdgeModel, edge_id: str, user_id: str, target_id: str
) -> None:
    """Insert a (user, target) edge and flush so constraint violations surface here."""
    edge = model(id=edge_id, user_id=user_id, **{_EDGE_TARGET_COLUMN[model]: target_id})
    session.add(edge)
    session.flush()


def delete_edge(session: DbSession, model: EdgeModel, edge_id: str) -> int:
    """Delete an edge by id."""
    return session.query(model).filter(model.id == edge_id).delete(synchronize_session="fetch")


def count_edges(session: DbSession, model: EdgeModel, target_id: str) -> int:
    """Count edges pointing at a target."""
    target_column = getattr(model, _EDGE_TARGET_COLUMN[model])
    return session.query(func.count(model.id)).filter(target_column == target_id).scalar() or 0


# ============================================================================
# Journal Repository
# ============================================================================


def create_journal_entry(session: DbSession, entity: JournalEntryEntity) -> JournalEntryEntity:
    """Create a new journal entry."""
    entry = JournalEntry(
        id=entity.id,
        user_id=entity.user_id,
        title=entity.title,
        content=entity.content,
        is_encrypted=entity.is_encrypted,
        content_encrypted=entity.content_encrypted,
        encryption_key_id=entity.encryption_key_id,
        encryption_salt=entity.encryption_salt,
        encryption_iv=entity.encryption_iv,
        mood=entity.mood,
        tags=list(entity.tags),
        media_url=entity.media_url,
        media_type=entity.media_type,
        is_private=entity.is_private,
    )
    session.add(entry)
    session.flush()
    return _journal_to_entity(entry)


def get_journal_entry(session: DbSession, entry_id: str) -> JournalEntryEntity | None:
    """Get journal entry by ID."""
    entry = session.query(JournalEntry).filter(JournalEntry.id == entry_id).first()
    return _journal_to_entity(entry) if entry else None


def list_journal_entries(session: DbSession, user_id: str) -> list[JournalEntryEntity]:
    """Get all entries written by a user, newest first."""
    entries = (
        session.query(JournalEntry)
        .filter(JournalEntry.user_id == user_id)
        .order_by(JournalEntry.created_at.desc())
        .all()
    )
    return [_journal_to_entity(e) for e in entries]


def create_journal_access_log(
    session: DbSession,
    log_id: str,
    entry_id: str,
    user_id: str,
    action: str,
    ip_address: str | None = None,
    user_agent: str | None = None,
) -> None:
    """Append a journal access row."""
    session.add(
        JournalAccessLog(
            id=log_id,
            entry_id=entry_id,
            user_id=user_id,
            action=action,
            ip_address=ip_address,
            user_agent=user_agent,
        )
    )


# ============================================================================
# Archive Repository
# ============================================================================


def create_archive_item(session: DbSession, entity: ArchiveItemEntity) -> ArchiveItemEntity:
    """Create a new archive item."""
    item = ArchiveItem(
        id=entity.id,
        user_id=entity.user_id,
        title=entity.title,
        description=entity.description,
        content_type=entity.content_type,
        media_url=entity.media_url,
        artist_name=entity.artist_name,
        tags=list(entity.tags),
    )
    session.add(item)
    session.flush()
    return _archive_item_to_entity(item)


def get_archive_item(session: DbSession, item_id: str) -> ArchiveItemEntity | None:
    """Get archive item by ID."""
    item = session.query(ArchiveItem).filter(ArchiveItem.id == item_id).first()
    return _archive_item_to_entity(item) if item else None


def list_archive_items(session: DbSession, limit: int = 100) -> list[ArchiveItemEntity]:
    """Get newest archive items."""
    items = session.query(ArchiveItem).order_by(ArchiveItem.created_at.desc()).limit(limit).all()
    return [_archive_item_to_entity(i) for i in items]


# ============================================================================
# Album Repository
# ============================================================================


def create_album(session: DbSession, entity: AlbumEntity) -> AlbumEntity:
    """Create a new album."""
    album = Album(
        id=entity.id,
        title=entity.title,
        description=entity.description,
        cover_image_url=entity.cover_image_url,
        event_date=entity.event_date,
        event_location=entity.event_location,
        created_by=entity.created_by,
        is_featured=entity.is_featured,
        sort_order=entity.sort_order,
    )
    session.add(album)
    session.flush()
    return _album_to_entity(album)


def get_album(session: DbSession, album_id: str) -> AlbumEntity | None:
    """Get album by ID."""
    album = session.query(Album).filter(Album.id == album_id).first()
    return _album_to_entity(album) if album else None


def list_albums(session: DbSession) -> list[AlbumEntity]:
    """Get albums, featured first, then by sort order."""
    albums = (
        session.query(Album)
        .order_by(Album.is_featured.desc(), Album.sort_order.asc(), Album.created_at.desc())
        .all()
    )
    return [_album_to_entity(a) for a in albums]


def update_album(session: DbSession, album_id: str, values: dict[str, Any]) -> int:
    """Update album fields and stamp updated_at."""
    values = {**values, "updated_at": _utcnow()}
    return (
        session.query(Album)
        .filter(Album.id == album_id)
        .update(values, synchronize_session="fetch")
    )


def delete_album(session: DbSession, album_id: str) -> int:
    """Delete an album (its memberships cascade)."""
    return session.query(Album).filter(Album.id == album_id).delete(synchronize_session="fetch")


def create_album_item(session: DbSession, entity: AlbumItemEntity) -> AlbumItemEntity:
    """Add an archive item to an album."""
    row = AlbumItem(
        id=entity.id,
        album_id=entity.album_id,
        item_id=entity.item_id,
        added_by=entity.added_by,
        sort_order=entity.sort_order,
    )
    session.add(row)
    session.flush()
    return _album_item_to_entity(row)


def delete_album_item(session: DbSession, album_id: str, item_id: str) -> int:
    """Remove an archive item from an album."""
    return (
        session.query(AlbumItem)
        .filter(AlbumItem.album_id == album_id, AlbumItem.item_id == item_id)
        .delete(synchronize_session="fetch")
    )


def update_album_item_order(
    session: DbSession, album_id: str, item_id: str, sort_order: int
) -> int:
    """Set the sort order of one album membership."""
    return (
        session.query(AlbumItem)
        .filter(AlbumItem.album_id == album_id, AlbumItem.item_id == item_id)
        .update({"sort_order": sort_order}, synchronize_session="fetch")
    )


def list_album_items(session: DbSession, album_id: str) -> list[AlbumItemEntity]:
    """Get album memberships in display order."""
    rows = (
        session.query(AlbumItem)
        .filter(AlbumItem.album_id == album_id)
        .order_by(AlbumItem.sort_order.asc(), AlbumItem.created_at.asc())
        .all()
    )
    return [_album_item_to_entity(r) for r in rows]


# ============================================================================
# Transactions
# ============================================================================


def commit(session: DbSession) -> None:
    """Commit current transaction."""
    session.commit()


def rollback(session: DbSession) -> None:
    """Roll back current transaction."""
    session.rollback()
