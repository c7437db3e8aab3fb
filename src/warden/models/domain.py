"""Domain models for Warden.

Pure Python dataclasses representing domain entities.
These models are independent of SQLAlchemy and used throughout
the application for clean separation from the database layer.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime


# ============================================================================
# Feed Domain
# ============================================================================


@dataclass
class PostEntity:
    """Domain model for a feed post."""

    id: str
    user_id: str
    content: str
    tags: list[str] = field(default_factory=list)
    has_content_warning: bool = False
    content_warning_text: str | None = None
    media_url: str | None = None
    media_type: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass
class PostSummary:
    """Post plus counters for listing."""

    post: PostEntity
    like_count: int
    comment_count: int
    liked_by_actor: bool


@dataclass
class CommentEntity:
    """Domain model for a comment on a post or archive item.

    `target_id` is the post id or the archive item id.
    """

    id: str
    target_id: str
    user_id: str
    content: str
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass
class ToggleResult:
    """Outcome of a like toggle."""

    liked: bool
    like_count: int = 0


# ============================================================================
# Journal Domain
# ============================================================================


@dataclass
class JournalEntryEntity:
    """Domain model for a journal entry."""

    id: str
    user_id: str
    title: str | None = None
    content: str | None = None
    is_encrypted: bool = False
    content_encrypted: str | None = None
    encryption_key_id: str | None = None
    encryption_salt: str | None = None
    encryption_iv: str | None = None
    mood: str | None = None
    tags: list[str] = field(default_factory=list)
    media_url: str | None = None
    media_type: str | None = None
    is_private: bool = True
    created_at: datetime | None = None
    updated_at: datetime | None = None


# ============================================================================
# Archive Domain
# ============================================================================


@dataclass
class ArchiveItemEntity:
    """Domain model for an archive item."""

    id: str
    user_id: str
    title: str
    content_type: str
    media_url: str
    description: str | None = None
    artist_name: str | None = None
    tags: list[str] = field(default_factory=list)
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass
class AlbumEntity:
    """Domain model for an album."""

    id: str
    title: str
    created_by: str
    description: str | None = None
    cover_image_url: str | None = None
    event_date: date | None = None
    event_location: str | None = None
    is_featured: bool = False
    sort_order: int = 0
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass
class AlbumItemEntity:
    """Domain model for an album membership row."""

    id: str
    album_id: str
    item_id: str
    added_by: str
    sort_order: int = 0
