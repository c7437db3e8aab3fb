"""Pydantic models for the Warden API.

Request bodies carry the caller's `actor_id` explicitly; identity is issued
elsewhere. Every response is an envelope with `success` plus the payload.
Field names are snake_case on the wire.
"""

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field

# ============================================================================
# Records (response payloads)
# ============================================================================


class RecordOut(BaseModel):
    """Base for payloads built from domain dataclasses."""

    model_config = ConfigDict(from_attributes=True)


class PostOut(RecordOut):
    id: str
    user_id: str
    content: str
    tags: list[str]
    has_content_warning: bool
    content_warning_text: str | None
    media_url: str | None
    media_type: str | None
    created_at: datetime | None
    updated_at: datetime | None


class PostSummaryOut(PostOut):
    """Post with counters, as listed in the feed."""

    like_count: int
    comment_count: int
    liked_by_actor: bool


class CommentOut(RecordOut):
    id: str
    target_id: str
    user_id: str
    content: str
    created_at: datetime | None
    updated_at: datetime | None


class JournalEntryOut(RecordOut):
    id: str
    user_id: str
    title: str | None
    content: str | None
    is_encrypted: bool
    content_encrypted: str | None
    encryption_key_id: str | None
    encryption_salt: str | None
    encryption_iv: str | None
    mood: str | None
    tags: list[str]
    media_url: str | None
    media_type: str | None
    is_private: bool
    created_at: datetime | None
    updated_at: datetime | None


class ArchiveItemOut(RecordOut):
    id: str
    user_id: str
    title: str
    content_type: str
    media_url: str
    description: str | None
    artist_name: str | None
    tags: list[str]
    created_at: datetime | None
    updated_at: datetime | None


class AlbumOut(RecordOut):
    id: str
    title: str
    created_by: str
    description: str | None
    cover_image_url: str | None
    event_date: date | None
    event_location: str | None
    is_featured: bool
    sort_order: int
    created_at: datetime | None
    updated_at: datetime | None


class AlbumItemOut(RecordOut):
    id: str
    album_id: str
    item_id: str
    added_by: str
    sort_order: int


# ============================================================================
# Envelopes
# ============================================================================


class Envelope(BaseModel):
    """Success envelope; failures are rendered by the exception handlers."""

    success: bool = True


class MessageResponse(Envelope):
    message: str


class PostResponse(Envelope):
    post: PostOut


class PostListResponse(Envelope):
    posts: list[PostSummaryOut]


class ToggleResponse(Envelope):
    liked: bool
    like_count: int


class CommentResponse(Envelope):
    comment: CommentOut


class CommentListResponse(Envelope):
    comments: list[CommentOut]


class JournalEntryResponse(Envelope):
    entry: JournalEntryOut


class JournalListResponse(Envelope):
    entries: list[JournalEntryOut]


class ArchiveItemResponse(Envelope):
    item: ArchiveItemOut


class AlbumResponse(Envelope):
    album: AlbumOut


class AlbumItemResponse(Envelope):
    album_item: AlbumItemOut


class ReorderResponse(Envelope):
    reordered: int


class UploadResponse(Envelope):
    url: str
    path: str
    bucket: str


class CategoryLimits(BaseModel):
    category: str
    allowed_types: list[str]
    max_bytes: int
    max_size: str
    public: bool


class LimitsResponse(Envelope):
    categories: list[CategoryLimits]


class AccessGrantOut(BaseModel):
    ref: str
    url: str
    expires_at: str | None = None
    error: str | None = None


class SignedUrlResponse(Envelope):
    data: list[AccessGrantOut]


# ============================================================================
# Requests
# ============================================================================


class ActorRequest(BaseModel):
    """Base for requests made on behalf of an actor."""

    actor_id: str


class PostCreateRequest(ActorRequest):
    content: str
    tags: list[str] = Field(default_factory=list)
    content_warning: str | None = None
    media_url: str | None = None
    media_type: str | None = None


class PostUpdateRequest(ActorRequest):
    """Partial update: only fields present in the body are applied."""

    post_id: str
    content: str | None = None
    tags: list[str] | None = None
    content_warning: str | None = None
    media_url: str | None = None
    media_type: str | None = None


class PostDeleteRequest(ActorRequest):
    post_id: str


class LikeToggleRequest(ActorRequest):
    post_id: str


class CommentCreateRequest(ActorRequest):
    post_id: str
    content: str


class CommentUpdateRequest(ActorRequest):
    comment_id: str
    content: str


class CommentDeleteRequest(ActorRequest):
    comment_id: str


class JournalFields(BaseModel):
    """Complete journal entry; omitted optional fields take their defaults."""

    content: str | None = None
    title: str | None = None
    mood: str | None = None
    tags: list[str] = Field(default_factory=list)
    media_url: str | None = None
    media_type: str | None = None
    is_private: bool = True
    is_encrypted: bool = False
    content_encrypted: str | None = None
    encryption_key_id: str | None = None
    encryption_salt: str | None = None
    encryption_iv: str | None = None


class JournalCreateRequest(ActorRequest, JournalFields):
    pass


class JournalUpdateRequest(ActorRequest, JournalFields):
    entry_id: str


class JournalDeleteRequest(ActorRequest):
    entry_id: str


class ArchiveItemCreateRequest(ActorRequest):
    title: str
    content_type: str
    media_url: str
    description: str | None = None
    artist_name: str | None = None
    tags: list[str] = Field(default_factory=list)


class ArchiveItemUpdateRequest(ActorRequest):
    """Partial update: only fields present in the body are applied."""

    item_id: str
    title: str | None = None
    description: str | None = None
    artist_name: str | None = None
    tags: list[str] | None = None


class ArchiveItemDeleteRequest(ActorRequest):
    item_id: str


class ArchiveLikeToggleRequest(ActorRequest):
    item_id: str


class ArchiveCommentCreateRequest(ActorRequest):
    item_id: str
    content: str


class ArchiveCommentDeleteRequest(ActorRequest):
    comment_id: str


class AlbumFields(BaseModel):
    """Complete album; omitted optional fields take their defaults."""

    title: str
    description: str | None = None
    cover_image_url: str | None = None
    event_date: date | None = None
    event_location: str | None = None
    is_featured: bool = False
    sort_order: int = 0


class AlbumCreateRequest(ActorRequest, AlbumFields):
    pass


class AlbumUpdateRequest(ActorRequest, AlbumFields):
    album_id: str


class AlbumDeleteRequest(ActorRequest):
    album_id: str


class AlbumItemAddRequest(ActorRequest):
    album_id: str
    item_id: str
    sort_order: int = 0


class AlbumItemRemoveRequest(ActorRequest):
    album_id: str
    item_id: str


class ItemOrderIn(BaseModel):
    item_id: str
    sort_order: int


class AlbumReorderRequest(ActorRequest):
    album_id: str
    orders: list[ItemOrderIn]


class MediaDeleteRequest(ActorRequest):
    category: str
    path: str


class SignedUrlRequest(BaseModel):
    refs: list[str]
