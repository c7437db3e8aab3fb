"""Archive API endpoints.

POST /api/archive/items/create - Create archive item
POST /api/archive/items/update - Partially update own item
POST /api/archive/items/delete - Delete own item
POST /api/archive/comments/create - Comment on an item
POST /api/archive/comments/delete - Delete own archive comment
GET /api/archive/items/{item_id}/comments - List comments on an item
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from warden.api.app import get_db_session
from warden.db import repo
from warden.db.errors import store_errors
from warden.db.repo import DbSession
from warden.models.types import (
    ArchiveCommentCreateRequest,
    ArchiveCommentDeleteRequest,
    ArchiveItemCreateRequest,
    ArchiveItemDeleteRequest,
    ArchiveItemOut,
    ArchiveItemResponse,
    ArchiveItemUpdateRequest,
    CommentListResponse,
    CommentOut,
    CommentResponse,
    MessageResponse,
)
from warden.records.archive import (
    ArchiveItemInput,
    create_archive_item,
    delete_archive_item,
    update_archive_item,
)
from warden.records.comments import create_archive_comment, delete_archive_comment

router = APIRouter()


@router.post("/archive/items/create", response_model=ArchiveItemResponse)
def create_archive_item_endpoint(
    body: ArchiveItemCreateRequest,
    session: DbSession = Depends(get_db_session),
) -> ArchiveItemResponse:
    """Create an archive item owned by the actor."""
    item = create_archive_item(
        session,
        ArchiveItemInput(
            actor_id=body.actor_id,
            title=body.title,
            content_type=body.content_type,
            media_url=body.media_url,
            description=body.description,
            artist_name=body.artist_name,
            tags=body.tags,
        ),
    )
    return ArchiveItemResponse(item=ArchiveItemOut.model_validate(item))


@router.post("/archive/items/update", response_model=ArchiveItemResponse)
def update_archive_item_endpoint(
    body: ArchiveItemUpdateRequest,
    session: DbSession = Depends(get_db_session),
) -> ArchiveItemResponse:
    """Apply the fields present in the body to the actor's item."""
    changes = body.model_dump(exclude_unset=True, exclude={"actor_id", "item_id"})
    item = update_archive_item(session, body.item_id, body.actor_id, changes)
    return ArchiveItemResponse(item=ArchiveItemOut.model_validate(item))


@router.post("/archive/items/delete", response_model=MessageResponse)
def delete_archive_item_endpoint(
    body: ArchiveItemDeleteRequest,
    session: DbSession = Depends(get_db_session),
) -> MessageResponse:
    delete_archive_item(session, body.item_id, body.actor_id)
    return MessageResponse(message="Archive item deleted successfully")


@router.post("/archive/comments/create", response_model=CommentResponse)
def create_archive_comment_endpoint(
    body: ArchiveCommentCreateRequest,
    session: DbSession = Depends(get_db_session),
) -> CommentResponse:
    comment = create_archive_comment(session, body.item_id, body.actor_id, body.content)
    return CommentResponse(comment=CommentOut.model_validate(comment))


@router.post("/archive/comments/delete", response_model=MessageResponse)
def delete_archive_comment_endpoint(
    body: ArchiveCommentDeleteRequest,
    session: DbSession = Depends(get_db_session),
) -> MessageResponse:
    delete_archive_comment(session, body.comment_id, body.actor_id)
    return MessageResponse(message="Comment deleted successfully")


@router.get("/archive/items/{item_id}/comments", response_model=CommentListResponse)
def list_archive_comments_endpoint(
    item_id: str,
    session: DbSession = Depends(get_db_session),
) -> CommentListResponse:
    with store_errors(session, "load comments"):
        comments = repo.list_comments_for_archive_item(session, item_id)
    return CommentListResponse(comments=[CommentOut.model_validate(c) for c in comments])
