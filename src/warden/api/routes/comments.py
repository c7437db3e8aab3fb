"""Comments API endpoints.

POST /api/comments/create - Comment on a post
POST /api/comments/update - Edit own comment
POST /api/comments/delete - Delete own comment
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from warden.api.app import get_db_session
from warden.db.repo import DbSession
from warden.models.types import (
    CommentCreateRequest,
    CommentDeleteRequest,
    CommentOut,
    CommentResponse,
    CommentUpdateRequest,
    MessageResponse,
)
from warden.records.comments import create_comment, delete_comment, update_comment

router = APIRouter()


@router.post("/comments/create", response_model=CommentResponse)
def create_comment_endpoint(
    body: CommentCreateRequest,
    session: DbSession = Depends(get_db_session),
) -> CommentResponse:
    """Comment on a post."""
    comment = create_comment(session, body.post_id, body.actor_id, body.content)
    return CommentResponse(comment=CommentOut.model_validate(comment))


@router.post("/comments/update", response_model=CommentResponse)
def update_comment_endpoint(
    body: CommentUpdateRequest,
    session: DbSession = Depends(get_db_session),
) -> CommentResponse:
    comment = update_comment(session, body.comment_id, body.actor_id, body.content)
    return CommentResponse(comment=CommentOut.model_validate(comment))


@router.post("/comments/delete", response_model=MessageResponse)
def delete_comment_endpoint(
    body: CommentDeleteRequest,
    session: DbSession = Depends(get_db_session),
) -> MessageResponse:
    delete_comment(session, body.comment_id, body.actor_id)
    return MessageResponse(message="Comment deleted successfully")
