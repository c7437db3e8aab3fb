"""Likes API endpoints.

POST /api/likes/toggle - Like or unlike a post
POST /api/archive/likes/toggle - Like or unlike an archive item
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from warden.api.app import get_db_session
from warden.db.repo import DbSession
from warden.models.types import ArchiveLikeToggleRequest, LikeToggleRequest, ToggleResponse
from warden.records.likes import toggle_archive_like, toggle_post_like

router = APIRouter()


@router.post("/likes/toggle", response_model=ToggleResponse)
def toggle_like_endpoint(
    body: LikeToggleRequest,
    session: DbSession = Depends(get_db_session),
) -> ToggleResponse:
    """Flip the actor's like on a post.

    Returns:
        ToggleResponse with `liked` (state after the call) and the post's
        like count.
    """
    result = toggle_post_like(session, body.actor_id, body.post_id)
    return ToggleResponse(liked=result.liked, like_count=result.like_count)


@router.post("/archive/likes/toggle", response_model=ToggleResponse)
def toggle_archive_like_endpoint(
    body: ArchiveLikeToggleRequest,
    session: DbSession = Depends(get_db_session),
) -> ToggleResponse:
    """Flip the actor's like on an archive item."""
    result = toggle_archive_like(session, body.actor_id, body.item_id)
    return ToggleResponse(liked=result.liked, like_count=result.like_count)
