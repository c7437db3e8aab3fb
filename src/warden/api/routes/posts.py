"""Posts API endpoints.

POST /api/posts/create - Create post
POST /api/posts/update - Partially update own post
POST /api/posts/delete - Delete own post
GET /api/posts - List newest posts with counters
GET /api/posts/{post_id}/comments - List comments on a post
"""

from __future__ import annotations

from dataclasses import asdict

from fastapi import APIRouter, Depends, Query

from warden.api.app import get_db_session
from warden.db import repo
from warden.db.errors import store_errors
from warden.db.repo import DbSession
from warden.models.domain import PostSummary
from warden.models.types import (
    CommentListResponse,
    CommentOut,
    MessageResponse,
    PostCreateRequest,
    PostDeleteRequest,
    PostListResponse,
    PostOut,
    PostResponse,
    PostSummaryOut,
    PostUpdateRequest,
)
from warden.records.posts import PostInput, create_post, delete_post, update_post

router = APIRouter()


def _summary_to_out(summary: PostSummary) -> PostSummaryOut:
    return PostSummaryOut(
        **asdict(summary.post),
        like_count=summary.like_count,
        comment_count=summary.comment_count,
        liked_by_actor=summary.liked_by_actor,
    )


@router.post("/posts/create", response_model=PostResponse)
def create_post_endpoint(
    body: PostCreateRequest,
    session: DbSession = Depends(get_db_session),
) -> PostResponse:
    """Create a post owned by the actor."""
    post = create_post(
        session,
        PostInput(
            actor_id=body.actor_id,
            content=body.content,
            tags=body.tags,
            content_warning=body.content_warning,
            media_url=body.media_url,
            media_type=body.media_type,
        ),
    )
    return PostResponse(post=PostOut.model_validate(post))


@router.post("/posts/update", response_model=PostResponse)
def update_post_endpoint(
    body: PostUpdateRequest,
    session: DbSession = Depends(get_db_session),
) -> PostResponse:
    """Apply the fields present in the body to the actor's post.

    Raises:
        ValidationError: Blank content or unknown field (400).
        Forbidden: Actor is not the owner (403).
        NotFound: No such post (404).
    """
    changes = body.model_dump(exclude_unset=True, exclude={"actor_id", "post_id"})
    post = update_post(session, body.post_id, body.actor_id, changes)
    return PostResponse(post=PostOut.model_validate(post))


@router.post("/posts/delete", response_model=MessageResponse)
def delete_post_endpoint(
    body: PostDeleteRequest,
    session: DbSession = Depends(get_db_session),
) -> MessageResponse:
    """Delete the actor's post along with its likes and comments."""
    delete_post(session, body.post_id, body.actor_id)
    return MessageResponse(message="Post deleted successfully")


@router.get("/posts", response_model=PostListResponse)
def list_posts_endpoint(
    actor_id: str | None = Query(default=None),
    limit: int = Query(default=50, ge=1, le=200),
    session: DbSession = Depends(get_db_session),
) -> PostListResponse:
    """List the newest posts; `liked_by_actor` is filled when actor_id is given."""
    with store_errors(session, "load posts"):
        summaries = repo.list_posts(session, actor_id=actor_id, limit=limit)
    return PostListResponse(posts=[_summary_to_out(s) for s in summaries])


@router.get("/posts/{post_id}/comments", response_model=CommentListResponse)
def list_post_comments_endpoint(
    post_id: str,
    session: DbSession = Depends(get_db_session),
) -> CommentListResponse:
    """List comments on a post, oldest first."""
    with store_errors(session, "load comments"):
        comments = repo.list_comments_for_post(session, post_id)
    return CommentListResponse(comments=[CommentOut.model_validate(c) for c in comments])
