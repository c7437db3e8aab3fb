"""Feed post mutations.

Update policy: partial. Fields absent from `changes` are left as they are;
an explicit None clears an optional field. `content` can never be cleared.
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
from warden.db.schema import Post
from warden.models.domain import PostEntity
from warden.records.ownership import (
    delete_owned_record,
    normalize_tags,
    optional_text,
    require_text,
    update_owned_record,
)

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = frozenset(
    {"content", "tags", "content_warning", "media_url", "media_type"}
)


@dataclass
class PostInput:
    """Input for post creation."""

    actor_id: str
    content: str
    tags: list[str] = field(default_factory=list)
    content_warning: str | None = None
    media_url: str | None = None
    media_type: str | None = None


def create_post(session: DbSession, post_input: PostInput) -> PostEntity:
    """Create a post owned by the actor.

    Raises:
        ValidationError: Blank content or actor.
        StoreError: Database failure.
    """
    actor_id = require_text(post_input.actor_id, "User ID")
    content = require_text(post_input.content, "Content")
    warning = optional_text(post_input.content_warning)

    entity = PostEntity(
        id=new_record_id(),
        user_id=actor_id,
        content=content,
        tags=normalize_tags(post_input.tags),
        has_content_warning=warning is not None,
        content_warning_text=warning,
        media_url=post_input.media_url or None,
        media_type=post_input.media_type or None,
    )
    with store_errors(session, "create post"):
        created = repo.create_post(session, entity)
        repo.commit(session)
    logger.info(f"Created post {created.id}")
    return created


def _post_values(changes: dict[str, Any]) -> dict[str, Any]:
    unknown = set(changes) - UPDATABLE_FIELDS
    if unknown:
        raise ValidationError(f"Unknown post fields: {', '.join(sorted(unknown))}")

    values: dict[str, Any] = {}
    if "content" in changes:
        values["content"] = require_text(changes["content"], "Content")
    if "tags" in changes:
        values["tags"] = normalize_tags(changes["tags"])
    if "content_warning" in changes:
        warning = optional_text(changes["content_warning"])
        values["has_content_warning"] = warning is not None
        values["content_warning_text"] = warning
    if "media_url" in changes:
        values["media_url"] = changes["media_url"] or None
    if "media_type" in changes:
        values["media_type"] = changes["media_type"] or None
    return values


def update_post(
    session: DbSession, post_id: str, actor_id: str, changes: dict[str, Any]
) -> PostEntity:
    """Apply a partial update to the actor's post.

    Args:
        session: Database session.
        post_id: Post to update.
        actor_id: Requesting actor.
        changes: Only the fields the caller supplied.

    Raises:
        ValidationError: Unknown field or blank content.
        NotFound: No such post.
        Forbidden: Actor does not own the post.
    """
    values = _post_values(changes)
    update_owned_record(session, Post, RecordKind.POST, post_id, actor_id, values, "post")
    post = repo.get_post(session, post_id)
    if post is None:
        raise NotFound("Post not found")
    return post


def delete_post(session: DbSession, post_id: str, actor_id: str) -> None:
    """Delete the actor's post; likes and comments cascade."""
    delete_owned_record(session, Post, RecordKind.POST, post_id, actor_id, "post")
