"""Comments on posts and on archive items.

`content` is the only mutable field of a comment and it is required on
every update.
"""

from __future__ import annotations

import logging

from warden.core.errors import NotFound
from warden.core.identity import new_record_id
from warden.core.policy import RecordKind
from warden.db import repo
from warden.db.errors import store_errors
from warden.db.repo import DbSession
from warden.db.schema import ArchiveComment, Comment
from warden.models.domain import CommentEntity
from warden.records.ownership import delete_owned_record, require_text, update_owned_record

logger = logging.getLogger(__name__)


def _insert(session: DbSession, entity: CommentEntity, on_archive: bool) -> CommentEntity:
    label = "archive item" if on_archive else "post"
    with store_errors(session, "create comment"):
        if on_archive:
            created = repo.create_archive_comment(session, entity)
        else:
            created = repo.create_comment(session, entity)
        repo.commit(session)
    logger.info(f"Created comment {created.id} on {label} {entity.target_id}")
    return created


def create_comment(session: DbSession, post_id: str, actor_id: str, content: str) -> CommentEntity:
    """Comment on a post.

    The post's existence is enforced by the foreign key, not checked here.
    """
    entity = CommentEntity(
        id=new_record_id(),
        target_id=require_text(post_id, "Post ID"),
        user_id=require_text(actor_id, "User ID"),
        content=require_text(content, "Content"),
    )
    return _insert(session, entity, on_archive=False)


def update_comment(session: DbSession, comment_id: str, actor_id: str, content: str) -> CommentEntity:
    """Replace the text of the actor's comment."""
    values = {"content": require_text(content, "Content")}
    update_owned_record(
        session, Comment, RecordKind.COMMENT, comment_id, actor_id, values, "comment"
    )
    comment = repo.get_comment(session, comment_id)
    if comment is None:
        raise NotFound("Comment not found")
    return comment


def delete_comment(session: DbSession, comment_id: str, actor_id: str) -> None:
    """Delete the actor's comment."""
    delete_owned_record(session, Comment, RecordKind.COMMENT, comment_id, actor_id, "comment")


def create_archive_comment(
    session: DbSession, item_id: str, actor_id: str, content: str
) -> CommentEntity:
    """Comment on an archive item."""
    entity = CommentEntity(
        id=new_record_id(),
        target_id=require_text(item_id, "Item ID"),
        user_id=require_text(actor_id, "User ID"),
        content=require_text(content, "Content"),
    )
    return _insert(session, entity, on_archive=True)


def update_archive_comment(
    session: DbSession, comment_id: str, actor_id: str, content: str
) -> CommentEntity:
    """Replace the text of the actor's archive comment."""
    values = {"content": require_text(content, "Content")}
    update_owned_record(
        session,
        ArchiveComment,
        RecordKind.ARCHIVE_COMMENT,
        comment_id,
        actor_id,
        values,
        "comment",
    )
    comment = repo.get_archive_comment(session, comment_id)
    if comment is None:
        raise NotFound("Comment not found")
    return comment


def delete_archive_comment(session: DbSession, comment_id: str, actor_id: str) -> None:
    """Delete the actor's archive comment."""
    delete_owned_record(
        session, ArchiveComment, RecordKind.ARCHIVE_COMMENT, comment_id, actor_id, "comment"
    )
