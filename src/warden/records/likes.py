"""Idempotent like toggles for posts and archive items.

A toggle is check-then-act: look up the (actor, target) edge, delete it if
present, insert it otherwise. Two concurrent "like" toggles can both see no
edge; the loser's insert then trips the UNIQUE(user_id, target) constraint.
That outcome still means "liked", so it is reported as success.
"""

from __future__ import annotations

import logging

from sqlalchemy.exc import IntegrityError

from warden.core.identity import new_record_id
from warden.db import repo
from warden.db.errors import is_unique_violation, store_errors
from warden.db.repo import DbSession, EdgeModel
from warden.db.schema import ArchiveLike, Like
from warden.models.domain import ToggleResult
from warden.records.ownership import require_text

logger = logging.getLogger(__name__)


def toggle(session: DbSession, model: EdgeModel, actor_id: str, target_id: str) -> ToggleResult:
    """Flip the actor's like on a target.

    Args:
        session: Database session.
        model: Edge table (Like or ArchiveLike).
        actor_id: Liking actor.
        target_id: Post or archive item id.

    Returns:
        ToggleResult with the state after the call and the target's like count.

    Raises:
        ValidationError: Blank actor or target.
        StoreError: Database failure, including a target that does not exist.
    """
    actor_id = require_text(actor_id, "User ID")
    target_id = require_text(target_id, "Target ID")

    with store_errors(session, "load like"):
        edge_id = repo.find_edge_id(session, model, actor_id, target_id)

    if edge_id is not None:
        with store_errors(session, "remove like"):
            repo.delete_edge(session, model, edge_id)
            repo.commit(session)
        logger.debug(f"{actor_id} unliked {target_id}")
        return ToggleResult(liked=False, like_count=_count(session, model, target_id))

    with store_errors(session, "toggle like"):
        try:
            repo.insert_edge(session, model, new_record_id(), actor_id, target_id)
            repo.commit(session)
            logger.debug(f"{actor_id} liked {target_id}")
        except IntegrityError as e:
            if not is_unique_violation(e):
                raise
            # A concurrent toggle inserted the same edge first
            repo.rollback(session)
            logger.info(f"Concurrent like by {actor_id} on {target_id}, edge already present")

    return ToggleResult(liked=True, like_count=_count(session, model, target_id))


def _count(session: DbSession, model: EdgeModel, target_id: str) -> int:
    with store_errors(session, "count likes"):
        return repo.count_edges(session, model, target_id)


def toggle_post_like(session: DbSession, actor_id: str, post_id: str) -> ToggleResult:
    """Toggle the actor's like on a post."""
    return toggle(session, Like, actor_id, post_id)


def toggle_archive_like(session: DbSession, actor_id: str, item_id: str) -> ToggleResult:
    """Toggle the actor's like on an archive item."""
    return toggle(session, ArchiveLike, actor_id, item_id)
