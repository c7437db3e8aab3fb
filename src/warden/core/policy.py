"""Authorization gate for record mutation.

The store runs with a service credential, so row-level rules are never
applied there. Every mutate/delete goes through `authorize` first.

Rules:
- owner-scoped kinds: allow only when the actor is the record owner
- administrative kinds (albums): always allow; the admin surface filters
  callers before they reach this layer
"""

from __future__ import annotations

from enum import Enum
from typing import Literal

from warden.core.errors import Forbidden

Action = Literal["update", "delete"]


class RecordKind(str, Enum):
    """Kinds of records this layer mutates."""

    POST = "post"
    COMMENT = "comment"
    ARCHIVE_COMMENT = "archive_comment"
    JOURNAL_ENTRY = "journal_entry"
    ARCHIVE_ITEM = "archive_item"
    MEDIA_OBJECT = "media_object"
    ALBUM = "album"
    ALBUM_ITEM = "album_item"


ADMINISTRATIVE_KINDS = frozenset({RecordKind.ALBUM, RecordKind.ALBUM_ITEM})

_PLURAL_LABELS = {
    RecordKind.POST: "posts",
    RecordKind.COMMENT: "comments",
    RecordKind.ARCHIVE_COMMENT: "comments",
    RecordKind.JOURNAL_ENTRY: "journal entries",
    RecordKind.ARCHIVE_ITEM: "archive items",
    RecordKind.MEDIA_OBJECT: "files",
    RecordKind.ALBUM: "albums",
    RecordKind.ALBUM_ITEM: "album items",
}


class Decision(str, Enum):
    ALLOW = "allow"
    DENY = "deny"


def authorize(
    actor_id: str | None,
    owner_id: str | None,
    action: Action,
    kind: RecordKind,
) -> Decision:
    """Decide whether an actor may mutate a record.

    Pure and total: any input yields a decision.

    Args:
        actor_id: Identity making the request.
        owner_id: Owner recorded on the target record.
        action: "update" or "delete".
        kind: Record kind.

    Returns:
        Decision.ALLOW or Decision.DENY.
    """
    if kind in ADMINISTRATIVE_KINDS:
        return Decision.ALLOW
    if not actor_id or not owner_id:
        return Decision.DENY
    return Decision.ALLOW if actor_id == owner_id else Decision.DENY


def require(
    actor_id: str | None,
    owner_id: str | None,
    action: Action,
    kind: RecordKind,
) -> None:
    """Raise Forbidden unless `authorize` allows the action."""
    if authorize(actor_id, owner_id, action, kind) is Decision.DENY:
        raise Forbidden(f"Unauthorized: you can only {action} your own {_PLURAL_LABELS[kind]}")
