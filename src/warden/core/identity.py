"""Identity utilities for records and stored objects.

- new_record_id: opaque primary key for every inserted row
- unique_object_name: collision-free filename for an upload
- object_path: storage path ``owner/category[/folder]/name``
"""

from __future__ import annotations

import re
import secrets
import time
import uuid

from warden.core.errors import ValidationError

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]+")
_FOLDER_SEGMENT = re.compile(r"^[A-Za-z0-9_-]+$")
MAX_FILENAME_LENGTH = 120


def new_record_id() -> str:
    """Return a fresh record id (uuid4 string)."""
    return str(uuid.uuid4())


def sanitize_filename(filename: str | None) -> str:
    """Reduce a client-supplied filename to a safe single path segment.

    Args:
        filename: Original filename from the upload, may be None.

    Returns:
        Filename containing only ``[A-Za-z0-9._-]``, never empty,
        never starting with a dot.

    Examples:
        >>> sanitize_filename("my photo (1).jpg")
        'my_photo_1_.jpg'
        >>> sanitize_filename("../../etc/passwd")
        'passwd'
    """
    name = (filename or "").replace("\\", "/").split("/")[-1]
    name = _UNSAFE_CHARS.sub("_", name).strip("._")
    if not name:
        name = "file"
    return name[-MAX_FILENAME_LENGTH:]


def unique_object_name(filename: str | None, now_ms: int | None = None) -> str:
    """Build a unique object name for an upload.

    Format: ``<epoch ms>-<8 hex>-<sanitized filename>``. The timestamp keeps
    names ordered; the random part separates uploads landing in the same
    millisecond.

    Args:
        filename: Original filename.
        now_ms: Timestamp override in milliseconds (tests).

    Returns:
        Object name safe to use as the last path segment.
    """
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    return f"{now_ms}-{secrets.token_hex(4)}-{sanitize_filename(filename)}"


def split_folder(folder: str | None) -> list[str]:
    """Validate an optional sub-folder and return its segments.

    Raises:
        ValidationError: If any segment is empty or contains unsafe characters.
    """
    if folder is None or folder.strip("/") == "":
        return []
    segments = folder.strip("/").split("/")
    for segment in segments:
        if not _FOLDER_SEGMENT.match(segment):
            raise ValidationError(f"Invalid folder: {folder}")
    return segments


def object_path(owner_id: str, category: str, name: str, folder: str | None = None) -> str:
    """Compose the storage path ``owner/category[/folder]/name``."""
    if not owner_id or "/" in owner_id or owner_id in (".", ".."):
        raise ValidationError("Invalid owner id for upload path")
    return "/".join([owner_id, category, *split_folder(folder), name])
