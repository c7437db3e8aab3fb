"""Upload router: validated bytes to a stored object and its reference URL.

Object paths are ``owner/category[/folder]/<ms>-<hex>-<filename>``. The
first segment is always the uploader, which is what later deletes check
ownership against.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from warden.core.errors import NotFound, UploadFailed, ValidationError
from warden.core.identity import object_path, unique_object_name
from warden.core.policy import RecordKind, require
from warden.media.categories import MediaCategory, get_category
from warden.media.validator import validate
from warden.storage.base import StorageBackend, StorageError

logger = logging.getLogger(__name__)


@dataclass
class StoredObjectRef:
    """Where an upload landed."""

    url: str
    path: str
    bucket: str


def public_url(base_url: str, bucket: str, path: str) -> str:
    return f"{base_url}/media/public/{bucket}/{path}"


def object_url(base_url: str, bucket: str, path: str) -> str:
    """Unsigned reference to a private object; resolve it with the signed issuer."""
    return f"{base_url}/media/object/{bucket}/{path}"


class MediaUploader:
    """Validate, place and write uploads through a storage backend."""

    def __init__(self, storage: StorageBackend, base_url: str):
        """Initialize the uploader.

        Args:
            storage: Backend the objects are written to.
            base_url: Public base URL of this service, without trailing slash.
        """
        self.storage = storage
        self.base_url = base_url.rstrip("/")

    def reference_for(self, category: MediaCategory, path: str) -> str:
        """Return the client-facing reference for a stored object."""
        if category.public:
            return public_url(self.base_url, category.bucket, path)
        return object_url(self.base_url, category.bucket, path)

    def store(
        self,
        payload: bytes,
        content_type: str | None,
        category: str,
        owner_id: str,
        filename: str | None,
        folder: str | None = None,
        now_ms: int | None = None,
    ) -> StoredObjectRef:
        """Validate and write an upload.

        Args:
            payload: File bytes.
            content_type: Declared MIME type.
            category: Media category name.
            owner_id: Uploading actor; becomes the first path segment.
            filename: Client filename, sanitized before use.
            folder: Optional sub-folder inside the category.
            now_ms: Timestamp override in milliseconds (tests).

        Returns:
            StoredObjectRef with the reference URL, path and bucket.

        Raises:
            ValidationError: Unknown category, bad owner id or folder.
            UnsupportedType: Content type not allowed.
            TooLarge: Payload over the category limit.
            UploadFailed: Backend write failed or the path already existed.
        """
        rules = validate(len(payload), content_type, category)
        if not owner_id or not owner_id.strip():
            raise ValidationError("User ID is required")

        path = object_path(owner_id, rules.name, unique_object_name(filename, now_ms), folder)
        declared = (content_type or "").split(";")[0].strip().lower()
        try:
            self.storage.write(rules.bucket, path, payload, declared, overwrite=False)
        except StorageError as e:
            logger.error(f"Upload to {rules.bucket}/{path} failed: {e}")
            raise UploadFailed(f"Upload failed: {e}") from e

        logger.info(f"Stored {len(payload)} bytes at {rules.bucket}/{path}")
        return StoredObjectRef(url=self.reference_for(rules, path), path=path, bucket=rules.bucket)

    def delete(self, category: str, path: str, actor_id: str) -> None:
        """Delete an object the actor uploaded.

        Raises:
            ValidationError: Unknown category or malformed path.
            Forbidden: The path's owner segment is not the actor.
            NotFound: No such object.
        """
        rules = get_category(category)
        segments = [s for s in (path or "").split("/") if s]
        if len(segments) < 2 or any(s in (".", "..") for s in segments):
            raise ValidationError("Invalid object path")

        owner_id = segments[0]
        if owner_id != actor_id:
            logger.warning(f"Denied delete of {rules.bucket}/{path} by {actor_id}")
        require(actor_id, owner_id, "delete", RecordKind.MEDIA_OBJECT)

        normalized = "/".join(segments)
        try:
            deleted = self.storage.delete(rules.bucket, normalized)
        except StorageError as e:
            logger.error(f"Delete of {rules.bucket}/{normalized} failed: {e}")
            raise UploadFailed(f"Delete failed: {e}") from e
        if not deleted:
            raise NotFound("File not found")
        logger.info(f"Deleted {rules.bucket}/{normalized}")
