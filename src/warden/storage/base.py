"""Base storage backend interface.

Backends hold immutable objects addressed by ``(bucket, path)``:
- write once (overwrite is refused by default)
- read, exists, delete
- Forbidden: authorization, validation, URL shaping
"""

from __future__ import annotations

from abc import ABC, abstractmethod


class StorageError(Exception):
    """Backend failure or refused write."""


class ObjectExistsError(StorageError):
    """A write targeted an existing object with overwrite disabled."""


class StorageBackend(ABC):
    """Abstract base class for object storage.

    Backends implement a narrow interface and must NOT:
    - Check ownership
    - Validate media types or sizes
    - Build client-facing URLs
    """

    @abstractmethod
    def write(self, bucket: str, path: str, data: bytes, content_type: str, overwrite: bool = False) -> None:
        """Store bytes at ``bucket/path``.

        Args:
            bucket: Bucket (media category).
            path: Object path inside the bucket.
            data: Object bytes.
            content_type: MIME type recorded with the object.
            overwrite: Replace an existing object instead of failing.

        Raises:
            ObjectExistsError: Object exists and overwrite is False.
            StorageError: Any other backend failure.
        """
        pass

    @abstractmethod
    def read(self, bucket: str, path: str) -> bytes:
        """Return object bytes.

        Raises:
            StorageError: Object missing or unreadable.
        """
        pass

    @abstractmethod
    def exists(self, bucket: str, path: str) -> bool:
        """Return True when the object exists."""
        pass

    @abstractmethod
    def delete(self, bucket: str, path: str) -> bool:
        """Delete an object.

        Returns:
            False when there was nothing to delete.
        """
        pass

    @abstractmethod
    def content_type(self, bucket: str, path: str) -> str | None:
        """Return the MIME type recorded at write time, if any."""
        pass
