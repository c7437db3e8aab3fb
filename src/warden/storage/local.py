"""Filesystem storage backend.

Each bucket is a directory under `root`; object paths map to files below
it. Writes use exclusive creation so an existing object is never replaced
unless overwrite is requested.
"""

from __future__ import annotations

import logging
import mimetypes
from pathlib import Path

from warden.storage.base import ObjectExistsError, StorageBackend, StorageError

logger = logging.getLogger(__name__)


class LocalStorage(StorageBackend):
    """Storage backend writing objects below a root directory."""

    def __init__(self, root: Path):
        """Initialize local storage.

        Args:
            root: Directory holding one sub-directory per bucket.
        """
        self.root = Path(root).resolve()
        self.root.mkdir(parents=True, exist_ok=True)

    def _resolve(self, bucket: str, path: str) -> Path:
        """Map ``bucket/path`` to a file, refusing anything outside root."""
        if not bucket or "/" in bucket or bucket in (".", ".."):
            raise StorageError(f"Invalid bucket: {bucket!r}")
        parts = [p for p in path.split("/") if p]
        if not parts or any(p in (".", "..") for p in parts):
            raise StorageError(f"Invalid object path: {path!r}")

        target = self.root.joinpath(bucket, *parts).resolve()
        if not target.is_relative_to(self.root / bucket):
            raise StorageError(f"Invalid object path: {path!r}")
        return target

    def write(self, bucket: str, path: str, data: bytes, content_type: str, overwrite: bool = False) -> None:
        target = self._resolve(bucket, path)
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            with open(target, "wb" if overwrite else "xb") as f:
                f.write(data)
        except FileExistsError as e:
            raise ObjectExistsError(f"Object already exists: {bucket}/{path}") from e
        except OSError as e:
            # Drop a partially written file
            target.unlink(missing_ok=True)
            raise StorageError(f"Failed to write {bucket}/{path}: {e}") from e
        logger.debug(f"Wrote {len(data)} bytes to {bucket}/{path}")

    def read(self, bucket: str, path: str) -> bytes:
        target = self._resolve(bucket, path)
        try:
            return target.read_bytes()
        except OSError as e:
            raise StorageError(f"Failed to read {bucket}/{path}: {e}") from e

    def exists(self, bucket: str, path: str) -> bool:
        try:
            return self._resolve(bucket, path).is_file()
        except StorageError:
            return False

    def delete(self, bucket: str, path: str) -> bool:
        target = self._resolve(bucket, path)
        if not target.is_file():
            return False
        try:
            target.unlink()
        except OSError as e:
            raise StorageError(f"Failed to delete {bucket}/{path}: {e}") from e
        return True

    def content_type(self, bucket: str, path: str) -> str | None:
        guessed, _ = mimetypes.guess_type(path)
        return guessed
