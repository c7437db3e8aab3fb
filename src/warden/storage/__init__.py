"""Object storage backends."""

from warden.storage.base import ObjectExistsError, StorageBackend, StorageError
from warden.storage.local import LocalStorage

__all__ = [
    "LocalStorage",
    "ObjectExistsError",
    "StorageBackend",
    "StorageError",
]
