"""Error taxonomy for Warden.

Domain code raises these; the API layer turns them into the JSON envelope
with the matching status code. Raw backend exceptions never cross the
boundary.
"""

from __future__ import annotations

from fastapi import status


class WardenError(Exception):
    """Base class for errors surfaced to clients."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    detail: str = "Internal error"

    def __init__(self, detail: str | None = None) -> None:
        super().__init__(detail or self.detail)
        if detail:
            self.detail = detail


class ValidationError(WardenError):
    """Missing or malformed required input."""

    status_code = status.HTTP_400_BAD_REQUEST
    detail = "Invalid input"


class Forbidden(WardenError):
    """Authenticated but not allowed to touch the record."""

    status_code = status.HTTP_403_FORBIDDEN
    detail = "Forbidden"


class NotFound(WardenError):
    """Referenced record or object does not exist."""

    status_code = status.HTTP_404_NOT_FOUND
    detail = "Not found"


class AlreadyExists(WardenError):
    """Duplicate unique-key insert outside the toggle race."""

    status_code = status.HTTP_409_CONFLICT
    detail = "Already exists"


class UnsupportedType(WardenError):
    """Declared content type is not allowed for the media category."""

    status_code = status.HTTP_400_BAD_REQUEST
    detail = "Unsupported file type"


class TooLarge(WardenError):
    """Payload exceeds the media category ceiling."""

    status_code = status.HTTP_400_BAD_REQUEST
    detail = "File too large"


class UploadFailed(WardenError):
    """Storage backend rejected or failed the write."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    detail = "Upload failed"


class StoreError(WardenError):
    """Relational store failure."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    detail = "Database error"
