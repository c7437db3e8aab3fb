"""Media API endpoints.

POST /api/media/upload - Validate and store a multipart upload
POST /api/media/delete - Delete an object the actor uploaded
GET /api/media/limits - Per-category types and size ceilings
POST /api/media/signed-urls - Mint signed URLs for a batch of refs

Object serving (outside /api):
GET /media/public/{bucket}/{path} - Public categories only
GET /media/signed/{bucket}/{path}?expires=&signature= - Any category, signed
GET /media/object/{bucket}/{path} - Always 403; private refs need signing
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile
from fastapi.responses import Response

from warden.api.app import get_issuer, get_storage, get_uploader
from warden.core.errors import Forbidden, NotFound
from warden.media.categories import CATEGORIES, describe_limits
from warden.media.signing import SignedUrlIssuer
from warden.media.uploads import MediaUploader
from warden.media.validator import validate
from warden.models.types import (
    AccessGrantOut,
    CategoryLimits,
    LimitsResponse,
    MediaDeleteRequest,
    MessageResponse,
    SignedUrlRequest,
    SignedUrlResponse,
    UploadResponse,
)
from warden.storage.base import StorageBackend, StorageError

logger = logging.getLogger(__name__)

router = APIRouter()
serving_router = APIRouter()


@router.post("/media/upload", response_model=UploadResponse)
def upload_media_endpoint(
    file: UploadFile = File(...),
    category: str = Form(...),
    actor_id: str = Form(...),
    folder: str | None = Form(default=None),
    uploader: MediaUploader = Depends(get_uploader),
) -> UploadResponse:
    """Validate and store an upload.

    Type and declared size are checked before the body is read; the read
    itself stops one byte past the category maximum.

    Raises:
        ValidationError: Unknown category or bad folder (400).
        UnsupportedType: Type not allowed for the category (400).
        TooLarge: Over the category ceiling (400).
        UploadFailed: Storage write failed (500).
    """
    rules = validate(file.size or 0, file.content_type, category)
    payload = file.file.read(rules.max_bytes + 1)
    ref = uploader.store(
        payload,
        file.content_type,
        rules.name,
        actor_id,
        file.filename,
        folder=folder,
    )
    return UploadResponse(url=ref.url, path=ref.path, bucket=ref.bucket)


@router.post("/media/delete", response_model=MessageResponse)
def delete_media_endpoint(
    body: MediaDeleteRequest,
    uploader: MediaUploader = Depends(get_uploader),
) -> MessageResponse:
    uploader.delete(body.category, body.path, body.actor_id)
    return MessageResponse(message="File deleted successfully")


@router.get("/media/limits", response_model=LimitsResponse)
def media_limits_endpoint() -> LimitsResponse:
    """Advertise the same limits the validator enforces."""
    return LimitsResponse(categories=[CategoryLimits(**c) for c in describe_limits()])


@router.post("/media/signed-urls", response_model=SignedUrlResponse)
def signed_urls_endpoint(
    body: SignedUrlRequest,
    issuer: SignedUrlIssuer = Depends(get_issuer),
) -> SignedUrlResponse:
    """Sign each ref independently; failures are reported per entry."""
    grants = issuer.issue(body.refs)
    return SignedUrlResponse(data=[AccessGrantOut(**g.to_dict()) for g in grants])


def _object_response(storage: StorageBackend, bucket: str, path: str) -> Response:
    if not storage.exists(bucket, path):
        raise NotFound("File not found")
    try:
        data = storage.read(bucket, path)
    except StorageError as e:
        logger.error(f"Failed to read {bucket}/{path}: {e}")
        raise NotFound("File not found") from e
    return Response(
        content=data,
        media_type=storage.content_type(bucket, path) or "application/octet-stream",
    )


@serving_router.get("/media/public/{bucket}/{path:path}")
def serve_public_object(
    bucket: str,
    path: str,
    storage: StorageBackend = Depends(get_storage),
) -> Response:
    """Serve an object from a public category."""
    category = CATEGORIES.get(bucket)
    if category is None or not category.public:
        raise NotFound("File not found")
    return _object_response(storage, bucket, path)


@serving_router.get("/media/signed/{bucket}/{path:path}")
def serve_signed_object(
    bucket: str,
    path: str,
    expires: int = Query(...),
    signature: str = Query(...),
    storage: StorageBackend = Depends(get_storage),
    issuer: SignedUrlIssuer = Depends(get_issuer),
) -> Response:
    """Serve any object through an unexpired signed URL."""
    if not issuer.verify(bucket, path, expires, signature):
        logger.warning(f"Rejected signed URL for {bucket}/{path}")
        raise Forbidden("Invalid or expired signature")
    return _object_response(storage, bucket, path)


@serving_router.get("/media/object/{bucket}/{path:path}")
def serve_unsigned_object(bucket: str, path: str) -> Response:
    """Private references are not directly fetchable."""
    raise Forbidden("Signed URL required")
