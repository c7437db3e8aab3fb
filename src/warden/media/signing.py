"""Signed access URLs for stored media.

A signed URL carries its expiry and an HMAC-SHA256 over
``bucket/path:expires``; the serving route recomputes the HMAC to check it.
Grants are computed per call and never stored.

Batch issue is per-entry: a ref that cannot be parsed or points to a
missing object yields an error entry (with the ref echoed back as its URL)
and never affects the other entries.
"""

from __future__ import annotations

import hashlib
import hmac
import logging
import time
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from typing import Callable
from urllib.parse import unquote, urlsplit

from warden.storage.base import StorageBackend

logger = logging.getLogger(__name__)

_MARKERS = ("/media/public/", "/media/object/", "/media/signed/")


@dataclass
class AccessGrant:
    """Result of signing one ref; exactly one of expires_at / error is set."""

    ref: str
    url: str
    expires_at: str | None = None
    error: str | None = None

    def to_dict(self) -> dict:
        return {k: v for k, v in asdict(self).items() if v is not None}


def parse_ref(ref: str) -> tuple[str, str] | None:
    """Split a media reference into ``(bucket, path)``.

    Accepts any URL produced by this service (public, object or signed) or a
    bare ``bucket/path``.

    Examples:
        >>> parse_ref("http://localhost:8000/media/object/journal/u1/journal/a.png")
        ('journal', 'u1/journal/a.png')
        >>> parse_ref("archive/u1/archive/b.pdf")
        ('archive', 'u1/archive/b.pdf')
        >>> parse_ref("https://example.com/elsewhere.png") is None
        True
    """
    if not isinstance(ref, str) or not ref.strip():
        return None
    ref = ref.strip()

    if "://" in ref:
        remainder = None
        url_path = unquote(urlsplit(ref).path)
        for marker in _MARKERS:
            if marker in url_path:
                remainder = url_path.split(marker, 1)[1]
                break
        if remainder is None:
            return None
    else:
        remainder = ref.split("?", 1)[0]

    bucket, _, path = remainder.strip("/").partition("/")
    segments = [s for s in path.split("/") if s]
    if not bucket or not segments or any(s in (".", "..") for s in segments):
        return None
    return bucket, "/".join(segments)


class SignedUrlIssuer:
    """Mint and verify time-limited media URLs."""

    def __init__(
        self,
        secret: str,
        base_url: str,
        storage: StorageBackend,
        ttl_seconds: int = 3600,
        clock: Callable[[], float] = time.time,
    ):
        """Initialize the issuer.

        Args:
            secret: HMAC key.
            base_url: Public base URL of this service.
            storage: Backend checked for object existence.
            ttl_seconds: Lifetime of each URL.
            clock: Returns the current unix time (tests override it).
        """
        self._key = secret.encode()
        self.base_url = base_url.rstrip("/")
        self.storage = storage
        self.ttl_seconds = ttl_seconds
        self.clock = clock

    def signature(self, bucket: str, path: str, expires: int) -> str:
        message = f"{bucket}/{path}:{expires}".encode()
        return hmac.new(self._key, message, hashlib.sha256).hexdigest()

    def sign(self, bucket: str, path: str) -> AccessGrant:
        """Mint a signed URL for one object, without checking it exists."""
        expires = int(self.clock()) + self.ttl_seconds
        url = (
            f"{self.base_url}/media/signed/{bucket}/{path}"
            f"?expires={expires}&signature={self.signature(bucket, path, expires)}"
        )
        expires_at = datetime.fromtimestamp(expires, tz=timezone.utc).isoformat().replace(
            "+00:00", "Z"
        )
        return AccessGrant(ref=f"{bucket}/{path}", url=url, expires_at=expires_at)

    def issue(self, refs: list[str]) -> list[AccessGrant]:
        """Sign a batch of refs, one grant per ref in input order."""
        grants = []
        for ref in refs:
            parsed = parse_ref(ref)
            if parsed is None:
                logger.warning(f"Unparseable media ref: {ref!r}")
                grants.append(AccessGrant(ref=ref, url=ref, error="Invalid URL format"))
                continue

            bucket, path = parsed
            if not self.storage.exists(bucket, path):
                logger.warning(f"Signed URL requested for missing object {bucket}/{path}")
                grants.append(AccessGrant(ref=ref, url=ref, error="Object not found"))
                continue

            grant = self.sign(bucket, path)
            grant.ref = ref
            grants.append(grant)
        return grants

    def verify(self, bucket: str, path: str, expires: int, signature: str) -> bool:
        """Return True for an unexpired URL whose signature matches."""
        if expires < int(self.clock()):
            return False
        expected = self.signature(bucket, path, expires)
        return hmac.compare_digest(expected, signature or "")
