"""Runtime configuration read from the environment."""

from __future__ import annotations

import logging
import os
import secrets
from dataclasses import dataclass, field
from pathlib import Path

logger = logging.getLogger(__name__)

DEFAULT_DB_PATH = Path("data/warden.db")
DEFAULT_MEDIA_ROOT = Path("media")
DEFAULT_PUBLIC_BASE_URL = "http://localhost:8000"
DEFAULT_SIGNED_URL_TTL = 3600
DEFAULT_CORS_ORIGINS = ("http://localhost:3000", "http://127.0.0.1:3000")


def _split_origins(raw: str | None) -> tuple[str, ...]:
    if not raw:
        return DEFAULT_CORS_ORIGINS
    return tuple(origin.strip() for origin in raw.split(",") if origin.strip())


def _int_env(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None
    if value <= 0:
        raise ValueError(f"{name} must be positive, got {value}")
    return value


@dataclass
class Settings:
    """Service settings.

    Attributes:
        db_path: SQLite database file.
        media_root: Directory backing the local storage buckets.
        public_base_url: Prefix for every URL handed back to clients.
        signing_key: HMAC key for signed media URLs.
        signed_url_ttl_seconds: Lifetime of a signed URL.
        cors_origins: Origins allowed to call the API from a browser.
    """

    db_path: Path = DEFAULT_DB_PATH
    media_root: Path = DEFAULT_MEDIA_ROOT
    public_base_url: str = DEFAULT_PUBLIC_BASE_URL
    signing_key: str = field(default_factory=lambda: secrets.token_hex(32))
    signed_url_ttl_seconds: int = DEFAULT_SIGNED_URL_TTL
    cors_origins: tuple[str, ...] = DEFAULT_CORS_ORIGINS

    @classmethod
    def from_env(cls) -> Settings:
        """Build settings from WARDEN_* environment variables."""
        signing_key = os.environ.get("WARDEN_SIGNING_KEY")
        if not signing_key:
            # Signed URLs will not survive a restart with a generated key
            logger.warning("WARDEN_SIGNING_KEY not set; using a per-process random key")
            signing_key = secrets.token_hex(32)

        return cls(
            db_path=Path(os.environ.get("WARDEN_DB_PATH", str(DEFAULT_DB_PATH))),
            media_root=Path(os.environ.get("WARDEN_MEDIA_ROOT", str(DEFAULT_MEDIA_ROOT))),
            public_base_url=os.environ.get(
                "WARDEN_PUBLIC_BASE_URL", DEFAULT_PUBLIC_BASE_URL
            ).rstrip("/"),
            signing_key=signing_key,
            signed_url_ttl_seconds=_int_env("WARDEN_SIGNED_URL_TTL", DEFAULT_SIGNED_URL_TTL),
            cors_origins=_split_origins(os.environ.get("WARDEN_CORS_ORIGINS")),
        )
