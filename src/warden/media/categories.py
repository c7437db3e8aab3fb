"""Media category table.

One row per upload category. The validator, the upload router and the
limits endpoint all read this table, so advertised and enforced limits
are the same values.
"""

from __future__ import annotations

from dataclasses import dataclass

from warden.core.errors import ValidationError

MB = 1024 * 1024

IMAGE_TYPES = (
    "image/jpeg",
    "image/png",
    "image/gif",
    "image/webp",
    "image/heic",
    "image/heif",
)
VIDEO_TYPES = ("video/mp4", "video/webm")
ARCHIVE_EXTRA_TYPES = ("audio/mpeg", "audio/wav", "application/pdf")


@dataclass(frozen=True)
class MediaCategory:
    """Upload rules for one category.

    Attributes:
        name: Category key, also the storage bucket.
        allowed_types: Accepted MIME types.
        max_bytes: Largest accepted payload (inclusive).
        public: Public objects get a direct URL; private ones need a signed URL.
    """

    name: str
    allowed_types: tuple[str, ...]
    max_bytes: int
    public: bool

    @property
    def bucket(self) -> str:
        return self.name


CATEGORIES: dict[str, MediaCategory] = {
    c.name: c
    for c in (
        MediaCategory("avatar", IMAGE_TYPES, 5 * MB, public=True),
        MediaCategory("post", IMAGE_TYPES + VIDEO_TYPES, 10 * MB, public=True),
        MediaCategory("journal", IMAGE_TYPES, 10 * MB, public=False),
        MediaCategory(
            "archive", IMAGE_TYPES + VIDEO_TYPES + ARCHIVE_EXTRA_TYPES, 20 * MB, public=False
        ),
    )
}


def get_category(name: str | None) -> MediaCategory:
    """Look up a category by name.

    Raises:
        ValidationError: Unknown or missing category.
    """
    category = CATEGORIES.get((name or "").strip().lower())
    if category is None:
        raise ValidationError(
            f"Invalid category '{name}'. Expected one of: {', '.join(CATEGORIES)}"
        )
    return category


def format_mb(size: int) -> str:
    """Render a byte count in MB with up to two decimals.

    Examples:
        >>> format_mb(5 * MB)
        '5MB'
        >>> format_mb(5 * MB + 1)
        '5.00MB'
    """
    if size % MB == 0:
        return f"{size // MB}MB"
    return f"{size / MB:.2f}MB"


def describe_limits() -> list[dict]:
    """Return the category table as plain dicts for the limits endpoint."""
    return [
        {
            "category": c.name,
            "allowed_types": list(c.allowed_types),
            "max_bytes": c.max_bytes,
            "max_size": format_mb(c.max_bytes),
            "public": c.public,
        }
        for c in CATEGORIES.values()
    ]
