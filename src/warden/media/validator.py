"""Media validation against the category table.

Type is checked before size, so a disallowed type is reported as such
whatever its size. Nothing here touches storage.
"""

from __future__ import annotations

import logging

from warden.core.errors import TooLarge, UnsupportedType
from warden.media.categories import MediaCategory, format_mb, get_category

logger = logging.getLogger(__name__)


def validate(size: int, content_type: str | None, category: str) -> MediaCategory:
    """Check an upload against its category's rules.

    Args:
        size: Payload size in bytes.
        content_type: Declared MIME type.
        category: Category name.

    Returns:
        The matched category.

    Raises:
        ValidationError: Unknown category.
        UnsupportedType: Content type not allowed for the category.
        TooLarge: Payload larger than the category maximum.
    """
    rules = get_category(category)
    declared = (content_type or "").split(";")[0].strip().lower()

    if declared not in rules.allowed_types:
        logger.warning(f"Rejected {declared or 'untyped'} upload for {rules.name}")
        raise UnsupportedType(
            f"Invalid file type '{declared or 'unknown'}' for {rules.name}. "
            f"Allowed: {', '.join(rules.allowed_types)}"
        )

    if size > rules.max_bytes:
        logger.warning(f"Rejected {size} byte upload for {rules.name}")
        raise TooLarge(
            f"File too large: {format_mb(size)}. "
            f"Maximum for {rules.name} is {format_mb(rules.max_bytes)}"
        )

    return rules
