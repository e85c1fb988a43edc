"""Tenant slug rules and helpers."""

import re
from typing import Awaitable, Callable


class TenantValidationRules:
    """Centralized tenant slug rules."""

    SLUG_PATTERN = re.compile(r'^[a-z0-9](?:[a-z0-9-]*[a-z0-9])?$')
    SLUGIFY_PATTERN = re.compile(r'[^a-z0-9]+')

    MAX_SLUG_LENGTH = 60
    # Room for the uniqueness suffix appended after slugify
    MAX_STORED_SLUG_LENGTH = 72
    FALLBACK_SLUG = "restaurant"

    @classmethod
    def validate_slug(cls, slug: str) -> None:
        """Validate tenant slug format.

        Raises:
            ValueError: If slug is invalid
        """
        if not slug:
            raise ValueError("Slug cannot be empty")

        if len(slug) > cls.MAX_STORED_SLUG_LENGTH:
            raise ValueError(f"Slug cannot exceed {cls.MAX_STORED_SLUG_LENGTH} characters")

        if not cls.SLUG_PATTERN.match(slug):
            raise ValueError(
                "Slug must contain only lowercase letters, numbers, and hyphens, "
                "and cannot start or end with a hyphen"
            )

    @classmethod
    def slugify(cls, text: str) -> str:
        """Turn a display name into a URL-safe slug."""
        slug = cls.SLUGIFY_PATTERN.sub('-', str(text or '').strip().lower())
        slug = slug.strip('-')[:cls.MAX_SLUG_LENGTH].strip('-')
        return slug or cls.FALLBACK_SLUG


async def ensure_unique_slug(
    base: str,
    slug_exists: Callable[[str], Awaitable[bool]],
) -> str:
    """Return `base`, or `base-2`, `base-3`, ... whichever is free first."""
    candidate = base
    i = 1
    while await slug_exists(candidate):
        i += 1
        candidate = f"{base}-{i}"
    return candidate
