"""Storage namespace naming for tenant databases.

A tenant's isolated database name is derived from its slug. The derivation
is deterministic, so a tenant deprovisioned and provisioned again lands in
the same namespace.
"""

import re

from ....config.constants import NamespaceLimits
from ....core.exceptions import InvalidNamespaceError

_UNSAFE_RUN = re.compile(r'[^a-z0-9]+')
PREFIX_PATTERN = re.compile(r'^[a-z][a-z0-9_]*$')
NAMESPACE_PATTERN = re.compile(r'^[a-z0-9](?:[a-z0-9_]*[a-z0-9])?$')


def validate_namespace_prefix(
    prefix: str,
    max_identifier_length: int = NamespaceLimits.MAX_IDENTIFIER_LENGTH,
) -> None:
    """Validate a namespace prefix.

    An empty prefix is allowed. A non-empty one must start with a letter and
    leave room for at least one slug character.

    Raises:
        InvalidNamespaceError: If the prefix is unusable
    """
    if not prefix:
        return
    if not PREFIX_PATTERN.match(prefix):
        raise InvalidNamespaceError(
            prefix, "prefix must start with a letter and contain only [a-z0-9_]"
        )
    if len(prefix) >= max_identifier_length:
        raise InvalidNamespaceError(
            prefix, f"prefix must be shorter than {max_identifier_length} characters"
        )


def sanitize_slug(slug: str, max_length: int = NamespaceLimits.MAX_SLUG_PART_LENGTH) -> str:
    """Lower-case a slug and collapse every unsafe run into a single `_`."""
    safe = _UNSAFE_RUN.sub('_', str(slug or '').lower()).strip('_')
    return safe[:max_length].strip('_')


def derive_namespace_name(
    slug: str,
    prefix: str = NamespaceLimits.DEFAULT_PREFIX,
    max_slug_length: int = NamespaceLimits.MAX_SLUG_PART_LENGTH,
    max_identifier_length: int = NamespaceLimits.MAX_IDENTIFIER_LENGTH,
) -> str:
    """Derive the namespace name for a tenant slug.

    The result only contains [a-z0-9_], never starts or ends with `_`, and is
    at most `max_identifier_length` characters long.

    Raises:
        InvalidNamespaceError: If the slug has no usable characters or the
            prefix is invalid
    """
    validate_namespace_prefix(prefix, max_identifier_length)

    safe = sanitize_slug(slug, max_slug_length)
    if not safe:
        raise InvalidNamespaceError(str(slug), "slug has no [a-z0-9] characters")

    name = f"{prefix}{safe}"[:max_identifier_length].strip('_')
    if not NAMESPACE_PATTERN.match(name):
        raise InvalidNamespaceError(name, "derived name is not a safe identifier")
    return name


def validate_namespace_name(name: str) -> str:
    """Check a namespace name before it is interpolated into DDL."""
    if (
        not name
        or len(name) > NamespaceLimits.MAX_IDENTIFIER_LENGTH
        or not NAMESPACE_PATTERN.match(name)
    ):
        raise InvalidNamespaceError(str(name), "not a safe identifier")
    return name


def quote_identifier(name: str) -> str:
    """Quote a validated namespace name for use in DDL."""
    return '"' + validate_namespace_name(name) + '"'
