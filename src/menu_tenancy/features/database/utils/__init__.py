"""Database utility modules."""

from .namespace import (
    derive_namespace_name,
    quote_identifier,
    sanitize_slug,
    validate_namespace_name,
    validate_namespace_prefix,
)
from .encryption import DescriptorEncryption, build_encryption
from .connection_factory import ConnectionFactory

__all__ = [
    "derive_namespace_name",
    "quote_identifier",
    "sanitize_slug",
    "validate_namespace_name",
    "validate_namespace_prefix",
    "DescriptorEncryption",
    "build_encryption",
    "ConnectionFactory",
]
