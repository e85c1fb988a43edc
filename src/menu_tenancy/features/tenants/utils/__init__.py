"""Tenant utilities."""

from .validation import TenantValidationRules, ensure_unique_slug

__all__ = ["TenantValidationRules", "ensure_unique_slug"]
