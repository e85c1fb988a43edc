"""Tenant API models."""

from .requests import TenantCreateRequest, TenantDatabaseConfigRequest
from .responses import (
    MenuCategory,
    PublicMenuResponse,
    ResolvedTenantResponse,
    TenantCreatedResponse,
    TenantDatabaseConfigResponse,
    TenantDeletedResponse,
    TenantResponse,
)

__all__ = [
    "TenantCreateRequest",
    "TenantDatabaseConfigRequest",
    "MenuCategory",
    "PublicMenuResponse",
    "ResolvedTenantResponse",
    "TenantCreatedResponse",
    "TenantDatabaseConfigResponse",
    "TenantDeletedResponse",
    "TenantResponse",
]
