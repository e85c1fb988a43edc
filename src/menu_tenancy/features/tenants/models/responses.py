"""Tenant response models for API endpoints."""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class TenantResponse(BaseModel):
    """Response model for tenant information."""

    id: str = Field(..., description="Tenant ID")
    slug: str = Field(..., description="Tenant slug")
    name: str = Field(..., description="Restaurant display name")
    created_at: Optional[datetime] = Field(None, description="Creation time")


class ResolvedTenantResponse(BaseModel):
    """Response model for the tenant a request resolved to."""

    id: str
    slug: str
    source: str = Field(..., description="Which resolution rule matched")


class TenantCreatedResponse(BaseModel):
    tenant: TenantResponse
    connection: str = Field(..., description="Descriptor with the password masked")
    namespace: str


class TenantDeletedResponse(BaseModel):
    deleted: bool
    namespace: Optional[str] = None
    namespace_dropped: bool = False
    warnings: List[str] = Field(default_factory=list)


class TenantDatabaseConfigResponse(BaseModel):
    tenant_id: str
    connection: str = Field(..., description="Descriptor with the password masked")
    updated_at: Optional[datetime] = None


class MenuCategory(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    items: List[Dict[str, Any]] = Field(default_factory=list)


class PublicMenuResponse(BaseModel):
    restaurant: ResolvedTenantResponse
    categories: List[MenuCategory]
