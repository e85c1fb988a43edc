"""Platform admin routes: tenant creation, deletion and database configuration."""

import logging

from fastapi import APIRouter, Depends, Path, status

from ..fastapi.container import TenancyContainer
from ..fastapi.dependencies import get_container, require_admin_host
from ...features.database.entities.connection_descriptor import ConnectionDescriptor
from ...features.tenants.models import (
    TenantCreateRequest,
    TenantCreatedResponse,
    TenantDatabaseConfigRequest,
    TenantDatabaseConfigResponse,
    TenantDeletedResponse,
    TenantResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/admin",
    tags=["Admin"],
    dependencies=[Depends(require_admin_host)],
    responses={
        403: {"description": "Wrong host for admin routes"},
        404: {"description": "Tenant not found"},
        502: {"description": "Provisioning failed"},
    },
)


@router.post("/tenants", status_code=status.HTTP_201_CREATED)
async def create_tenant(request: TenantCreateRequest, container: TenancyContainer = Depends(get_container)):
    """Create a restaurant and provision its database."""
    tenant, descriptor = await container.lifecycle.create_tenant(request.name, request.slug)
    return {
        "success": True,
        "data": TenantCreatedResponse(
            tenant=TenantResponse(
                id=str(tenant.id), slug=tenant.slug, name=tenant.name, created_at=tenant.created_at
            ),
            connection=descriptor.safe_uri,
            namespace=descriptor.namespace,
        ),
    }


@router.delete("/tenants/{tenant_id}")
async def delete_tenant(
    tenant_id: str = Path(..., min_length=1),
    container: TenancyContainer = Depends(get_container),
):
    """Delete a restaurant; database teardown is best effort."""
    result = await container.lifecycle.delete_tenant(tenant_id)
    return {
        "success": True,
        "data": TenantDeletedResponse(
            deleted=True,
            namespace=result.namespace,
            namespace_dropped=result.dropped,
            warnings=result.warnings,
        ),
    }


@router.put("/tenants/{tenant_id}/db")
async def set_tenant_database(
    request: TenantDatabaseConfigRequest,
    tenant_id: str = Path(..., min_length=1),
    container: TenancyContainer = Depends(get_container),
):
    """Point a restaurant at a different database."""
    config = await container.lifecycle.set_database_config(tenant_id, request.connection_url)
    return {
        "success": True,
        "data": TenantDatabaseConfigResponse(
            tenant_id=str(config.tenant_id),
            connection=ConnectionDescriptor.from_uri(config.connection_descriptor).safe_uri,
            updated_at=config.updated_at,
        ),
    }


@router.get("/pools")
async def get_pool_metrics(container: TenancyContainer = Depends(get_container)):
    """Per-tenant pool sizes for this process."""
    return {
        "success": True,
        "data": {
            "pool_count": len(container.pools),
            "pools": container.pools.pool_metrics(),
        },
    }
