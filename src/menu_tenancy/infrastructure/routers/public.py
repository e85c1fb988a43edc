"""Public tenant-scoped routes, served on the tenant's own host."""

import logging
from typing import Any, Dict, List

from fastapi import APIRouter, Depends

from ..fastapi.dependencies import get_resolved_tenant, get_tenant_connection
from ...features.database.utils import queries
from ...features.tenants.entities.tenant import ResolvedTenant
from ...features.tenants.models import MenuCategory, PublicMenuResponse, ResolvedTenantResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Public"])


def _resolved(tenant: ResolvedTenant) -> ResolvedTenantResponse:
    return ResolvedTenantResponse(id=str(tenant.tenant_id), slug=tenant.slug, source=tenant.source.value)


@router.get("/restaurant")
async def get_restaurant(tenant: ResolvedTenant = Depends(get_resolved_tenant)):
    """Return the restaurant the request host resolves to."""
    return {"success": True, "data": _resolved(tenant)}


@router.get("/public/menu")
async def get_public_menu(
    tenant: ResolvedTenant = Depends(get_resolved_tenant),
    conn: Any = Depends(get_tenant_connection),
):
    """Categories with their available items, read from the tenant's database."""
    category_rows = await conn.fetch(queries.CATALOG_CATEGORIES)
    item_rows = await conn.fetch(queries.CATALOG_AVAILABLE_ITEMS)

    items_by_category: Dict[int, List[Dict[str, Any]]] = {}
    for row in item_rows:
        item = dict(row)
        items_by_category.setdefault(item["category_id"], []).append(item)

    categories = [
        MenuCategory(
            id=row["id"],
            name=row["name"],
            description=row["description"],
            items=items_by_category.get(row["id"], []),
        )
        for row in category_rows
    ]
    return {"success": True, "data": PublicMenuResponse(restaurant=_resolved(tenant), categories=categories)}
