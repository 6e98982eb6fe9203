"""Read-only administrative routes over the tenant store.

Mount the router next to the application routes and exclude its prefix from
tenant resolution, since administrative callers act on behalf of no tenant::

    app.include_router(make_admin_router(manager))
    app.add_middleware(
        TenancyMiddleware,
        manager=manager,
        excluded_paths=["/admin/tenants"],
    )

Authentication is left to the application (router-level ``dependencies=``).
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from fastapi import APIRouter, HTTPException, status

from fastapi_tenantkit.core.types import Tenant

if TYPE_CHECKING:
    from fastapi_tenantkit.manager import TenancyManager

logger = logging.getLogger(__name__)


def make_admin_router(
    manager: TenancyManager,
    prefix: str = "/admin/tenants",
) -> APIRouter:
    """Build an ``APIRouter`` enumerating the tenants known to *manager*'s store.

    Routes:
        ``GET {prefix}`` — every tenant, in store order.
        ``GET {prefix}/{tenant_id}`` — one tenant, matched case-insensitively.

    Args:
        manager: The configured :class:`~fastapi_tenantkit.manager.TenancyManager`.
        prefix: URL prefix of the router.

    Returns:
        The router, ready for ``app.include_router``.
    """
    router = APIRouter(prefix=prefix, tags=["tenants"])

    @router.get("")
    async def list_tenants() -> list[Tenant]:
        """List all tenants.

        Raises:
            HTTPException: 501 if the store cannot enumerate tenants.
        """
        try:
            tenants = await manager.store.list()
        except NotImplementedError:
            logger.info("Store %s does not support enumeration", type(manager.store).__name__)
            raise HTTPException(
                status_code=status.HTTP_501_NOT_IMPLEMENTED,
                detail="Tenant enumeration is not supported by the configured store",
            ) from None
        return list(tenants)

    @router.get("/{tenant_id}")
    async def get_tenant(tenant_id: str) -> Tenant:
        """Return a single tenant.

        Raises:
            HTTPException: 404 if no tenant has this id.
        """
        tenant = await manager.store.find_by_id(tenant_id)
        if tenant is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Tenant not found",
            )
        return tenant

    return router


__all__ = ["make_admin_router"]
