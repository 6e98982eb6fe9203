"""FastAPI dependencies for the current tenant and the request's tenant context.

Two ways to run the pipeline
----------------------------
**Middleware mode** — :class:`~fastapi_tenantkit.middleware.tenancy.TenancyMiddleware`
resolves every request before routing.  Handlers only read the result::

    @app.get("/data")
    async def data(tenant: TenantDep):
        ...

**Dependency mode** — the pipeline runs inside a dependency, after routing,
so path parameters are already parsed.  Create the dependency once with the
closure factory and attach it where needed::

    resolve_tenant = make_tenant_context_dependency(manager)

    @app.get("/{tenantId}/orders", dependencies=[Depends(resolve_tenant)])
    async def orders(tenant: TenantDep):
        ...

Both modes can be combined: the dependency reuses the context the middleware
already populated and never resolves twice.

Annotated shorthand::

    TenantDep = Annotated[Tenant, Depends(get_current_tenant)]
    TenantOptionalDep = Annotated[Tenant | None, Depends(get_current_tenant_optional)]
    TenantContextDep = Annotated[TenantContext, Depends(get_tenant_context)]
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Annotated, Any

from fastapi import Depends, HTTPException, Request

from fastapi_tenantkit.core.context import (
    TenantContext,
    bind_tenant_context,
    get_current_tenant,
    get_current_tenant_optional,
    get_tenant_context,
    reset_tenant_context,
)
from fastapi_tenantkit.core.types import Tenant
from fastapi_tenantkit.middleware.tenancy import REJECTION_STATUS, rejection_detail

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from fastapi_tenantkit.manager import TenancyManager

logger = logging.getLogger(__name__)


##################################################
# Re-export context dependencies for convenience #
##################################################

#: Annotated type alias for the current tenant dependency.
#: Use in route function signatures: ``tenant: TenantDep``
TenantDep = Annotated[Tenant, Depends(get_current_tenant)]

#: Annotated type alias for the optional tenant dependency.
#: Use when some routes serve both anonymous and tenant-scoped requests.
TenantOptionalDep = Annotated[Tenant | None, Depends(get_current_tenant_optional)]

#: Annotated type alias for the request's tenant context holder.
TenantContextDep = Annotated[TenantContext, Depends(get_tenant_context)]


####################################
# Closure-based dependency factory #
####################################


def make_tenant_context_dependency(
    manager: TenancyManager,
) -> Any:
    """Create a FastAPI dependency that runs the resolution pipeline.

    The returned async generator function captures *manager* in its closure.
    When the middleware already populated ``request.state.tenant_context``,
    that context is yielded unchanged.  Otherwise the pipeline runs for the
    request, the fresh context is bound for the rest of the request, and the
    binding is reset once the response is produced.

    Args:
        manager: The configured :class:`~fastapi_tenantkit.manager.TenancyManager`.

    Returns:
        An async generator function suitable for use as a FastAPI ``Depends``.

    Example::

        resolve_tenant = make_tenant_context_dependency(manager)

        @app.get("/{tenantId}/info")
        async def info(context: Annotated[TenantContext, Depends(resolve_tenant)]):
            return {"tenant": context.current.id if context.has_tenant else None}
    """

    async def _resolve_tenant_context(request: Request) -> AsyncIterator[TenantContext]:
        """Yield the populated tenant context for *request*.

        Raises:
            HTTPException: ``400`` when a tenant is required but none was
                resolved, ``404`` when the identifier matched no tenant.
        """
        existing = getattr(request.state, "tenant_context", None)
        if isinstance(existing, TenantContext) and existing.populated:
            yield existing
            return

        context = TenantContext()
        result = await manager.resolve(request, context)
        if result.rejected:
            raise HTTPException(
                status_code=REJECTION_STATUS[result.outcome],
                detail=rejection_detail(result),
            )

        request.state.tenant_context = context
        token = bind_tenant_context(context)
        try:
            yield context
        finally:
            reset_tenant_context(token)

    return _resolve_tenant_context


__all__ = [
    "TenantContextDep",
    "TenantDep",
    "TenantOptionalDep",
    "get_current_tenant",
    "get_current_tenant_optional",
    "get_tenant_context",
    "make_tenant_context_dependency",
]
