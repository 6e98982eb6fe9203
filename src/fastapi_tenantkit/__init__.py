"""fastapi-tenantkit — per-request tenant resolution for FastAPI.

The package identifies which tenant an incoming request belongs to, looks the
tenant up in a store, enforces the configured policy, and exposes the result
to downstream handlers through a request-scoped context.

Resolution strategies: header, query string, authenticated-principal claim,
route value, subdomain, and custom resolvers, chained in configuration order.

Quick start
-----------
.. code-block:: python

    from fastapi import FastAPI
    from fastapi_tenantkit import (
        TenancyConfig,
        TenancyManager,
        TenancyMiddleware,
        Tenant,
        TenantDep,
    )

    config = TenancyConfig(
        resolution_strategies=["header", "query"],
        tenants=[Tenant(id="acme", name="Acme Corp")],
    )
    manager = TenancyManager(config)

    app = FastAPI(lifespan=manager.create_lifespan())
    app.add_middleware(TenancyMiddleware, manager=manager, excluded_paths=["/health"])

    @app.get("/info")
    async def info(tenant: TenantDep):
        return {"tenant": tenant.id}

Public surface
--------------
The symbols exported below form the **stable public API**.  Anything not
listed here is an implementation detail and may change between minor versions.
"""

from fastapi_tenantkit.admin import make_admin_router
from fastapi_tenantkit.core.config import TenancyConfig
from fastapi_tenantkit.core.context import (
    TenantContext,
    get_current_tenant,
    get_current_tenant_optional,
    get_tenant_context,
    tenant_scope,
)
from fastapi_tenantkit.core.exceptions import (
    ConfigurationError,
    TenancyError,
    TenantContextError,
    TenantNotFoundError,
    TenantResolutionError,
    TenantStoreError,
)
from fastapi_tenantkit.core.types import (
    ResolutionOutcome,
    ResolutionResult,
    ResolutionStrategy,
    Tenant,
    TenantResolver,
)
from fastapi_tenantkit.dependencies import (
    TenantContextDep,
    TenantDep,
    TenantOptionalDep,
    make_tenant_context_dependency,
)
from fastapi_tenantkit.manager import TenancyManager
from fastapi_tenantkit.middleware.tenancy import TenancyMiddleware
from fastapi_tenantkit.resolution.base import BaseTenantResolver
from fastapi_tenantkit.resolution.claim import ClaimTenantResolver
from fastapi_tenantkit.resolution.composite import CompositeTenantResolver
from fastapi_tenantkit.resolution.factory import ResolverFactory
from fastapi_tenantkit.resolution.header import HeaderTenantResolver
from fastapi_tenantkit.resolution.query import QueryTenantResolver
from fastapi_tenantkit.resolution.route import RouteTenantResolver
from fastapi_tenantkit.resolution.subdomain import SubdomainTenantResolver
from fastapi_tenantkit.storage.memory import InMemoryTenantStore
from fastapi_tenantkit.storage.tenant_store import TenantStore

try:
    from importlib.metadata import version as _pkg_version
    __version__: str = _pkg_version("fastapi-tenantkit")
except Exception:  # pragma: no cover — package not installed in editable mode without build
    __version__ = "0.0.0.dev0"

__all__ = [  # NOQA
    # Version
    "__version__",
    # Configuration
    "TenancyConfig",
    # Manager
    "TenancyManager",
    # Domain types
    "ResolutionOutcome",
    "ResolutionResult",
    "ResolutionStrategy",
    "Tenant",
    "TenantResolver",
    # Context
    "TenantContext",
    "get_current_tenant",
    "get_current_tenant_optional",
    "get_tenant_context",
    "tenant_scope",
    # Dependencies
    "TenantContextDep",
    "TenantDep",
    "TenantOptionalDep",
    "make_tenant_context_dependency",
    # Admin
    "make_admin_router",
    # Exceptions
    "ConfigurationError",
    "TenancyError",
    "TenantContextError",
    "TenantNotFoundError",
    "TenantResolutionError",
    "TenantStoreError",
    # Storage
    "InMemoryTenantStore",
    "TenantStore",
    # Middleware
    "TenancyMiddleware",
    # Resolvers
    "BaseTenantResolver",
    "ClaimTenantResolver",
    "CompositeTenantResolver",
    "HeaderTenantResolver",
    "QueryTenantResolver",
    "ResolverFactory",
    "RouteTenantResolver",
    "SubdomainTenantResolver",
]
