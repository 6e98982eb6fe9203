"""Core tenancy abstractions — types, config, context, and exceptions."""

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

__all__ = [
    # Config
    "TenancyConfig",
    # Context
    "TenantContext",
    "get_current_tenant",
    "get_current_tenant_optional",
    "get_tenant_context",
    "tenant_scope",
    # Exceptions
    "TenancyError",
    "TenantNotFoundError",
    "TenantResolutionError",
    "TenantStoreError",
    "TenantContextError",
    "ConfigurationError",
    # Types
    "ResolutionOutcome",
    "ResolutionResult",
    "ResolutionStrategy",
    "Tenant",
    "TenantResolver",
]
