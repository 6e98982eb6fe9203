"""Tenant resolution strategies.

Resolution strategies extract a candidate tenant identifier from an incoming
HTTP request; they never look it up.  All strategies implement
:class:`~fastapi_tenantkit.resolution.base.BaseTenantResolver`.

Built-in strategies
-------------------
:class:`HeaderTenantResolver`
    Read a named HTTP header (default: ``X-Tenant-Id``).

:class:`QueryTenantResolver`
    Read a query-string parameter (default: ``tenant``).

:class:`ClaimTenantResolver`
    Read a claim of the authenticated principal (default: ``tenant_id``).

:class:`RouteTenantResolver`
    Read a path-template variable (default: ``tenantId``).

:class:`SubdomainTenantResolver`
    Take the leftmost label of the host (``acme.myapp.com`` → ``"acme"``).

:class:`CompositeTenantResolver`
    Ordered chain; first non-empty answer wins.

:class:`ResolverFactory`
    Build the chain from a
    :class:`~fastapi_tenantkit.core.config.TenancyConfig` instance.
"""

from fastapi_tenantkit.resolution.base import BaseTenantResolver, clean_identifier
from fastapi_tenantkit.resolution.claim import ClaimTenantResolver
from fastapi_tenantkit.resolution.composite import CompositeTenantResolver
from fastapi_tenantkit.resolution.factory import ResolverFactory
from fastapi_tenantkit.resolution.header import HeaderTenantResolver
from fastapi_tenantkit.resolution.query import QueryTenantResolver
from fastapi_tenantkit.resolution.route import RouteTenantResolver
from fastapi_tenantkit.resolution.subdomain import SubdomainTenantResolver

__all__ = [
    "BaseTenantResolver",
    "ClaimTenantResolver",
    "CompositeTenantResolver",
    "HeaderTenantResolver",
    "QueryTenantResolver",
    "ResolverFactory",
    "RouteTenantResolver",
    "SubdomainTenantResolver",
    "clean_identifier",
]
