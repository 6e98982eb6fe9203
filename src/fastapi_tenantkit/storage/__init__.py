"""Tenant storage backends for fastapi-tenantkit.

All backends implement :class:`~fastapi_tenantkit.storage.tenant_store.TenantStore`
and are fully interchangeable.

Backends
--------
:class:`~fastapi_tenantkit.storage.memory.InMemoryTenantStore`
    Read-only store seeded at startup.  No I/O.

Example::

    from fastapi_tenantkit.storage import InMemoryTenantStore

    store = InMemoryTenantStore([Tenant(id="acme", name="Acme Corp")])
"""

from fastapi_tenantkit.storage.memory import InMemoryTenantStore
from fastapi_tenantkit.storage.tenant_store import TenantStore

__all__ = [
    "InMemoryTenantStore",
    "TenantStore",
]
