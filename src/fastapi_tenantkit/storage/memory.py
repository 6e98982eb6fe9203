"""In-memory tenant storage for development, tests, and small deployments.

The store is seeded once from a finite collection and never mutated
afterwards, so concurrent reads need no locking.

Design notes
------------
- O(1) lookups: ``_index`` maps the case-folded ``id`` to the tenant.
- ``list()`` returns tenants in seed order.
- Blank identifiers are "not found", not errors.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from fastapi_tenantkit.storage.tenant_store import TenantStore

if TYPE_CHECKING:
    from collections.abc import Iterable

    from fastapi_tenantkit.core.types import Tenant

logger = logging.getLogger(__name__)


class InMemoryTenantStore(TenantStore):
    """Read-only tenant store backed by a dictionary.

    Example::

        store = InMemoryTenantStore([
            Tenant(id="acme", name="Acme Corp", metadata={"plan": "enterprise"}),
            Tenant(id="globex", name="Globex Inc"),
        ])

        tenant = await store.find_by_id("ACME")   # → Tenant(id="acme", …)

    Args:
        tenants: Seed collection.  Identifiers must be unique
            case-insensitively.

    Raises:
        ValueError: When two seed tenants share an identifier.
    """

    def __init__(self, tenants: Iterable[Tenant] = ()) -> None:
        index: dict[str, Tenant] = {}
        for tenant in tenants:
            if tenant.key in index:
                raise ValueError(f"Duplicate tenant id {tenant.id!r} in seed data")
            index[tenant.key] = tenant
        self._index = index
        logger.debug("InMemoryTenantStore initialised with %d tenants", len(index))

    async def find_by_id(self, tenant_id: str) -> Tenant | None:
        """Return the tenant whose id matches *tenant_id* case-insensitively.

        Args:
            tenant_id: Identifier to look up.

        Returns:
            The tenant, or ``None`` when unknown or *tenant_id* is blank.
        """
        if not tenant_id or not tenant_id.strip():
            return None
        return self._index.get(tenant_id.casefold())

    async def list(self) -> list[Tenant]:
        return list(self._index.values())

    @property
    def all(self) -> tuple[Tenant, ...]:
        """Synchronous snapshot of every seeded tenant."""
        return tuple(self._index.values())

    def __len__(self) -> int:
        return len(self._index)

    def __contains__(self, tenant_id: object) -> bool:
        return isinstance(tenant_id, str) and tenant_id.casefold() in self._index


__all__ = ["InMemoryTenantStore"]
