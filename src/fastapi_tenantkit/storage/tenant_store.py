"""Abstract tenant storage interface — the repository pattern.

``TenantStore`` is the authority that maps a tenant identifier to a full
:class:`~fastapi_tenantkit.core.types.Tenant` record.  The resolution
pipeline depends only on this interface, so any backend (database, cache,
remote directory service) can be plugged in.

Contract
--------
- **Async** — lookups may hit the network or disk.  Cancellation of the
  calling task (request abort, deadline) must be honoured, which is the
  default for any coroutine that awaits I/O.
- **``None`` on not-found** — :meth:`find_by_id` returns ``None`` for an
  unknown identifier and never raises for that case.
- **Raise on failure** — infrastructure failures raise (ideally
  :class:`~fastapi_tenantkit.core.exceptions.TenantStoreError`) and propagate
  unchanged to the caller; they are never reported as "not found".
- **Case-insensitive** — identifiers compare case-insensitively.

Extending
---------
::

    class DirectoryTenantStore(TenantStore):
        def __init__(self, client: httpx.AsyncClient) -> None:
            self._client = client

        async def find_by_id(self, tenant_id: str) -> Tenant | None:
            try:
                resp = await self._client.get(f"/tenants/{tenant_id.casefold()}")
            except httpx.HTTPError as exc:
                raise TenantStoreError("find_by_id", str(exc)) from exc
            if resp.status_code == 404:
                return None
            return Tenant.model_validate(resp.json())

        async def close(self) -> None:
            await self._client.aclose()
"""

from __future__ import annotations

from abc import ABC, abstractmethod
import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Sequence

    from fastapi_tenantkit.core.types import Tenant

logger = logging.getLogger(__name__)


class TenantStore(ABC):
    """Abstract base class for tenant lookup backends.

    Instances are created once at startup and shared across all requests.
    The pipeline treats :meth:`find_by_id` as atomic and performs no retries
    or caching of its own; a store backed by a mutable external system is
    responsible for its own consistency.
    """

    @abstractmethod
    async def find_by_id(self, tenant_id: str) -> Tenant | None:
        """Fetch a tenant by identifier (case-insensitive).

        Args:
            tenant_id: Identifier produced by the resolver chain.

        Returns:
            The matching tenant, or ``None`` when none exists.

        Raises:
            TenantStoreError: When the lookup could not be completed.
        """

    async def list(self) -> Sequence[Tenant]:
        """Return every tenant known to this store (administrative use).

        The base implementation does not support enumeration; stores that can
        enumerate cheaply should override it.

        Raises:
            NotImplementedError: When the store cannot enumerate its tenants.
        """
        raise NotImplementedError(f"{type(self).__name__} does not support enumeration.")

    async def close(self) -> None:
        """Release any resources held by this store (connections, pools, etc.).

        The base implementation is a no-op.  Called automatically by
        ``TenancyManager.close()`` on application shutdown.
        """


__all__ = ["TenantStore"]
