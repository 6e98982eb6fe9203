"""``TenancyManager`` — the tenant resolution orchestrator.

The manager wires together the resolver chain, the tenant store, and the
enforcement policy, and runs the per-request pipeline::

    Resolving ──identifier──► LookingUp ──► Enforcing ──► Populated ──► (downstream)
        │                          │            │
        └──no identifier───────────┼───────────►┤
                                   │            └──policy──► Rejected
                                   └──unknown + throw_on_tenant_not_found──► Rejected

Resolution always precedes lookup, lookup precedes enforcement, and the
:class:`~fastapi_tenantkit.core.context.TenantContext` is written only after
enforcement succeeded — downstream code never sees a half-populated context.

Typical setup::

    from fastapi import FastAPI
    from fastapi_tenantkit import TenancyConfig, TenancyManager, TenancyMiddleware, Tenant

    config = TenancyConfig(
        resolution_strategies=["header", "query"],
        tenants=[Tenant(id="acme", name="Acme Corp")],
    )
    manager = TenancyManager(config)

    app = FastAPI(lifespan=manager.create_lifespan())
    app.add_middleware(TenancyMiddleware, manager=manager, excluded_paths=["/health"])

Custom store::

    manager = TenancyManager(config, store=DirectoryTenantStore(client))
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Any

from fastapi_tenantkit.core.types import ResolutionOutcome, ResolutionResult
from fastapi_tenantkit.resolution.base import clean_identifier
from fastapi_tenantkit.resolution.factory import ResolverFactory
from fastapi_tenantkit.storage.memory import InMemoryTenantStore

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Sequence

    from starlette.requests import Request

    from fastapi_tenantkit.core.config import TenancyConfig
    from fastapi_tenantkit.core.context import TenantContext
    from fastapi_tenantkit.core.types import Tenant, TenantResolver
    from fastapi_tenantkit.storage.tenant_store import TenantStore

logger = logging.getLogger(__name__)


class TenancyManager:
    """Central orchestrator wiring resolver, store, and enforcement policy.

    Args:
        config: Application-wide tenancy configuration.
        store: Tenant lookup backend.  ``None`` builds an
            :class:`~fastapi_tenantkit.storage.memory.InMemoryTenantStore`
            seeded from ``config.tenants``.
        resolvers: Custom resolvers filling the ``CUSTOM`` slots of
            ``config.resolution_strategies`` (or forming the whole chain when
            no strategy is configured).

    Attributes:
        config: The ``TenancyConfig`` this manager was constructed with.
        store: The active ``TenantStore``.
        resolver: The active resolver (single or composite).

    Raises:
        ConfigurationError: When the resolver chain cannot be built.
        ValueError: When the seed list contains duplicate tenant ids.
    """

    def __init__(
        self,
        config: TenancyConfig,
        store: TenantStore | None = None,
        resolvers: Sequence[TenantResolver] = (),
    ) -> None:
        self.config = config
        self.store: TenantStore = store if store is not None else InMemoryTenantStore(config.tenants)
        self.resolver: TenantResolver = ResolverFactory.build(config, resolvers)
        logger.info(
            "TenancyManager created resolver=%r store=%s require_tenant=%s "
            "throw_on_tenant_not_found=%s",
            self.resolver,
            type(self.store).__name__,
            config.require_tenant,
            config.throw_on_tenant_not_found,
        )

    #############
    # Lifecycle #
    #############

    async def initialize(self) -> None:
        """Initialise the store when it exposes an ``initialize()`` hook.

        Call this once at application startup — typically through
        :meth:`create_lifespan`.
        """
        if hasattr(self.store, "initialize"):
            await self.store.initialize()
            logger.info("Store initialised: %s", type(self.store).__name__)
        logger.info("TenancyManager initialised")

    async def close(self) -> None:
        """Release the store's resources."""
        await self.store.close()
        logger.info("TenancyManager shut down cleanly")

    def create_lifespan(self) -> Any:
        """Return an async context manager suitable for FastAPI's ``lifespan`` parameter.

        Example::

            app = FastAPI(lifespan=manager.create_lifespan())
        """
        from contextlib import asynccontextmanager  # noqa: PLC0415

        @asynccontextmanager
        async def _lifespan(app: Any) -> AsyncIterator[None]:
            await self.initialize()
            try:
                yield
            finally:
                await self.close()

        return _lifespan

    ############
    # Pipeline #
    ############

    async def resolve(
        self,
        request: Request,
        context: TenantContext | None = None,
    ) -> ResolutionResult:
        """Run the resolution pipeline for *request*.

        Args:
            request: The incoming request.
            context: Fresh per-request holder.  Populated only when the result
                is not a rejection.

        Returns:
            The :class:`~fastapi_tenantkit.core.types.ResolutionResult`.
            Rejections are returned, not raised.

        Raises:
            TimeoutError: When ``config.resolution_timeout`` elapsed.
            asyncio.CancelledError: When the request was cancelled.
            Exception: Store failures propagate unchanged.
        """
        async with asyncio.timeout(self.config.resolution_timeout):
            result = await self._run(request)

        if result.rejected:
            logger.warning(
                "Tenant resolution rejected outcome=%s identifier=%r path=%r",
                result.outcome.value,
                result.identifier,
                result.path,
            )
            return result

        if result.outcome == ResolutionOutcome.UNKNOWN_TENANT:
            logger.info(
                "Unknown tenant identifier %r for %r — proceeding without tenant",
                result.identifier,
                result.path,
            )
        else:
            logger.debug(
                "Tenant resolution outcome=%s tenant=%r path=%r",
                result.outcome.value,
                result.tenant.id if result.tenant is not None else None,
                result.path,
            )

        if context is not None:
            context.populate(result.tenant)
        return result

    async def _run(self, request: Request) -> ResolutionResult:
        path: str = request.scope.get("path", "/")

        # Resolving
        identifier = clean_identifier(await self.resolver.resolve(request))

        # LookingUp
        tenant: Tenant | None = None
        if identifier is not None:
            tenant = await self.store.find_by_id(identifier)
            if tenant is None and self.config.throw_on_tenant_not_found:
                return ResolutionResult(
                    outcome=ResolutionOutcome.TENANT_NOT_FOUND,
                    identifier=identifier,
                    path=path,
                )

        # Enforcing
        if tenant is None and self.config.require_tenant:
            return ResolutionResult(
                outcome=ResolutionOutcome.TENANT_REQUIRED,
                identifier=identifier,
                path=path,
            )

        if tenant is not None:
            outcome = ResolutionOutcome.RESOLVED
        elif identifier is not None:
            outcome = ResolutionOutcome.UNKNOWN_TENANT
        else:
            outcome = ResolutionOutcome.NO_IDENTIFIER
        return ResolutionResult(outcome=outcome, identifier=identifier, tenant=tenant, path=path)


__all__ = ["TenancyManager"]
