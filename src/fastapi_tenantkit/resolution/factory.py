"""Factory for building the resolver chain from configuration.

:class:`ResolverFactory` is a pure factory — it has no instance state and all
logic lives in static methods.

Chain selection
---------------
* No strategy and no custom resolver → :class:`HeaderTenantResolver`.  An
  empty chain would silently resolve nothing, so the header strategy is the
  safe default.
* Exactly one resolver → that resolver, unwrapped.
* Several resolvers → :class:`CompositeTenantResolver`, in configuration
  order.

Custom resolvers
----------------
Each :attr:`~fastapi_tenantkit.core.types.ResolutionStrategy.CUSTOM` entry in
``config.resolution_strategies`` marks the position of the next resolver
from ``custom_resolvers``::

    config = TenancyConfig(resolution_strategies=["header", "custom", "query"])
    resolver = ResolverFactory.build(config, [CookieTenantResolver()])
    # header → cookie → query

When no strategy is configured, the custom resolvers alone form the chain.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from fastapi_tenantkit.core.exceptions import ConfigurationError
from fastapi_tenantkit.core.types import ResolutionStrategy
from fastapi_tenantkit.resolution.composite import CompositeTenantResolver
from fastapi_tenantkit.resolution.header import HeaderTenantResolver

if TYPE_CHECKING:
    from collections.abc import Sequence

    from fastapi_tenantkit.core.config import TenancyConfig
    from fastapi_tenantkit.core.types import TenantResolver

logger = logging.getLogger(__name__)


class ResolverFactory:
    """Static factory that turns :class:`TenancyConfig` into a resolver."""

    @staticmethod
    def create(strategy: ResolutionStrategy, config: TenancyConfig) -> TenantResolver:
        """Build one built-in resolver for *strategy* using *config*.

        Resolver classes other than the header fallback are imported lazily
        so unused strategies cost nothing.

        Raises:
            ConfigurationError: When *strategy* is ``CUSTOM`` (custom
                resolvers are instances, not configuration) or unknown.
        """
        if strategy == ResolutionStrategy.HEADER:
            return HeaderTenantResolver(header_name=config.tenant_header_name)

        if strategy == ResolutionStrategy.QUERY:
            from fastapi_tenantkit.resolution.query import QueryTenantResolver  # noqa: PLC0415

            return QueryTenantResolver(param_name=config.query_param_name)

        if strategy == ResolutionStrategy.CLAIM:
            from fastapi_tenantkit.resolution.claim import ClaimTenantResolver  # noqa: PLC0415

            return ClaimTenantResolver(claim_name=config.claim_name)

        if strategy == ResolutionStrategy.ROUTE:
            from fastapi_tenantkit.resolution.route import RouteTenantResolver  # noqa: PLC0415

            return RouteTenantResolver(route_key=config.route_key)

        if strategy == ResolutionStrategy.SUBDOMAIN:
            from fastapi_tenantkit.resolution.subdomain import (  # noqa: PLC0415
                SubdomainTenantResolver,
            )

            return SubdomainTenantResolver(
                excluded_subdomains=config.excluded_subdomains,
                trust_x_forwarded=config.trust_x_forwarded_host,
            )

        if strategy == ResolutionStrategy.CUSTOM:
            raise ConfigurationError(
                parameter="resolution_strategies",
                reason=(
                    "CUSTOM entries are filled from the custom resolvers passed to "
                    "TenancyManager(resolvers=...), not built from configuration."
                ),
            )

        raise ConfigurationError(
            parameter="resolution_strategies",
            reason=f"Unrecognised resolution strategy: {strategy!r}.",
        )

    @staticmethod
    def build(
        config: TenancyConfig,
        custom_resolvers: Sequence[TenantResolver] = (),
    ) -> TenantResolver:
        """Build the resolver chain described by *config*.

        Args:
            config: Application-wide tenancy configuration.
            custom_resolvers: Resolver instances filling the ``CUSTOM`` slots,
                in order.

        Returns:
            A single resolver or a :class:`CompositeTenantResolver`.

        Raises:
            ConfigurationError: When the number of ``CUSTOM`` slots does not
                match the number of custom resolvers.
        """
        strategies = list(config.resolution_strategies)
        if not strategies:
            strategies = [ResolutionStrategy.CUSTOM] * len(custom_resolvers)

        slots = strategies.count(ResolutionStrategy.CUSTOM)
        if slots != len(custom_resolvers):
            raise ConfigurationError(
                parameter="resolution_strategies",
                reason=(
                    f"{slots} CUSTOM slot(s) configured but {len(custom_resolvers)} "
                    "custom resolver(s) supplied."
                ),
            )

        pending = iter(custom_resolvers)
        chain: list[TenantResolver] = [
            next(pending) if s == ResolutionStrategy.CUSTOM else ResolverFactory.create(s, config)
            for s in strategies
        ]

        if not chain:
            logger.warning(
                "No tenant resolution strategy configured — falling back to header %r",
                config.tenant_header_name,
            )
            return HeaderTenantResolver(header_name=config.tenant_header_name)
        if len(chain) == 1:
            return chain[0]
        return CompositeTenantResolver(chain)


__all__ = ["ResolverFactory"]
