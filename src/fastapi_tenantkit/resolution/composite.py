"""Ordered chain of tenant resolvers.

Precedence is positional: the first resolver is asked first, and the first
non-empty answer wins.  There is no voting or merging — with
``[HeaderTenantResolver(), QueryTenantResolver()]`` an ``X-Tenant-Id`` header
always overrides ``?tenant=``.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from fastapi_tenantkit.core.exceptions import ConfigurationError
from fastapi_tenantkit.resolution.base import BaseTenantResolver, clean_identifier

if TYPE_CHECKING:
    from collections.abc import Iterable

    from starlette.requests import Request

    from fastapi_tenantkit.core.types import TenantResolver

logger = logging.getLogger(__name__)


class CompositeTenantResolver(BaseTenantResolver):
    """Try several resolvers in order and return the first non-empty result.

    The child list is captured as a tuple at construction time and never
    changes, so one instance can serve concurrent requests without locking.
    The result is always one of the children's results (or ``None``); the
    composite never produces an identifier of its own.

    Args:
        resolvers: Child resolvers, highest precedence first.

    Raises:
        ConfigurationError: When *resolvers* is empty.
    """

    def __init__(self, resolvers: Iterable[TenantResolver]) -> None:
        self._resolvers: tuple[TenantResolver, ...] = tuple(resolvers)
        if not self._resolvers:
            raise ConfigurationError(
                parameter="resolvers",
                reason="CompositeTenantResolver needs at least one resolver.",
            )
        logger.debug("CompositeTenantResolver chain=%r", self._resolvers)

    @property
    def resolvers(self) -> tuple[TenantResolver, ...]:
        return self._resolvers

    async def resolve(self, request: Request) -> str | None:
        for resolver in self._resolvers:
            identifier = await resolver.resolve(request)
            if clean_identifier(identifier) is not None:
                logger.debug("Identifier %r resolved by %r", identifier, resolver)
                return identifier
        return None

    def __len__(self) -> int:
        return len(self._resolvers)

    def __repr__(self) -> str:
        return f"CompositeTenantResolver({list(self._resolvers)!r})"


__all__ = ["CompositeTenantResolver"]
