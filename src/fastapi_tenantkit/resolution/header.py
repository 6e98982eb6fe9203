"""Header-based tenant resolution strategy.

Extracts the tenant identifier from a named HTTP request header.

This is the simplest and most widely applicable resolution strategy, and the
fallback when no strategy is configured:

* Works with every HTTP client without URL routing changes.
* Trivial to test — just set a header in your test client.
* Suitable for API clients, SDKs, mobile apps, and service-to-service calls.

Example request::

    GET /api/users HTTP/1.1
    Host: api.example.com
    X-Tenant-Id: acme
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from fastapi_tenantkit.core.types import ResolutionStrategy
from fastapi_tenantkit.resolution.base import BaseTenantResolver, clean_identifier

if TYPE_CHECKING:
    from starlette.requests import Request

logger = logging.getLogger(__name__)


class HeaderTenantResolver(BaseTenantResolver):
    """Resolve the tenant identifier from a named HTTP request header.

    Header name matching is case-insensitive, as HTTP field names are.  When
    the header is repeated, the first occurrence wins.

    Args:
        header_name: Name of the header to read.  Defaults to ``"X-Tenant-Id"``.

    Example::

        resolver = HeaderTenantResolver(header_name="X-Tenant-Id")
        identifier = await resolver.resolve(request)
    """

    strategy = ResolutionStrategy.HEADER

    def __init__(self, header_name: str = "X-Tenant-Id") -> None:
        self._header_name = header_name
        logger.debug("HeaderTenantResolver header=%r", header_name)

    @property
    def header_name(self) -> str:
        return self._header_name

    async def resolve(self, request: Request) -> str | None:
        values = request.headers.getlist(self._header_name)
        return clean_identifier(values[0]) if values else None

    def __repr__(self) -> str:
        return f"HeaderTenantResolver(header_name={self._header_name!r})"


__all__ = ["HeaderTenantResolver"]
