"""Query-string tenant resolution strategy.

Example::

    GET /info?tenant=globex  →  identifier: "globex"

Handy during development and for links that must carry the tenant (e-mail
verification, shared dashboards).  Place it after the header strategy when
both are enabled so that an explicit header keeps precedence.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from fastapi_tenantkit.core.types import ResolutionStrategy
from fastapi_tenantkit.resolution.base import BaseTenantResolver, clean_identifier

if TYPE_CHECKING:
    from starlette.requests import Request

logger = logging.getLogger(__name__)


class QueryTenantResolver(BaseTenantResolver):
    """Resolve the tenant identifier from a query-string parameter.

    When the parameter is repeated (``?tenant=a&tenant=b``) the first value
    wins.

    Args:
        param_name: Name of the query parameter.  Defaults to ``"tenant"``.
    """

    strategy = ResolutionStrategy.QUERY

    def __init__(self, param_name: str = "tenant") -> None:
        self._param_name = param_name
        logger.debug("QueryTenantResolver param=%r", param_name)

    @property
    def param_name(self) -> str:
        return self._param_name

    async def resolve(self, request: Request) -> str | None:
        values = request.query_params.getlist(self._param_name)
        return clean_identifier(values[0]) if values else None

    def __repr__(self) -> str:
        return f"QueryTenantResolver(param_name={self._param_name!r})"


__all__ = ["QueryTenantResolver"]
