"""Route-value tenant resolution strategy.

Extracts the tenant identifier from a path-template variable::

    @app.get("/api/{tenantId}/orders")
    GET /api/acme/orders  →  identifier: "acme"

ASGI middleware runs *before* Starlette's router, so ``scope["path_params"]``
is still empty when :class:`~fastapi_tenantkit.middleware.tenancy.TenancyMiddleware`
calls this resolver.  In that case the resolver matches the request against
the application's routes itself (the same ``Route.matches`` call the router
makes later) and reads the variable from the match.  When routing already ran
— e.g. in dependency mode — the populated ``path_params`` are used directly.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from starlette.routing import Match

from fastapi_tenantkit.core.types import ResolutionStrategy
from fastapi_tenantkit.resolution.base import BaseTenantResolver, clean_identifier

if TYPE_CHECKING:
    from collections.abc import Iterable

    from starlette.requests import Request
    from starlette.routing import BaseRoute
    from starlette.types import Scope

logger = logging.getLogger(__name__)


class RouteTenantResolver(BaseTenantResolver):
    """Resolve the tenant identifier from a path-template variable.

    Args:
        route_key: Name of the path parameter.  Defaults to ``"tenantId"``.
    """

    strategy = ResolutionStrategy.ROUTE

    def __init__(self, route_key: str = "tenantId") -> None:
        self._route_key = route_key
        logger.debug("RouteTenantResolver key=%r", route_key)

    @property
    def route_key(self) -> str:
        return self._route_key

    async def resolve(self, request: Request) -> str | None:
        scope = request.scope
        params: dict[str, Any] = scope.get("path_params") or {}
        if self._route_key not in params:
            params = _match_path_params(scope) or {}
        return clean_identifier(params.get(self._route_key))

    def __repr__(self) -> str:
        return f"RouteTenantResolver(route_key={self._route_key!r})"


def _match_path_params(scope: Scope) -> dict[str, Any] | None:
    """Match *scope* against the application's router and return its path params.

    Returns:
        The path parameters of the matching route, or ``None`` when the app
        has no router or no route matches.
    """
    app = scope.get("app")
    router = getattr(app, "router", None)
    routes = getattr(router, "routes", None)
    if not routes:
        return None
    return _match_routes(routes, scope)


def _match_routes(routes: Iterable[BaseRoute], scope: Scope) -> dict[str, Any] | None:
    partial: dict[str, Any] | None = None
    for route in routes:
        match, child_scope = route.matches(scope)
        if match == Match.NONE:
            continue
        nested_scope = {**scope, **child_scope}
        params: dict[str, Any] = dict(nested_scope.get("path_params") or {})
        nested_routes = getattr(route, "routes", None)
        if nested_routes:
            nested = _match_routes(nested_routes, nested_scope)
            if nested is None:
                continue
            params.update(nested)
        if match == Match.FULL:
            return params
        if partial is None:
            partial = params
    return partial


__all__ = ["RouteTenantResolver"]
