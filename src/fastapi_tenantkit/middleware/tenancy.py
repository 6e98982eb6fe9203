"""Raw ASGI tenancy middleware — streaming-safe and context-clean.

Why raw ASGI instead of ``BaseHTTPMiddleware``
----------------------------------------------
Starlette's ``BaseHTTPMiddleware`` buffers responses and does not propagate
``ContextVar`` mutations made in ``dispatch()`` to background tasks.  Because
this middleware binds the request's
:class:`~fastapi_tenantkit.core.context.TenantContext` through a
``ContextVar``, it uses the raw ASGI 3-callable interface
``__call__(scope, receive, send)`` instead.

ASGI lifecycle
--------------
::

    Client                        Middleware               App
      │                               │                    │
      │── HTTP request ──────────────►│                    │
      │                      TenantContext()               │
      │                      manager.resolve()             │
      │                      bind_tenant_context()         │
      │                               ├── await app() ────►│
      │                               │◄── response ───────│
      │◄── response ──────────────────│                    │
      │                      reset_tenant_context()        │

The downstream app is called at most once, and only when the pipeline did not
reject the request.

Error handling
--------------
Rejections are translated into JSON responses with a ``{"detail": "..."}``
body:

- ``TENANT_REQUIRED``  → ``400 Bad Request``
- ``TENANT_NOT_FOUND`` → ``404 Not Found``

Store failures, resolution timeouts, and cancellation are *not* translated;
they propagate to the server / outer middleware unchanged.

Excluded paths
--------------
Paths starting with an excluded prefix skip resolution.  They still receive
an empty, populated context so handlers can call ``get_tenant_context()``::

    app.add_middleware(
        TenancyMiddleware,
        manager=manager,
        excluded_paths=["/health", "/docs", "/openapi.json"],
    )
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING

from starlette.requests import Request
from starlette.websockets import WebSocket

from fastapi_tenantkit.core.context import (
    TenantContext,
    bind_tenant_context,
    reset_tenant_context,
)
from fastapi_tenantkit.core.types import ResolutionOutcome

if TYPE_CHECKING:
    from collections.abc import Awaitable

    from starlette.types import ASGIApp, Receive, Scope, Send

    from fastapi_tenantkit.core.types import ResolutionResult
    from fastapi_tenantkit.manager import TenancyManager

logger = logging.getLogger(__name__)

REJECTION_STATUS: dict[ResolutionOutcome, int] = {
    ResolutionOutcome.TENANT_REQUIRED: 400,
    ResolutionOutcome.TENANT_NOT_FOUND: 404,
}


def _json_response(
    send: Send,
    status_code: int,
    detail: str,
) -> Awaitable[None]:
    """Build and send a minimal JSON error response.

    Args:
        send: ASGI send callable.
        status_code: HTTP status code.
        detail: Human-readable error description for the ``detail`` field.

    Returns:
        Coroutine that completes after the body is sent.
    """
    body = json.dumps({"detail": detail}).encode("utf-8")
    headers: list[tuple[bytes, bytes]] = [
        (b"content-type", b"application/json"),
        (b"content-length", str(len(body)).encode()),
    ]

    async def _send() -> None:
        await send(
            {
                "type": "http.response.start",
                "status": status_code,
                "headers": headers,
            }
        )
        await send(
            {
                "type": "http.response.body",
                "body": body,
                "more_body": False,
            }
        )

    return _send()


def rejection_detail(result: ResolutionResult) -> str:
    """Return the client-facing ``detail`` text for a rejected *result*."""
    if result.outcome == ResolutionOutcome.TENANT_NOT_FOUND:
        return "Tenant not found"
    return "Tenant is required but could not be resolved"


class TenancyMiddleware:
    """Raw ASGI middleware running the tenant resolution pipeline per request.

    Args:
        app: The downstream ASGI application.
        manager: The configured :class:`~fastapi_tenantkit.manager.TenancyManager`.
        excluded_paths: URL path prefixes that bypass tenant resolution
            (e.g. ``["/health", "/docs"]``).

    Example::

        from fastapi_tenantkit.middleware.tenancy import TenancyMiddleware

        app.add_middleware(
            TenancyMiddleware,
            manager=manager,
            excluded_paths=["/health"],
        )
    """

    def __init__(
        self,
        app: ASGIApp,
        manager: TenancyManager,
        excluded_paths: list[str] | None = None,
    ) -> None:
        self._app = app
        self._manager = manager
        self._excluded: list[str] = excluded_paths or []

    def _is_excluded(self, path: str) -> bool:
        return any(path.startswith(prefix) for prefix in self._excluded)

    async def __call__(
        self,
        scope: Scope,
        receive: Receive,
        send: Send,
    ) -> None:
        """Process an ASGI connection.

        Handles only ``http`` and ``websocket`` scopes.  All other scopes
        (``lifespan``, etc.) are passed through unchanged.
        """
        if scope["type"] not in ("http", "websocket"):
            await self._app(scope, receive, send)
            return

        context = TenantContext()
        path: str = scope.get("path", "/")

        if self._is_excluded(path):
            logger.debug("Path %r is excluded from tenant resolution", path)
            context.populate(None)
        else:
            result = await self._manager.resolve(self._connection(scope, receive, send), context)
            if result.rejected:
                await self._reject(scope, send, result)
                return

        self._attach(scope, context)
        token = bind_tenant_context(context)
        try:
            await self._app(scope, receive, send)
        finally:
            reset_tenant_context(token)

    @staticmethod
    def _connection(scope: Scope, receive: Receive, send: Send) -> Request | WebSocket:
        """Wrap *scope* the way the downstream handler will see it."""
        if scope["type"] == "websocket":
            return WebSocket(scope, receive, send)
        return Request(scope, receive)

    @staticmethod
    def _attach(scope: Scope, context: TenantContext) -> None:
        """Expose *context* as ``request.state.tenant_context``."""
        if "state" not in scope:
            scope["state"] = {}
        state = scope["state"]
        if isinstance(state, dict):
            state["tenant_context"] = context
        else:
            state.tenant_context = context

    @staticmethod
    async def _reject(scope: Scope, send: Send, result: ResolutionResult) -> None:
        status = REJECTION_STATUS[result.outcome]
        if scope["type"] == "websocket":
            # Closing before accept makes the server answer 403.
            await send({"type": "websocket.close", "code": 1008})
            return
        await _json_response(send, status, rejection_detail(result))


__all__ = ["REJECTION_STATUS", "TenancyMiddleware", "rejection_detail"]
