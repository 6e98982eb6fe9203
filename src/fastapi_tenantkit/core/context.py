"""Request-scoped tenant context.

A :class:`TenantContext` is an explicit per-request holder: the orchestrator
creates a fresh instance for every request, writes it exactly once, and the
instance is discarded when the request completes.  Nothing about it is shared
between requests.

Downstream code reaches the holder in one of two ways:

* ``request.state.tenant_context`` (set by the middleware on the ASGI scope);
* :func:`get_tenant_context`, backed by a :class:`~contextvars.ContextVar`.
  Each async task (i.e. each HTTP request handled by FastAPI) receives its own
  copy of the variable, so concurrent requests never observe each other's
  context, and the middleware resets the variable with its token when the
  request ends.

Public surface
--------------
:class:`TenantContext`
    The per-request holder (``current`` / ``has_tenant``).

:func:`get_tenant_context`
    Return the holder bound to the current request.

:func:`get_current_tenant` / :func:`get_current_tenant_optional`
    FastAPI-compatible dependencies returning the tenant (or ``None``).

:func:`tenant_scope`
    Bind a tenant for a ``with`` / ``async with`` block — background tasks
    and tests.
"""

from __future__ import annotations

from contextvars import ContextVar, Token
from typing import TYPE_CHECKING, Any

from fastapi_tenantkit.core.exceptions import TenantContextError, TenantResolutionError

if TYPE_CHECKING:
    from fastapi_tenantkit.core.types import Tenant

# One variable per process; each asyncio task sees its own value.
_context_var: ContextVar[TenantContext | None] = ContextVar("tenant_context", default=None)


class TenantContext:
    """Holder for the tenant resolved for one request.

    The holder starts empty.  The orchestrator calls :meth:`populate` once,
    after enforcement succeeded and before downstream handling begins; every
    later write raises :class:`TenantContextError`.

    Attributes:
        current: The resolved tenant, or ``None`` when no tenant applies.
        has_tenant: ``True`` when :attr:`current` is set.
        populated: ``True`` once the orchestrator wrote the holder.
    """

    __slots__ = ("_populated", "_tenant")

    def __init__(self) -> None:
        self._tenant: Tenant | None = None
        self._populated = False

    @property
    def current(self) -> Tenant | None:
        return self._tenant

    @property
    def has_tenant(self) -> bool:
        return self._tenant is not None

    @property
    def populated(self) -> bool:
        return self._populated

    def populate(self, tenant: Tenant | None) -> None:
        """Write the resolved tenant (or ``None``) into the holder.

        Args:
            tenant: The tenant for this request, or ``None``.

        Raises:
            TenantContextError: When the holder was already populated.
        """
        if self._populated:
            raise TenantContextError("TenantContext is already populated for this request.")
        self._tenant = tenant
        self._populated = True

    def __repr__(self) -> str:
        tenant_id = self._tenant.id if self._tenant is not None else None
        return f"TenantContext(current={tenant_id!r}, populated={self._populated})"


# ---------------------------------------------------------------------------
# ContextVar binding
# ---------------------------------------------------------------------------


def bind_tenant_context(context: TenantContext) -> Token[TenantContext | None]:
    """Make *context* the holder visible to :func:`get_tenant_context`.

    Returns:
        A token for :func:`reset_tenant_context`.  Always reset with the token
        in a ``finally`` block.
    """
    return _context_var.set(context)


def reset_tenant_context(token: Token[TenantContext | None]) -> None:
    """Restore the binding captured in *token*."""
    _context_var.reset(token)


def get_tenant_context() -> TenantContext:
    """Return the tenant context bound to the current request.

    Raises:
        TenantContextError: When called outside a request that passed through
            :class:`~fastapi_tenantkit.middleware.tenancy.TenancyMiddleware`
            (or outside :func:`tenant_scope`).
    """
    context = _context_var.get()
    if context is None:
        raise TenantContextError(
            "No tenant context is bound to the current execution context. "
            "Ensure the request passed through TenancyMiddleware."
        )
    return context


def get_tenant_context_optional() -> TenantContext | None:
    """Return the bound tenant context, or ``None`` outside a request."""
    return _context_var.get()


# ---------------------------------------------------------------------------
# FastAPI dependency functions
# ---------------------------------------------------------------------------


def get_current_tenant() -> Tenant:
    """FastAPI dependency — return the current tenant or raise.

    Inject this via ``Depends`` in any route that cannot work without a
    tenant::

        @app.get("/data")
        async def data(tenant: Tenant = Depends(get_current_tenant)):
            ...

    Raises:
        TenantResolutionError: When the current request has no tenant.
        TenantContextError: When no context is bound (route bypassed the
            middleware — misconfiguration).
    """
    tenant = get_tenant_context().current
    if tenant is None:
        raise TenantResolutionError("No tenant was resolved for the current request.")
    return tenant


def get_current_tenant_optional() -> Tenant | None:
    """FastAPI dependency — return the current tenant or ``None``.

    Use in routes that serve both anonymous and tenant-scoped requests.
    Also returns ``None`` outside a request.
    """
    context = _context_var.get()
    return context.current if context is not None else None


# ---------------------------------------------------------------------------
# Scope context manager
# ---------------------------------------------------------------------------


class tenant_scope:  # noqa: N801
    """Context manager binding a populated context for a block.

    Restores the previous binding on exit — even if an exception is raised.
    This is the recommended pattern for background tasks and tests::

        async with tenant_scope(tenant) as context:
            await process_tenant_data()

    Supports both synchronous and asynchronous usage.

    Args:
        tenant: The tenant to expose, or ``None`` for an explicit
            "no tenant" scope.
    """

    def __init__(self, tenant: Tenant | None) -> None:
        self._context = TenantContext()
        self._context.populate(tenant)
        self._token: Token[TenantContext | None] | None = None

    # Async protocol ------------------------------------------------

    async def __aenter__(self) -> TenantContext:
        return self.__enter__()

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: Any,
    ) -> None:
        self.__exit__(exc_type, exc_val, exc_tb)

    # Sync protocol -------------------------------------------------

    def __enter__(self) -> TenantContext:
        self._token = _context_var.set(self._context)
        return self._context

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: Any,
    ) -> None:
        if self._token is not None:
            _context_var.reset(self._token)
            self._token = None


__all__ = [
    "TenantContext",
    "bind_tenant_context",
    "get_current_tenant",
    "get_current_tenant_optional",
    "get_tenant_context",
    "get_tenant_context_optional",
    "reset_tenant_context",
    "tenant_scope",
]
