"""Custom exceptions for fastapi-tenantkit.

All exceptions derive from ``TenancyError`` so callers can catch the entire
family with a single ``except TenancyError`` clause while still being able to
handle individual sub-types for fine-grained error recovery.

Exception hierarchy::

    TenancyError
    ├── TenantResolutionError
    ├── TenantNotFoundError
    ├── TenantStoreError
    ├── TenantContextError
    └── ConfigurationError

Design decisions:
    - Every exception carries a structured ``details`` dict that is safe to
      log or include in internal error reports.  It must never contain raw
      secrets, full stack traces, or user PII.
    - Error messages are human-readable and operator-focused.  Client-facing
      messages are constructed by the middleware, not here.
    - Policy rejections are first represented as
      :class:`~fastapi_tenantkit.core.types.ResolutionResult` values; these
      exceptions are what a rejection turns into at the framework edge.
"""

from __future__ import annotations

from typing import Any


class TenancyError(Exception):
    """Base exception for all fastapi-tenantkit errors.

    Attributes:
        message: Human-readable description of the error.
        details: Supplementary key-value context.  Safe to log; must never
            contain raw secrets, full stack traces, or user PII.
    """

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.message = message
        self.details: dict[str, Any] = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        """Return ``human-readable`` string."""
        if self.details:
            return f"{self.message} | details={self.details}"
        return self.message

    def __repr__(self) -> str:
        """Return ``repr`` string for debugging purpose."""
        return f"{type(self).__name__}(message={self.message!r})"


class TenantResolutionError(TenancyError):
    """Raised when a tenant is required but none could be resolved.

    This is distinct from ``TenantNotFoundError``:

    - Resolution failure → the request carried no usable tenant identifier
      (or only an unknown one) while ``require_tenant`` is enabled.
    - Not-found → an identifier was sent but matches no known tenant and
      ``throw_on_tenant_not_found`` is enabled.

    Attributes:
        reason: A concise, operator-readable explanation.
        path: Request path for which resolution failed (``None`` when raised
            outside a request, e.g. by :func:`get_current_tenant`).
    """

    def __init__(
        self,
        reason: str,
        path: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(reason, details)
        self.reason = reason
        self.path = path


class TenantNotFoundError(TenancyError):
    """Raised when a resolved identifier matches no tenant in the store.

    Attributes:
        identifier: The identifier that was looked up.
    """

    def __init__(
        self,
        identifier: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        message = f"Tenant {identifier!r} was not found." if identifier else "Tenant not found."
        super().__init__(message, details)
        self.identifier = identifier


class TenantStoreError(TenancyError):
    """Raised by store implementations when a lookup cannot be completed.

    A store failure (backend unreachable, timeout inside the driver, …) is
    never reported as "not found"; it propagates unchanged through the
    resolution pipeline to the caller.

    Attributes:
        operation: The store operation that failed (e.g. ``"find_by_id"``).
        reason: A concise description of the failure.
    """

    def __init__(
        self,
        operation: str,
        reason: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(f"Tenant store operation {operation!r} failed: {reason}", details)
        self.operation = operation
        self.reason = reason


class TenantContextError(TenancyError):
    """Raised when the request-scoped tenant context is misused.

    Typical causes:
        - Populating a ``TenantContext`` a second time.
        - Reading the context outside a request that passed through
          ``TenancyMiddleware`` or the tenant context dependency.
    """

    def __init__(
        self,
        reason: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(reason, details)
        self.reason = reason


class ConfigurationError(TenancyError):
    """Raised when the tenancy wiring is invalid or inconsistent.

    Raised at construction time so misconfigured applications fail fast during
    startup rather than silently producing wrong behaviour at the first request.

    Attributes:
        parameter: The name of the invalid configuration field.
        reason: Why the current value is invalid.
    """

    def __init__(
        self,
        parameter: str,
        reason: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(f"Invalid configuration for {parameter!r}: {reason}", details)
        self.parameter = parameter
        self.reason = reason


__all__ = [
    "ConfigurationError",
    "TenancyError",
    "TenantContextError",
    "TenantNotFoundError",
    "TenantResolutionError",
    "TenantStoreError",
]
