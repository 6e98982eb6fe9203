"""ASGI middleware for per-request tenant resolution and context injection."""

from fastapi_tenantkit.middleware.tenancy import TenancyMiddleware

__all__ = ["TenancyMiddleware"]
