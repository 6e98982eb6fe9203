"""Shared pytest fixtures for the fastapi-tenantkit test suite.

Hierarchy
---------
make_request            callable that builds a Starlette Request from scope parts
tenant_factory          callable that builds Tenant objects with sensible defaults
acme / globex / initech seeded Tenants with plan/region metadata
mem_store               InMemoryTenantStore seeded with the three tenants
header_query_config     TenancyConfig wired for HEADER then QUERY resolution
manager                 TenancyManager over mem_store
asgi_app                minimal FastAPI + TenancyMiddleware
make_app                callable building a FastAPI app around a manager
http_client             httpx.AsyncClient → asgi_app
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
import pytest
import pytest_asyncio
from starlette.requests import Request

from fastapi_tenantkit.core.config import TenancyConfig
from fastapi_tenantkit.core.context import get_tenant_context
from fastapi_tenantkit.core.types import ResolutionStrategy, Tenant
from fastapi_tenantkit.dependencies import TenantOptionalDep
from fastapi_tenantkit.manager import TenancyManager
from fastapi_tenantkit.middleware.tenancy import TenancyMiddleware
from fastapi_tenantkit.storage.memory import InMemoryTenantStore

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Callable

###################
# Request builder #
###################


def build_request(
    *,
    path: str = "/",
    headers: dict[str, str] | list[tuple[str, str]] | None = None,
    query_string: str = "",
    user: Any = None,
    path_params: dict[str, Any] | None = None,
    app: Any = None,
    method: str = "GET",
) -> Request:
    """Build a real Starlette ``Request`` from raw scope parts."""
    items = headers.items() if isinstance(headers, dict) else (headers or [])
    scope: dict[str, Any] = {
        "type": "http",
        "method": method,
        "path": path,
        "root_path": "",
        "query_string": query_string.encode("latin-1"),
        "headers": [(k.lower().encode("latin-1"), v.encode("latin-1")) for k, v in items],
    }
    if user is not None:
        scope["user"] = user
    if path_params is not None:
        scope["path_params"] = path_params
    if app is not None:
        scope["app"] = app
    return Request(scope)


@pytest.fixture
def make_request() -> Callable[..., Request]:
    return build_request


##################
# Tenant factory #
##################


@pytest.fixture
def tenant_factory():
    """Return a factory that produces unique Tenant objects."""
    counter = [0]

    def _make(
        *,
        tenant_id: str | None = None,
        name: str | None = None,
        metadata: dict[str, str] | None = None,
    ) -> Tenant:
        counter[0] += 1
        n = counter[0]
        return Tenant(
            id=tenant_id or f"tenant-{n:04d}",
            name=name or f"Test Tenant {n}",
            metadata=metadata or {},
        )

    return _make


@pytest.fixture
def acme(tenant_factory) -> Tenant:
    return tenant_factory(
        tenant_id="acme",
        name="Acme Corp",
        metadata={"plan": "enterprise", "region": "eu-west-1"},
    )


@pytest.fixture
def globex(tenant_factory) -> Tenant:
    return tenant_factory(
        tenant_id="globex",
        name="Globex Inc",
        metadata={"plan": "starter", "region": "us-east-1"},
    )


@pytest.fixture
def initech(tenant_factory) -> Tenant:
    return tenant_factory(tenant_id="initech", name="Initech Ltd")


###################
# In-memory store #
###################


@pytest.fixture
def mem_store(acme: Tenant, globex: Tenant, initech: Tenant) -> InMemoryTenantStore:
    return InMemoryTenantStore([acme, globex, initech])


###########
# Configs #
###########


@pytest.fixture
def header_query_config() -> TenancyConfig:
    return TenancyConfig(
        resolution_strategies=[ResolutionStrategy.HEADER, ResolutionStrategy.QUERY],
        tenant_header_name="X-Tenant-Id",
        query_param_name="tenant",
    )


###########
# Manager #
###########


@pytest_asyncio.fixture
async def manager(
    header_query_config: TenancyConfig,
    mem_store: InMemoryTenantStore,
) -> AsyncIterator[TenancyManager]:
    m = TenancyManager(header_query_config, mem_store)
    await m.initialize()
    yield m
    await m.close()


##########################
# ASGI app + HTTP client #
##########################


def build_app(manager: TenancyManager, excluded_paths: list[str] | None = None) -> FastAPI:
    """Return a minimal FastAPI app wrapped in TenancyMiddleware."""
    app = FastAPI()
    app.add_middleware(
        TenancyMiddleware,
        manager=manager,
        excluded_paths=excluded_paths if excluded_paths is not None else ["/health"],
    )

    @app.get("/health")
    async def health():
        context = get_tenant_context()
        return {"status": "ok", "populated": context.populated, "tenant": context.current}

    @app.get("/whoami")
    async def whoami(tenant: TenantOptionalDep):
        return {"tenant": tenant.id if tenant is not None else None}

    return app


@pytest.fixture
def make_app() -> Callable[..., FastAPI]:
    return build_app


@pytest.fixture
def asgi_app(manager: TenancyManager) -> FastAPI:
    return build_app(manager)


@pytest_asyncio.fixture
async def http_client(asgi_app: FastAPI) -> AsyncIterator[AsyncClient]:
    async with AsyncClient(
        transport=ASGITransport(app=asgi_app),
        base_url="http://testserver",
    ) as client:
        yield client
