"""Integration tests — fastapi_tenantkit.dependencies

Verified:
* TenantDep / TenantOptionalDep / TenantContextDep under the middleware
* TenantDep without a tenant surfaces TenantResolutionError
* make_tenant_context_dependency runs the pipeline after routing
  (path params available) when no middleware is installed
* Dependency mode rejections → HTTPException 400 / 404
* Dependency mode reuses the middleware's context (no second resolution)
* Dependency mode binds the ContextVar for the handler and resets it afterwards
"""

from typing import Annotated
from unittest.mock import AsyncMock

from fastapi import Depends, FastAPI
from fastapi.responses import JSONResponse
from httpx import ASGITransport, AsyncClient
import pytest

from fastapi_tenantkit.core.config import TenancyConfig
from fastapi_tenantkit.core.context import TenantContext, get_tenant_context_optional
from fastapi_tenantkit.core.exceptions import TenantResolutionError
from fastapi_tenantkit.dependencies import (
    TenantContextDep,
    TenantDep,
    TenantOptionalDep,
    make_tenant_context_dependency,
)
from fastapi_tenantkit.manager import TenancyManager
from fastapi_tenantkit.middleware.tenancy import TenancyMiddleware

pytestmark = pytest.mark.integration


def _client(app: FastAPI) -> AsyncClient:
    return AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver")


# ─────────────────────────── middleware mode ─────────────────────────────────


@pytest.fixture
def dep_app(manager: TenancyManager) -> FastAPI:
    app = FastAPI()
    app.add_middleware(TenancyMiddleware, manager=manager)

    @app.exception_handler(TenantResolutionError)
    async def _no_tenant(request, exc: TenantResolutionError):
        return JSONResponse(status_code=401, content={"detail": exc.message})

    @app.get("/required")
    async def required(tenant: TenantDep):
        return {"id": tenant.id, "plan": tenant.metadata.get("plan")}

    @app.get("/optional")
    async def optional(tenant: TenantOptionalDep):
        return {"id": tenant.id if tenant else None}

    @app.get("/context")
    async def context(ctx: TenantContextDep):
        return {"populated": ctx.populated, "has_tenant": ctx.has_tenant}

    return app


class TestAnnotatedDependencies:
    async def test_tenant_dep(self, dep_app: FastAPI):
        async with _client(dep_app) as client:
            r = await client.get("/required", headers={"X-Tenant-Id": "acme"})
        assert r.json() == {"id": "acme", "plan": "enterprise"}

    async def test_tenant_dep_without_tenant(self, dep_app: FastAPI):
        async with _client(dep_app) as client:
            r = await client.get("/required")
        assert r.status_code == 401

    async def test_optional_dep(self, dep_app: FastAPI):
        async with _client(dep_app) as client:
            with_tenant = await client.get("/optional", headers={"X-Tenant-Id": "globex"})
            without = await client.get("/optional")
        assert with_tenant.json() == {"id": "globex"}
        assert without.json() == {"id": None}

    async def test_context_dep(self, dep_app: FastAPI):
        async with _client(dep_app) as client:
            r = await client.get("/context")
        assert r.json() == {"populated": True, "has_tenant": False}


# ─────────────────────────── dependency mode ─────────────────────────────────


def _dependency_app(manager: TenancyManager, with_middleware: bool = False) -> FastAPI:
    resolve_tenant = make_tenant_context_dependency(manager)
    app = FastAPI()
    if with_middleware:
        app.add_middleware(TenancyMiddleware, manager=manager)

    @app.get("/{tenantId}/info")
    async def info(
        tenantId: str,  # noqa: N803
        ctx: Annotated[TenantContext, Depends(resolve_tenant)],
        tenant: TenantOptionalDep,
    ):
        return {
            "route": tenantId,
            "context": ctx.current.id if ctx.has_tenant else None,
            "bound": tenant.id if tenant else None,
        }

    return app


class TestDependencyMode:
    async def test_route_value_resolved_after_routing(self, mem_store):
        manager = TenancyManager(TenancyConfig(resolution_strategies=["route"]), mem_store)
        async with _client(_dependency_app(manager)) as client:
            r = await client.get("/Initech/info")
        assert r.json() == {"route": "Initech", "context": "initech", "bound": "initech"}

    async def test_context_reset_after_request(self, mem_store):
        manager = TenancyManager(TenancyConfig(resolution_strategies=["route"]), mem_store)
        async with _client(_dependency_app(manager)) as client:
            await client.get("/acme/info")
        assert get_tenant_context_optional() is None

    async def test_required_is_400(self, mem_store):
        config = TenancyConfig(resolution_strategies=["header"], require_tenant=True)
        manager = TenancyManager(config, mem_store)
        async with _client(_dependency_app(manager)) as client:
            r = await client.get("/acme/info")
        assert r.status_code == 400
        assert "detail" in r.json()

    async def test_not_found_is_404(self, mem_store):
        config = TenancyConfig(resolution_strategies=["route"], throw_on_tenant_not_found=True)
        manager = TenancyManager(config, mem_store)
        async with _client(_dependency_app(manager)) as client:
            r = await client.get("/ghost/info")
        assert r.status_code == 404
        assert r.json() == {"detail": "Tenant not found"}

    async def test_reuses_middleware_context(self, mem_store):
        resolver = AsyncMock()
        resolver.resolve.return_value = "globex"
        manager = TenancyManager(TenancyConfig(), mem_store, resolvers=[resolver])
        async with _client(_dependency_app(manager, with_middleware=True)) as client:
            r = await client.get("/acme/info")
        assert r.json() == {"route": "acme", "context": "globex", "bound": "globex"}
        resolver.resolve.assert_awaited_once()
