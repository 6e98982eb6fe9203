"""Integration tests — fastapi_tenantkit.admin.make_admin_router"""

from __future__ import annotations

from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
import pytest

from fastapi_tenantkit.admin import make_admin_router
from fastapi_tenantkit.core.config import TenancyConfig
from fastapi_tenantkit.core.types import Tenant
from fastapi_tenantkit.manager import TenancyManager
from fastapi_tenantkit.middleware.tenancy import TenancyMiddleware
from fastapi_tenantkit.storage.tenant_store import TenantStore

pytestmark = pytest.mark.integration


class _LookupOnlyStore(TenantStore):
    async def find_by_id(self, tenant_id: str) -> Tenant | None:
        return Tenant(id=tenant_id, name=tenant_id) if tenant_id == "acme" else None


def _app(manager: TenancyManager, prefix: str = "/admin/tenants") -> FastAPI:
    app = FastAPI()
    app.include_router(make_admin_router(manager, prefix=prefix))
    config = manager.config
    if config.require_tenant:
        app.add_middleware(TenancyMiddleware, manager=manager, excluded_paths=[prefix])
    return app


def _client(app: FastAPI) -> AsyncClient:
    return AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver")


class TestAdminRouter:
    async def test_list(self, manager: TenancyManager):
        async with _client(_app(manager)) as client:
            r = await client.get("/admin/tenants")
        assert r.status_code == 200
        assert [t["id"] for t in r.json()] == ["acme", "globex", "initech"]
        assert r.json()[0]["metadata"] == {"plan": "enterprise", "region": "eu-west-1"}

    async def test_get(self, manager: TenancyManager):
        async with _client(_app(manager)) as client:
            r = await client.get("/admin/tenants/GLOBEX")
        assert r.status_code == 200
        assert r.json()["id"] == "globex"

    async def test_get_unknown(self, manager: TenancyManager):
        async with _client(_app(manager)) as client:
            r = await client.get("/admin/tenants/ghost")
        assert r.status_code == 404

    async def test_list_not_supported(self):
        manager = TenancyManager(TenancyConfig(), _LookupOnlyStore())
        async with _client(_app(manager)) as client:
            r = await client.get("/admin/tenants")
            found = await client.get("/admin/tenants/acme")
        assert r.status_code == 501
        assert found.status_code == 200

    async def test_custom_prefix(self, manager: TenancyManager):
        async with _client(_app(manager, prefix="/ops/tenants")) as client:
            r = await client.get("/ops/tenants")
        assert r.status_code == 200

    async def test_excluded_from_strict_resolution(self, mem_store):
        manager = TenancyManager(TenancyConfig(require_tenant=True), mem_store)
        async with _client(_app(manager)) as client:
            r = await client.get("/admin/tenants")
        assert r.status_code == 200
        assert len(r.json()) == 3
