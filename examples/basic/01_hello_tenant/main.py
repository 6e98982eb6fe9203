"""
Basic Example 1 — Hello Tenant
================================
A small multi-tenant FastAPI application with three seeded tenants.

What you'll learn
-----------------
- Configure TenancyConfig with an in-memory tenant seed
- Chain two resolution strategies (header first, then query string)
- Add TenancyMiddleware to your FastAPI app
- Read the request's TenantContext in a route
- Serve anonymous and tenant-scoped requests from the same app

Run
---
    pip install "fastapi-tenantkit"
    pip install "fastapi[standard]"
    uvicorn main:app --reload

Test
----
    # Service banner (no tenant needed)
    curl http://localhost:8000/

    # Resolve acme from the header
    curl http://localhost:8000/info -H "X-Tenant-Id: acme"

    # Resolve globex from the query string
    curl "http://localhost:8000/info?tenant=globex"

    # No tenant → anonymous response
    curl http://localhost:8000/info

    # Tenant data and plan features
    curl http://localhost:8000/data -H "X-Tenant-Id: initech"
    curl http://localhost:8000/features -H "X-Tenant-Id: acme"

    # Unknown tenant → 404
    curl http://localhost:8000/info -H "X-Tenant-Id: no-such-tenant"
"""
from fastapi import FastAPI, HTTPException, Request, status
from fastapi.responses import JSONResponse

from fastapi_tenantkit import (
    TenancyConfig,
    TenancyManager,
    TenancyMiddleware,
    Tenant,
    TenantContextDep,
    TenantDep,
    TenantResolutionError,
)

# ── 1. Configuration ──────────────────────────────────────────────────────────
#
# The header is checked first; the query string is a fallback that is handy
# during development.  Requests without a tenant are allowed, requests naming
# an unknown tenant are rejected with 404.
#
config = TenancyConfig(
    resolution_strategies=["header", "query"],
    tenant_header_name="X-Tenant-Id",
    query_param_name="tenant",
    require_tenant=False,
    throw_on_tenant_not_found=True,
    tenants=[
        Tenant(
            id="acme",
            name="Acme Corp",
            metadata={"plan": "enterprise", "region": "eu-west-1", "theme": "dark"},
        ),
        Tenant(
            id="globex",
            name="Globex Inc",
            metadata={"plan": "starter", "region": "us-east-1", "theme": "light"},
        ),
        Tenant(
            id="initech",
            name="Initech Ltd",
            metadata={"plan": "professional", "region": "ap-southeast-1", "theme": "system"},
        ),
    ],
)

# ── 2. Manager ────────────────────────────────────────────────────────────────
#
# Without an explicit store the manager seeds an InMemoryTenantStore from
# config.tenants.  Swap in your own TenantStore for production.
#
manager = TenancyManager(config)

# ── 3. App + lifespan ─────────────────────────────────────────────────────────

app = FastAPI(
    title="Hello Tenant — Basic Example",
    description="Header and query-string tenant resolution over an in-memory store.",
    lifespan=manager.create_lifespan(),
)

# ── 4. Middleware ─────────────────────────────────────────────────────────────
#
# TenancyMiddleware resolves the tenant before routing and exposes it through
# a ContextVar and request.state.tenant_context.
#
app.add_middleware(
    TenancyMiddleware,
    manager=manager,
    excluded_paths=["/health", "/docs", "/openapi.json", "/favicon.ico"],
)

# ── 5. Error handling ─────────────────────────────────────────────────────────
#
# get_current_tenant (behind TenantDep) raises TenantResolutionError on
# anonymous requests.  Map it to 401 for tenant-only routes.
#
@app.exception_handler(TenantResolutionError)
async def tenant_required_handler(request: Request, exc: TenantResolutionError):
    return JSONResponse(status_code=status.HTTP_401_UNAUTHORIZED, content={"detail": exc.message})


# ── 6. Routes ─────────────────────────────────────────────────────────────────

_RECORDS: dict[str, list[str]] = {
    "acme": ["Widget A", "Widget B", "Widget C"],
    "globex": ["Product X", "Product Y"],
    "initech": ["Item Alpha"],
}

_FEATURES: dict[str, list[str]] = {
    "enterprise": ["SSO", "Audit Logs", "Custom Domain", "SLA 99.99%", "Dedicated Support"],
    "professional": ["SSO", "Audit Logs", "Custom Domain"],
    "starter": ["Standard Support"],
}


@app.get("/")
async def root():
    """Public banner — no tenant required."""
    return {
        "service": "TenantKit Demo API",
        "version": "0.1.0",
        "docs": "Pass X-Tenant-Id header or ?tenant= query param to identify your tenant",
    }


@app.get("/info")
async def info(context: TenantContextDep):
    """Describe the current tenant, or report an anonymous request."""
    if not context.has_tenant:
        return {"tenant": None, "message": "Anonymous request — no tenant resolved"}
    tenant = context.current
    return {"id": tenant.id, "name": tenant.name, "metadata": dict(tenant.metadata)}


@app.get("/data")
async def data(context: TenantContextDep):
    """Simulated per-tenant records.  In a real app: query your database by tenant id."""
    if not context.has_tenant:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)
    rows = _RECORDS.get(context.current.id, [])
    return {"tenant": context.current.id, "records": rows, "count": len(rows)}


@app.get("/features")
async def features(tenant: TenantDep):
    """Feature flags derived from the tenant's plan metadata."""
    plan = tenant.metadata.get("plan", "free")
    return {
        "tenant": tenant.id,
        "plan": plan,
        "features": _FEATURES.get(plan, ["Limited Access"]),
    }


@app.get("/health")
async def health():
    """No tenant needed — used by load-balancers and CI checks."""
    return {"status": "healthy"}
