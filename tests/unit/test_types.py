"""Unit tests — fastapi_tenantkit.core.types

Verified:
* Tenant validation (blank id, None metadata coerced to {})
* Tenant is frozen
* Tenant equality and hashing are case-insensitive on id
* ResolutionResult.rejected / has_tenant per outcome
* ResolutionResult.error() maps rejections onto exceptions
* TenantResolver protocol is runtime-checkable
"""

from __future__ import annotations

from pydantic import ValidationError
import pytest

from fastapi_tenantkit.core.exceptions import TenantNotFoundError, TenantResolutionError
from fastapi_tenantkit.core.types import (
    ResolutionOutcome,
    ResolutionResult,
    ResolutionStrategy,
    Tenant,
    TenantResolver,
)
from fastapi_tenantkit.resolution.header import HeaderTenantResolver

pytestmark = pytest.mark.unit


class TestTenant:
    def test_minimal(self):
        t = Tenant(id="acme", name="Acme Corp")
        assert t.id == "acme"
        assert t.name == "Acme Corp"
        assert t.metadata == {}

    def test_metadata_none_coerced_to_empty(self):
        t = Tenant(id="acme", name="Acme Corp", metadata=None)
        assert t.metadata == {}

    def test_metadata_preserved(self):
        t = Tenant(id="acme", name="Acme", metadata={"plan": "enterprise"})
        assert t.metadata["plan"] == "enterprise"

    @pytest.mark.parametrize("bad_id", ["", "   ", "\t"])
    def test_blank_id_rejected(self, bad_id: str):
        with pytest.raises(ValidationError):
            Tenant(id=bad_id, name="x")

    def test_frozen(self):
        t = Tenant(id="acme", name="Acme")
        with pytest.raises(ValidationError):
            t.name = "Other"  # type: ignore[misc]

    def test_model_copy(self):
        t = Tenant(id="acme", name="Acme")
        renamed = t.model_copy(update={"name": "Acme Holdings"})
        assert renamed.name == "Acme Holdings"
        assert t.name == "Acme"

    def test_equality_case_insensitive(self):
        assert Tenant(id="acme", name="a") == Tenant(id="ACME", name="b")

    def test_inequality(self):
        assert Tenant(id="acme", name="a") != Tenant(id="globex", name="a")

    def test_not_equal_to_other_types(self):
        assert Tenant(id="acme", name="a") != "acme"

    def test_hash_case_insensitive(self):
        assert len({Tenant(id="acme", name="a"), Tenant(id="Acme", name="a")}) == 1

    def test_key(self):
        assert Tenant(id="AcMe", name="a").key == "acme"

    def test_metadata_read_only(self):
        t = Tenant(id="acme", name="Acme", metadata={"plan": "pro"})
        with pytest.raises(TypeError):
            t.metadata["plan"] = "hacked"  # type: ignore[index]
        assert t.metadata["plan"] == "pro"

    def test_default_metadata_read_only(self):
        with pytest.raises(TypeError):
            Tenant(id="acme", name="Acme").metadata["k"] = "v"  # type: ignore[index]

    def test_metadata_detached_from_input(self):
        source = {"plan": "pro"}
        t = Tenant(id="acme", name="Acme", metadata=source)
        source["plan"] = "changed"
        assert t.metadata["plan"] == "pro"

    def test_metadata_serialised_as_dict(self):
        t = Tenant(id="acme", name="Acme", metadata={"plan": "pro"})
        assert t.model_dump()["metadata"] == {"plan": "pro"}
        assert type(t.model_dump()["metadata"]) is dict
        assert '"metadata":{"plan":"pro"}' in t.model_dump_json()

    def test_round_trip_through_dump(self):
        t = Tenant(id="acme", name="Acme", metadata={"plan": "pro"})
        assert Tenant.model_validate(t.model_dump()).metadata == {"plan": "pro"}

    def test_long_display_name_accepted(self):
        name = "Acme " * 100
        assert Tenant(id="acme", name=name).name == name


class TestResolutionStrategy:
    def test_values(self):
        assert {s.value for s in ResolutionStrategy} == {
            "header",
            "query",
            "claim",
            "route",
            "subdomain",
            "custom",
        }

    def test_str_enum(self):
        assert ResolutionStrategy("header") is ResolutionStrategy.HEADER


class TestResolutionResult:
    @pytest.mark.parametrize(
        ("outcome", "rejected"),
        [
            (ResolutionOutcome.RESOLVED, False),
            (ResolutionOutcome.NO_IDENTIFIER, False),
            (ResolutionOutcome.UNKNOWN_TENANT, False),
            (ResolutionOutcome.TENANT_REQUIRED, True),
            (ResolutionOutcome.TENANT_NOT_FOUND, True),
        ],
    )
    def test_rejected(self, outcome: ResolutionOutcome, rejected: bool):
        assert ResolutionResult(outcome=outcome).rejected is rejected

    def test_has_tenant(self):
        t = Tenant(id="acme", name="Acme")
        assert ResolutionResult(outcome=ResolutionOutcome.RESOLVED, tenant=t).has_tenant
        assert not ResolutionResult(outcome=ResolutionOutcome.NO_IDENTIFIER).has_tenant

    def test_error_none_for_success(self):
        assert ResolutionResult(outcome=ResolutionOutcome.RESOLVED).error() is None
        ResolutionResult(outcome=ResolutionOutcome.UNKNOWN_TENANT).raise_for_rejection()

    def test_error_not_found(self):
        result = ResolutionResult(outcome=ResolutionOutcome.TENANT_NOT_FOUND, identifier="ghost")
        exc = result.error()
        assert isinstance(exc, TenantNotFoundError)
        assert exc.identifier == "ghost"

    def test_error_required_carries_path(self):
        result = ResolutionResult(
            outcome=ResolutionOutcome.TENANT_REQUIRED,
            identifier="ghost",
            path="/data",
        )
        with pytest.raises(TenantResolutionError) as exc_info:
            result.raise_for_rejection()
        assert exc_info.value.path == "/data"
        assert exc_info.value.details == {"identifier": "ghost"}

    def test_frozen(self):
        result = ResolutionResult(outcome=ResolutionOutcome.RESOLVED)
        with pytest.raises(ValidationError):
            result.identifier = "x"  # type: ignore[misc]


class TestTenantResolverProtocol:
    def test_builtin_resolver_satisfies_protocol(self):
        assert isinstance(HeaderTenantResolver(), TenantResolver)

    def test_duck_typed_resolver_satisfies_protocol(self):
        class CookieResolver:
            async def resolve(self, request):
                return request.cookies.get("tenant")

        assert isinstance(CookieResolver(), TenantResolver)

    def test_object_without_resolve_rejected(self):
        assert not isinstance(object(), TenantResolver)
