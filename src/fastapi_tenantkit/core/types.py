"""Domain types, enumerations, and data models for fastapi-tenantkit.

This module is the single source of truth for the library's public domain
vocabulary.  All other modules import *from* this module — never the reverse —
to keep the dependency graph acyclic.

Design notes
------------
* Enumerations use :class:`~enum.StrEnum` so values serialise to plain
  strings in JSON, logs, and environment variables without extra conversion.
* :class:`Tenant` and :class:`ResolutionResult` are Pydantic ``frozen=True``
  models.  Immutability makes instances safe to share across async tasks.
* Rejections are values (:class:`ResolutionResult`), not exceptions.  The
  matching exception is built only at the framework edge via
  :meth:`ResolutionResult.error`.
"""

from __future__ import annotations

from collections.abc import Mapping
from enum import StrEnum
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

if TYPE_CHECKING:
    from starlette.requests import Request

    from fastapi_tenantkit.core.exceptions import TenancyError


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------


class ResolutionStrategy(StrEnum):
    """Named strategy used to extract a tenant identifier from a request.

    Strategies
    ----------
    HEADER
        Read a dedicated HTTP header (default: ``X-Tenant-Id``).
    QUERY
        Read a query-string parameter (default: ``tenant``).
    CLAIM
        Read a claim of the authenticated principal (default: ``tenant_id``).
    ROUTE
        Read a path-template variable (default: ``tenantId``).
    SUBDOMAIN
        Take the leftmost label of the request host
        (e.g. ``acme.myapp.com`` → ``acme``).
    CUSTOM
        Slot for a user-supplied resolver passed to
        :class:`~fastapi_tenantkit.manager.TenancyManager`.
    """

    HEADER = "header"
    QUERY = "query"
    CLAIM = "claim"
    ROUTE = "route"
    SUBDOMAIN = "subdomain"
    CUSTOM = "custom"


class ResolutionOutcome(StrEnum):
    """Terminal state of one run of the resolution pipeline.

    ``NO_IDENTIFIER`` and ``UNKNOWN_TENANT`` both let the request proceed
    without a tenant under the default policy, but stay distinct so that
    audit logs can tell "nothing was sent" from "an unknown tenant was sent".
    """

    RESOLVED = "resolved"
    NO_IDENTIFIER = "no_identifier"
    UNKNOWN_TENANT = "unknown_tenant"
    TENANT_REQUIRED = "tenant_required"
    TENANT_NOT_FOUND = "tenant_not_found"


_REJECTED_OUTCOMES = frozenset(
    {ResolutionOutcome.TENANT_REQUIRED, ResolutionOutcome.TENANT_NOT_FOUND}
)


# ---------------------------------------------------------------------------
# Domain models
# ---------------------------------------------------------------------------


class Tenant(BaseModel):
    """Immutable tenant domain model.

    All instances are frozen (``ConfigDict(frozen=True)``).  To produce a
    modified copy use :meth:`model_copy`::

        renamed = tenant.model_copy(update={"name": "Acme Holdings"})

    Identity is the tenant ``id`` compared case-insensitively, so
    ``Tenant(id="acme", ...) == Tenant(id="ACME", ...)``.

    Attributes:
        id: Unique identifier; the value clients send in headers, query
            strings, claims, routes, and subdomains.
        name: Display name shown in UIs and reports.
        metadata: Read-only string key-value pairs (plan, region, feature
            flags, …).  Never ``None``; serialised as a plain ``dict``.
    """

    model_config = ConfigDict(
        frozen=True,
        json_schema_extra={
            "examples": [
                {
                    "id": "acme",
                    "name": "Acme Corp",
                    "metadata": {"plan": "enterprise", "region": "eu-west-1"},
                }
            ]
        },
    )

    id: str = Field(
        ...,
        min_length=1,
        max_length=255,
        description="Unique tenant identifier (case-insensitive).",
    )
    name: str = Field(
        ...,
        description="Display name.",
    )
    metadata: Mapping[str, str] = Field(
        default_factory=dict,
        validate_default=True,
        description="Opaque string key-value pairs.",
    )

    @field_validator("id")
    @classmethod
    def _validate_id(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Tenant id must not be blank")
        return v

    @field_validator("metadata", mode="before")
    @classmethod
    def _coerce_metadata(cls, v: Any) -> Any:
        return {} if v is None else v

    @field_validator("metadata")
    @classmethod
    def _freeze_metadata(cls, v: Mapping[str, str]) -> Mapping[str, str]:
        # Read-only: one instance serves every request.
        return MappingProxyType(dict(v))

    @field_serializer("metadata")
    def _serialize_metadata(self, v: Mapping[str, str]) -> dict[str, str]:
        return dict(v)

    # ------------------------------------------------------------------
    # Identity helpers
    # ------------------------------------------------------------------

    @property
    def key(self) -> str:
        """Case-folded ``id`` used for lookups and equality."""
        return self.id.casefold()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Tenant):
            return NotImplemented
        return self.key == other.key

    def __hash__(self) -> int:
        return hash(self.key)


class ResolutionResult(BaseModel):
    """Explicit outcome of resolving one request.

    Attributes:
        outcome: Terminal :class:`ResolutionOutcome`.
        identifier: Identifier produced by the resolver chain, or ``None``.
        tenant: Tenant found in the store, or ``None``.
        path: Request path the pipeline ran for.
    """

    model_config = ConfigDict(frozen=True)

    outcome: ResolutionOutcome
    identifier: str | None = None
    tenant: Tenant | None = None
    path: str = "/"

    @property
    def rejected(self) -> bool:
        """``True`` when the policy rejected the request."""
        return self.outcome in _REJECTED_OUTCOMES

    @property
    def has_tenant(self) -> bool:
        return self.tenant is not None

    def error(self) -> TenancyError | None:
        """Return the exception describing a rejection, or ``None``."""
        from fastapi_tenantkit.core.exceptions import (  # noqa: PLC0415
            TenantNotFoundError,
            TenantResolutionError,
        )

        if self.outcome == ResolutionOutcome.TENANT_NOT_FOUND:
            return TenantNotFoundError(identifier=self.identifier)
        if self.outcome == ResolutionOutcome.TENANT_REQUIRED:
            details = {"identifier": self.identifier} if self.identifier else None
            return TenantResolutionError(
                reason=(
                    "Tenant resolution is required but no tenant could be "
                    f"resolved for {self.path!r}."
                ),
                path=self.path,
                details=details,
            )
        return None

    def raise_for_rejection(self) -> None:
        """Raise the matching :class:`TenancyError` when the result is a rejection."""
        exc = self.error()
        if exc is not None:
            raise exc


# ---------------------------------------------------------------------------
# Protocols
# ---------------------------------------------------------------------------


@runtime_checkable
class TenantResolver(Protocol):
    """Structural type for tenant resolution strategies.

    Any object that implements ``async def resolve(request) -> str | None``
    satisfies this protocol and can be plugged into the resolver chain.
    """

    async def resolve(self, request: Request) -> str | None:
        """Extract a candidate tenant identifier from *request*.

        Args:
            request: A Starlette / FastAPI ``Request``.

        Returns:
            The identifier, or ``None`` when the request does not carry one.
            Absence is never an error.
        """
        ...


__all__ = [
    "ResolutionOutcome",
    "ResolutionResult",
    "ResolutionStrategy",
    "Tenant",
    "TenantResolver",
]
