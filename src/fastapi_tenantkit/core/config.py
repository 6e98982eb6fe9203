"""Configuration management for fastapi-tenantkit.

``TenancyConfig`` is a ``pydantic_settings.BaseSettings`` model that reads its
values from environment variables (prefix ``TENANCY_``), an optional ``.env``
file, or explicit keyword arguments.  It is read once at startup and treated
as read-only afterwards.

Environment variables
---------------------
Every field can be overridden with ``TENANCY_<FIELD_NAME_UPPER>``; list
fields take JSON::

    TENANCY_REQUIRE_TENANT=true
    TENANCY_THROW_ON_TENANT_NOT_FOUND=false
    TENANCY_RESOLUTION_STRATEGIES='["header", "query"]'
    TENANCY_TENANT_HEADER_NAME=X-Tenant-Id
    TENANCY_TENANTS='[{"id": "acme", "name": "Acme Corp"}]'
"""

from __future__ import annotations

from collections import Counter

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from fastapi_tenantkit.core.types import ResolutionStrategy, Tenant

#: Subdomains that never identify a tenant.
DEFAULT_EXCLUDED_SUBDOMAINS: tuple[str, ...] = ("www", "api", "app", "mail", "ftp", "admin")


class TenancyConfig(BaseSettings):
    """Central configuration for tenant resolution.

    Instances are validated eagerly: invalid field values and inconsistent field
    combinations both raise ``ValidationError`` at construction time.

    Example — programmatic::

        config = TenancyConfig(
            resolution_strategies=["header", "query"],
            require_tenant=True,
            tenants=[Tenant(id="acme", name="Acme Corp")],
        )

    Example — environment variables::

        # .env
        TENANCY_RESOLUTION_STRATEGIES=["subdomain", "header"]
        TENANCY_THROW_ON_TENANT_NOT_FOUND=true

        config = TenancyConfig()  # reads from environment / .env
    """

    model_config = SettingsConfigDict(
        env_prefix="TENANCY_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    ######################
    # Enforcement policy #
    ######################

    require_tenant: bool = Field(
        default=False,
        description="Reject requests for which no tenant could be resolved.",
    )

    throw_on_tenant_not_found: bool = Field(
        default=False,
        description=(
            "Reject requests whose resolved identifier matches no tenant.  When "
            "False, unknown identifiers silently degrade to 'no tenant'."
        ),
    )

    resolution_timeout: float | None = Field(
        default=None,
        gt=0,
        description="Deadline in seconds for one resolver + store run (None = no deadline).",
    )

    #########################
    # Resolution strategies #
    #########################

    resolution_strategies: list[ResolutionStrategy] = Field(
        default_factory=list,
        description=(
            "Ordered resolver chain; the first strategy has the highest "
            "precedence.  Empty falls back to the header strategy."
        ),
    )

    tenant_header_name: str = Field(
        default="X-Tenant-Id",
        description="HTTP header read by the HEADER strategy.",
    )

    query_param_name: str = Field(
        default="tenant",
        description="Query-string parameter read by the QUERY strategy.",
    )

    claim_name: str = Field(
        default="tenant_id",
        description="Principal claim read by the CLAIM strategy.",
    )

    route_key: str = Field(
        default="tenantId",
        description="Path-template variable read by the ROUTE strategy.",
    )

    excluded_subdomains: list[str] = Field(
        default_factory=lambda: list(DEFAULT_EXCLUDED_SUBDOMAINS),
        description="Subdomains the SUBDOMAIN strategy never treats as tenants.",
    )

    trust_x_forwarded_host: bool = Field(
        default=False,
        description="Read X-Forwarded-Host before Host (only behind a trusted proxy).",
    )

    #########
    # Store #
    #########

    tenants: list[Tenant] = Field(
        default_factory=list,
        description="Seed list for the default in-memory tenant store.",
    )

    ####################
    # Field validators #
    ####################

    @field_validator("tenant_header_name", "query_param_name", "claim_name", "route_key")
    @classmethod
    def _validate_parameter_name(cls, v: str) -> str:
        """Strip surrounding whitespace and reject blank names.

        Raises:
            ValueError: When the value is empty after stripping.
        """
        v = v.strip()
        if not v:
            msg = "Resolver parameter names must not be blank."
            raise ValueError(msg)
        return v

    @field_validator("excluded_subdomains")
    @classmethod
    def _normalise_excluded_subdomains(cls, v: list[str]) -> list[str]:
        """Lower-case entries and drop blanks; order is kept for readability."""
        seen: list[str] = []
        for item in v:
            label = item.strip().lower()
            if label and label not in seen:
                seen.append(label)
        return seen

    ##########################
    # Cross-field validation #
    ##########################

    @model_validator(mode="after")
    def _validate_cross_field_consistency(self) -> TenancyConfig:
        """Raise ``ValueError`` if the configuration is internally inconsistent.

        Checks:
            - A built-in strategy appears at most once in the chain
              (``CUSTOM`` may repeat, one slot per custom resolver).

        Returns:
            The validated model instance.

        Raises:
            ValueError: On inconsistency.
        """
        counts = Counter(self.resolution_strategies)
        duplicates = sorted(
            s.value for s, n in counts.items() if n > 1 and s != ResolutionStrategy.CUSTOM
        )
        if duplicates:
            msg = f"resolution_strategies lists {duplicates} more than once."
            raise ValueError(msg)
        return self


__all__ = ["DEFAULT_EXCLUDED_SUBDOMAINS", "TenancyConfig"]
