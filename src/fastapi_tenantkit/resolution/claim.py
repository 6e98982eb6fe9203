"""Claim-based tenant resolution strategy.

Reads the tenant identifier from a claim of the authenticated principal that
an upstream authentication layer attached to the request.  This resolver does
not authenticate anything itself: it expects Starlette's
``AuthenticationMiddleware`` (or any middleware following the same convention)
to have stored the principal in ``scope["user"]``, and must therefore run
*inside* that middleware.

Supported principal shapes
--------------------------
* A mapping of claims (e.g. a decoded JWT payload)::

      {"sub": "user-abc", "tenant_id": "acme"}

* An object exposing a ``claims`` mapping, such as a
  ``starlette.authentication.SimpleUser`` subclass::

      class ClaimsUser(SimpleUser):
          def __init__(self, username: str, claims: dict[str, Any]) -> None:
              super().__init__(username)
              self.claims = claims

Principals reporting ``is_authenticated = False`` (e.g.
``UnauthenticatedUser``) never yield an identifier.
"""

from __future__ import annotations

from collections.abc import Mapping
import logging
from typing import TYPE_CHECKING, Any

from fastapi_tenantkit.core.types import ResolutionStrategy
from fastapi_tenantkit.resolution.base import BaseTenantResolver, clean_identifier

if TYPE_CHECKING:
    from starlette.requests import Request

logger = logging.getLogger(__name__)


class ClaimTenantResolver(BaseTenantResolver):
    """Resolve the tenant identifier from a principal claim.

    Args:
        claim_name: Claim carrying the identifier.  Defaults to ``"tenant_id"``.
    """

    strategy = ResolutionStrategy.CLAIM

    def __init__(self, claim_name: str = "tenant_id") -> None:
        self._claim_name = claim_name
        logger.debug("ClaimTenantResolver claim=%r", claim_name)

    @property
    def claim_name(self) -> str:
        return self._claim_name

    async def resolve(self, request: Request) -> str | None:
        # request.user asserts when AuthenticationMiddleware is absent.
        principal = request.scope.get("user")
        claims = _claims_of(principal)
        if claims is None:
            return None
        value = claims.get(self._claim_name)
        if isinstance(value, (list, tuple)):
            value = value[0] if value else None
        return clean_identifier(value)

    def __repr__(self) -> str:
        return f"ClaimTenantResolver(claim_name={self._claim_name!r})"


def _claims_of(principal: Any) -> Mapping[str, Any] | None:
    """Return the claim mapping of *principal*, or ``None``."""
    if principal is None:
        return None
    if isinstance(principal, Mapping):
        return principal
    if not getattr(principal, "is_authenticated", True):
        return None
    claims = getattr(principal, "claims", None)
    return claims if isinstance(claims, Mapping) else None


__all__ = ["ClaimTenantResolver"]
