"""Abstract base class for tenant resolution strategies.

A resolver only *extracts* a candidate identifier from the request; it never
consults the tenant store.  All resolution strategies — header, query, claim,
route, subdomain, and custom — implement a single abstract method,
:meth:`BaseTenantResolver.resolve`, returning ``str | None``.  Resolvers are
stateless leaves apart from their immutable parameters, so one instance is
shared by every request.

Extension pattern::

    from fastapi_tenantkit.resolution.base import BaseTenantResolver, clean_identifier

    class CookieTenantResolver(BaseTenantResolver):
        strategy = ResolutionStrategy.CUSTOM

        def __init__(self, cookie_name: str = "tenant") -> None:
            self._cookie = cookie_name

        async def resolve(self, request: Request) -> str | None:
            return clean_identifier(request.cookies.get(self._cookie))

Any object with a matching ``async def resolve(request)`` also satisfies the
:class:`~fastapi_tenantkit.core.types.TenantResolver` protocol and can be used
without subclassing.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, ClassVar

from fastapi_tenantkit.core.types import ResolutionStrategy

if TYPE_CHECKING:
    from starlette.requests import Request


def clean_identifier(value: Any) -> str | None:
    """Normalise a raw request value into an identifier candidate.

    ``None``, empty, and whitespace-only values mean "absent".  Anything else
    is converted to ``str`` and stripped of surrounding whitespace; case is
    preserved.

    Args:
        value: Raw value read from the request.

    Returns:
        The stripped identifier, or ``None``.
    """
    if value is None:
        return None
    text = str(value).strip()
    return text or None


class BaseTenantResolver(ABC):
    """Abstract base class for tenant identifier extraction strategies.

    Contract for :meth:`resolve`:

    - no side effects on the request;
    - ``None`` (never an exception) when the identifier is absent, empty, or
      whitespace-only;
    - idempotent for an unmodified request.

    Attributes:
        strategy: Tag identifying the strategy in logs and diagnostics.
    """

    strategy: ClassVar[ResolutionStrategy] = ResolutionStrategy.CUSTOM

    @abstractmethod
    async def resolve(self, request: Request) -> str | None:
        """Extract a candidate tenant identifier from *request*.

        Args:
            request: A FastAPI / Starlette :class:`~starlette.requests.Request`.

        Returns:
            The identifier, or ``None`` when the request does not carry one.
        """

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


__all__ = ["BaseTenantResolver", "clean_identifier"]
