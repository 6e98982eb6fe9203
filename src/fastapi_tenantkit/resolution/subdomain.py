"""Subdomain-based tenant resolution strategy.

Extracts the tenant identifier from the leftmost label of the request host.

Example::

    Host: acme.myapp.com   → identifier: "acme"
    Host: www.myapp.com    → None  (excluded label)
    Host: myapp.com        → None  (no label beyond domain + TLD)

Rules
-----
- The port is ignored (``acme.myapp.com:8000`` → ``acme``).
- Hosts with fewer than three labels carry no subdomain.
- IP literals never carry a subdomain.
- Labels in the exclusion set (case-insensitive) are ignored; the returned
  label keeps its original case.
- ``X-Forwarded-Host`` is read before ``Host`` only when
  ``trust_x_forwarded=True``.  Enable it only behind a trusted reverse proxy.
"""

from __future__ import annotations

import ipaddress
import logging
from typing import TYPE_CHECKING

from fastapi_tenantkit.core.config import DEFAULT_EXCLUDED_SUBDOMAINS
from fastapi_tenantkit.core.types import ResolutionStrategy
from fastapi_tenantkit.resolution.base import BaseTenantResolver, clean_identifier

if TYPE_CHECKING:
    from collections.abc import Iterable

    from starlette.requests import Request

logger = logging.getLogger(__name__)


class SubdomainTenantResolver(BaseTenantResolver):
    """Resolve the tenant identifier from the leftmost subdomain.

    Args:
        excluded_subdomains: Labels that never identify a tenant.  ``None``
            uses ``www, api, app, mail, ftp, admin``.
        trust_x_forwarded: Whether to read ``X-Forwarded-Host`` before
            ``Host``.  Default ``False``.

    Example::

        resolver = SubdomainTenantResolver(excluded_subdomains=["www", "status"])

        # Request: Host: acme.myapp.com
        identifier = await resolver.resolve(request)   # → "acme"
    """

    strategy = ResolutionStrategy.SUBDOMAIN

    def __init__(
        self,
        excluded_subdomains: Iterable[str] | None = None,
        trust_x_forwarded: bool = False,
    ) -> None:
        source = DEFAULT_EXCLUDED_SUBDOMAINS if excluded_subdomains is None else excluded_subdomains
        self._excluded: frozenset[str] = frozenset(s.casefold() for s in source)
        self._trust_x_forwarded = trust_x_forwarded
        logger.debug(
            "SubdomainTenantResolver excluded=%s trust_x_forwarded=%s",
            sorted(self._excluded),
            trust_x_forwarded,
        )

    @property
    def excluded_subdomains(self) -> frozenset[str]:
        return self._excluded

    def extract(self, host: str) -> str | None:
        """Return the tenant label of *host*, or ``None``.

        Args:
            host: Raw ``Host`` header value (may include a port).
        """
        hostname = _strip_port(host.strip())
        if not hostname or _is_ip_literal(hostname):
            return None

        labels = hostname.split(".")
        if len(labels) < 3:
            return None

        label = clean_identifier(labels[0])
        if label is None or label.casefold() in self._excluded:
            return None
        return label

    async def resolve(self, request: Request) -> str | None:
        host = ""
        if self._trust_x_forwarded:
            # A proxy chain may append several hosts; the first is the client's.
            host = request.headers.get("x-forwarded-host", "").split(",")[0]
        if not host.strip():
            host = request.headers.get("host", "")
        identifier = self.extract(host)
        logger.debug("Subdomain resolver: host=%r → identifier=%r", host, identifier)
        return identifier

    def __repr__(self) -> str:
        return (
            f"SubdomainTenantResolver(excluded_subdomains={sorted(self._excluded)!r}, "
            f"trust_x_forwarded={self._trust_x_forwarded})"
        )


def _strip_port(host: str) -> str:
    if host.startswith("["):
        # Bracketed IPv6 literal, with or without a port.
        return host[1:].split("]", 1)[0]
    name, sep, port = host.rpartition(":")
    if sep and port.isdigit() and ":" not in name:
        return name
    return host


def _is_ip_literal(hostname: str) -> bool:
    try:
        ipaddress.ip_address(hostname)
    except ValueError:
        return False
    return True


__all__ = ["SubdomainTenantResolver"]
