"""Public DNS lookups of TXT records through dnspython."""

from __future__ import annotations

import logging

import dns.exception
import dns.name
import dns.resolver

logger = logging.getLogger(__name__)


class ResolverLookupError(Exception):
    """A TXT lookup failed or returned nothing; callers treat it as "not yet visible"."""


class PublicResolver:
    """Queries TXT records the way the CA's validation servers would see them."""

    def __init__(self, nameservers: list[str] | tuple[str, ...] = (), _resolver: dns.resolver.Resolver | None = None):
        if _resolver is None:
            _resolver = dns.resolver.Resolver(configure=not nameservers)
            if nameservers:
                _resolver.nameservers = list(nameservers)
        self._resolver = _resolver

    def query_txt(self, name: str, timeout: float) -> list[str]:
        """Return every TXT string at ``name``, joining multi-string records.

        Raises:
            ResolverLookupError: on timeout, NXDOMAIN, empty answer or any other resolver failure.
        """
        qname = dns.name.from_text(name)
        try:
            answer = self._resolver.resolve(qname, "TXT", lifetime=timeout, search=False)
        except (dns.resolver.NXDOMAIN, dns.resolver.NoAnswer) as exc:
            raise ResolverLookupError(f"No TXT record at {name}") from exc
        except dns.exception.DNSException as exc:
            raise ResolverLookupError(f"Error resolving {name}: {exc}") from exc
        return [b"".join(rdata.strings).decode("utf-8", errors="replace") for rdata in answer]
