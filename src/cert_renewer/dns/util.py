"""DNS name utility functions."""

from __future__ import annotations


def candidate_zones(domain: str) -> list[str]:
    """Parent names of a domain, most specific first, stopping before the TLD.

    ``_acme-challenge.a.example.com`` yields
    ``["_acme-challenge.a.example.com", "a.example.com", "example.com"]``.
    """
    labels = domain.removeprefix("*.").rstrip(".").split(".")
    return [".".join(labels[i:]) for i in range(len(labels) - 1)]


def relative_record_name(fqdn: str, zone: str) -> str:
    """Strip the zone suffix from an FQDN; the zone apex becomes ``@``.

    DNS names compare case-insensitively, so the result is lower case.

    Args:
        fqdn: Fully qualified record name (e.g. "_acme-challenge.example.com").
        zone: DNS zone name (e.g. "example.com").

    Returns:
        Record name relative to the zone (e.g. "_acme-challenge").
    """
    fqdn = fqdn.rstrip(".").lower()
    zone = zone.rstrip(".").lower()
    if fqdn == zone:
        return "@"
    suffix = f".{zone}"
    if not fqdn.endswith(suffix):
        raise ValueError(f"Record '{fqdn}' is not under zone '{zone}'")
    return fqdn.removesuffix(suffix)
