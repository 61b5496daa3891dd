"""Cloudflare zone provider — replace TXT records via the Cloudflare REST API."""

from __future__ import annotations

import logging

import httpx

from cert_renewer.dns.base import ZoneProvider
from cert_renewer.dns.util import candidate_zones

logger = logging.getLogger(__name__)

_API_BASE = "https://api.cloudflare.com/client/v4"


class CloudflareZoneProvider(ZoneProvider):
    """Zone provider backed by the Cloudflare API. Writes are synchronous."""

    def __init__(
        self,
        api_token: str,
        _http_client: httpx.Client | None = None,
    ) -> None:
        self._client = _http_client or httpx.Client(
            headers={"Authorization": f"Bearer {api_token}"},
            timeout=30,
        )

    def find_zone_id(self, domain: str) -> str | None:
        for zone in candidate_zones(domain):
            resp = self._client.get(f"{_API_BASE}/zones", params={"name": zone})
            resp.raise_for_status()
            results = resp.json()["result"]
            if results:
                return results[0]["id"]
        return None

    def upsert_txt_record_set(self, zone_id: str, record_name: str, ttl: int, values: list[str]) -> str:
        # Cloudflare has no record-set UPSERT: drop whatever is there, then add each value.
        removed = self._delete_records_by_name(zone_id, record_name)
        for value in values:
            resp = self._client.post(
                f"{_API_BASE}/zones/{zone_id}/dns_records",
                json={"type": "TXT", "name": record_name, "content": value, "ttl": ttl},
            )
            resp.raise_for_status()
        logger.info(
            "Replaced %d TXT record(s) at %s with %d value(s) in Cloudflare zone %s",
            removed,
            record_name,
            len(values),
            zone_id,
        )
        return f"{zone_id}/{record_name}"

    def _delete_records_by_name(self, zone_id: str, fqdn: str) -> int:
        """Delete all TXT records matching the FQDN. Returns count of records deleted."""
        resp = self._client.get(
            f"{_API_BASE}/zones/{zone_id}/dns_records",
            params={"type": "TXT", "name": fqdn},
        )
        resp.raise_for_status()
        records = resp.json()["result"]
        for record in records:
            self._client.delete(
                f"{_API_BASE}/zones/{zone_id}/dns_records/{record['id']}",
            ).raise_for_status()
        return len(records)

    def close(self) -> None:
        """Close the underlying HTTP client."""
        self._client.close()
