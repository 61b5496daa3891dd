"""Publish a TXT record set and wait for the zone provider to report it in sync."""

from __future__ import annotations

import logging

from cert_renewer.config import RetryPolicy
from cert_renewer.dns.base import INSYNC, ZoneProvider
from cert_renewer.errors import ZoneLookupError, ZonePropagationError
from cert_renewer.waiting import Waiter

logger = logging.getLogger(__name__)


class ZoneUpdater:
    def __init__(
        self,
        provider: ZoneProvider,
        retry: RetryPolicy,
        waiter: Waiter,
        ttl: int = 60,
        zone_id: str | None = None,
    ) -> None:
        self._provider = provider
        self._retry = retry
        self._waiter = waiter
        self._ttl = ttl
        self._zone_id = zone_id

    def close(self) -> None:
        self._provider.close()

    def resolve_zone(self, domain: str) -> str:
        """An explicitly configured zone wins over discovery by name."""
        if self._zone_id:
            return self._zone_id
        zone_id = self._provider.find_zone_id(domain)
        if zone_id is None:
            raise ZoneLookupError(f"Cannot find a hosted zone for '{domain}'")
        return zone_id

    def upsert(self, domain: str, record_name: str, values: list[str]) -> None:
        """Replace the TXT record set at ``record_name`` with ``values`` and block until in sync."""
        zone_id = self.resolve_zone(domain)
        change_id = self._provider.upsert_txt_record_set(zone_id, record_name, self._ttl, list(values))
        self._wait_for_sync(change_id, record_name)

    def _wait_for_sync(self, change_id: str, record_name: str) -> None:
        status = None
        for attempt in range(1, self._retry.attempts + 1):
            self._waiter.check()
            status = self._provider.get_change_status(change_id)
            if status == INSYNC:
                logger.info("Zone change %s for %s is in sync", change_id, record_name)
                return
            logger.info(
                "Waiting for zone change %s to complete (status %s). Check %d/%d",
                change_id,
                status,
                attempt,
                self._retry.attempts,
            )
            if attempt < self._retry.attempts:
                self._waiter.sleep(self._retry.interval)
        raise ZonePropagationError(
            f"Zone change {change_id} for {record_name} not in sync after {self._retry.attempts} checks "
            f"(last status: {status})"
        )
