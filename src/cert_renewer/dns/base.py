"""Abstract base class for DNS zone providers."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Self

INSYNC = "INSYNC"


class ZoneProvider(ABC):
    """Interface for zone APIs that publish ACME DNS-01 TXT record sets."""

    def close(self) -> None:
        """Release resources. Override in subclasses that hold open connections."""

    def __enter__(self) -> Self:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()

    @abstractmethod
    def find_zone_id(self, domain: str) -> str | None:
        """Return the identifier of the zone that manages ``domain``, or None if there is none."""

    @abstractmethod
    def upsert_txt_record_set(self, zone_id: str, record_name: str, ttl: int, values: list[str]) -> str:
        """Replace the TXT record set at ``record_name`` with exactly ``values``.

        Args:
            zone_id: Identifier returned by ``find_zone_id`` (or configured explicitly).
            record_name: Fully qualified record name (e.g. "_acme-challenge.example.com").
            ttl: Record TTL in seconds.
            values: TXT strings, one record per value.

        Returns:
            A change identifier accepted by ``get_change_status``.
        """

    def get_change_status(self, change_id: str) -> str:
        """Report propagation status of a change.

        Providers that apply writes synchronously keep this default and report
        every change as ``INSYNC``.
        """
        return INSYNC
