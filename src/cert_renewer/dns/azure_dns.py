"""Azure DNS zone provider — replace TXT record sets via azure-mgmt-dns."""

from __future__ import annotations

import logging

from azure.core.exceptions import ResourceNotFoundError
from azure.mgmt.dns import DnsManagementClient
from azure.mgmt.dns.models import RecordSet, TxtRecord

from cert_renewer.dns.base import ZoneProvider
from cert_renewer.dns.util import candidate_zones, relative_record_name

logger = logging.getLogger(__name__)


class AzureDnsZoneProvider(ZoneProvider):
    """Zone provider backed by Azure DNS zones in one resource group.

    Zone identifiers are zone names. Record set writes are applied
    synchronously, so the inherited ``get_change_status`` is always in sync.
    """

    def __init__(
        self,
        credential,
        subscription_id: str,
        resource_group: str,
        _dns_client: DnsManagementClient | None = None,
    ) -> None:
        self._resource_group = resource_group
        self._dns_client = _dns_client or DnsManagementClient(credential, subscription_id)

    def find_zone_id(self, domain: str) -> str | None:
        for zone in candidate_zones(domain):
            try:
                self._dns_client.zones.get(resource_group_name=self._resource_group, zone_name=zone)
            except ResourceNotFoundError:
                continue
            return zone
        return None

    def upsert_txt_record_set(self, zone_id: str, record_name: str, ttl: int, values: list[str]) -> str:
        relative = relative_record_name(record_name, zone_id)
        record_set = RecordSet(
            ttl=ttl,
            txt_records=[TxtRecord(value=[value]) for value in values],
        )
        result = self._dns_client.record_sets.create_or_update(
            resource_group_name=self._resource_group,
            zone_name=zone_id,
            relative_record_set_name=relative,
            record_type="TXT",
            parameters=record_set,
        )
        logger.info("Upserted TXT record set %s.%s (%d value(s))", relative, zone_id, len(values))
        return getattr(result, "etag", None) or f"{zone_id}/{relative}"
