"""AWS Route53 zone provider — UPSERT TXT record sets and report change sync status."""

from __future__ import annotations

import logging

from cert_renewer.dns.base import ZoneProvider

logger = logging.getLogger(__name__)


class Route53ZoneProvider(ZoneProvider):
    """Zone provider backed by Route53 hosted zones.

    Route53 applies changes asynchronously: ``get_change_status`` reports
    ``PENDING`` until every Route53 name server serves the new record set.
    """

    def __init__(self, client) -> None:
        self._client = client

    def find_zone_id(self, domain: str) -> str | None:
        """Find the public hosted zone whose name is the longest suffix of ``domain``."""
        target_labels = domain.removeprefix("*.").rstrip(".").split(".")
        zones: list[tuple[str, str]] = []
        paginator = self._client.get_paginator("list_hosted_zones")
        for page in paginator.paginate():
            for zone in page["HostedZones"]:
                if zone.get("Config", {}).get("PrivateZone"):
                    continue
                candidate_labels = zone["Name"].rstrip(".").split(".")
                if candidate_labels == target_labels[-len(candidate_labels) :]:
                    zones.append((zone["Name"], zone["Id"]))

        if not zones:
            return None
        zones.sort(key=lambda z: len(z[0]), reverse=True)
        logger.debug("Route53 zone candidates for %s: %s", domain, zones)
        return zones[0][1]

    def upsert_txt_record_set(self, zone_id: str, record_name: str, ttl: int, values: list[str]) -> str:
        response = self._client.change_resource_record_sets(
            HostedZoneId=zone_id,
            ChangeBatch={
                "Comment": "TXT records for ACME validation",
                "Changes": [
                    {
                        "Action": "UPSERT",
                        "ResourceRecordSet": {
                            "Name": record_name,
                            "Type": "TXT",
                            "TTL": ttl,
                            "ResourceRecords": [{"Value": f'"{value}"'} for value in values],
                        },
                    }
                ],
            },
        )
        change_id = response["ChangeInfo"]["Id"]
        logger.info("Submitted Route53 UPSERT of %s (%d value(s)) as change %s", record_name, len(values), change_id)
        return change_id

    def get_change_status(self, change_id: str) -> str:
        response = self._client.get_change(Id=change_id)
        return response["ChangeInfo"]["Status"]
