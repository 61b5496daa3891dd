"""Tests for Route53 zone provider."""

from unittest.mock import MagicMock

from cert_renewer.dns.route53 import Route53ZoneProvider


def _make_provider(pages):
    mock_client = MagicMock()
    mock_client.get_paginator.return_value.paginate.return_value = pages
    return Route53ZoneProvider(client=mock_client), mock_client


def _zone(name, zone_id, private=False):
    return {"Name": name, "Id": zone_id, "Config": {"PrivateZone": private}}


class TestRoute53FindZoneId:
    def test_longest_suffix_wins(self):
        provider, mock_client = _make_provider(
            [
                {"HostedZones": [_zone("example.com.", "/hostedzone/Z1")]},
                {"HostedZones": [_zone("sub.example.com.", "/hostedzone/Z2")]},
            ]
        )

        assert provider.find_zone_id("_acme-challenge.a.sub.example.com") == "/hostedzone/Z2"
        mock_client.get_paginator.assert_called_once_with("list_hosted_zones")

    def test_private_zones_skipped(self):
        provider, _ = _make_provider(
            [
                {
                    "HostedZones": [
                        _zone("example.com.", "/hostedzone/PUBLIC"),
                        _zone("a.example.com.", "/hostedzone/PRIVATE", private=True),
                    ]
                }
            ]
        )

        assert provider.find_zone_id("_acme-challenge.a.example.com") == "/hostedzone/PUBLIC"

    def test_label_boundary_respected(self):
        provider, _ = _make_provider([{"HostedZones": [_zone("ample.com.", "/hostedzone/Z1")]}])

        assert provider.find_zone_id("_acme-challenge.example.com") is None

    def test_wildcard_domain(self):
        provider, _ = _make_provider([{"HostedZones": [_zone("example.com.", "/hostedzone/Z1")]}])

        assert provider.find_zone_id("*.example.com") == "/hostedzone/Z1"


class TestRoute53Upsert:
    def test_upserts_quoted_values(self):
        mock_client = MagicMock()
        mock_client.change_resource_record_sets.return_value = {"ChangeInfo": {"Id": "/change/C1", "Status": "PENDING"}}
        provider = Route53ZoneProvider(client=mock_client)

        change_id = provider.upsert_txt_record_set("Z1", "_acme-challenge.example.com", 60, ["v1", "v2"])

        assert change_id == "/change/C1"
        kwargs = mock_client.change_resource_record_sets.call_args.kwargs
        assert kwargs["HostedZoneId"] == "Z1"
        change = kwargs["ChangeBatch"]["Changes"][0]
        assert change["Action"] == "UPSERT"
        assert change["ResourceRecordSet"] == {
            "Name": "_acme-challenge.example.com",
            "Type": "TXT",
            "TTL": 60,
            "ResourceRecords": [{"Value": '"v1"'}, {"Value": '"v2"'}],
        }


class TestRoute53ChangeStatus:
    def test_reports_status(self):
        mock_client = MagicMock()
        mock_client.get_change.return_value = {"ChangeInfo": {"Id": "/change/C1", "Status": "INSYNC"}}
        provider = Route53ZoneProvider(client=mock_client)

        assert provider.get_change_status("/change/C1") == "INSYNC"
        mock_client.get_change.assert_called_once_with(Id="/change/C1")
