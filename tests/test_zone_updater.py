"""Tests for cert_renewer.zone_updater."""

from unittest.mock import MagicMock

import pytest

from cert_renewer.config import RetryPolicy
from cert_renewer.errors import WorkflowCancelledError, ZoneLookupError, ZonePropagationError
from cert_renewer.waiting import Waiter
from cert_renewer.zone_updater import ZoneUpdater


def _make_updater(statuses=("INSYNC",), attempts=3, zone_id=None, waiter=None):
    provider = MagicMock()
    provider.find_zone_id.return_value = "Z-DISCOVERED"
    provider.upsert_txt_record_set.return_value = "change-1"
    provider.get_change_status.side_effect = list(statuses)
    waiter = waiter or MagicMock(spec=Waiter)
    updater = ZoneUpdater(provider, RetryPolicy(attempts=attempts, interval=5), waiter, ttl=60, zone_id=zone_id)
    return updater, provider, waiter


def test_upsert_discovers_zone_and_waits_for_sync():
    updater, provider, waiter = _make_updater(statuses=["PENDING", "PENDING", "INSYNC"])

    updater.upsert("example.com", "_acme-challenge.example.com", ["v1", "v2"])

    provider.find_zone_id.assert_called_once_with("example.com")
    provider.upsert_txt_record_set.assert_called_once_with(
        "Z-DISCOVERED", "_acme-challenge.example.com", 60, ["v1", "v2"]
    )
    assert provider.get_change_status.call_count == 3
    assert waiter.sleep.call_count == 2
    waiter.sleep.assert_called_with(5)


def test_configured_zone_id_skips_discovery():
    updater, provider, _ = _make_updater(zone_id="Z-CONFIGURED")

    updater.upsert("example.com", "_acme-challenge.example.com", ["v1"])

    provider.find_zone_id.assert_not_called()
    assert provider.upsert_txt_record_set.call_args.args[0] == "Z-CONFIGURED"


def test_missing_zone_raises_before_any_write():
    updater, provider, _ = _make_updater()
    provider.find_zone_id.return_value = None

    with pytest.raises(ZoneLookupError, match="example.com"):
        updater.upsert("example.com", "_acme-challenge.example.com", ["v1"])

    provider.upsert_txt_record_set.assert_not_called()


def test_gives_up_after_exactly_n_checks():
    updater, provider, waiter = _make_updater(statuses=["PENDING"] * 3, attempts=3)

    with pytest.raises(ZonePropagationError, match="not in sync after 3 checks"):
        updater.upsert("example.com", "_acme-challenge.example.com", ["v1"])

    assert provider.get_change_status.call_count == 3
    # No sleep after the final check
    assert waiter.sleep.call_count == 2


def test_cancellation_stops_polling():
    waiter = Waiter()
    waiter.cancel()
    updater, provider, _ = _make_updater(statuses=["PENDING"], waiter=waiter)

    with pytest.raises(WorkflowCancelledError):
        updater.upsert("example.com", "_acme-challenge.example.com", ["v1"])

    provider.get_change_status.assert_not_called()


def test_close_closes_provider():
    updater, provider, _ = _make_updater()

    updater.close()

    provider.close.assert_called_once_with()
