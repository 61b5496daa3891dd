"""Tests for cert_renewer.handlers."""

from unittest.mock import MagicMock, patch

from cert_renewer.config import RetryPolicy
from cert_renewer.coordinator import ChallengeCoordinator
from cert_renewer.handlers import build_controller
from cert_renewer.models import RenewalResult, RevocationResult
from cert_renewer.waiting import Waiter


@patch("cert_renewer.handlers.get_object_store")
def test_build_controller_wires_artifact_names(mock_get_store, make_config):
    config = make_config(account_key_name="a/client.pem", certificate_name="a/cert.pem")

    controller = build_controller(config)

    mock_get_store.assert_called_once_with(config)
    assert controller._artifacts.account_key_name == "a/client.pem"
    assert controller._artifacts.certificate_name == "a/cert.pem"


@patch("cert_renewer.handlers.AcmeClient")
@patch("cert_renewer.handlers.get_object_store")
def test_client_factory_uses_configured_directory(mock_get_store, mock_acme_cls, make_config):
    config = make_config(acme_directory_url="https://acme.example.com/directory")
    controller = build_controller(config)
    account_key = MagicMock()

    client = controller._client_factory(account_key)

    mock_acme_cls.assert_called_once_with("https://acme.example.com/directory", account_key)
    assert client is mock_acme_cls.return_value


@patch("cert_renewer.handlers.PublicResolver")
@patch("cert_renewer.handlers.get_zone_provider")
@patch("cert_renewer.handlers.get_object_store")
def test_coordinator_factory_builds_from_config(mock_get_store, mock_get_provider, mock_resolver_cls, make_config):
    config = make_config(
        dns_zone_id="Z1",
        dns_domain="example.com",
        dns_nameservers=("8.8.8.8",),
        challenge_poll=RetryPolicy(attempts=7, interval=1),
    )
    waiter = Waiter()
    controller = build_controller(config, waiter=waiter)
    client = MagicMock()

    coordinator = controller._coordinator_factory(client)

    assert isinstance(coordinator, ChallengeCoordinator)
    mock_get_provider.assert_called_once_with(config)
    mock_resolver_cls.assert_called_once_with(nameservers=("8.8.8.8",))
    assert coordinator._ca is client
    assert coordinator._poll == RetryPolicy(attempts=7, interval=1)
    assert coordinator._dns_domain == "example.com"
    assert coordinator._zone_updater._zone_id == "Z1"
    assert coordinator._waiter is waiter


@patch("cert_renewer.handlers.PublicResolver")
@patch("cert_renewer.handlers.get_zone_provider")
@patch("cert_renewer.handlers.get_object_store")
def test_coordinator_exit_closes_zone_provider(mock_get_store, mock_get_provider, mock_resolver_cls, make_config):
    controller = build_controller(make_config())

    with controller._coordinator_factory(MagicMock()):
        mock_get_provider.return_value.close.assert_not_called()

    mock_get_provider.return_value.close.assert_called_once_with()


@patch("cert_renewer.handlers.get_object_store")
def test_zone_provider_not_created_until_challenges(mock_get_store, make_config):
    with patch("cert_renewer.handlers.get_zone_provider") as mock_get_provider:
        build_controller(make_config())

    mock_get_provider.assert_not_called()


@patch("cert_renewer.handlers.build_controller")
def test_create_or_renew_certificate_returns_dict(mock_build, make_config):
    from cert_renewer.handlers import create_or_renew_certificate

    config = make_config()
    mock_build.return_value.create_or_renew.return_value = RenewalResult(renewed=True)

    assert create_or_renew_certificate(config) == {"renewed": True}
    mock_build.assert_called_once_with(config)


@patch("cert_renewer.handlers.build_controller")
@patch("cert_renewer.handlers.load_config")
def test_revoke_certificate_loads_config_when_missing(mock_load_config, mock_build):
    from cert_renewer.handlers import revoke_certificate

    mock_build.return_value.revoke.return_value = RevocationResult(revoked=False)

    assert revoke_certificate() == {"revoked": False}
    mock_build.assert_called_once_with(mock_load_config.return_value)


@patch("cert_renewer.handlers.create_or_renew_certificate", return_value={"renewed": False})
def test_lambda_renew(mock_renew):
    from cert_renewer.handlers import lambda_renew

    assert lambda_renew({}, None) == {"renewed": False}
    mock_renew.assert_called_once_with()


@patch("cert_renewer.handlers.revoke_certificate", return_value={"revoked": True})
def test_lambda_revoke(mock_revoke):
    from cert_renewer.handlers import lambda_revoke

    assert lambda_revoke({}, None) == {"revoked": True}
    mock_revoke.assert_called_once_with()
