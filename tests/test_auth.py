"""Tests for cert_renewer.auth."""

from unittest.mock import patch

from cert_renewer.auth import aws_client, get_credential
from cert_renewer.config import AwsCredentials


@patch("cert_renewer.auth.DefaultAzureCredential")
def test_get_credential_is_cached(mock_cred_cls):
    first = get_credential()
    second = get_credential()

    assert first is second
    mock_cred_cls.assert_called_once_with()


@patch("cert_renewer.auth.boto3.session.Session")
def test_aws_client_uses_service_credentials(mock_session_cls):
    creds = AwsCredentials(access_key_id="key", secret_access_key="secret", session_token="tok", region="eu-west-1")

    client = aws_client("route53", creds)

    mock_session_cls.assert_called_once_with(
        aws_access_key_id="key",
        aws_secret_access_key="secret",
        aws_session_token="tok",
        region_name="eu-west-1",
    )
    session = mock_session_cls.return_value
    assert session.client.call_args.args == ("route53",)
    assert client is session.client.return_value


@patch("cert_renewer.auth.boto3.session.Session")
def test_unset_credentials_defer_to_default_chain(mock_session_cls):
    aws_client("s3", AwsCredentials())

    assert mock_session_cls.call_args.kwargs == {
        "aws_access_key_id": None,
        "aws_secret_access_key": None,
        "aws_session_token": None,
        "region_name": None,
    }
