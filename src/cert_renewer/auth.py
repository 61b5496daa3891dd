"""Shared cloud credential management."""

from __future__ import annotations

import boto3
from azure.identity import DefaultAzureCredential
from botocore.config import Config

from cert_renewer.config import AwsCredentials

_credential: DefaultAzureCredential | None = None

# Per-call timeouts for every AWS request; the workflow's own polling loops handle retries.
_AWS_CLIENT_CONFIG = Config(connect_timeout=10, read_timeout=30, retries={"max_attempts": 3, "mode": "standard"})


def get_credential() -> DefaultAzureCredential:
    """Return a cached DefaultAzureCredential instance."""
    global _credential
    if _credential is None:
        _credential = DefaultAzureCredential()
    return _credential


def aws_client(service_name: str, credentials: AwsCredentials):
    """Create a boto3 client for one service with its own credentials.

    Unset credential fields fall through to boto3's default provider chain.
    """
    session = boto3.session.Session(
        aws_access_key_id=credentials.access_key_id,
        aws_secret_access_key=credentials.secret_access_key,
        aws_session_token=credentials.session_token,
        region_name=credentials.region,
    )
    return session.client(service_name, config=_AWS_CLIENT_CONFIG)
