"""Object store factory — resolve storage provider name to concrete implementation."""

from __future__ import annotations

from cert_renewer.auth import aws_client as _aws_client
from cert_renewer.auth import get_credential as _get_credential
from cert_renewer.config import AppConfig
from cert_renewer.errors import ConfigurationError
from cert_renewer.storage.azure_blob import AzureBlobObjectStore
from cert_renewer.storage.base import ObjectStore
from cert_renewer.storage.s3 import S3ObjectStore


def get_object_store(config: AppConfig) -> ObjectStore:
    name = config.storage_provider.lower()

    if name == "s3":
        return S3ObjectStore(client=_aws_client("s3", config.s3_credentials), bucket=config.storage_bucket)

    if name == "azure_blob":
        if not config.azure_storage_account_url:
            raise ConfigurationError("AZURE_STORAGE_ACCOUNT_URL is required when STORAGE_PROVIDER=azure_blob")
        return AzureBlobObjectStore(
            account_url=config.azure_storage_account_url,
            container=config.storage_bucket,
            credential=_get_credential(),
        )

    raise ConfigurationError(f"Unknown storage provider: '{name}'")
