"""Azure Blob Storage object store."""

from __future__ import annotations

import logging

from azure.core.exceptions import AzureError, ResourceNotFoundError
from azure.storage.blob import BlobServiceClient, ContainerClient, ContentSettings

from cert_renewer.errors import ArtifactStoreError
from cert_renewer.storage.base import PEM_CONTENT_TYPE, ObjectStore

logger = logging.getLogger(__name__)


class AzureBlobObjectStore(ObjectStore):
    """Blobs in one container. Containers are private unless configured otherwise in Azure."""

    def __init__(
        self,
        account_url: str,
        container: str,
        credential=None,
        _container_client: ContainerClient | None = None,
    ) -> None:
        self._container = container
        self._container_client = _container_client or BlobServiceClient(
            account_url=account_url, credential=credential
        ).get_container_client(container)

    def get(self, key: str) -> bytes | None:
        blob_client = self._container_client.get_blob_client(key)
        try:
            return blob_client.download_blob().readall()
        except ResourceNotFoundError:
            logger.info("Blob %s/%s not found", self._container, key)
            return None
        except AzureError as exc:
            raise ArtifactStoreError(f"Cannot read blob {self._container}/{key}: {exc}") from exc

    def put(self, key: str, data: bytes, metadata: dict[str, str], filename: str) -> None:
        blob_client = self._container_client.get_blob_client(key)
        try:
            blob_client.upload_blob(
                data,
                overwrite=True,
                metadata=metadata,
                content_settings=ContentSettings(
                    content_type=PEM_CONTENT_TYPE,
                    content_disposition=f'attachment; filename="{filename}"',
                ),
            )
        except AzureError as exc:
            raise ArtifactStoreError(f"Cannot write blob {self._container}/{key}: {exc}") from exc
        logger.info("Wrote blob %s/%s (%d bytes)", self._container, key, len(data))
