"""Amazon S3 object store."""

from __future__ import annotations

import logging

from botocore.exceptions import BotoCoreError, ClientError

from cert_renewer.errors import ArtifactStoreError
from cert_renewer.storage.base import PEM_CONTENT_TYPE, ObjectStore

logger = logging.getLogger(__name__)

_NOT_FOUND_CODES = ("NoSuchKey", "NotFound", "404")


class S3ObjectStore(ObjectStore):
    def __init__(self, client, bucket: str) -> None:
        self._client = client
        self._bucket = bucket

    def get(self, key: str) -> bytes | None:
        try:
            response = self._client.get_object(Bucket=self._bucket, Key=key)
        except ClientError as exc:
            if exc.response.get("Error", {}).get("Code") in _NOT_FOUND_CODES:
                logger.info("Object s3://%s/%s not found", self._bucket, key)
                return None
            raise ArtifactStoreError(f"Cannot read s3://{self._bucket}/{key}: {exc}") from exc
        except BotoCoreError as exc:
            raise ArtifactStoreError(f"Cannot read s3://{self._bucket}/{key}: {exc}") from exc
        return response["Body"].read()

    def put(self, key: str, data: bytes, metadata: dict[str, str], filename: str) -> None:
        try:
            self._client.put_object(
                Bucket=self._bucket,
                Key=key,
                Body=data,
                ACL="private",
                ContentType=PEM_CONTENT_TYPE,
                ContentDisposition=f'attachment; filename="{filename}"',
                Metadata=metadata,
            )
        except (BotoCoreError, ClientError) as exc:
            raise ArtifactStoreError(f"Cannot write s3://{self._bucket}/{key}: {exc}") from exc
        logger.info("Wrote s3://%s/%s (%d bytes)", self._bucket, key, len(data))
