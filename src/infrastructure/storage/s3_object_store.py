"""S3-compatible object store (AWS S3, MinIO, ...)."""

import asyncio
from typing import Any

import boto3
import structlog
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from core.exceptions import StorageError

logger = structlog.get_logger()


class S3ObjectStore:
    """boto3 implementation of IObjectStore.

    boto3 is synchronous, so each call runs in a worker thread to keep the
    event loop free.
    """

    def __init__(
        self,
        bucket: str,
        region: str | None = None,
        endpoint_url: str | None = None,
        timeout: float = 10.0,
        client: Any | None = None,
    ) -> None:
        """Initialize the store.

        Args:
            bucket: S3 bucket name.
            region: AWS region (optional, uses boto3 default if not set).
            endpoint_url: Custom endpoint for MinIO/compatible storage.
            timeout: Connect/read timeout for each S3 request, in seconds.
            client: Preconfigured S3 client, mainly for tests.
        """
        if client is None:
            kwargs: dict[str, Any] = {
                "config": Config(
                    connect_timeout=timeout,
                    read_timeout=timeout,
                    retries={"max_attempts": 2},
                    signature_version="s3v4",
                ),
            }
            if region:
                kwargs["region_name"] = region
            if endpoint_url:
                kwargs["endpoint_url"] = endpoint_url
            client = boto3.client("s3", **kwargs)

        self._s3 = client
        self._bucket = bucket

    async def put(self, key: str, data: bytes, content_type: str) -> None:
        """Write an object, replacing any existing one."""
        try:
            await asyncio.to_thread(
                self._s3.put_object,
                Bucket=self._bucket,
                Key=key,
                Body=data,
                ContentType=content_type,
            )
        except (BotoCoreError, ClientError) as e:
            logger.error("s3_put_failed", bucket=self._bucket, key=key, error=str(e))
            raise StorageError("avatar_put", "Failed to store avatar") from e
        logger.debug("s3_put", bucket=self._bucket, key=key, size=len(data))

    async def get(self, key: str) -> bytes:
        """Read an object's bytes."""

        def _read() -> bytes:
            response = self._s3.get_object(Bucket=self._bucket, Key=key)
            return response["Body"].read()

        try:
            return await asyncio.to_thread(_read)
        except (BotoCoreError, ClientError) as e:
            raise StorageError("avatar_get", "Failed to read avatar") from e

    async def signed_url(self, key: str, expires_in: int) -> str:
        """Presign a GET for key. No existence check is made."""
        try:
            return await asyncio.to_thread(
                self._s3.generate_presigned_url,
                "get_object",
                Params={"Bucket": self._bucket, "Key": key},
                ExpiresIn=expires_in,
            )
        except (BotoCoreError, ClientError) as e:
            raise StorageError("avatar_sign", "Failed to sign avatar URL") from e
