"""S3-compatible object storage (AWS S3, MinIO, etc.) with public-read objects."""

from __future__ import annotations

import asyncio
from urllib.parse import quote, unquote

import boto3
from botocore.exceptions import ClientError

from app.infrastructure.exceptions import StorageDeleteError, StorageUploadError


class S3StorageBackend:
    """S3-compatible storage.

    Uses boto3 (sync) via asyncio.to_thread for async API. Compatible with
    AWS S3, MinIO, DigitalOcean Spaces.
    """

    name = "s3"

    def __init__(
        self,
        bucket: str,
        region: str = "us-east-1",
        endpoint_url: str | None = None,
        access_key: str | None = None,
        secret_key: str | None = None,
        public_base_url: str | None = None,
    ) -> None:
        """Initialize S3 client.

        Args:
            bucket: Bucket name.
            region: AWS region.
            endpoint_url: Custom endpoint (MinIO/Spaces).
            access_key: Optional; uses env/IAM if not set.
            secret_key: Optional.
            public_base_url: Base URL objects are served from; defaults to the
                virtual-hosted AWS URL.
        """
        self.bucket = bucket
        self.region = region
        extra = {} if endpoint_url is None else {"endpoint_url": endpoint_url}
        self._client = boto3.client(
            "s3",
            region_name=region,
            aws_access_key_id=access_key,
            aws_secret_access_key=secret_key,
            **extra,
        )
        if public_base_url:
            self.public_base_url = public_base_url.rstrip("/")
        elif endpoint_url:
            self.public_base_url = f"{endpoint_url.rstrip('/')}/{bucket}"
        else:
            self.public_base_url = f"https://{bucket}.s3.{region}.amazonaws.com"

    async def put(self, path: str, content: bytes, content_type: str) -> str:
        def _put() -> None:
            self._client.put_object(
                Bucket=self.bucket,
                Key=path,
                Body=content,
                ContentType=content_type,
                ACL="public-read",
            )

        try:
            await asyncio.to_thread(_put)
        except ClientError as e:
            raise StorageUploadError(path, str(e)) from e
        return f"{self.public_base_url}/{quote(path)}"

    async def remove(self, path: str) -> bool:
        """Delete object. Returns True if deleted."""
        def _delete() -> bool:
            try:
                self._client.head_object(Bucket=self.bucket, Key=path)
            except ClientError as e:
                if e.response["Error"]["Code"] in ("404", "NoSuchKey"):
                    return False
                raise
            self._client.delete_object(Bucket=self.bucket, Key=path)
            return True

        try:
            return await asyncio.to_thread(_delete)
        except ClientError as e:
            raise StorageDeleteError(path, str(e)) from e

    def path_from_url(self, url: str) -> str | None:
        prefix = f"{self.public_base_url}/"
        if not url.startswith(prefix):
            return None
        return unquote(url[len(prefix):]) or None
