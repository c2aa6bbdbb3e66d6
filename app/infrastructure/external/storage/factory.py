"""Storage service factory: creates the Firebase, local or S3 backend from settings."""

from __future__ import annotations

from typing import TYPE_CHECKING

import httpx

from app.infrastructure.external.storage.protocol import ObjectStorageService

if TYPE_CHECKING:
    from app.core.config import Settings
    from app.infrastructure.firebase.client import FirebaseCredentials


class StorageFactory:
    """Factory for storage service instances based on configuration."""

    @staticmethod
    def create_storage_service(
        settings: "Settings",
        *,
        firebase: "FirebaseCredentials | None" = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> ObjectStorageService:
        """Create storage service from settings.

        Args:
            settings: Application settings.
            firebase: Service account credentials (firebase backend only).
            http_client: Shared HTTP client (firebase backend only).

        Returns:
            ObjectStorageService wrapping the selected backend.

        Raises:
            ValueError: Unknown backend or missing required config.
        """
        backend = settings.storage_backend.lower()

        if backend == "firebase":
            from app.infrastructure.external.storage.firebase_storage import (
                FirebaseStorageBackend,
            )

            if not settings.firebase_storage_bucket:
                raise ValueError("FIREBASE_STORAGE_BUCKET required for firebase backend")
            if firebase is None or http_client is None:
                raise ValueError(
                    "Firebase storage requires FIREBASE_SERVICE_ACCOUNT_KEY or "
                    "FIREBASE_SERVICE_ACCOUNT_PATH"
                )
            return ObjectStorageService(
                FirebaseStorageBackend(
                    bucket=settings.firebase_storage_bucket,
                    token_source=firebase.token_source,
                    http_client=http_client,
                )
            )
        if backend == "local":
            from app.infrastructure.external.storage.local_storage import (
                LocalStorageBackend,
            )

            if not settings.storage_root:
                raise ValueError("STORAGE_ROOT required for local backend")
            return ObjectStorageService(
                LocalStorageBackend(
                    storage_root=settings.storage_root,
                    base_url=settings.storage_base_url,
                )
            )
        if backend == "s3":
            if not settings.s3_bucket:
                raise ValueError("S3_BUCKET required for s3 backend")
            try:
                from app.infrastructure.external.storage.s3_storage import (
                    S3StorageBackend,
                )
            except ImportError as e:
                raise ValueError(
                    "S3 backend requires boto3. Install with: pip install '.[storage]'"
                ) from e
            return ObjectStorageService(
                S3StorageBackend(
                    bucket=settings.s3_bucket,
                    region=settings.s3_region,
                    endpoint_url=settings.s3_endpoint_url,
                    access_key=settings.s3_access_key,
                    secret_key=(
                        settings.s3_secret_key.get_secret_value()
                        if settings.s3_secret_key
                        else None
                    ),
                    public_base_url=settings.storage_base_url,
                )
            )
        raise ValueError(
            f"Unknown storage backend: {backend}. Supported: 'firebase', 'local', 's3'"
        )
