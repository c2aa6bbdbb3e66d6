"""Storage: Firebase (GCS), local filesystem and S3-compatible backends.

Factory creates the backend from app.core.config. Implementations are loaded
lazily inside StorageFactory.create_storage_service() so that:
- Firebase and local backends only need httpx/aiofiles (main dependencies).
- S3 backend only loads boto3 when used; install with: pip install '.[storage]'.

Backends implement StorageProtocol (put, remove, path_from_url);
ObjectStorageService adds upload naming and URL-based deletion.
"""

from app.infrastructure.external.storage.factory import StorageFactory
from app.infrastructure.external.storage.protocol import (
    ObjectStorageService,
    StorageProtocol,
)

__all__ = [
    "ObjectStorageService",
    "StorageFactory",
    "StorageProtocol",
]
