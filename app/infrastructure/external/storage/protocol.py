"""Storage backend protocol (DIP) and the object-storage service built on it.

Backends store bytes at a path and know how to turn that path into a public
URL and back. ObjectStorageService adds the naming policy shared by every
backend: uploads are renamed to a random id plus the original extension
under a folder.
"""

from __future__ import annotations

from pathlib import PurePosixPath
from typing import Protocol

from app.shared.utils.generators import generate_cuid


class StorageProtocol(Protocol):
    """Protocol for object storage backends (Firebase/GCS, local, S3-compatible)."""

    name: str

    async def put(self, path: str, content: bytes, content_type: str) -> str:
        """Store content at path (publicly readable); return the public URL."""
        ...

    async def remove(self, path: str) -> bool:
        """Delete the object. Returns True if deleted, False if not found."""
        ...

    def path_from_url(self, url: str) -> str | None:
        """Return the object path for a URL this backend produced, else None."""
        ...


def build_object_path(folder: str, filename: str) -> str:
    """Return "<folder>/<random id><ext>" for an uploaded filename."""
    suffix = PurePosixPath(filename or "").suffix.lower()
    return f"{folder.strip('/')}/{generate_cuid()}{suffix}"


class ObjectStorageService:
    """IObjectStorage implementation delegating bytes to a backend."""

    def __init__(self, backend: StorageProtocol) -> None:
        self.backend = backend

    async def upload(
        self, content: bytes, filename: str, content_type: str, folder: str
    ) -> str:
        path = build_object_path(folder, filename)
        return await self.backend.put(path, content, content_type)

    async def delete(self, url: str) -> bool:
        path = self.backend.path_from_url(url) if url else None
        if not path:
            return False
        return await self.backend.remove(path)
