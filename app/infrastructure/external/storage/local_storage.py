"""Local filesystem storage with path validation and atomic writes."""

from __future__ import annotations

import os
import tempfile
from pathlib import Path
from urllib.parse import quote, unquote

import aiofiles
import aiofiles.os

from app.infrastructure.exceptions import (
    StorageDeleteError,
    StoragePermissionError,
    StorageUploadError,
)


class LocalStorageBackend:
    """Local filesystem storage with atomic writes and path traversal protection.

    Paths are validated against storage_root. Writes use temp file + rename.
    Public URLs are base_url + "/" + path; serve storage_root from that URL
    (reverse proxy or static mount) in development.
    """

    name = "local"

    def __init__(self, storage_root: str, base_url: str | None = None) -> None:
        """Initialize local storage.

        Args:
            storage_root: Base directory for all files.
            base_url: Public base URL for stored files (e.g. https://cdn.example.com/media).
        """
        self.storage_root = Path(storage_root).resolve()
        self.base_url = (base_url or "/media").rstrip("/")
        self.storage_root.mkdir(parents=True, exist_ok=True, mode=0o750)

    def _get_full_path(self, path: str) -> Path:
        """Resolve and validate path under storage_root. Raises StoragePermissionError if traversal."""
        full_path = (self.storage_root / path).resolve()
        try:
            full_path.relative_to(self.storage_root)
        except ValueError as e:
            raise StoragePermissionError(path, "path_validation") from e
        return full_path

    async def put(self, path: str, content: bytes, content_type: str) -> str:
        """Write atomically (temp file in the target directory, then rename)."""
        target_path = self._get_full_path(path)
        try:
            target_path.parent.mkdir(parents=True, exist_ok=True, mode=0o750)
            temp_fd, temp_path = tempfile.mkstemp(
                dir=target_path.parent,
                prefix=".tmp_",
                suffix=target_path.suffix,
            )
            os.close(temp_fd)
            try:
                async with aiofiles.open(temp_path, "wb") as f:
                    await f.write(content)
                os.chmod(temp_path, 0o644)
                os.replace(temp_path, target_path)
            finally:
                if Path(temp_path).exists():
                    os.unlink(temp_path)
        except OSError as e:
            raise StorageUploadError(path, str(e)) from e
        return f"{self.base_url}/{quote(path)}"

    async def remove(self, path: str) -> bool:
        """Delete file and prune empty parent directories. Returns True if deleted."""
        file_path = self._get_full_path(path)
        if not file_path.exists():
            return False
        try:
            await aiofiles.os.remove(file_path)
        except OSError as e:
            raise StorageDeleteError(path, str(e)) from e
        parent = file_path.parent
        while parent != self.storage_root:
            try:
                if any(parent.iterdir()):
                    break
                parent.rmdir()
                parent = parent.parent
            except OSError:
                break
        return True

    def path_from_url(self, url: str) -> str | None:
        prefix = f"{self.base_url}/"
        if not url.startswith(prefix):
            return None
        return unquote(url[len(prefix):]) or None
