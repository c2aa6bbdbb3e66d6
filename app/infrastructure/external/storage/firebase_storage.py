"""Firebase Storage (Google Cloud Storage JSON API) backend over httpx.

Objects are uploaded with the publicRead ACL so the persisted URL
https://storage.googleapis.com/<bucket>/<path> is directly fetchable by
the mobile app.
"""

from __future__ import annotations

from urllib.parse import quote, unquote

import httpx

from app.infrastructure.exceptions import StorageDeleteError, StorageUploadError
from app.infrastructure.firebase._credentials import TokenSource

_UPLOAD_BASE = "https://storage.googleapis.com/upload/storage/v1/b"
_API_BASE = "https://storage.googleapis.com/storage/v1/b"
_PUBLIC_BASE = "https://storage.googleapis.com"


class FirebaseStorageBackend:
    """GCS bucket backend authenticated with the service account."""

    name = "firebase"

    def __init__(
        self, bucket: str, token_source: TokenSource, http_client: httpx.AsyncClient
    ) -> None:
        self.bucket = bucket
        self._token_source = token_source
        self._http = http_client
        self._public_prefix = f"{_PUBLIC_BASE}/{bucket}/"

    async def put(self, path: str, content: bytes, content_type: str) -> str:
        token = await self._token_source.token()
        try:
            resp = await self._http.post(
                f"{_UPLOAD_BASE}/{self.bucket}/o",
                params={"uploadType": "media", "name": path, "predefinedAcl": "publicRead"},
                content=content,
                headers={"Authorization": f"Bearer {token}", "Content-Type": content_type},
            )
        except httpx.HTTPError as e:
            raise StorageUploadError(path, str(e)) from e
        if resp.status_code != 200:
            raise StorageUploadError(path, f"HTTP {resp.status_code}: {resp.text}")
        return f"{self._public_prefix}{quote(path)}"

    async def remove(self, path: str) -> bool:
        token = await self._token_source.token()
        try:
            resp = await self._http.delete(
                f"{_API_BASE}/{self.bucket}/o/{quote(path, safe='')}",
                headers={"Authorization": f"Bearer {token}"},
            )
        except httpx.HTTPError as e:
            raise StorageDeleteError(path, str(e)) from e
        if resp.status_code == 404:
            return False
        if resp.status_code not in (200, 204):
            raise StorageDeleteError(path, f"HTTP {resp.status_code}: {resp.text}")
        return True

    def path_from_url(self, url: str) -> str | None:
        if not url.startswith(self._public_prefix):
            return None
        return unquote(url[len(self._public_prefix):].split("?", 1)[0]) or None
