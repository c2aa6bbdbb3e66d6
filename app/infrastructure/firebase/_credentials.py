"""Service-account credentials shared by the Firebase REST adapters.

One google-auth credential object carries every scope the adapters need
(Firestore, Identity Toolkit, Cloud Messaging, Cloud Storage); access
tokens are refreshed in a worker thread so the event loop never blocks.
"""

from __future__ import annotations

import asyncio
from typing import Any

FIREBASE_SCOPES = [
    "https://www.googleapis.com/auth/cloud-platform",
    "https://www.googleapis.com/auth/datastore",
    "https://www.googleapis.com/auth/firebase.messaging",
    "https://www.googleapis.com/auth/identitytoolkit",
    "https://www.googleapis.com/auth/devstorage.read_write",
    "https://www.googleapis.com/auth/userinfo.email",
]


def get_credentials(key_dict: dict[str, Any], scopes: list[str] | None = None):
    """Return google.oauth2.service_account.Credentials for the Firebase APIs."""
    from google.oauth2 import service_account

    return service_account.Credentials.from_service_account_info(
        key_dict, scopes=scopes or FIREBASE_SCOPES
    )


def _get_access_token(credentials) -> str:
    from google.auth.transport.requests import Request

    if not credentials.valid:
        credentials.refresh(Request())
    return credentials.token


class TokenSource:
    """Async access-token provider over a google-auth credential."""

    def __init__(self, credentials) -> None:
        self._credentials = credentials

    @property
    def credentials(self):
        return self._credentials

    async def token(self) -> str:
        """Return a valid access token; refreshes in thread pool to avoid blocking."""
        return await asyncio.to_thread(_get_access_token, self._credentials)
