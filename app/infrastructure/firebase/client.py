"""Firebase service-account loading and Firestore client construction.

Credentials come from FIREBASE_SERVICE_ACCOUNT_KEY (JSON string, e.g. on
serverless hosts) or FIREBASE_SERVICE_ACCOUNT_PATH (file path). All Firebase
adapters (Firestore, Auth, Cloud Messaging, Storage) use REST with
google-auth instead of firebase-admin.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import httpx

from app.core.config import Settings
from app.domain.exceptions import ConfigurationException
from app.infrastructure.firebase._credentials import TokenSource, get_credentials
from app.infrastructure.firebase._rest_client import FirestoreRESTClient

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FirebaseCredentials:
    """Parsed service account plus a shared access-token source."""

    project_id: str
    client_email: str
    private_key: str
    token_source: TokenSource


def _load_key_dict(settings: Settings) -> dict[str, Any] | None:
    """Return service account dict from env key or file path."""
    key_json = (
        settings.firebase_service_account_key.get_secret_value()
        if settings.firebase_service_account_key
        else None
    )
    if key_json:
        try:
            return json.loads(key_json)
        except json.JSONDecodeError as e:
            raise ConfigurationException(
                "FIREBASE_SERVICE_ACCOUNT_KEY is not valid JSON"
            ) from e
    path = settings.firebase_service_account_path
    if path:
        resolved = Path(path).expanduser().resolve()
        if not resolved.is_file():
            logger.warning(
                "FIREBASE_SERVICE_ACCOUNT_PATH set but file not found: %s (resolved: %s)",
                path,
                resolved,
            )
            return None
        with open(resolved, encoding="utf-8") as f:
            return json.load(f)
    return None


def load_firebase_credentials(settings: Settings) -> FirebaseCredentials | None:
    """Load the service account and build credentials.

    Returns None when no service account is configured so the app can boot
    without Firebase (health reports it as disconnected).

    Raises:
        ConfigurationException: Key JSON is malformed or lacks required fields.
    """
    key_dict = _load_key_dict(settings)
    if not key_dict:
        return None
    project_id = settings.firebase_project_id or key_dict.get("project_id")
    if not project_id:
        raise ConfigurationException("Firebase service account JSON missing 'project_id'")
    missing = [k for k in ("client_email", "private_key") if not key_dict.get(k)]
    if missing:
        raise ConfigurationException(
            f"Firebase service account JSON missing: {', '.join(missing)}"
        )
    return FirebaseCredentials(
        project_id=project_id,
        client_email=key_dict["client_email"],
        private_key=key_dict["private_key"],
        token_source=TokenSource(get_credentials(key_dict)),
    )


def create_firestore_client(
    credentials: FirebaseCredentials, http_client: httpx.AsyncClient
) -> FirestoreRESTClient:
    """Return a Firestore REST client sharing the container's HTTP pool."""
    return FirestoreRESTClient(
        credentials.project_id,
        credentials.token_source,
        http_client=http_client,
    )
