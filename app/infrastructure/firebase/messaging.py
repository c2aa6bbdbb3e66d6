"""Firebase Cloud Messaging adapter (HTTP v1 API over httpx).

Builds the same message shape for topic and device sends: a notification
block, string-only data, high-priority Android delivery with the Flutter
click action, and an APNs payload with default sound and badge.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from app.core.constants import BROADCAST_TOPIC
from app.infrastructure.exceptions import PushGatewayError
from app.infrastructure.firebase.client import FirebaseCredentials

logger = logging.getLogger(__name__)

_FCM_BASE = "https://fcm.googleapis.com/v1"
_IID_BATCH_ADD = "https://iid.googleapis.com/iid/v1:batchAdd"


def build_message(
    title: str,
    body: str,
    data: dict[str, Any] | None = None,
    *,
    topic: str | None = None,
    token: str | None = None,
) -> dict[str, Any]:
    """Build an FCM v1 message for exactly one target (topic or token).

    Data values are stringified; FCM rejects non-string data.
    """
    if (topic is None) == (token is None):
        raise ValueError("Exactly one of topic or token is required")
    message: dict[str, Any] = {
        "notification": {"title": title, "body": body},
        "data": {k: "" if v is None else str(v) for k, v in (data or {}).items()},
        "android": {
            "priority": "high",
            "notification": {
                "sound": "default",
                "click_action": "FLUTTER_NOTIFICATION_CLICK",
            },
        },
        "apns": {"payload": {"aps": {"sound": "default", "badge": 1}}},
    }
    if topic is not None:
        message["topic"] = topic
    else:
        message["token"] = token
    return {"message": message}


class FcmPushGateway:
    """Push gateway backed by Firebase Cloud Messaging."""

    def __init__(self, credentials: FirebaseCredentials, http_client: httpx.AsyncClient) -> None:
        self._credentials = credentials
        self._http = http_client
        self._send_url = f"{_FCM_BASE}/projects/{credentials.project_id}/messages:send"

    async def _send(self, payload: dict[str, Any], target: str) -> str:
        token = await self._credentials.token_source.token()
        try:
            resp = await self._http.post(
                self._send_url,
                json=payload,
                headers={"Authorization": f"Bearer {token}"},
            )
        except httpx.HTTPError as e:
            raise PushGatewayError(target, str(e)) from e
        if resp.status_code != 200:
            raise PushGatewayError(target, f"HTTP {resp.status_code}: {resp.text}")
        message_id = resp.json().get("name", "")
        logger.info("Notification sent to %s: %s", target, message_id)
        return message_id

    async def send_to_topic(
        self, topic: str, title: str, body: str, data: dict[str, str] | None = None
    ) -> str:
        return await self._send(build_message(title, body, data, topic=topic), f"topic:{topic}")

    async def send_to_token(
        self, token: str, title: str, body: str, data: dict[str, str] | None = None
    ) -> str:
        return await self._send(build_message(title, body, data, token=token), "device")

    async def send_to_all(
        self, title: str, body: str, data: dict[str, str] | None = None
    ) -> str:
        return await self.send_to_topic(BROADCAST_TOPIC, title, body, data)

    async def subscribe_to_topic(self, tokens: list[str], topic: str) -> None:
        """Register device tokens on a topic (Instance ID batchAdd)."""
        if not tokens:
            return
        access_token = await self._credentials.token_source.token()
        try:
            resp = await self._http.post(
                _IID_BATCH_ADD,
                json={"to": f"/topics/{topic}", "registration_tokens": tokens},
                headers={
                    "Authorization": f"Bearer {access_token}",
                    "access_token_auth": "true",
                },
            )
        except httpx.HTTPError as e:
            raise PushGatewayError(f"topic:{topic}", str(e)) from e
        if resp.status_code != 200:
            raise PushGatewayError(f"topic:{topic}", f"HTTP {resp.status_code}: {resp.text}")
