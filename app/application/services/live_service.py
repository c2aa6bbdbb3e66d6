"""Live service: the singleton live-stream status and live notifications."""

from __future__ import annotations

from typing import Any
from urllib.parse import urlparse

from app.application.dtos.user import CurrentUser
from app.application.services.content_service import ContentService
from app.core.constants import APP_SETTINGS_DOCUMENT, COLLECTION_SETTINGS
from app.domain.exceptions import ValidationException
from app.shared.utils.datetime import utc_now
from app.shared.utils.sanitization import sanitize_text

YOUTUBE_HOSTS = frozenset(
    {"youtube.com", "www.youtube.com", "m.youtube.com", "youtu.be", "www.youtu.be"}
)

_DEFAULT_STATUS: dict[str, Any] = {
    "isLive": False,
    "liveYoutubeUrl": None,
    "liveTitle": None,
}


def is_youtube_url(url: str) -> bool:
    """True for an http(s) URL on a YouTube host."""
    parsed = urlparse(url.strip())
    return parsed.scheme in ("http", "https") and (parsed.hostname or "").lower() in YOUTUBE_HOSTS


def _check_length(value: str, field: str, low: int, high: int, label: str) -> str:
    cleaned = sanitize_text(value) or ""
    if not low <= len(cleaned) <= high:
        raise ValidationException(
            f"{label} must be between {low} and {high} characters", field=field
        )
    return cleaned


class LiveService(ContentService):
    """Reads and writes settings/app_settings."""

    collection_name = COLLECTION_SETTINGS
    resource_name = "Settings"

    @property
    def _document(self):
        return self.collection.document(APP_SETTINGS_DOCUMENT)

    async def get_status(self) -> dict[str, Any]:
        """Current live status; defaults when the document does not exist yet."""
        snap = await self._document.get()
        if snap is None:
            return {"success": True, "live": dict(_DEFAULT_STATUS)}
        data = snap.to_dict()
        return {
            "success": True,
            "live": {
                "isLive": bool(data.get("isLive")),
                "liveYoutubeUrl": data.get("liveYoutubeUrl") or None,
                "liveTitle": data.get("liveTitle") or None,
            },
        }

    async def update_status(
        self,
        *,
        is_live: bool,
        live_youtube_url: str | None = None,
        live_title: str | None = None,
        user: CurrentUser,
    ) -> dict[str, Any]:
        """Upsert the live status; going live notifies all users."""
        changes: dict[str, Any] = {
            "isLive": is_live,
            "updatedAt": utc_now(),
            "updatedBy": user.uid,
        }
        if live_youtube_url is not None:
            if live_youtube_url and not is_youtube_url(live_youtube_url):
                raise ValidationException("Invalid YouTube URL", field="liveYoutubeUrl")
            changes["liveYoutubeUrl"] = live_youtube_url.strip() or None
        if live_title is not None:
            changes["liveTitle"] = _check_length(live_title, "liveTitle", 3, 200, "Title")

        doc = self._document
        if not await doc.update(changes):
            await doc.set({**changes, "createdAt": utc_now()})

        if is_live:
            await self._broadcast(
                "🔴 LIVE EN DIRECT !",
                changes.get("liveTitle") or "Rejoignez-nous maintenant",
                {"type": "live", "url": changes.get("liveYoutubeUrl") or ""},
            )
        return {
            "success": True,
            "message": "Live started successfully" if is_live else "Live stopped successfully",
            "live": changes,
        }

    async def notify(self, *, title: str, body: str) -> dict[str, Any]:
        """Broadcast a custom notification carrying the current live URL."""
        clean_title = _check_length(title, "title", 3, 100, "Title")
        clean_body = _check_length(body, "body", 3, 500, "Body")
        snap = await self._document.get()
        live_url = (snap.to_dict().get("liveYoutubeUrl") if snap else None) or ""
        sent = await self._broadcast(
            clean_title, clean_body, {"type": "live", "url": live_url}
        )
        return {"success": True, "message": "Notification sent successfully", "sent": sent}
