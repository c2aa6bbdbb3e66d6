"""Audio service: upload, list, update, delete and play/download counters."""

from __future__ import annotations

from typing import Any

from app.application.dtos.uploads import UploadedFile
from app.application.dtos.user import CurrentUser
from app.application.services.content_service import ContentService, snapshot_to_dict
from app.core.constants import (
    COLLECTION_AUDIOS,
    DESCENDING,
    FOLDER_AUDIOS,
    FOLDER_THUMBNAILS,
)
from app.domain.enums import AudioCategory
from app.domain.exceptions import ValidationException
from app.shared.utils.datetime import utc_now
from app.shared.utils.sanitization import sanitize_text


class AudioService(ContentService):
    """Owns the `audios` collection."""

    collection_name = COLLECTION_AUDIOS
    resource_name = "Audio"

    async def create(
        self,
        *,
        title: str,
        category: str,
        description: str | None,
        audio: UploadedFile | None,
        thumbnail: UploadedFile | None,
        user: CurrentUser,
    ) -> dict[str, Any]:
        """Upload the audio (and optional thumbnail), store metadata, notify all users."""
        if audio is None:
            raise ValidationException("Audio file is required", field="audio")
        if category not in AudioCategory.values():
            raise ValidationException("Invalid category", field="category")
        self._validate_file(audio, kind="audio")
        if thumbnail is not None:
            self._validate_file(thumbnail, kind="image")

        audio_url = await self._upload(audio, FOLDER_AUDIOS)
        thumbnail_url = await self._upload(thumbnail, FOLDER_THUMBNAILS) if thumbnail else None

        clean_title = sanitize_text(title) or ""
        audio_id = await self.collection.add(
            {
                "title": clean_title,
                "description": sanitize_text(description) or "",
                "audioUrl": audio_url,
                "thumbnailUrl": thumbnail_url,
                "duration": 0,
                "uploadedBy": user.uid,
                "uploadedByName": user.display_name,
                "category": category,
                "createdAt": utc_now(),
                "downloads": 0,
                "plays": 0,
            }
        )
        await self._broadcast(
            "🎵 Nouvel audio disponible",
            clean_title,
            {"type": "audio", "audioId": audio_id},
        )
        return {
            "success": True,
            "message": "Audio uploaded successfully",
            "audioId": audio_id,
            "audioUrl": audio_url,
        }

    async def list_all(
        self, *, category: str | None = None, page: int = 1, limit: int | None = None
    ) -> dict[str, Any]:
        """Newest first, optionally filtered by category."""
        req = self.page_request(page, limit)
        query = self.collection
        if category:
            query = query.where("category", "==", category)
        audios, pagination = await self._paginate(
            query.order_by("createdAt", DESCENDING), req, count_query=query
        )
        return {"success": True, "audios": audios, "pagination": pagination}

    async def get(self, audio_id: str) -> dict[str, Any]:
        snap = await self._get_snapshot(audio_id)
        return {"success": True, "audio": snapshot_to_dict(snap)}

    async def update(
        self,
        audio_id: str,
        *,
        title: str | None,
        description: str | None,
        user: CurrentUser,
    ) -> dict[str, Any]:
        """Update title/description; owner or admin only."""
        snap = await self._get_snapshot(audio_id)
        self.authz.require_owner_or_admin(
            snap.to_dict().get("uploadedBy"), user, "audio", "update"
        )
        changes: dict[str, Any] = {"updatedAt": utc_now()}
        if title is not None:
            changes["title"] = sanitize_text(title)
        if description is not None:
            changes["description"] = sanitize_text(description)
        await self.collection.document(audio_id).update(changes)
        return {"success": True, "message": "Audio updated successfully"}

    async def delete(self, audio_id: str, *, user: CurrentUser) -> dict[str, Any]:
        """Delete the document and its stored audio/thumbnail; owner or admin only."""
        snap = await self._get_snapshot(audio_id)
        data = snap.to_dict()
        self.authz.require_owner_or_admin(data.get("uploadedBy"), user, "audio", "delete")
        await self.collection.document(audio_id).delete()
        await self._remove_files([data.get("audioUrl"), data.get("thumbnailUrl")])
        return {"success": True, "message": "Audio deleted successfully"}

    async def increment_plays(self, audio_id: str) -> dict[str, Any]:
        await self._increment(audio_id, "plays")
        return {"success": True, "message": "Plays incremented"}

    async def increment_downloads(self, audio_id: str) -> dict[str, Any]:
        await self._increment(audio_id, "downloads")
        return {"success": True, "message": "Downloads incremented"}
