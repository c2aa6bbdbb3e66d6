"""Sermon service: image + PDF upload, date-filtered listing, stats."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from app.application.dtos.uploads import UploadedFile
from app.application.dtos.user import CurrentUser
from app.application.services.content_service import ContentService, snapshot_to_dict
from app.core.constants import (
    COLLECTION_SERMONS,
    DESCENDING,
    FOLDER_SERMON_IMAGES,
    FOLDER_SERMON_PDFS,
)
from app.domain.exceptions import ValidationException
from app.shared.utils.datetime import ensure_utc, month_key, month_range, utc_now, year_range
from app.shared.utils.sanitization import sanitize_text


def _date_window(year: int | None, month: int | None) -> tuple[datetime, datetime] | None:
    if year is None:
        if month is not None:
            raise ValidationException("Month filter requires a year", field="month")
        return None
    if month is None:
        return year_range(year)
    return month_range(year, month)


class SermonService(ContentService):
    """Owns the `sermons` collection."""

    collection_name = COLLECTION_SERMONS
    resource_name = "Sermon"

    async def create(
        self,
        *,
        title: str,
        date: datetime,
        image: UploadedFile | None,
        pdf: UploadedFile | None,
        user: CurrentUser,
    ) -> dict[str, Any]:
        """Store the cover image and PDF, persist metadata, notify all users."""
        if image is None or pdf is None:
            raise ValidationException("Image and PDF files are required")
        self._validate_file(image, kind="image")
        self._validate_file(pdf, kind="pdf")

        image_url = await self._upload(image, FOLDER_SERMON_IMAGES)
        pdf_url = await self._upload(pdf, FOLDER_SERMON_PDFS)

        clean_title = sanitize_text(title) or ""
        sermon_id = await self.collection.add(
            {
                "title": clean_title,
                "date": ensure_utc(date),
                "imageUrl": image_url,
                "pdfUrl": pdf_url,
                "uploadedBy": user.uid,
                "uploadedByName": user.display_name,
                "downloads": 0,
                "createdAt": utc_now(),
            }
        )
        await self._broadcast(
            "📖 Nouveau sermon disponible",
            clean_title,
            {"type": "sermon", "sermonId": sermon_id},
        )
        return {
            "success": True,
            "message": "Sermon uploaded successfully",
            "sermonId": sermon_id,
            "imageUrl": image_url,
            "pdfUrl": pdf_url,
        }

    async def list_all(
        self,
        *,
        year: int | None = None,
        month: int | None = None,
        page: int = 1,
        limit: int | None = None,
    ) -> dict[str, Any]:
        """Most recent sermon date first; optional year or year+month window."""
        req = self.page_request(page, limit)
        query = self.collection
        window = _date_window(year, month)
        if window:
            start, end = window
            query = query.where("date", ">=", start).where("date", "<", end)
        sermons, pagination = await self._paginate(
            query.order_by("date", DESCENDING), req, count_query=query
        )
        return {"success": True, "sermons": sermons, "pagination": pagination}

    async def get(self, sermon_id: str) -> dict[str, Any]:
        snap = await self._get_snapshot(sermon_id)
        return {"success": True, "sermon": snapshot_to_dict(snap)}

    async def update(
        self,
        sermon_id: str,
        *,
        title: str | None,
        date: datetime | None,
        user: CurrentUser,
    ) -> dict[str, Any]:
        """Update title/date; owner or admin only."""
        snap = await self._get_snapshot(sermon_id)
        self.authz.require_owner_or_admin(
            snap.to_dict().get("uploadedBy"), user, "sermon", "update"
        )
        changes: dict[str, Any] = {"updatedAt": utc_now()}
        if title is not None:
            changes["title"] = sanitize_text(title)
        if date is not None:
            changes["date"] = ensure_utc(date)
        await self.collection.document(sermon_id).update(changes)
        return {"success": True, "message": "Sermon updated successfully"}

    async def delete(self, sermon_id: str, *, user: CurrentUser) -> dict[str, Any]:
        """Delete the document, its image and its PDF; owner or admin only."""
        snap = await self._get_snapshot(sermon_id)
        data = snap.to_dict()
        self.authz.require_owner_or_admin(data.get("uploadedBy"), user, "sermon", "delete")
        await self.collection.document(sermon_id).delete()
        await self._remove_files([data.get("imageUrl"), data.get("pdfUrl")])
        return {"success": True, "message": "Sermon deleted successfully"}

    async def increment_downloads(self, sermon_id: str) -> dict[str, Any]:
        await self._increment(sermon_id, "downloads")
        return {"success": True, "message": "Downloads incremented"}

    async def stats(self, *, year: int | None = None) -> dict[str, Any]:
        """Totals and per-month counts over all sermons (or one year)."""
        query = self.collection
        if year is not None:
            start, end = year_range(year)
            query = query.where("date", ">=", start).where("date", "<", end)
        total = 0
        total_downloads = 0
        by_month: dict[str, int] = {}
        async for snap in query.stream():
            data = snap.to_dict()
            total += 1
            total_downloads += data.get("downloads") or 0
            sermon_date = data.get("date")
            if isinstance(sermon_date, datetime):
                key = month_key(sermon_date)
                by_month[key] = by_month.get(key, 0) + 1
        return {
            "success": True,
            "stats": {
                "total": total,
                "totalDownloads": total_downloads,
                "avgDownloadsPerSermon": round(total_downloads / total) if total else 0,
                "sermonsByMonth": by_month,
            },
        }
