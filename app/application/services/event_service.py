"""Event service: events with optional image and per-day summaries."""

from __future__ import annotations

import json
from datetime import date, datetime
from typing import Any

from app.application.dtos.uploads import UploadedFile
from app.application.dtos.user import CurrentUser
from app.application.services.content_service import ContentService, snapshot_to_dict
from app.core.constants import ASCENDING, COLLECTION_EVENTS, DESCENDING, FOLDER_EVENTS
from app.domain.exceptions import ValidationException
from app.shared.utils.datetime import ensure_utc, parse_datetime, utc_now
from app.shared.utils.sanitization import InputSanitizer, sanitize_text


def parse_daily_summaries(raw: str | list[dict[str, Any]] | None) -> list[dict[str, Any]]:
    """Normalize dailySummaries from a JSON string or a list of dicts.

    Every entry must carry a "date" (ISO string or date); it is converted to a UTC
    datetime and the remaining string fields are sanitized.

    Raises:
        ValidationException: Malformed JSON, non-list payload or bad dates.
    """
    if raw is None or raw == "":
        return []
    if isinstance(raw, str):
        try:
            raw = json.loads(raw)
        except json.JSONDecodeError as e:
            raise ValidationException(
                "Daily summaries must be a JSON array", field="dailySummaries"
            ) from e
    if not isinstance(raw, list):
        raise ValidationException("Daily summaries must be an array", field="dailySummaries")
    summaries: list[dict[str, Any]] = []
    for entry in raw:
        if not isinstance(entry, dict) or "date" not in entry:
            raise ValidationException(
                "Each daily summary needs a date", field="dailySummaries"
            )
        value = entry["date"]
        if not isinstance(value, (str, date)):
            raise ValidationException("Invalid daily summary date", field="dailySummaries")
        try:
            day = parse_datetime(value)
        except ValueError as e:
            raise ValidationException(
                "Invalid daily summary date", field="dailySummaries"
            ) from e
        try:
            rest = InputSanitizer.sanitize_dict({k: v for k, v in entry.items() if k != "date"})
        except ValueError as e:
            raise ValidationException(
                "Daily summary is nested too deeply", field="dailySummaries"
            ) from e
        summaries.append({**rest, "date": day})
    return summaries


def _check_dates(start: datetime | None, end: datetime | None) -> None:
    if start is not None and end is not None and end < start:
        raise ValidationException("End date must be after start date", field="endDate")


class EventService(ContentService):
    """Owns the `events` collection."""

    collection_name = COLLECTION_EVENTS
    resource_name = "Event"

    async def create(
        self,
        *,
        title: str,
        description: str,
        start_date: datetime,
        end_date: datetime,
        location: str,
        daily_summaries: str | list[dict[str, Any]] | None,
        image: UploadedFile | None,
        user: CurrentUser,
    ) -> dict[str, Any]:
        """Persist the event (image optional) and notify all users."""
        start_date, end_date = ensure_utc(start_date), ensure_utc(end_date)
        _check_dates(start_date, end_date)
        summaries = parse_daily_summaries(daily_summaries)
        image_url = ""
        if image is not None:
            self._validate_file(image, kind="image")
            image_url = await self._upload(image, FOLDER_EVENTS)

        clean_title = sanitize_text(title) or ""
        event_id = await self.collection.add(
            {
                "title": clean_title,
                "description": sanitize_text(description),
                "startDate": start_date,
                "endDate": end_date,
                "imageUrl": image_url,
                "location": sanitize_text(location),
                "dailySummaries": summaries,
                "createdBy": user.uid,
                "createdAt": utc_now(),
            }
        )
        await self._broadcast(
            "📅 Nouvel événement",
            clean_title,
            {"type": "event", "eventId": event_id},
        )
        return {"success": True, "message": "Event created successfully", "eventId": event_id}

    async def list_all(
        self, *, upcoming: bool = False, page: int = 1, limit: int | None = None
    ) -> dict[str, Any]:
        """Upcoming events soonest first, otherwise all events latest start first."""
        req = self.page_request(page, limit)
        query = self.collection
        if upcoming:
            query = query.where("startDate", ">=", utc_now())
        ordered = query.order_by("startDate", ASCENDING if upcoming else DESCENDING)
        events, pagination = await self._paginate(ordered, req, count_query=query)
        return {"success": True, "events": events, "pagination": pagination}

    async def get(self, event_id: str) -> dict[str, Any]:
        snap = await self._get_snapshot(event_id)
        return {"success": True, "event": snapshot_to_dict(snap)}

    async def update(
        self,
        event_id: str,
        *,
        title: str | None = None,
        description: str | None = None,
        start_date: datetime | None = None,
        end_date: datetime | None = None,
        location: str | None = None,
        daily_summaries: str | list[dict[str, Any]] | None = None,
        image: UploadedFile | None = None,
        user: CurrentUser,
    ) -> dict[str, Any]:
        """Update fields, replace the image or the summaries.

        Events created before ownership was recorded carry no createdBy and
        stay editable by any moderator.
        """
        snap = await self._get_snapshot(event_id)
        data = snap.to_dict()
        if data.get("createdBy"):
            self.authz.require_owner_or_admin(data["createdBy"], user, "event", "update")
        start_date, end_date = ensure_utc(start_date), ensure_utc(end_date)
        _check_dates(start_date or data.get("startDate"), end_date or data.get("endDate"))

        changes: dict[str, Any] = {"updatedAt": utc_now()}
        if title is not None:
            changes["title"] = sanitize_text(title)
        if description is not None:
            changes["description"] = sanitize_text(description)
        if start_date is not None:
            changes["startDate"] = start_date
        if end_date is not None:
            changes["endDate"] = end_date
        if location is not None:
            changes["location"] = sanitize_text(location)
        if daily_summaries is not None:
            changes["dailySummaries"] = parse_daily_summaries(daily_summaries)
        if image is not None:
            self._validate_file(image, kind="image")
            changes["imageUrl"] = await self._upload(image, FOLDER_EVENTS)

        await self.collection.document(event_id).update(changes)
        if image is not None:
            await self._remove_files([data.get("imageUrl")])
        return {"success": True, "message": "Event updated successfully"}

    async def delete(self, event_id: str, *, user: CurrentUser) -> dict[str, Any]:
        """Delete the event and its image."""
        snap = await self._get_snapshot(event_id)
        data = snap.to_dict()
        if data.get("createdBy"):
            self.authz.require_owner_or_admin(data["createdBy"], user, "event", "delete")
        await self.collection.document(event_id).delete()
        await self._remove_files([data.get("imageUrl")])
        return {"success": True, "message": "Event deleted successfully"}
