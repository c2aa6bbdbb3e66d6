"""Admin statistics and the monthly activity report.

Aggregations are computed by scanning the collections; there are no
materialized counters beyond the per-document play/download/view/like
fields.
"""

from __future__ import annotations

from collections import Counter
from datetime import datetime
from typing import TYPE_CHECKING, Any

from app.core.constants import (
    COLLECTION_AUDIOS,
    COLLECTION_EVENTS,
    COLLECTION_POSTS,
    COLLECTION_SERMONS,
    COLLECTION_USERS,
)
from app.domain.enums import AudioCategory, Role
from app.domain.exceptions import ValidationException
from app.shared.utils.datetime import days_ago, month_key, month_range, utc_now

if TYPE_CHECKING:
    from app.application.interfaces import IDocumentStore, IQuery

GROWTH_WINDOW_DAYS = 30
TOP_AUDIOS = 10


def _avg(total: float, count: int) -> int:
    return round(total / count) if count else 0


def _role_counts() -> dict[str, int]:
    return {role: 0 for role in Role.values()}


class StatsService:
    """Read-only aggregations over users and content."""

    def __init__(self, db: "IDocumentStore") -> None:
        self.db = db

    async def _scan(self, query: "IQuery") -> list[dict[str, Any]]:
        return [{"id": snap.id, **snap.to_dict()} async for snap in query.stream()]

    async def overview(self) -> dict[str, Any]:
        """Users by role, content counts, audio engagement, 30-day growth."""
        users = await self._scan(self.db.collection(COLLECTION_USERS))
        by_role = _role_counts()
        for user in users:
            if user.get("role") in by_role:
                by_role[user["role"]] += 1

        audios = await self._scan(self.db.collection(COLLECTION_AUDIOS))
        total_plays = sum(a.get("plays") or 0 for a in audios)
        total_downloads = sum(a.get("downloads") or 0 for a in audios)

        since = days_ago(GROWTH_WINDOW_DAYS)
        new_users = await self.db.collection(COLLECTION_USERS).where(
            "createdAt", ">=", since
        ).count()
        new_audios = await self.db.collection(COLLECTION_AUDIOS).where(
            "createdAt", ">=", since
        ).count()

        return {
            "success": True,
            "stats": {
                "users": {**by_role, "total": len(users)},
                "content": {
                    "audios": len(audios),
                    "sermons": await self.db.collection(COLLECTION_SERMONS).count(),
                    "events": await self.db.collection(COLLECTION_EVENTS).count(),
                    "posts": await self.db.collection(COLLECTION_POSTS).count(),
                },
                "engagement": {
                    "totalPlays": total_plays,
                    "totalDownloads": total_downloads,
                    "avgPlaysPerAudio": _avg(total_plays, len(audios)),
                },
                "growth": {
                    "newUsersLast30Days": new_users,
                    "newAudiosLast30Days": new_audios,
                },
            },
        }

    async def audio_stats(self, period: int = 30) -> dict[str, Any]:
        """Audios created in the last `period` days: categories, totals, top 10 by plays."""
        if period < 1:
            raise ValidationException("Period must be at least 1 day", field="period")
        audios = await self._scan(
            self.db.collection(COLLECTION_AUDIOS).where("createdAt", ">=", days_ago(period))
        )
        by_category = {c: 0 for c in AudioCategory.values()}
        for audio in audios:
            if audio.get("category") in by_category:
                by_category[audio["category"]] += 1
        top = sorted(audios, key=lambda a: a.get("plays") or 0, reverse=True)[:TOP_AUDIOS]
        return {
            "success": True,
            "period": f"{period} days",
            "stats": {
                "total": len(audios),
                "byCategory": by_category,
                "topAudios": [
                    {
                        "id": a["id"],
                        "title": a.get("title"),
                        "plays": a.get("plays") or 0,
                        "downloads": a.get("downloads") or 0,
                    }
                    for a in top
                ],
                "totalPlays": sum(a.get("plays") or 0 for a in audios),
                "totalDownloads": sum(a.get("downloads") or 0 for a in audios),
            },
        }

    async def user_stats(self) -> dict[str, Any]:
        users = await self._scan(self.db.collection(COLLECTION_USERS))
        by_role = _role_counts()
        by_month: dict[str, int] = {}
        for user in users:
            if user.get("role") in by_role:
                by_role[user["role"]] += 1
            created = user.get("createdAt")
            if isinstance(created, datetime):
                key = month_key(created)
                by_month[key] = by_month.get(key, 0) + 1
        return {
            "success": True,
            "stats": {
                "total": len(users),
                "byRole": by_role,
                "registrationsByMonth": by_month,
            },
        }

    async def engagement(self) -> dict[str, Any]:
        posts = await self._scan(self.db.collection(COLLECTION_POSTS))
        sermons = await self._scan(self.db.collection(COLLECTION_SERMONS))
        views = sum(p.get("views") or 0 for p in posts)
        likes = sum(p.get("likes") or 0 for p in posts)
        downloads = sum(s.get("downloads") or 0 for s in sermons)
        return {
            "success": True,
            "stats": {
                "posts": {
                    "total": len(posts),
                    "totalViews": views,
                    "totalLikes": likes,
                    "avgViewsPerPost": _avg(views, len(posts)),
                },
                "sermons": {
                    "total": len(sermons),
                    "totalDownloads": downloads,
                    "avgDownloadsPerSermon": _avg(downloads, len(sermons)),
                },
            },
        }

    async def monthly_report(self, year: int, month: int) -> dict[str, Any]:
        """Activity created during one calendar month, per collection.

        Raises:
            ValidationException: Year outside 2000-2100 or month outside 1-12.
        """
        if not 2000 <= year <= 2100:
            raise ValidationException("Year must be between 2000 and 2100", field="year")
        if not 1 <= month <= 12:
            raise ValidationException("Month must be between 1 and 12", field="month")
        start, end = month_range(year, month)

        async def created_in_month(collection: str) -> list[dict[str, Any]]:
            return await self._scan(
                self.db.collection(collection)
                .where("createdAt", ">=", start)
                .where("createdAt", "<", end)
            )

        users = await created_in_month(COLLECTION_USERS)
        audios = await created_in_month(COLLECTION_AUDIOS)
        sermons = await created_in_month(COLLECTION_SERMONS)
        events = await created_in_month(COLLECTION_EVENTS)
        posts = await created_in_month(COLLECTION_POSTS)

        return {
            "success": True,
            "reportData": {
                "period": month_key(start),
                "users": {
                    "newUsers": len(users),
                    "byRole": dict(Counter(u.get("role") for u in users)),
                },
                "audios": {
                    "newAudios": len(audios),
                    "totalPlays": sum(a.get("plays") or 0 for a in audios),
                    "totalDownloads": sum(a.get("downloads") or 0 for a in audios),
                    "byCategory": dict(Counter(a.get("category") for a in audios)),
                },
                "sermons": {
                    "newSermons": len(sermons),
                    "totalDownloads": sum(s.get("downloads") or 0 for s in sermons),
                },
                "events": {"newEvents": len(events)},
                "posts": {
                    "newPosts": len(posts),
                    "totalViews": sum(p.get("views") or 0 for p in posts),
                    "totalLikes": sum(p.get("likes") or 0 for p in posts),
                    "byCategory": dict(Counter(p.get("category") for p in posts)),
                    "byType": dict(Counter(p.get("type") for p in posts)),
                },
            },
            "generatedAt": utc_now(),
        }
