"""API router aggregation.

Includes all endpoint modules with consistent prefix and tags. All routes
use dependencies from app.api.dependencies (no adapter construction in routes).
"""

from fastapi import APIRouter

from app.api.endpoints import (
    audios,
    auth,
    donations,
    events,
    live,
    posts,
    sermons,
    stats,
    users,
)

api_router = APIRouter()

api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_router.include_router(users.router, prefix="/admin/users", tags=["users"])
api_router.include_router(audios.router, prefix="/audios", tags=["audios"])
api_router.include_router(sermons.router, prefix="/sermons", tags=["sermons"])
api_router.include_router(events.router, prefix="/events", tags=["events"])
api_router.include_router(posts.router, prefix="/posts", tags=["posts"])
api_router.include_router(live.router, prefix="/admin/live", tags=["live"])
api_router.include_router(donations.router, prefix="/admin/donations", tags=["donations"])
api_router.include_router(stats.router, prefix="/admin/stats", tags=["stats"])
