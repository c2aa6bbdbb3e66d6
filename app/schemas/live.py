"""Live-stream status schemas."""

from pydantic import Field

from app.schemas._base import CamelModel


class LiveStatusUpdate(CamelModel):
    """Request body for PUT /admin/live/status."""

    is_live: bool
    live_youtube_url: str | None = None
    live_title: str | None = Field(None, max_length=200)


class LiveNotifyRequest(CamelModel):
    """Request body for POST /admin/live/notify."""

    title: str = Field(..., min_length=1)
    body: str = Field(..., min_length=1)
