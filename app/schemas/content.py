"""Update schemas for audios, sermons and posts (creation is multipart)."""

from datetime import datetime

from pydantic import Field

from app.schemas._base import CamelModel


class AudioUpdate(CamelModel):
    title: str | None = Field(None, min_length=3, max_length=200)
    description: str | None = Field(None, max_length=1000)


class SermonUpdate(CamelModel):
    title: str | None = Field(None, min_length=3, max_length=200)
    date: datetime | None = None


class PostUpdate(CamelModel):
    content: str | None = Field(None, min_length=1, max_length=1000)
