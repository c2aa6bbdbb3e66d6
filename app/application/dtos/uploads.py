"""Uploaded file payload passed from the HTTP layer to content services."""

from dataclasses import dataclass
from pathlib import PurePath


@dataclass(frozen=True)
class UploadedFile:
    """A fully buffered upload."""

    field: str
    filename: str
    content_type: str
    content: bytes

    @property
    def size(self) -> int:
        return len(self.content)

    @property
    def extension(self) -> str:
        """Lower-case extension including the dot, or an empty string."""
        return PurePath(self.filename or "").suffix.lower()
