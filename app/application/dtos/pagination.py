"""Offset pagination parameters and metadata."""

from dataclasses import dataclass
from math import ceil
from typing import Any


@dataclass(frozen=True)
class PageRequest:
    """Validated page/limit pair."""

    page: int = 1
    limit: int = 20

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit

    def meta(self, total: int) -> dict[str, Any]:
        """Pagination block returned alongside list results."""
        return {
            "page": self.page,
            "limit": self.limit,
            "total": total,
            "pages": ceil(total / self.limit) if self.limit else 0,
        }
