"""Document store port (Firestore-shaped).

Services speak this narrow subset of the Firestore API; the REST client in
app.infrastructure.firebase and the in-memory store used by tests both
satisfy it.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from typing import Any, Protocol


class ISnapshot(Protocol):
    """Document id plus decoded data."""

    id: str

    def to_dict(self) -> dict[str, Any]: ...


class IDocumentRef(Protocol):
    """Single document operations."""

    @property
    def id(self) -> str: ...

    async def get(self) -> ISnapshot | None: ...

    async def set(self, data: dict[str, Any]) -> None: ...

    async def update(self, data: dict[str, Any]) -> bool:
        """Merge fields; False when the document does not exist."""

    async def increment(self, field: str, amount: int = 1) -> bool:
        """Atomic server-side add; False when the document does not exist."""

    async def delete(self) -> None: ...


class IQuery(Protocol):
    """Immutable query builder; multiple where() calls combine with AND."""

    def where(self, field: str, op: str, value: Any) -> IQuery: ...

    def order_by(self, field: str, direction: str = "ASCENDING") -> IQuery: ...

    def offset(self, n: int) -> IQuery: ...

    def limit(self, n: int) -> IQuery: ...

    def stream(self) -> AsyncIterator[ISnapshot]: ...

    async def get(self) -> list[ISnapshot]: ...

    async def count(self) -> int: ...


class ICollection(IQuery, Protocol):
    """Collection reference; also the root query over the collection."""

    def document(self, document_id: str) -> IDocumentRef: ...

    async def add(self, data: dict[str, Any]) -> str: ...


class IDocumentStore(Protocol):
    """Entry point: named collections."""

    def collection(self, collection_id: str) -> ICollection: ...
