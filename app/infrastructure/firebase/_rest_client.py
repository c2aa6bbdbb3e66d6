"""Thin Firestore REST API client (no firebase-admin).

Uses google-auth for service account tokens and Firestore REST v1.
Keeps the deployment small (avoids grpcio / firebase-admin).
All HTTP calls use httpx.AsyncClient so they do not block the event loop.

Supported surface (mirrors the firestore SDK for the operations we use):
    await db.collection(name).document(id).get() / set() / update() / delete()
    await db.collection(name).document(id).increment(field, 1)
    await db.collection(name).add(data)
    db.collection(name).where(f, op, v).order_by(f, DESCENDING).offset(n).limit(n)
    async for snap in query.stream(); await query.get(); await query.count()
"""

from __future__ import annotations

import copy
import json
from collections.abc import AsyncIterator
from typing import Any
from urllib.parse import quote, urlencode

import httpx

from app.infrastructure.exceptions import DocumentExistsError, DocumentStoreError
from app.infrastructure.firebase._credentials import TokenSource
from app.infrastructure.firebase._rest_encoding import (
    _encode_value,
    decode_document,
    encode_document,
    encode_fields,
)

_BASE = "https://firestore.googleapis.com/v1"

ASCENDING = "ASCENDING"
DESCENDING = "DESCENDING"


async def _request_async(
    client: httpx.AsyncClient,
    url: str,
    method: str = "GET",
    body: dict | None = None,
    access_token: str | None = None,
) -> Any:
    """Perform async HTTP request to Firestore REST API. 404 returns None."""
    headers = {"Content-Type": "application/json"}
    if access_token:
        headers["Authorization"] = f"Bearer {access_token}"
    try:
        resp = await client.request(method, url, headers=headers, json=body)
    except httpx.HTTPError as e:
        raise DocumentStoreError(f"{method} {url}", str(e)) from e
    if resp.status_code == 404:
        return None
    if resp.status_code == 409:
        raise DocumentExistsError(url)
    if resp.status_code not in (200, 204):
        raise DocumentStoreError(f"{method} {url}", f"HTTP {resp.status_code}: {resp.text}")
    if method == "DELETE":
        return {}
    raw = resp.content
    return json.loads(raw.decode()) if raw else {}


def _doc_id(name: str) -> str:
    return name.split("/")[-1] if name else ""


class DocumentSnapshot:
    """Snapshot of a document (id + data)."""

    def __init__(self, id_: str, data: dict):
        self.id = id_
        self._data = data

    def to_dict(self) -> dict:
        return dict(self._data)


class DocumentReference:
    """Reference to a single document; matches firestore API style."""

    def __init__(self, client: "FirestoreRESTClient", path: str):
        self._client = client
        self._path = path

    @property
    def id(self) -> str:
        return _doc_id(self._path)

    async def set(self, data: dict[str, Any]) -> None:
        """Create or overwrite the document (PATCH with full replace)."""
        await _request_async(
            self._client._http,
            f"{_BASE}/{self._path}",
            method="PATCH",
            body=encode_document(data),
            access_token=await self._client.get_token(),
        )

    async def update(self, data: dict[str, Any]) -> bool:
        """Merge fields into an existing document.

        Only the given top-level fields are written (update mask). Returns
        False if the document does not exist.
        """
        if not data:
            return await self.get() is not None
        params = [("updateMask.fieldPaths", field) for field in data]
        params.append(("currentDocument.exists", "true"))
        out = await _request_async(
            self._client._http,
            f"{_BASE}/{self._path}?{urlencode(params)}",
            method="PATCH",
            body=encode_document(data),
            access_token=await self._client.get_token(),
        )
        return out is not None

    async def increment(self, field: str, amount: int = 1) -> bool:
        """Atomically add `amount` to a numeric field (server-side transform).

        Returns False if the document does not exist.
        """
        body = {
            "writes": [
                {
                    "transform": {
                        "document": self._path,
                        "fieldTransforms": [
                            {"fieldPath": field, "increment": _encode_value(amount)}
                        ],
                    },
                    "currentDocument": {"exists": True},
                }
            ]
        }
        out = await _request_async(
            self._client._http,
            f"{_BASE}/{self._client._prefix}:commit",
            method="POST",
            body=body,
            access_token=await self._client.get_token(),
        )
        return out is not None

    async def get(self) -> DocumentSnapshot | None:
        """Fetch the document; returns None if not found."""
        out = await _request_async(
            self._client._http,
            f"{_BASE}/{self._path}",
            access_token=await self._client.get_token(),
        )
        if not out:
            return None
        return DocumentSnapshot(self.id, decode_document(out.get("fields")))

    async def delete(self) -> None:
        """Delete the document. Idempotent if document is already missing (404)."""
        await _request_async(
            self._client._http,
            f"{_BASE}/{self._path}",
            method="DELETE",
            access_token=await self._client.get_token(),
        )


_OP_MAP: dict[str, str] = {
    "==": "EQUAL",
    "!=": "NOT_EQUAL",
    "<": "LESS_THAN",
    "<=": "LESS_THAN_OR_EQUAL",
    ">": "GREATER_THAN",
    ">=": "GREATER_THAN_OR_EQUAL",
    "in": "IN",
    "not-in": "NOT_IN",
    "array-contains": "ARRAY_CONTAINS",
    "array-contains-any": "ARRAY_CONTAINS_ANY",
}


class Query:
    """Fluent query builder; runs via runQuery (filter/order/offset/limit on server).

    Each builder call returns a new Query so a CollectionReference can be
    reused as the root of many queries.
    """

    def __init__(self, client: "FirestoreRESTClient", parent: str, collection_id: str):
        self._client = client
        self._parent = parent
        self._collection_id = collection_id
        self._filters: list[tuple[str, str, Any]] = []
        self._orders: list[tuple[str, str]] = []
        self._offset: int = 0
        self._limit: int | None = None

    def _copy(self) -> "Query":
        clone = copy.copy(self)
        clone._filters = list(self._filters)
        clone._orders = list(self._orders)
        return clone

    def where(self, field: str, op: str, value: Any) -> "Query":
        if op not in _OP_MAP:
            raise ValueError(f"Unsupported query operator: {op!r}")
        q = self._copy()
        q._filters.append((field, _OP_MAP[op], value))
        return q

    def order_by(self, field: str, direction: str = ASCENDING) -> "Query":
        q = self._copy()
        q._orders.append((field, direction))
        return q

    def offset(self, n: int) -> "Query":
        q = self._copy()
        q._offset = n
        return q

    def limit(self, n: int) -> "Query":
        q = self._copy()
        q._limit = n
        return q

    def _structured_query(self, *, with_paging: bool = True) -> dict[str, Any]:
        structured: dict[str, Any] = {
            "from": [{"collectionId": self._collection_id}],
        }
        field_filters = [
            {
                "fieldFilter": {
                    "field": {"fieldPath": field},
                    "op": op,
                    "value": _encode_value(value),
                }
            }
            for field, op, value in self._filters
        ]
        if len(field_filters) == 1:
            structured["where"] = field_filters[0]
        elif field_filters:
            structured["where"] = {
                "compositeFilter": {"op": "AND", "filters": field_filters}
            }
        if self._orders:
            structured["orderBy"] = [
                {"field": {"fieldPath": field}, "direction": direction}
                for field, direction in self._orders
            ]
        if with_paging:
            if self._offset:
                structured["offset"] = self._offset
            if self._limit is not None:
                structured["limit"] = self._limit
        return structured

    async def stream(self) -> AsyncIterator[DocumentSnapshot]:
        """Execute the query and yield document snapshots."""
        resp = await _request_async(
            self._client._http,
            f"{_BASE}/{self._parent}:runQuery",
            method="POST",
            body={"structuredQuery": self._structured_query()},
            access_token=await self._client.get_token(),
        )
        items = resp if isinstance(resp, list) else ([resp] if resp else [])
        for item in items:
            if "document" not in item:
                continue
            doc = item["document"]
            yield DocumentSnapshot(_doc_id(doc.get("name", "")), decode_document(doc.get("fields")))

    async def get(self) -> list[DocumentSnapshot]:
        """Execute the query and return all snapshots as a list."""
        return [snap async for snap in self.stream()]

    async def count(self) -> int:
        """Count matching documents server-side (ignores offset/limit)."""
        body = {
            "structuredAggregationQuery": {
                "structuredQuery": self._structured_query(with_paging=False),
                "aggregations": [{"alias": "total", "count": {}}],
            }
        }
        resp = await _request_async(
            self._client._http,
            f"{_BASE}/{self._parent}:runAggregationQuery",
            method="POST",
            body=body,
            access_token=await self._client.get_token(),
        )
        items = resp if isinstance(resp, list) else ([resp] if resp else [])
        for item in items:
            fields = (item.get("result") or {}).get("aggregateFields") or {}
            if "total" in fields:
                return int(fields["total"].get("integerValue", 0))
        return 0


class CollectionReference(Query):
    """Reference to a collection; also the root query over it."""

    def __init__(self, client: "FirestoreRESTClient", path: str):
        path = path.rstrip("/")
        super().__init__(client, path.rsplit("/", 1)[0], path.split("/")[-1])
        self._path = path

    @property
    def id(self) -> str:
        return self._collection_id

    def document(self, document_id: str) -> DocumentReference:
        return DocumentReference(self._client, f"{self._path}/{document_id}")

    async def create(self, document_id: str, data: dict[str, Any]) -> None:
        """Create a document with the given ID (DocumentExistsError if it exists)."""
        await _request_async(
            self._client._http,
            f"{_BASE}/{self._path}?documentId={quote(document_id, safe='')}",
            method="POST",
            body=encode_document(data),
            access_token=await self._client.get_token(),
        )

    async def add(self, data: dict[str, Any]) -> str:
        """Create a document with a server-generated ID and return that ID."""
        out = await _request_async(
            self._client._http,
            f"{_BASE}/{self._path}",
            method="POST",
            body={"fields": encode_fields(data)},
            access_token=await self._client.get_token(),
        )
        return _doc_id((out or {}).get("name", ""))


class FirestoreRESTClient:
    """Lightweight Firestore client using REST API (no firebase-admin)."""

    def __init__(
        self,
        project_id: str,
        token_source: TokenSource,
        *,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self._project_id = project_id
        self._token_source = token_source
        self._prefix = f"projects/{project_id}/databases/(default)/documents"
        self._http = http_client if http_client is not None else httpx.AsyncClient(timeout=30.0)
        self._owns_http = http_client is None

    async def aclose(self) -> None:
        """Close the HTTP client only if we created it (do not close injected client)."""
        if self._owns_http:
            await self._http.aclose()

    async def get_token(self) -> str:
        return await self._token_source.token()

    def collection(self, collection_id: str) -> CollectionReference:
        return CollectionReference(self, f"{self._prefix}/{collection_id}")
