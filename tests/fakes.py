"""In-memory adapters for tests.

InMemoryDocumentStore mirrors the subset of the Firestore API the services
use (where/order_by/offset/limit/count, add/set/update/increment/delete),
including Firestore's rule that inequality filters and order_by skip
documents missing the field.
"""

from __future__ import annotations

import asyncio
import copy
import itertools
import operator
from collections.abc import AsyncIterator
from typing import Any

from app.application.dtos.identity import (
    IdentityErrorCode,
    IdentityResult,
    IdentityUser,
    SignInTokens,
    TokenClaims,
)
from app.application.dtos.user import CurrentUser
from app.infrastructure.exceptions import MailDeliveryError, PushGatewayError, StorageUploadError

_OPS = {
    "==": operator.eq,
    "!=": operator.ne,
    "<": operator.lt,
    "<=": operator.le,
    ">": operator.gt,
    ">=": operator.ge,
    "in": lambda value, options: value in options,
    "array-contains": lambda value, item: isinstance(value, list) and item in value,
}
_MISSING = object()


class Snapshot:
    def __init__(self, doc_id: str, data: dict[str, Any]) -> None:
        self.id = doc_id
        self._data = data

    def to_dict(self) -> dict[str, Any]:
        return copy.deepcopy(self._data)


class DocumentRef:
    def __init__(self, store: "InMemoryDocumentStore", collection: str, doc_id: str) -> None:
        self._store = store
        self._docs = store.data.setdefault(collection, {})
        self.id = doc_id

    async def get(self) -> Snapshot | None:
        data = self._docs.get(self.id)
        return Snapshot(self.id, data) if data is not None else None

    async def set(self, data: dict[str, Any]) -> None:
        self._docs[self.id] = copy.deepcopy(data)

    async def update(self, data: dict[str, Any]) -> bool:
        if self.id not in self._docs:
            return False
        self._docs[self.id].update(copy.deepcopy(data))
        return True

    async def increment(self, field: str, amount: int = 1) -> bool:
        async with self._store.lock:
            if self.id not in self._docs:
                return False
            current = self._docs[self.id].get(field) or 0
            # Yield inside the critical section so unsynchronized callers would interleave.
            await asyncio.sleep(0)
            self._docs[self.id][field] = current + amount
            return True

    async def delete(self) -> None:
        self._docs.pop(self.id, None)


class Query:
    def __init__(
        self,
        store: "InMemoryDocumentStore",
        collection: str,
        filters: tuple = (),
        orders: tuple = (),
        offset: int = 0,
        limit: int | None = None,
    ) -> None:
        self._store = store
        self._collection = collection
        self._filters = filters
        self._orders = orders
        self._offset = offset
        self._limit = limit

    def _copy(self, **changes: Any) -> "Query":
        state = {
            "filters": self._filters,
            "orders": self._orders,
            "offset": self._offset,
            "limit": self._limit,
        }
        state.update(changes)
        return Query(self._store, self._collection, **state)

    def where(self, field: str, op: str, value: Any) -> "Query":
        if op not in _OPS:
            raise ValueError(f"Unsupported operator: {op}")
        return self._copy(filters=self._filters + ((field, op, value),))

    def order_by(self, field: str, direction: str = "ASCENDING") -> "Query":
        return self._copy(orders=self._orders + ((field, direction),))

    def offset(self, n: int) -> "Query":
        return self._copy(offset=n)

    def limit(self, n: int) -> "Query":
        return self._copy(limit=n)

    def _matching(self) -> list[tuple[str, dict[str, Any]]]:
        docs = self._store.data.get(self._collection, {})
        rows = []
        for doc_id, data in docs.items():
            ok = True
            for field, op, value in self._filters:
                actual = data.get(field, _MISSING)
                if actual is _MISSING or not _OPS[op](actual, value):
                    ok = False
                    break
            if ok and all(data.get(f, _MISSING) is not _MISSING for f, _ in self._orders):
                rows.append((doc_id, data))
        for field, direction in reversed(self._orders):
            rows.sort(
                key=lambda row: (row[1][field] is None, row[1][field]),
                reverse=direction == "DESCENDING",
            )
        return rows

    def _page(self) -> list[tuple[str, dict[str, Any]]]:
        rows = self._matching()[self._offset :]
        return rows if self._limit is None else rows[: self._limit]

    async def get(self) -> list[Snapshot]:
        return [Snapshot(doc_id, data) for doc_id, data in self._page()]

    async def stream(self) -> AsyncIterator[Snapshot]:
        for doc_id, data in self._page():
            yield Snapshot(doc_id, data)

    async def count(self) -> int:
        return len(self._page())


class Collection(Query):
    def __init__(self, store: "InMemoryDocumentStore", name: str) -> None:
        super().__init__(store, name)
        self.name = name

    def document(self, document_id: str) -> DocumentRef:
        return DocumentRef(self._store, self.name, document_id)

    async def add(self, data: dict[str, Any]) -> str:
        doc_id = f"{self.name}-{next(self._store.ids)}"
        await self.document(doc_id).set(data)
        return doc_id


class InMemoryDocumentStore:
    def __init__(self) -> None:
        self.data: dict[str, dict[str, dict[str, Any]]] = {}
        self.ids = itertools.count(1)
        self.lock = asyncio.Lock()

    def collection(self, collection_id: str) -> Collection:
        return Collection(self, collection_id)


class FakeIdentityProvider:
    """Accounts keyed by email; ID tokens are registered explicitly by tests."""

    def __init__(self) -> None:
        self.users: dict[str, IdentityUser] = {}
        self.passwords: dict[str, str] = {}
        self.id_tokens: dict[str, str] = {}
        self.deleted: list[str] = []
        self._uids = itertools.count(1)

    def add_account(self, email: str, password: str = "secret123", uid: str | None = None) -> str:
        uid = uid or f"uid-{next(self._uids)}"
        self.users[email] = IdentityUser(uid=uid, email=email)
        self.passwords[uid] = password
        return uid

    def issue_token(self, uid: str, token: str | None = None) -> str:
        token = token or f"token-{uid}"
        self.id_tokens[token] = uid
        return token

    def _by_uid(self, uid: str) -> IdentityUser | None:
        return next((u for u in self.users.values() if u.uid == uid), None)

    async def get_user_by_email(self, email: str):
        user = self.users.get(email)
        if user is None:
            return IdentityResult.failure(IdentityErrorCode.USER_NOT_FOUND, "User not found")
        return IdentityResult.success(user)

    async def create_user(self, email: str, password: str, display_name: str | None = None):
        if email in self.users:
            return IdentityResult.failure(IdentityErrorCode.EMAIL_EXISTS)
        self.add_account(email, password)
        return IdentityResult.success(self.users[email])

    async def update_password(self, uid: str, password: str):
        if self._by_uid(uid) is None:
            return IdentityResult.failure(IdentityErrorCode.USER_NOT_FOUND)
        self.passwords[uid] = password
        return IdentityResult.success(None)

    async def delete_user(self, uid: str):
        user = self._by_uid(uid)
        if user is None:
            return IdentityResult.failure(IdentityErrorCode.USER_NOT_FOUND)
        del self.users[user.email]
        self.deleted.append(uid)
        return IdentityResult.success(None)

    async def sign_in_with_password(self, email: str, password: str):
        user = self.users.get(email)
        if user is None:
            return IdentityResult.failure(IdentityErrorCode.EMAIL_NOT_FOUND)
        if self.passwords.get(user.uid) != password:
            return IdentityResult.failure(IdentityErrorCode.INVALID_PASSWORD)
        token = self.issue_token(user.uid)
        return IdentityResult.success(
            SignInTokens(id_token=token, refresh_token=f"refresh-{user.uid}", expires_in=3600, uid=user.uid)
        )

    async def refresh_token(self, refresh_token: str):
        if not refresh_token.startswith("refresh-"):
            return IdentityResult.failure(IdentityErrorCode.INVALID_TOKEN)
        uid = refresh_token.removeprefix("refresh-")
        return IdentityResult.success(
            SignInTokens(id_token=self.issue_token(uid), refresh_token=refresh_token, expires_in=3600, uid=uid)
        )

    async def verify_id_token(self, token: str):
        uid = self.id_tokens.get(token)
        if uid is None:
            return IdentityResult.failure(IdentityErrorCode.INVALID_TOKEN, "Invalid token")
        user = self._by_uid(uid)
        return IdentityResult.success(
            TokenClaims(uid=uid, email=user.email if user else None, raw={"uid": uid})
        )

    async def create_custom_token(self, uid: str):
        return IdentityResult.success(f"custom-{uid}")


class FakeObjectStorage:
    def __init__(self) -> None:
        self.files: dict[str, bytes] = {}
        self.deleted: list[str] = []
        self.fail_uploads = False
        self._ids = itertools.count(1)

    async def upload(self, content: bytes, filename: str, content_type: str, folder: str) -> str:
        if self.fail_uploads:
            raise StorageUploadError(f"{folder}/{filename}", "bucket unavailable")
        suffix = filename.rsplit(".", 1)[-1] if "." in filename else "bin"
        url = f"https://storage.test/{folder}/{next(self._ids)}.{suffix}"
        self.files[url] = content
        return url

    async def delete(self, url: str) -> bool:
        self.deleted.append(url)
        return self.files.pop(url, None) is not None


class FakePushGateway:
    def __init__(self) -> None:
        self.sent: list[dict[str, Any]] = []
        self.subscriptions: list[tuple[list[str], str]] = []
        self.fail = False

    async def _record(self, target: str, title: str, body: str, data: dict | None) -> str:
        if self.fail:
            raise PushGatewayError(target, "FCM unavailable")
        self.sent.append({"target": target, "title": title, "body": body, "data": data or {}})
        return f"projects/test/messages/{len(self.sent)}"

    async def send_to_topic(self, topic: str, title: str, body: str, data: dict | None = None) -> str:
        return await self._record(f"topic:{topic}", title, body, data)

    async def send_to_token(self, token: str, title: str, body: str, data: dict | None = None) -> str:
        return await self._record(f"token:{token}", title, body, data)

    async def send_to_all(self, title: str, body: str, data: dict | None = None) -> str:
        return await self.send_to_topic("all_users", title, body, data)

    async def subscribe_to_topic(self, tokens: list[str], topic: str) -> None:
        if self.fail:
            raise PushGatewayError(f"topic:{topic}", "IID unavailable")
        self.subscriptions.append((list(tokens), topic))


class FakeMailer:
    def __init__(self) -> None:
        self.invitations: list[dict[str, str]] = []
        self.welcomes: list[str] = []
        self.fail_invitations = False
        self.fail_welcome = False

    async def send_invitation(self, email: str, display_name: str, role: str, invite_token: str) -> None:
        if self.fail_invitations:
            raise MailDeliveryError(email, "SMTP unavailable")
        self.invitations.append(
            {"email": email, "displayName": display_name, "role": role, "token": invite_token}
        )

    async def send_welcome(self, email: str, display_name: str) -> None:
        if self.fail_welcome:
            raise MailDeliveryError(email, "SMTP unavailable")
        self.welcomes.append(email)

    async def verify_connection(self) -> bool:
        return True


def auth(user: CurrentUser) -> dict[str, str]:
    """Authorization header for a user created by the make_user fixture."""
    return {"Authorization": f"Bearer token-{user.uid}"}
