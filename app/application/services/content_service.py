"""Shared behaviour for collection-owning services.

Centralizes the pieces every content service repeats: loading a document
or failing NotFound, offset pagination with a total count, push fan-out
under the configured failure policy, upload validation, and removal of
stored files on delete.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import TYPE_CHECKING, Any, Literal

from app.application.dtos.pagination import PageRequest
from app.application.services.authorization_service import AuthorizationService
from app.core.constants import (
    AUDIO_MIME_TYPES,
    IMAGE_MIME_PREFIX,
    PDF_MIME_TYPES,
    VIDEO_MIME_PREFIX,
)
from app.domain.exceptions import (
    ExternalServiceException,
    FileTooLargeException,
    InvalidFileTypeException,
    ResourceNotFoundException,
    ValidationException,
    VoiceOfFaithException,
)
from app.shared.telemetry import get_tracer

if TYPE_CHECKING:
    from app.application.dtos.uploads import UploadedFile
    from app.application.interfaces import (
        ICollection,
        IDocumentStore,
        IObjectStorage,
        IPushGateway,
        IQuery,
        ISnapshot,
    )
    from app.core.config import Settings

logger = logging.getLogger(__name__)
tracer = get_tracer(__name__)


def snapshot_to_dict(snap: "ISnapshot") -> dict[str, Any]:
    """Flatten a snapshot to {"id": ..., **fields}."""
    return {"id": snap.id, **snap.to_dict()}


class ContentService:
    """Base class for services that own one Firestore collection.

    Subclasses set `collection_name` and `resource_name` (used in NotFound
    messages, e.g. "Audio not found").
    """

    collection_name: str = ""
    resource_name: str = ""

    def __init__(
        self,
        db: "IDocumentStore",
        settings: "Settings",
        *,
        storage: "IObjectStorage | None" = None,
        push: "IPushGateway | None" = None,
        authz: AuthorizationService | None = None,
    ) -> None:
        self.db = db
        self.settings = settings
        self.storage = storage
        self.push = push
        self.authz = authz or AuthorizationService()

    # ---- Documents ----

    @property
    def collection(self) -> "ICollection":
        return self.db.collection(self.collection_name)

    async def _get_snapshot(self, doc_id: str) -> "ISnapshot":
        snap = await self.collection.document(doc_id).get()
        if snap is None:
            raise ResourceNotFoundException(self.resource_name, doc_id)
        return snap

    async def _increment(self, doc_id: str, field: str) -> None:
        """Atomically bump a counter; NotFound if the document is missing."""
        if not await self.collection.document(doc_id).increment(field, 1):
            raise ResourceNotFoundException(self.resource_name, doc_id)

    # ---- Pagination ----

    def page_request(
        self, page: int = 1, limit: int | None = None, *, max_limit: int | None = None
    ) -> PageRequest:
        """Validate page/limit against settings and return a PageRequest.

        Args:
            page: 1-based page number.
            limit: Page size; defaults to settings.default_page_size.
            max_limit: Upper bound overriding settings.max_page_size.
        """
        limit = self.settings.default_page_size if limit is None else limit
        upper = max_limit or self.settings.max_page_size
        if page < 1:
            raise ValidationException("Page must be greater than 0", field="page")
        if limit < 1 or limit > upper:
            raise ValidationException(
                f"Limit must be between 1 and {upper}",
                field="limit",
            )
        return PageRequest(page=page, limit=limit)

    async def _paginate(
        self,
        query: "IQuery",
        page: PageRequest,
        *,
        count_query: "IQuery | None" = None,
    ) -> tuple[list[dict[str, Any]], dict[str, Any]]:
        """Run an offset page of `query` and count the unpaged result set.

        Offset pagination has no stability guarantee under concurrent writes.
        """
        items = [
            snapshot_to_dict(snap)
            for snap in await query.offset(page.offset).limit(page.limit).get()
        ]
        total = await (count_query or query).count()
        return items, page.meta(total)

    # ---- Notifications ----

    async def _broadcast(self, title: str, body: str, data: dict[str, str]) -> bool:
        """Send to the broadcast topic under notification_failure_policy.

        Returns True if sent. With policy "log" failures are logged and
        swallowed; with "raise" they surface as ExternalServiceException.
        """
        if self.push is None:
            return False
        try:
            with tracer.start_as_current_span("push.broadcast") as span:
                span.set_attribute("push.title", title)
                await self.push.send_to_all(title, body, data)
        except VoiceOfFaithException as e:
            if self.settings.notification_failure_policy == "raise":
                raise ExternalServiceException("Notification", e.message) from e
            logger.warning("Notification '%s' not sent: %s", title, e.message)
            return False
        return True

    # ---- Files ----

    def _validate_file(
        self,
        file: "UploadedFile",
        *,
        kind: Literal["image", "audio", "video", "pdf"],
    ) -> None:
        """Check content type and size for an upload kind (image/audio/video/pdf)."""
        content_type = (file.content_type or "").lower()
        s = self.settings
        if kind == "image":
            ok, max_bytes = content_type.startswith(IMAGE_MIME_PREFIX), s.max_image_size
        elif kind == "audio":
            ok, max_bytes = content_type in AUDIO_MIME_TYPES, s.max_audio_size
        elif kind == "video":
            ok, max_bytes = content_type.startswith(VIDEO_MIME_PREFIX), s.max_video_size
        elif kind == "pdf":
            ok, max_bytes = content_type in PDF_MIME_TYPES, s.max_pdf_size
        else:
            raise ValueError(f"Unknown upload kind: {kind}")
        if not ok:
            raise InvalidFileTypeException(file.field, file.content_type)
        if file.size > max_bytes:
            raise FileTooLargeException(file.field, max_bytes)

    async def _upload(self, file: "UploadedFile", folder: str) -> str:
        if self.storage is None:
            raise ExternalServiceException("Storage", "storage is not configured")
        try:
            with tracer.start_as_current_span("storage.upload") as span:
                span.set_attribute("storage.folder", folder)
                span.set_attribute("storage.size", file.size)
                return await self.storage.upload(
                    file.content, file.filename, file.content_type, folder
                )
        except VoiceOfFaithException as e:
            raise ExternalServiceException("Storage", e.message) from e

    async def _remove_files(self, urls: Iterable[str | None]) -> None:
        """Delete stored files when delete_uploaded_files is on; failures are logged."""
        if self.storage is None or not self.settings.delete_uploaded_files:
            return
        for url in urls:
            if not url:
                continue
            try:
                await self.storage.delete(url)
            except VoiceOfFaithException as e:
                logger.warning("Could not delete stored file %s: %s", url, e.message)
