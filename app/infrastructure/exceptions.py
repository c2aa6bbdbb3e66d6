"""Infrastructure exceptions for storage and external operations.

These extend VoiceOfFaithException so presentation can map them
to HTTP responses consistently.
"""

from app.domain.exceptions import VoiceOfFaithException


class DocumentStoreError(VoiceOfFaithException):
    """Firestore request failed (transport error or unexpected status)."""

    status_code = 500

    def __init__(self, operation: str, reason: str) -> None:
        super().__init__(
            "Database operation failed",
            "DATABASE_ERROR",
            {"operation": operation, "reason": reason},
        )


class DocumentExistsError(VoiceOfFaithException):
    """Raised when createDocument returns 409 (document ID already exists)."""

    status_code = 409

    def __init__(self, path: str) -> None:
        super().__init__("Document already exists", "DOCUMENT_EXISTS", {"path": path})


class StorageException(VoiceOfFaithException):
    """Base exception for object storage operations."""

    status_code = 502


class StorageUploadError(StorageException):
    """File upload failed."""

    def __init__(self, file_path: str, reason: str) -> None:
        super().__init__(
            f"Failed to upload file: {file_path}",
            "STORAGE_UPLOAD_ERROR",
            {"file_path": file_path, "reason": reason},
        )


class StorageDeleteError(StorageException):
    """File deletion failed."""

    def __init__(self, file_path: str, reason: str) -> None:
        super().__init__(
            f"Failed to delete file: {file_path}",
            "STORAGE_DELETE_ERROR",
            {"file_path": file_path, "reason": reason},
        )


class StoragePermissionError(StorageException):
    """Path escapes the storage root or the backend refused the operation."""

    status_code = 400

    def __init__(self, file_path: str, operation: str) -> None:
        super().__init__(
            f"Permission denied for {operation} on {file_path}",
            "STORAGE_PERMISSION_ERROR",
            {"file_path": file_path, "operation": operation},
        )


class PushGatewayError(VoiceOfFaithException):
    """Cloud Messaging rejected or failed to accept a message."""

    status_code = 502

    def __init__(self, target: str, reason: str) -> None:
        super().__init__(
            f"Messaging service error: {reason}",
            "PUSH_GATEWAY_ERROR",
            {"target": target},
        )


class MailDeliveryError(VoiceOfFaithException):
    """SMTP relay refused or failed to deliver a message."""

    status_code = 502

    def __init__(self, recipient: str, reason: str) -> None:
        super().__init__(
            f"Email service error: {reason}",
            "MAIL_DELIVERY_ERROR",
            {"recipient": recipient},
        )
