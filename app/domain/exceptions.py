"""Domain exceptions for the Voice Of Faith application.

Defines domain-level exceptions that represent business rule violations.
These exceptions are independent of infrastructure concerns. Presentation
layer maps them to HTTP responses in exception handlers.
"""

from typing import Any

from app.shared.utils.datetime import utc_now


class VoiceOfFaithException(Exception):
    """Base exception for all application errors.

    All custom exceptions should inherit from this class to allow
    consistent error handling and logging. Presentation layer maps
    these to HTTP responses using message, error_code, status_code and details.

    Attributes:
        message: Human-readable error description.
        error_code: Machine-readable error code.
        status_code: HTTP status the error maps to.
        details: Additional error context (e.g. field, resource_id).
        is_operational: False for programming/configuration errors whose
            message must not reach clients outside debug.
    """

    status_code: int = 500
    is_operational: bool = True

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
        status_code: int | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error description.
            error_code: Optional machine-readable code; defaults to class name.
            details: Optional dict of extra context.
            status_code: Optional HTTP status override.
        """
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the API error envelope."""
        error: dict[str, Any] = {
            "message": self.message,
            "code": self.error_code,
            "statusCode": self.status_code,
            "timestamp": utc_now().isoformat(),
        }
        if self.details:
            error["details"] = self.details
        return {"success": False, "error": error}


class ValidationException(VoiceOfFaithException):
    """Raised when input validation fails (e.g. invalid format or range)."""

    status_code = 400

    def __init__(
        self,
        message: str,
        field: str | None = None,
        errors: list[Any] | None = None,
    ) -> None:
        """Initialize with message, optional field name and error list.

        Args:
            message: Description of the validation failure.
            field: Optional field or attribute that failed validation.
            errors: Optional list of per-field errors.
        """
        details: dict[str, Any] = {}
        if field:
            details["field"] = field
        if errors:
            details["errors"] = errors
        super().__init__(message, "VALIDATION_ERROR", details)


class AuthenticationException(VoiceOfFaithException):
    """Raised when authentication fails (e.g. invalid credentials or token)."""

    status_code = 401

    def __init__(self, message: str = "Authentication failed") -> None:
        super().__init__(message, "AUTHENTICATION_ERROR")


class AuthorizationException(VoiceOfFaithException):
    """Raised when the user lacks required permissions for the operation."""

    status_code = 403

    def __init__(
        self,
        message: str = "Access denied",
        resource: str | None = None,
        action: str | None = None,
    ) -> None:
        """Initialize with message and optional resource/action context.

        Args:
            message: Human-readable message.
            resource: Optional resource type (e.g. 'audio', 'post').
            action: Optional action that was attempted (e.g. 'update').
        """
        details: dict[str, Any] = {}
        if resource:
            details["resource"] = resource
        if action:
            details["action"] = action
        super().__init__(message, "AUTHORIZATION_ERROR", details)


class ResourceNotFoundException(VoiceOfFaithException):
    """Raised when a requested document does not exist."""

    status_code = 404

    def __init__(
        self,
        resource_type: str,
        resource_id: str | None = None,
        message: str | None = None,
    ) -> None:
        """Initialize with the resource type and optional identifier.

        Args:
            resource_type: Kind of resource (e.g. 'User', 'Audio').
            resource_id: Optional identifier that was not found.
            message: Optional message; defaults to "<resource_type> not found".
        """
        details = {"resource_id": resource_id} if resource_id else {}
        super().__init__(
            message or f"{resource_type} not found", "NOT_FOUND", details
        )


class ConflictException(VoiceOfFaithException):
    """Raised when creating something that already exists (e.g. invited email)."""

    status_code = 400

    def __init__(self, message: str = "Resource already exists") -> None:
        super().__init__(message, "CONFLICT_ERROR")


class FileTooLargeException(VoiceOfFaithException):
    """Raised when an uploaded file exceeds its size limit."""

    status_code = 413

    def __init__(self, field: str, max_bytes: int) -> None:
        super().__init__(
            f"File too large: {field} exceeds {max_bytes // (1024 * 1024)}MB",
            "FILE_TOO_LARGE",
            {"field": field, "max_bytes": max_bytes},
        )


class InvalidFileTypeException(VoiceOfFaithException):
    """Raised when an uploaded file has a content type outside the allowlist."""

    status_code = 400

    def __init__(self, field: str, content_type: str | None) -> None:
        super().__init__(
            f"Invalid file type for {field}: {content_type or 'unknown'}",
            "INVALID_FILE_TYPE",
            {"field": field, "content_type": content_type},
        )


class ExternalServiceException(VoiceOfFaithException):
    """Raised when a third-party service (identity, storage, push, mail) fails."""

    status_code = 502

    def __init__(self, service: str, message: str) -> None:
        super().__init__(
            f"{service} service error: {message}",
            "EXTERNAL_SERVICE_ERROR",
            {"service": service},
        )


class ConfigurationException(VoiceOfFaithException):
    """Raised when the application is misconfigured (non-operational)."""

    status_code = 500
    is_operational = False

    def __init__(self, message: str) -> None:
        super().__init__(message, "CONFIGURATION_ERROR")


class RateLimitException(VoiceOfFaithException):
    """Raised when a client exceeds its request quota."""

    status_code = 429

    def __init__(
        self,
        message: str = "Too many requests, please try again later",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, "RATE_LIMIT_EXCEEDED", details)
