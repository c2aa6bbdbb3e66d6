"""Tests for domain exceptions (error_code, status_code, details, envelope)."""

from app.domain.exceptions import (
    AuthenticationException,
    AuthorizationException,
    ConfigurationException,
    ConflictException,
    ExternalServiceException,
    FileTooLargeException,
    InvalidFileTypeException,
    RateLimitException,
    ResourceNotFoundException,
    ValidationException,
    VoiceOfFaithException,
)


def test_base_exception_default_error_code() -> None:
    """Base exception uses class name as error_code when not provided."""
    exc = VoiceOfFaithException("Something failed")
    assert exc.message == "Something failed"
    assert exc.error_code == "VoiceOfFaithException"
    assert exc.status_code == 500
    assert exc.details == {}
    assert exc.is_operational is True


def test_base_exception_status_override() -> None:
    """status_code passed to the constructor wins over the class default."""
    exc = VoiceOfFaithException("Teapot", "TEAPOT", status_code=418)
    assert exc.status_code == 418
    assert VoiceOfFaithException.status_code == 500


def test_to_dict_envelope() -> None:
    """to_dict returns the error envelope; details only when present."""
    body = ValidationException("Invalid category", field="category").to_dict()
    assert body["success"] is False
    error = body["error"]
    assert error["message"] == "Invalid category"
    assert error["code"] == "VALIDATION_ERROR"
    assert error["statusCode"] == 400
    assert error["details"] == {"field": "category"}
    assert "timestamp" in error

    bare = AuthenticationException().to_dict()["error"]
    assert "details" not in bare


def test_validation_exception_without_field() -> None:
    """ValidationException with no field has empty details."""
    exc = ValidationException("Invalid")
    assert exc.error_code == "VALIDATION_ERROR"
    assert exc.details == {}


def test_authentication_and_authorization() -> None:
    """401 and 403 errors carry their codes and optional resource/action."""
    assert AuthenticationException().status_code == 401
    assert AuthenticationException().message == "Authentication failed"

    exc = AuthorizationException("No", resource="audio", action="delete")
    assert exc.status_code == 403
    assert exc.error_code == "AUTHORIZATION_ERROR"
    assert exc.details == {"resource": "audio", "action": "delete"}


def test_not_found_message() -> None:
    """ResourceNotFoundException defaults to '<type> not found'."""
    exc = ResourceNotFoundException("Audio", "a1")
    assert exc.status_code == 404
    assert exc.message == "Audio not found"
    assert exc.details == {"resource_id": "a1"}
    assert ResourceNotFoundException("Token", None, "Invalid or expired token").details == {}


def test_conflict_is_bad_request() -> None:
    """Duplicate invites surface as 400 with the conflict code."""
    exc = ConflictException("User with this email already exists")
    assert exc.status_code == 400
    assert exc.error_code == "CONFLICT_ERROR"


def test_upload_errors() -> None:
    """File size and type errors name the multipart field."""
    too_large = FileTooLargeException("audio", 100 * 1024 * 1024)
    assert too_large.status_code == 413
    assert too_large.message == "File too large: audio exceeds 100MB"

    bad_type = InvalidFileTypeException("thumbnail", "text/plain")
    assert bad_type.status_code == 400
    assert bad_type.details == {"field": "thumbnail", "content_type": "text/plain"}


def test_external_and_configuration_errors() -> None:
    """External failures are 502; configuration errors are non-operational."""
    ext = ExternalServiceException("Identity", "timeout")
    assert ext.status_code == 502
    assert ext.message == "Identity service error: timeout"

    cfg = ConfigurationException("missing key")
    assert cfg.is_operational is False
    assert cfg.error_code == "CONFIGURATION_ERROR"


def test_rate_limit_envelope() -> None:
    error = RateLimitException(details={"limit": "100 per 1 minute"}).to_dict()["error"]
    assert error["statusCode"] == 429
    assert error["code"] == "RATE_LIMIT_EXCEEDED"
    assert error["details"] == {"limit": "100 per 1 minute"}
