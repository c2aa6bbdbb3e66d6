"""Tests for Settings validation and derived values."""

import pytest
from pydantic import ValidationError

from app.core.config import Settings


def _settings(**overrides) -> Settings:
    return Settings(_env_file=None, **overrides)


def test_production_requires_firebase_and_smtp() -> None:
    with pytest.raises(ValidationError) as exc_info:
        _settings(environment="production")
    assert "FIREBASE_PROJECT_ID" in str(exc_info.value)
    assert "SMTP_PASS" in str(exc_info.value)


def test_production_with_required_values() -> None:
    settings = _settings(
        environment="production",
        firebase_project_id="vof",
        firebase_storage_bucket="vof.appspot.com",
        smtp_user="noreply@example.com",
        smtp_pass="secret",
        frontend_url="https://app.example.com",
    )
    assert settings.is_production
    assert settings.cors_origins == ["https://app.example.com"]


@pytest.mark.parametrize(
    "overrides",
    [
        {"storage_backend": "ftp"},
        {"storage_backend": "s3"},
        {"invite_consistency_policy": "retry"},
        {"notification_failure_policy": "ignore"},
    ],
)
def test_invalid_values_rejected(overrides) -> None:
    with pytest.raises(ValidationError):
        _settings(**overrides)


def test_cors_origins() -> None:
    assert _settings(environment="development").cors_origins == ["*"]
    explicit = _settings(allowed_origins="https://a.example, https://b.example ,")
    assert explicit.cors_origins == ["https://a.example", "https://b.example"]


def test_rate_limit_default() -> None:
    assert _settings(rate_limit_window_seconds=900, rate_limit_max_requests=100).rate_limit_default == "100/15 minutes"
    assert _settings(rate_limit_window_seconds=10).rate_limit_default.endswith("/1 minutes")


def test_generate_deep_link() -> None:
    settings = _settings(app_scheme="voiceoffaith")
    assert settings.generate_deep_link("/reset-password", {"token": "a b"}) == (
        "voiceoffaith://reset-password?token=a+b"
    )
    assert settings.generate_deep_link("home") == "voiceoffaith://home"
