"""Application configuration (settings and environment).

Single source of truth for all configuration. Uses pydantic-settings
with .env support. Production-only requirements (Firebase project, storage
bucket, SMTP credentials) are validated at load time.
"""

from functools import lru_cache
from urllib.parse import urlencode

from pydantic import SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_STORAGE_BACKENDS = ("firebase", "local", "s3")
_CONSISTENCY_POLICIES = ("best_effort", "compensate")
_NOTIFICATION_POLICIES = ("log", "raise")

MB = 1024 * 1024


class Settings(BaseSettings):
    """Application settings loaded from environment and .env.

    All settings have defaults suitable for development; in production
    validate_required_and_storage enforces the Firebase and SMTP settings.
    """

    # App
    app_name: str = "Voice Of Faith"
    app_version: str = "1.0.0"
    environment: str = "development"
    debug: bool = False
    port: int = 3000
    log_level: str = "info"

    # Deep links and web
    frontend_url: str = "http://localhost:3000"
    app_scheme: str = "voiceoffaith"
    web_url: str = "http://localhost:3000"

    # CORS: empty means derived from environment (see cors_origins)
    allowed_origins: str = ""

    # Firebase: service account as key (env JSON) or path (file)
    firebase_project_id: str = ""
    firebase_storage_bucket: str = ""
    firebase_api_key: SecretStr = SecretStr("")
    firebase_service_account_key: SecretStr | None = None
    firebase_service_account_path: str | None = None

    # SMTP
    smtp_host: str = "smtp.gmail.com"
    smtp_port: int = 587
    smtp_user: str = ""
    smtp_pass: SecretStr = SecretStr("")
    smtp_use_tls: bool = True
    smtp_timeout_seconds: float = 30.0
    mail_from_name: str = "Famille JVJP"

    # Storage
    storage_backend: str = "firebase"
    storage_root: str = "/var/voiceoffaith/storage"
    storage_base_url: str | None = None
    s3_bucket: str | None = None
    s3_region: str = "us-east-1"
    s3_endpoint_url: str | None = None
    s3_access_key: str | None = None
    s3_secret_key: SecretStr | None = None

    # Upload limits (bytes)
    max_image_size: int = 10 * MB
    max_audio_size: int = 100 * MB
    max_video_size: int = 200 * MB
    max_pdf_size: int = 50 * MB
    max_upload_size: int = 210 * MB  # whole request body, largest file plus form fields

    # Pagination
    default_page_size: int = 20
    max_page_size: int = 100

    # Rate limiting
    rate_limit_window_seconds: int = 900
    rate_limit_max_requests: int = 100
    login_rate_limit: str = "10/minute"
    rate_limit_enabled: bool = True

    # Request / middleware
    request_timeout_seconds: int = 120
    request_id_header: str = "X-Request-ID"

    # Policies for multi-step and side-effect failures
    invite_consistency_policy: str = "best_effort"
    notification_failure_policy: str = "log"
    invite_token_ttl_days: int | None = None
    delete_uploaded_files: bool = True

    # OpenTelemetry
    telemetry_enabled: bool = False
    telemetry_exporter: str = "console"
    telemetry_otlp_endpoint: str | None = None
    telemetry_sample_rate: float = 1.0

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == "production"

    @property
    def cors_origins(self) -> list[str]:
        """Allowed CORS origins.

        Explicit ALLOWED_ORIGINS wins; otherwise production allows only
        frontend_url and every other environment allows any origin.
        """
        if self.allowed_origins:
            return [o.strip() for o in self.allowed_origins.split(",") if o.strip()]
        if self.is_production:
            return [self.frontend_url]
        return ["*"]

    @property
    def rate_limit_default(self) -> str:
        """Global slowapi limit string built from window and max requests."""
        minutes = max(1, self.rate_limit_window_seconds // 60)
        return f"{self.rate_limit_max_requests}/{minutes} minutes"

    def generate_deep_link(self, path: str, params: dict[str, str] | None = None) -> str:
        """Build an app deep link such as voiceoffaith://reset-password?token=abc.

        Args:
            path: Path inside the app (no leading scheme).
            params: Optional query parameters (URL-encoded).

        Returns:
            Deep link string.
        """
        link = f"{self.app_scheme}://{path.lstrip('/')}"
        if params:
            link = f"{link}?{urlencode(params)}"
        return link

    @model_validator(mode="after")
    def validate_required_and_storage(self) -> "Settings":
        """Validate production requirements, storage backend and policy values."""
        if self.is_production:
            missing = [
                name
                for name, value in (
                    ("FIREBASE_PROJECT_ID", self.firebase_project_id),
                    ("FIREBASE_STORAGE_BUCKET", self.firebase_storage_bucket),
                    ("SMTP_USER", self.smtp_user),
                    ("SMTP_PASS", self.smtp_pass.get_secret_value()),
                )
                if not value
            ]
            if missing:
                raise ValueError(
                    f"Missing required environment variables: {', '.join(missing)}. "
                    "Set them in the environment or .env file."
                )
        if self.storage_backend not in _STORAGE_BACKENDS:
            raise ValueError(
                f"Invalid storage_backend '{self.storage_backend}'. "
                f"Must be one of: {', '.join(_STORAGE_BACKENDS)}"
            )
        if self.storage_backend == "s3" and not self.s3_bucket:
            raise ValueError(
                "s3_bucket is required when storage_backend is 's3'. "
                "Set S3_BUCKET environment variable or update .env file."
            )
        if self.invite_consistency_policy not in _CONSISTENCY_POLICIES:
            raise ValueError(
                "INVITE_CONSISTENCY_POLICY must be 'best_effort' or 'compensate', "
                f"got: {self.invite_consistency_policy!r}"
            )
        if self.notification_failure_policy not in _NOTIFICATION_POLICIES:
            raise ValueError(
                "NOTIFICATION_FAILURE_POLICY must be 'log' or 'raise', "
                f"got: {self.notification_failure_policy!r}"
            )
        return self


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings (single instance per process).

    Validation runs on first call, not at import time. In tests, call
    get_settings.cache_clear() before overriding env vars so the next
    get_settings() uses the new values.

    Returns:
        Loaded and validated Settings instance.
    """
    return Settings()
