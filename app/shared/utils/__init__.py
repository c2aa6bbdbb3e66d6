"""Shared utilities: datetime, generators, sanitization, formatting."""

from app.shared.utils.datetime import (
    days_ago,
    ensure_utc,
    month_key,
    month_range,
    parse_datetime,
    utc_now,
    year_range,
)
from app.shared.utils.generators import (
    generate_cuid,
    generate_random_password,
    generate_token,
)
from app.shared.utils.sanitization import (
    InputSanitizer,
    sanitize_text,
)

__all__ = [
    "generate_cuid",
    "generate_random_password",
    "generate_token",
    "utc_now",
    "ensure_utc",
    "parse_datetime",
    "days_ago",
    "month_key",
    "month_range",
    "year_range",
    "InputSanitizer",
    "sanitize_text",
]
