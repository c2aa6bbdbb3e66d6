"""
UTC datetime utilities for consistent timezone handling.

All datetime values in the system should be timezone-aware UTC.
Use these helpers instead of datetime.now() or datetime.utcnow().
"""

from datetime import UTC, date, datetime, time, timedelta


def utc_now() -> datetime:
    """
    Return the current UTC datetime with timezone info.

    Use this instead of:
        - datetime.now() - naive, uses local timezone
        - datetime.utcnow() - naive, deprecated in Python 3.12

    Returns:
        Timezone-aware datetime in UTC
    """
    return datetime.now(UTC)


def ensure_utc(dt: datetime | None) -> datetime | None:
    """
    Ensure a datetime is UTC-aware.

    - If None, returns None
    - If naive, assumes UTC and attaches timezone
    - If aware, converts to UTC

    Use at persistence boundaries to normalize datetimes.

    Args:
        dt: A datetime that may be naive or aware

    Returns:
        UTC-aware datetime or None
    """
    if dt is None:
        return None

    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)

    return dt.astimezone(UTC)


def parse_datetime(value: str | date | datetime) -> datetime:
    """
    Parse an ISO 8601 string (or date/datetime) into a UTC-aware datetime.

    Accepts a trailing "Z" and bare dates ("2024-05-01" becomes midnight UTC).

    Args:
        value: ISO string, date or datetime

    Returns:
        UTC-aware datetime

    Raises:
        TypeError: If value is not a string, date or datetime
        ValueError: If the string is not a valid ISO date/datetime
    """
    if isinstance(value, datetime):
        return ensure_utc(value)  # type: ignore[return-value]
    if isinstance(value, date):
        return datetime.combine(value, time.min, tzinfo=UTC)
    if not isinstance(value, str):
        raise TypeError(f"Expected an ISO date string, got {type(value).__name__}")
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    return ensure_utc(datetime.fromisoformat(text))  # type: ignore[return-value]


def days_ago(days: int) -> datetime:
    """Return the UTC datetime `days` days before now."""
    return utc_now() - timedelta(days=days)


def month_key(dt: datetime) -> str:
    """Return a "YYYY-MM" bucket key for a datetime."""
    return f"{dt.year:04d}-{dt.month:02d}"


def month_range(year: int, month: int) -> tuple[datetime, datetime]:
    """
    Return [start, end) UTC bounds of a calendar month.

    Args:
        year: Four-digit year
        month: Month number 1-12

    Returns:
        (first instant of the month, first instant of the next month)
    """
    start = datetime(year, month, 1, tzinfo=UTC)
    if month == 12:
        end = datetime(year + 1, 1, 1, tzinfo=UTC)
    else:
        end = datetime(year, month + 1, 1, tzinfo=UTC)
    return start, end


def year_range(year: int) -> tuple[datetime, datetime]:
    """Return [start, end) UTC bounds of a calendar year."""
    return datetime(year, 1, 1, tzinfo=UTC), datetime(year + 1, 1, 1, tzinfo=UTC)
