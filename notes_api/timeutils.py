"""
Notes API - Timestamp Helpers
=============================

All timestamps handled by the API are UTC and carry millisecond precision.
Cursors serialize `created_at` with millisecond precision, so stored values
are truncated the same way at write time; otherwise a row at
`12:00:00.123456` would compare greater than a cursor decoded as
`12:00:00.123` and reappear on the next page.
"""

from datetime import datetime, timezone


def truncate_to_millis(value: datetime) -> datetime:
    """Drop sub-millisecond precision."""
    return value.replace(microsecond=(value.microsecond // 1000) * 1000)


def ensure_utc(value: datetime) -> datetime:
    """
    Return `value` as an aware UTC datetime.

    SQLite hands back naive datetimes; they were written as UTC, so the
    timezone is attached rather than converted.
    """
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def utcnow_ms() -> datetime:
    """Current UTC time at millisecond precision. Default repository clock."""
    return truncate_to_millis(datetime.now(timezone.utc))


def isoformat_ms(value: datetime) -> str:
    """Format as ISO-8601 UTC with milliseconds and a `Z` suffix."""
    text = ensure_utc(value).isoformat(timespec="milliseconds")
    return text.replace("+00:00", "Z")
