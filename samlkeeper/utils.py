"""
Utility functions used across the samlkeeper codebase.

Timestamp helpers keep the on-disk expiration format identical to what
JavaScript's Date.toISOString() emits, since other tools share the file.
"""

from datetime import datetime, timezone


def to_utc(value: datetime) -> datetime:
    """
    Normalize a datetime to timezone-aware UTC.

    Naive datetimes are assumed to already be in UTC.
    """
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def format_expiration(value: datetime) -> str:
    """
    Format an expiration timestamp for the credentials file.

    Args:
        value: Expiration timestamp (naive values are treated as UTC)

    Returns:
        ISO-8601 string with millisecond precision and a 'Z' suffix
        (e.g., '2024-05-01T12:00:00.000Z')
    """
    return to_utc(value).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_expiration(value: str) -> datetime:
    """
    Parse an ISO-8601 expiration read from the credentials file.

    Accepts both 'Z' and explicit offset suffixes.

    Raises:
        ValueError: If the value is not an ISO-8601 timestamp
    """
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    return to_utc(datetime.fromisoformat(text))
