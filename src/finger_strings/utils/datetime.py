"""Datetime utilities with consistent timezone handling.

Completion timestamps are stored timezone-aware in the local zone, and
"today" is always the local calendar day, since that is the day the user
plans around.
"""

from datetime import date, datetime, timezone
from typing import Optional

LEGACY_TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S %z"


def now_local() -> datetime:
    """Return the current datetime, timezone-aware in the local zone.

    Returns:
        Current datetime with the local UTC offset attached
    """
    return datetime.now().astimezone()


def ensure_aware(dt: Optional[datetime]) -> Optional[datetime]:
    """Ensure datetime is timezone-aware, assuming UTC if naive.

    Args:
        dt: Datetime to check/convert, or None

    Returns:
        Timezone-aware datetime, or None if input was None
    """
    if dt is None:
        return None

    if dt.tzinfo is None:
        # Naive datetime - assume UTC
        return dt.replace(tzinfo=timezone.utc)

    return dt


def min_utc() -> datetime:
    """Return datetime.min with UTC timezone for sorting fallbacks."""
    return datetime.min.replace(tzinfo=timezone.utc)


def to_iso_string(dt: Optional[datetime]) -> Optional[str]:
    """Convert datetime to ISO string with timezone info.

    Args:
        dt: Datetime to convert, or None

    Returns:
        ISO format string with timezone, or None if input was None
    """
    if dt is None:
        return None

    return ensure_aware(dt).isoformat()


def parse_iso_datetime(value: Optional[str]) -> Optional[datetime]:
    """Parse a stored timestamp, making it timezone-aware.

    Accepts ISO-8601 and the ``2024-01-02 10:00:00 -0500`` form written by
    the predecessor script.

    Raises:
        ValueError: If the value is in neither format
    """
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        parsed = datetime.strptime(value, LEGACY_TIMESTAMP_FORMAT)
    return ensure_aware(parsed)


def parse_iso_date(value: Optional[str]) -> Optional[date]:
    """Parse a ``YYYY-MM-DD`` string.

    Raises:
        ValueError: If the value is not an ISO date
    """
    if not value:
        return None
    return date.fromisoformat(value)
