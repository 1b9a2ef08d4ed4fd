"""
Timezone-aware datetime utilities.

All stored timestamps are UTC; wire timestamps are ISO-8601 strings.
"""

from datetime import datetime, timezone

# UTC timezone constant
UTC = timezone.utc


def now_utc() -> datetime:
    """
    Get current UTC datetime (timezone-aware).

    Replaces datetime.utcnow() which is deprecated in Python 3.12+.

    Returns:
        datetime: Current UTC time with tzinfo set to UTC
    """
    return datetime.now(UTC)


def now_iso() -> str:
    """Current UTC time as an ISO-8601 string with millisecond precision."""
    return now_utc().isoformat(timespec="milliseconds").replace("+00:00", "Z")
