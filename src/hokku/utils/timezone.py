"""Timezone utilities for hokku.

All timestamps are UTC-aware; naive datetimes are treated as UTC.
"""

import time as time_module
from datetime import datetime, timezone


def utc_now() -> datetime:
    """
    Get current UTC datetime with timezone awareness.

    Returns:
        Current UTC datetime with timezone info
    """
    return datetime.now(timezone.utc)


def ensure_utc(dt: datetime) -> datetime:
    """
    Ensure datetime has UTC timezone.

    If datetime is naive (no timezone), assumes it's UTC and adds timezone info.
    If datetime has timezone, converts to UTC.
    """
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def to_utc_string(dt: datetime) -> str:
    """
    Convert datetime to an RFC 3339 UTC string with a `Z` suffix.

    Example: 2024-01-01T12:00:00.123456Z
    """
    return ensure_utc(dt).isoformat().replace("+00:00", "Z")


def from_utc_string(iso_string: str) -> datetime:
    """
    Parse an ISO 8601 / RFC 3339 string into a UTC datetime.

    Raises:
        ValueError: If string format is invalid
    """
    if iso_string.endswith("Z"):
        iso_string = iso_string[:-1] + "+00:00"
    return ensure_utc(datetime.fromisoformat(iso_string))


def format_duration(seconds: float) -> str:
    """
    Format duration in human-readable format.

    Examples:
        45.2 -> "45.2s", 125 -> "2m 5s", 3725 -> "1h 2m 5s"
    """
    if seconds < 60:
        return f"{seconds:.1f}s"
    elif seconds < 3600:
        minutes = int(seconds // 60)
        secs = int(seconds % 60)
        return f"{minutes}m {secs}s"
    else:
        hours = int(seconds // 3600)
        minutes = int((seconds % 3600) // 60)
        secs = int(seconds % 60)
        return f"{hours}h {minutes}m {secs}s"


class Timer:
    """Monotonic stopwatch measuring elapsed time since creation."""

    def __init__(self):
        self._start = time_module.monotonic()

    def elapsed_seconds(self) -> float:
        """Get elapsed time in seconds."""
        return time_module.monotonic() - self._start

    def elapsed_ms(self) -> int:
        """Get elapsed time in milliseconds."""
        return int(self.elapsed_seconds() * 1000)
