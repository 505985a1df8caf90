"""Utilities module for hokku."""

from .uuid import generate_uuid_v4, is_valid_uuid
from .timezone import (
    Timer,
    ensure_utc,
    format_duration,
    from_utc_string,
    to_utc_string,
    utc_now,
)

__all__ = [
    # UUID Generation
    "generate_uuid_v4",
    "is_valid_uuid",
    # Timezone Utilities
    "utc_now",
    "ensure_utc",
    "to_utc_string",
    "from_utc_string",
    "format_duration",
    "Timer",
]
