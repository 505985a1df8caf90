"""Sanitized name value object.

ONLY sanitized names - a string proven safe to use as a single filesystem
name component.

Following maximum separation architecture - one file = one purpose.
"""

from dataclasses import dataclass

from ..config.constants import RESERVED_DEVICE_NAMES, SecurityLimits


@dataclass(frozen=True)
class SanitizedName:
    """File name guaranteed safe for use under a storage root.

    Invariants:
    - no path separator (`/` or `\\`)
    - no NUL or other control character
    - not an unprefixed legacy device name (CON, NUL, COM1, ...)
    - at most 255 bytes when encoded as UTF-8
    """

    value: str

    def __post_init__(self):
        if not isinstance(self.value, str) or not self.value:
            raise ValueError("SanitizedName must be a non-empty string")
        if "/" in self.value or "\\" in self.value:
            raise ValueError("SanitizedName cannot contain a path separator")
        if any(ord(char) < 32 for char in self.value):
            raise ValueError("SanitizedName cannot contain control characters")
        if self.value.split(".", 1)[0].upper() in RESERVED_DEVICE_NAMES:
            raise ValueError(f"SanitizedName cannot be a reserved device name: {self.value}")
        size = len(self.value.encode("utf-8", "surrogatepass"))
        if size > SecurityLimits.MAX_FILENAME_LENGTH:
            raise ValueError(
                f"SanitizedName too long: {size} bytes > {SecurityLimits.MAX_FILENAME_LENGTH}"
            )

    @property
    def extension(self) -> str:
        """Extension without the dot, or an empty string."""
        if "." not in self.value:
            return ""
        return self.value.rsplit(".", 1)[1]

    def __len__(self) -> int:
        return len(self.value)

    def __str__(self) -> str:
        return self.value

    def __repr__(self) -> str:
        return f"SanitizedName('{self.value}')"
