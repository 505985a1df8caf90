"""Text safety checks shared by the validators."""

from ..config.constants import ALLOWED_CONTROL_CHARS


def is_valid_encoding(value: str) -> bool:
    """True when the string can be encoded as UTF-8 (no lone surrogates)."""
    try:
        value.encode("utf-8")
    except UnicodeEncodeError:
        return False
    return True


def contains_unsafe_characters(value: str) -> bool:
    """True for NUL bytes and control characters other than tab, LF and CR."""
    for char in value:
        if ord(char) < 32 and char not in ALLOWED_CONTROL_CHARS:
            return True
    return False
