"""Security sanitizer: safe file names and path-traversal defense."""

from .paths import (
    PLACEHOLDER,
    generate_random_name,
    is_secure_path,
    sanitize_name,
    validate_path,
)
from .sanitized_name import SanitizedName

__all__ = [
    "PLACEHOLDER",
    "SanitizedName",
    "generate_random_name",
    "is_secure_path",
    "sanitize_name",
    "validate_path",
]
