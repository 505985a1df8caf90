"""UUID utilities for hokku."""

import uuid
from typing import Optional


def generate_uuid_v4() -> str:
    """
    Generate a standard UUIDv4 (random).

    Returns:
        String representation of UUIDv4
    """
    return str(uuid.uuid4())


def is_valid_uuid(uuid_str: str, version: Optional[int] = None) -> bool:
    """
    Check if string is a valid UUID.

    Args:
        uuid_str: String to validate
        version: Optional specific version to check (4, 7, etc.)

    Returns:
        True if valid UUID, False otherwise
    """
    try:
        uuid_obj = uuid.UUID(uuid_str)

        if version is not None:
            return uuid_obj.version == version

        return True

    except (ValueError, TypeError, AttributeError):
        return False
