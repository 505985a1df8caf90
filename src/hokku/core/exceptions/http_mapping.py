"""HTTP status code mapping for exceptions.

Maps hokku exceptions to HTTP status codes for the API layer. Storage errors
are mapped by kind so that client-side problems (an oversized payload) are
told apart from server-side ones (a failed rename).
"""

from typing import Dict

from .base import ErrorKind
from .domain import (
    AuthenticationError,
    ConfigurationError,
    PayloadValidationError,
    SecurityError,
    StorageError,
)


HTTP_STATUS_MAP = {
    PayloadValidationError: 400,
    SecurityError: 400,
    AuthenticationError: 401,
    ConfigurationError: 500,
    StorageError: 500,
}

STORAGE_KIND_STATUS_MAP: Dict[ErrorKind, int] = {
    ErrorKind.FILE_TOO_LARGE: 413,
    ErrorKind.INSUFFICIENT_DISK_SPACE: 507,
    ErrorKind.PATH_TRAVERSAL: 400,
    ErrorKind.UNSAFE_CHARACTERS: 400,
    ErrorKind.INVALID_NAME: 400,
    ErrorKind.EMPTY_INPUT: 400,
    ErrorKind.PATH_TOO_LONG: 400,
}


def get_http_status_code(exception: Exception) -> int:
    """Get HTTP status code for an exception.

    Args:
        exception: The exception instance

    Returns:
        HTTP status code, 500 for anything unknown
    """
    if isinstance(exception, StorageError) and exception.kind in STORAGE_KIND_STATUS_MAP:
        return STORAGE_KIND_STATUS_MAP[exception.kind]

    for exc_type in type(exception).__mro__:
        if exc_type in HTTP_STATUS_MAP:
            return HTTP_STATUS_MAP[exc_type]

    return 500
