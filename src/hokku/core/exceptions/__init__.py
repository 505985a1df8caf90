"""Exceptions module for hokku.

This module provides the complete exception hierarchy for hokku and the
helpers that map it onto HTTP responses.
"""

from .base import (
    ErrorKind,
    HokkuError,
    create_error_response,
)

from .domain import (
    PayloadValidationError,
    SecurityError,
    StorageError,
    InsufficientSpaceError,
    ConfigurationError,
    AuthenticationError,
)

from .http_mapping import (
    HTTP_STATUS_MAP,
    get_http_status_code,
)

__all__ = [
    # Base
    "ErrorKind",
    "HokkuError",
    "create_error_response",

    # Domain
    "PayloadValidationError",
    "SecurityError",
    "StorageError",
    "InsufficientSpaceError",
    "ConfigurationError",
    "AuthenticationError",

    # HTTP mapping
    "HTTP_STATUS_MAP",
    "get_http_status_code",
]
