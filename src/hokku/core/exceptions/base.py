"""Base exceptions for hokku.

This module defines the root of the hokku exception hierarchy. Every error
carries a machine-readable kind, an error code and a details dictionary so
callers can log it or surface it to an end user without parsing messages.
"""

from enum import Enum
from typing import Any, Dict, Optional


class ErrorKind(str, Enum):
    """Categories of failure reported by the core."""

    EMPTY_INPUT = "EmptyInput"
    INVALID_ENCODING = "InvalidEncoding"
    UNSAFE_CHARACTERS = "UnsafeCharacters"
    PATH_TRAVERSAL = "PathTraversal"
    PATH_TOO_LONG = "PathTooLong"
    INVALID_NAME = "InvalidName"
    NAME_TOO_LONG = "NameTooLong"
    NESTING_TOO_DEEP = "NestingTooDeep"
    STRING_TOO_LONG = "StringTooLong"
    ARRAY_TOO_LONG = "ArrayTooLong"
    TOO_MANY_KEYS = "TooManyKeys"
    INVALID_KEY = "InvalidKey"
    UNSUPPORTED_VALUE_TYPE = "UnsupportedValueType"
    DATA_TOO_LARGE = "DataTooLarge"
    RESERVED_FIELD_NAME = "ReservedFieldName"
    INVALID_SOURCE_OR_TYPE_FORMAT = "InvalidSourceOrTypeFormat"
    MISSING_REQUIRED_FIELD = "MissingRequiredField"
    INVALID_PAYLOAD = "InvalidPayload"
    FILE_TOO_LARGE = "FileTooLarge"
    INSUFFICIENT_DISK_SPACE = "InsufficientDiskSpace"
    DIRECTORY_CREATE_FAILED = "DirectoryCreateFailed"
    WRITE_FAILED = "WriteFailed"
    RENAME_FAILED = "RenameFailed"


class HokkuError(Exception):
    """Base exception for all hokku errors.

    All exceptions raised by hokku inherit from this class and include
    structured error information for debugging and API responses.
    """

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        kind: Optional[ErrorKind] = None,
    ):
        super().__init__(message)
        self.message = message
        self.kind = kind
        self.error_code = error_code or (kind.value if kind else self.__class__.__name__)
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Serialize the error for API responses and structured logs."""
        return {
            "code": self.error_code,
            "kind": self.kind.value if self.kind else None,
            "message": self.message,
            "details": self.details,
            "type": self.__class__.__name__,
        }


def create_error_response(exception: HokkuError) -> Dict[str, Any]:
    """Create standardized error response from exception.

    Args:
        exception: The hokku exception

    Returns:
        Error response dictionary
    """
    return {"error": exception.to_dict()}
