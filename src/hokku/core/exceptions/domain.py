"""Domain-specific exceptions for hokku.

Validation, sanitization, storage, configuration and authentication errors.
Each one records the context needed to report the failure: the offending
field, the filesystem operation or the path involved.
"""

from typing import Any, Dict, Optional

from .base import ErrorKind, HokkuError


class PayloadValidationError(HokkuError):
    """Raised when a payload fails structural, content or business validation."""

    def __init__(
        self,
        field: str,
        reason: str,
        kind: ErrorKind,
        details: Optional[Dict[str, Any]] = None,
    ):
        enhanced_details = dict(details or {})
        enhanced_details["field"] = field
        enhanced_details["reason"] = reason
        super().__init__(
            message=f"validation failed for field {field}: {reason}",
            details=enhanced_details,
            kind=kind,
        )
        self.field = field
        self.reason = reason


class SecurityError(HokkuError):
    """Raised when an untrusted name or path is rejected by the sanitizer."""

    def __init__(
        self,
        message: str,
        kind: ErrorKind,
        path: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        enhanced_details = dict(details or {})
        if path is not None:
            enhanced_details["path"] = path
        super().__init__(message=message, details=enhanced_details, kind=kind)
        self.path = path


class StorageError(HokkuError):
    """Raised when persisting a payload to the filesystem fails."""

    def __init__(
        self,
        message: str,
        kind: ErrorKind,
        operation: str,
        path: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        enhanced_details = dict(details or {})
        enhanced_details["operation"] = operation
        if path is not None:
            enhanced_details["path"] = path
        super().__init__(
            message=f"file {operation} failed for {path or '<unknown>'}: {message}",
            details=enhanced_details,
            kind=kind,
        )
        self.operation = operation
        self.path = path


class InsufficientSpaceError(StorageError):
    """Raised when the storage root has less free space than required."""

    def __init__(self, available_bytes: int, required_bytes: int, path: Optional[str] = None):
        super().__init__(
            message=f"available {available_bytes} bytes < required {required_bytes} bytes",
            kind=ErrorKind.INSUFFICIENT_DISK_SPACE,
            operation="capacity check",
            path=path,
            details={
                "available_bytes": available_bytes,
                "required_bytes": required_bytes,
            },
        )
        self.available_bytes = available_bytes
        self.required_bytes = required_bytes


class ConfigurationError(HokkuError):
    """Raised when there's a configuration issue."""
    pass


class AuthenticationError(HokkuError):
    """Raised when a request carries missing or invalid credentials."""
    pass
