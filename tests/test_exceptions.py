"""
Test the exception hierarchy and HTTP mapping.
"""

import pytest

from hokku.core.exceptions import (
    AuthenticationError,
    ConfigurationError,
    ErrorKind,
    HokkuError,
    InsufficientSpaceError,
    PayloadValidationError,
    SecurityError,
    StorageError,
    create_error_response,
    get_http_status_code,
)


class TestHokkuError:
    """Base error behaviour."""

    def test_error_code_defaults(self):
        assert HokkuError("boom").error_code == "HokkuError"
        assert HokkuError("boom", kind=ErrorKind.WRITE_FAILED).error_code == "WriteFailed"
        assert HokkuError("boom", error_code="Custom", kind=ErrorKind.WRITE_FAILED).error_code == "Custom"

    def test_to_dict(self):
        error = SecurityError("bad path", ErrorKind.PATH_TRAVERSAL, path="../x")
        assert error.to_dict() == {
            "code": "PathTraversal",
            "kind": "PathTraversal",
            "message": "bad path",
            "details": {"path": "../x"},
            "type": "SecurityError",
        }

    def test_create_error_response(self):
        error = ConfigurationError("missing")
        assert create_error_response(error) == {"error": error.to_dict()}

    def test_kinds_are_strings(self):
        assert ErrorKind.NESTING_TOO_DEEP == "NestingTooDeep"
        assert len({kind.value for kind in ErrorKind}) == len(list(ErrorKind))


class TestDomainErrors:
    """Context carried by each domain error."""

    def test_validation_error(self):
        error = PayloadValidationError("title", "title is required", ErrorKind.MISSING_REQUIRED_FIELD)
        assert error.message == "validation failed for field title: title is required"
        assert error.details == {"field": "title", "reason": "title is required"}

    def test_storage_error(self):
        error = StorageError("disk full", ErrorKind.WRITE_FAILED, operation="write", path="/s/a.json")
        assert error.message == "file write failed for /s/a.json: disk full"
        assert error.details["operation"] == "write"

    def test_storage_error_without_path(self):
        error = StorageError("nope", ErrorKind.RENAME_FAILED, operation="rename")
        assert "<unknown>" in error.message

    def test_insufficient_space(self):
        error = InsufficientSpaceError(10, 20, path="/s")
        assert isinstance(error, StorageError)
        assert error.kind == ErrorKind.INSUFFICIENT_DISK_SPACE
        assert error.details["available_bytes"] == 10
        assert error.details["required_bytes"] == 20

    def test_cause_is_preserved(self):
        try:
            try:
                raise OSError("low level")
            except OSError as e:
                raise StorageError("wrapped", ErrorKind.WRITE_FAILED, operation="write") from e
        except StorageError as wrapped:
            assert isinstance(wrapped.__cause__, OSError)


class TestHttpMapping:
    """Status codes for API responses."""

    @pytest.mark.parametrize(
        "error, status",
        [
            (PayloadValidationError("data", "x", ErrorKind.NESTING_TOO_DEEP), 400),
            (SecurityError("x", ErrorKind.PATH_TRAVERSAL), 400),
            (AuthenticationError("x"), 401),
            (ConfigurationError("x"), 500),
            (StorageError("x", ErrorKind.FILE_TOO_LARGE, operation="size check"), 413),
            (InsufficientSpaceError(1, 2), 507),
            (StorageError("x", ErrorKind.PATH_TRAVERSAL, operation="path validation"), 400),
            (StorageError("x", ErrorKind.RENAME_FAILED, operation="rename"), 500),
            (StorageError("x", ErrorKind.DIRECTORY_CREATE_FAILED, operation="create directory"), 500),
            (HokkuError("x"), 500),
            (RuntimeError("x"), 500),
        ],
    )
    def test_status_codes(self, error, status):
        assert get_http_status_code(error) == status
