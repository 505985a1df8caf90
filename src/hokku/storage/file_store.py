"""Atomic file persistence for webhook payloads.

Each payload is written to a unique temp file in the target directory,
flushed to disk and then renamed over its final name, so readers only ever
see complete files. Temp files never outlive a failed write.
"""

import json
import logging
import os
import shutil
import tempfile

from ..config.constants import StorageDefaults
from ..core.exceptions import (
    ErrorKind,
    InsufficientSpaceError,
    SecurityError,
    StorageError,
)
from ..models.payload import WebhookPayload
from ..models.policy import ValidationPolicy
from ..models.results import PersistenceResult
from ..security import generate_random_name, is_secure_path, sanitize_name
from ..utils.timezone import ensure_utc

logger = logging.getLogger(__name__)


class FileStore:
    """Persists validated payloads as JSON files under the policy's storage root."""

    def __init__(self, policy: ValidationPolicy):
        self._policy = policy

    @property
    def storage_root(self) -> str:
        return self._policy.storage_root

    def persist(self, payload: WebhookPayload) -> PersistenceResult:
        """Write `payload` atomically and return where it landed.

        Assigns the identifier and timestamp if the payload has none.

        Raises:
            StorageError: with kind FileTooLarge, DirectoryCreateFailed,
                WriteFailed, RenameFailed, or the sanitizer's kind when the
                computed path is rejected
        """
        payload.ensure_metadata()

        filename = self._build_filename(payload)
        path = os.path.join(self.storage_root, filename)

        self._check_path(path, filename)

        content = self._serialize(payload, path)
        if len(content) > self._policy.max_file_size:
            raise StorageError(
                f"content size {len(content)} bytes exceeds limit {self._policy.max_file_size} bytes",
                ErrorKind.FILE_TOO_LARGE,
                operation="size check",
                path=path,
                details={"size": len(content), "limit": self._policy.max_file_size},
            )

        self.ensure_directory(os.path.dirname(path))
        self._write_atomically(path, content)

        logger.info(f"Persisted webhook {payload.identifier} to {path} ({len(content)} bytes)")
        return PersistenceResult(
            path=os.path.abspath(path),
            size=len(content),
            filename=filename,
            identifier=payload.identifier,
        )

    def check_capacity(self) -> int:
        """Check that the storage root has room for at least two maximum-size files.

        Returns:
            Available bytes

        Raises:
            InsufficientSpaceError: when free space is below the requirement
            StorageError: when the root cannot be created or inspected
        """
        root = self.storage_root
        self.ensure_directory(root)

        try:
            available = shutil.disk_usage(root).free
        except OSError as e:
            raise StorageError(
                f"cannot read filesystem stats: {e}",
                ErrorKind.INSUFFICIENT_DISK_SPACE,
                operation="capacity check",
                path=root,
            ) from e

        required = self._policy.required_free_space
        if available < required:
            logger.warning(f"Storage {root} low on space: {available} < {required} bytes")
            raise InsufficientSpaceError(available, required, path=root)

        return available

    def ensure_directory(self, directory: str) -> None:
        """Create `directory` and its parents with mode 0755 if missing."""
        if os.path.isdir(directory):
            return

        try:
            os.makedirs(directory, mode=StorageDefaults.DIRECTORY_MODE, exist_ok=True)
            os.chmod(directory, StorageDefaults.DIRECTORY_MODE)
        except OSError as e:
            raise StorageError(
                str(e), ErrorKind.DIRECTORY_CREATE_FAILED, operation="create directory", path=directory
            ) from e

        logger.debug(f"Created storage directory {directory}")

    def _build_filename(self, payload: WebhookPayload) -> str:
        timestamp = ensure_utc(payload.created_at).strftime(StorageDefaults.TIMESTAMP_FORMAT)

        try:
            prefix = str(sanitize_name(payload.title))[: StorageDefaults.TITLE_PREFIX_LENGTH]
        except SecurityError:
            prefix = StorageDefaults.FALLBACK_NAME

        candidate = f"{timestamp}_{payload.identifier}_{prefix}.{StorageDefaults.FILE_EXTENSION}"
        try:
            return str(sanitize_name(candidate))
        except SecurityError as e:
            logger.warning(f"Falling back to random filename for {payload.identifier}: {e.message}")
            return str(
                generate_random_name(StorageDefaults.FALLBACK_NAME, StorageDefaults.FILE_EXTENSION)
            )

    def _check_path(self, path: str, filename: str) -> None:
        extension = filename.rpartition(".")[2] if "." in filename else ""
        if not self._policy.is_extension_allowed(extension):
            raise StorageError(
                f"extension {extension!r} not allowed",
                ErrorKind.INVALID_NAME,
                operation="path validation",
                path=path,
            )

        try:
            is_secure_path(path, self.storage_root)
        except SecurityError as e:
            raise StorageError(e.message, e.kind, operation="path validation", path=path) from e

    @staticmethod
    def _serialize(payload: WebhookPayload, path: str) -> bytes:
        try:
            return json.dumps(
                payload.to_dict(), indent=2, ensure_ascii=False, allow_nan=False
            ).encode("utf-8")
        except (TypeError, ValueError, RecursionError) as e:
            # UnicodeEncodeError (lone surrogates) is a ValueError
            raise StorageError(
                f"cannot serialize payload to JSON: {e}",
                ErrorKind.WRITE_FAILED,
                operation="serialize",
                path=path,
            ) from e

    def _write_atomically(self, path: str, content: bytes) -> None:
        directory = os.path.dirname(path)

        try:
            fd, temp_path = tempfile.mkstemp(prefix=StorageDefaults.TEMP_FILE_PREFIX, dir=directory)
        except OSError as e:
            raise StorageError(
                f"cannot create temp file: {e}", ErrorKind.WRITE_FAILED, operation="write", path=path
            ) from e

        try:
            try:
                with os.fdopen(fd, "wb") as handle:
                    handle.write(content)
                    handle.flush()
                    os.fsync(handle.fileno())
                os.chmod(temp_path, StorageDefaults.FILE_MODE)
            except OSError as e:
                raise StorageError(str(e), ErrorKind.WRITE_FAILED, operation="write", path=path) from e

            try:
                os.replace(temp_path, path)
            except OSError as e:
                raise StorageError(str(e), ErrorKind.RENAME_FAILED, operation="rename", path=path) from e
        except StorageError:
            _remove_quietly(temp_path)
            raise

        _sync_directory(directory)


def _remove_quietly(path: str) -> None:
    try:
        os.remove(path)
    except FileNotFoundError:
        pass
    except OSError as e:
        logger.warning(f"Failed to remove temp file {path}: {e}")


def _sync_directory(directory: str) -> None:
    """Flush the directory entry after a rename. Not supported everywhere."""
    try:
        dir_fd = os.open(directory, os.O_RDONLY)
    except OSError as e:
        logger.debug(f"Cannot open {directory} for fsync: {e}")
        return
    try:
        os.fsync(dir_fd)
    except OSError as e:
        logger.debug(f"Directory fsync failed for {directory}: {e}")
    finally:
        os.close(dir_fd)


def create_file_store(policy: ValidationPolicy) -> FileStore:
    """Create file store."""
    return FileStore(policy)


def persist_payload(payload: WebhookPayload, policy: ValidationPolicy) -> PersistenceResult:
    """Persist `payload` under `policy.storage_root`; see FileStore.persist."""
    return FileStore(policy).persist(payload)


def check_capacity(policy: ValidationPolicy) -> int:
    """Return free bytes at the storage root, or raise InsufficientSpaceError."""
    return FileStore(policy).check_capacity()
