"""
Test atomic file persistence.
"""

import json
import os
import re
import stat
import threading
from collections import namedtuple

import pytest

from hokku.core.exceptions import ErrorKind, InsufficientSpaceError, StorageError
from hokku.models import PersistenceResult, ValidationPolicy, WebhookPayload
from hokku.storage import FileStore, check_capacity, create_file_store, persist_payload
from hokku.utils.uuid import is_valid_uuid

DiskUsage = namedtuple("DiskUsage", ["total", "used", "free"])

FILENAME_PATTERN = re.compile(
    r"\d{4}-\d{2}-\d{2}_\d{2}-\d{2}-\d{2}_[0-9a-f-]{36}_.+\.json"
)


def leftover_temp_files(directory):
    return [name for name in os.listdir(directory) if name.startswith(".tmp-webhook-")]


class TestPersist:
    """Happy path persistence."""

    def test_round_trip(self, policy, make_payload):
        payload = make_payload()
        result = persist_payload(payload, policy)

        assert isinstance(result, PersistenceResult)
        with open(result.path, encoding="utf-8") as handle:
            document = json.load(handle)

        assert document["title"] == payload.title
        assert document["description"] == payload.description
        assert document["data"] == payload.data
        assert document["source"] == payload.source
        assert document["type"] == payload.type
        assert document["id"] == payload.identifier
        assert document["timestamp"].endswith("Z")
        assert WebhookPayload.from_dict(document) == payload

    def test_minimal_document(self, policy):
        result = persist_payload(WebhookPayload(title="Hello", data={"a": 1}), policy)
        with open(result.path, encoding="utf-8") as handle:
            text = handle.read()

        assert '"title": "Hello"' in text
        document = json.loads(text)
        assert list(document) == ["title", "data", "id", "timestamp"]

    def test_two_space_indent_utf8(self, policy):
        result = persist_payload(WebhookPayload(title="Café", data={"emoji": "☕"}), policy)
        with open(result.path, "rb") as handle:
            raw = handle.read()

        assert b'\n  "title": "Caf\xc3\xa9"' in raw
        assert result.size == len(raw)

    def test_assigns_metadata(self, policy, make_payload):
        payload = make_payload()
        result = persist_payload(payload, policy)

        assert is_valid_uuid(payload.identifier, version=4)
        assert payload.created_at is not None
        assert result.identifier == payload.identifier

    def test_keeps_existing_metadata(self, policy, make_payload):
        payload = make_payload()
        payload.ensure_metadata()
        identifier, created_at = payload.identifier, payload.created_at

        persist_payload(payload, policy)
        assert payload.identifier == identifier
        assert payload.created_at == created_at

    def test_filename_convention(self, policy, make_payload):
        payload = make_payload(title="Order created")
        result = persist_payload(payload, policy)

        assert FILENAME_PATTERN.fullmatch(result.filename)
        assert payload.identifier in result.filename
        assert result.filename.endswith("_Order_created.json")
        assert result.filename.startswith(payload.created_at.strftime("%Y-%m-%d_%H-%M-%S"))

    def test_title_prefix_is_cut(self, policy):
        result = persist_payload(WebhookPayload(title="t" * 60, data={"a": 1}), policy)
        assert result.filename.endswith("_" + "t" * 32 + ".json")

    def test_unsanitizable_title_falls_back(self, policy):
        result = persist_payload(WebhookPayload(title="///", data={"a": 1}), policy)
        assert result.filename.endswith("_webhook.json")

    def test_path_is_absolute_and_inside_root(self, policy, make_payload):
        result = persist_payload(make_payload(), policy)

        assert os.path.isabs(result.path)
        assert os.path.dirname(result.path) == policy.storage_root
        assert os.path.basename(result.path) == result.filename

    def test_traversal_title_stays_inside_root(self, policy):
        result = persist_payload(WebhookPayload(title="../../etc/passwd", data={"a": 1}), policy)

        assert "/" not in result.filename
        assert ".." not in result.filename
        assert os.path.dirname(result.path) == policy.storage_root
        assert os.listdir(policy.storage_root) == [result.filename]

    def test_permissions(self, policy, make_payload):
        result = persist_payload(make_payload(), policy)

        assert stat.S_IMODE(os.stat(result.path).st_mode) == 0o644
        assert stat.S_IMODE(os.stat(policy.storage_root).st_mode) == 0o755

    def test_creates_nested_root(self, tmp_path, make_payload):
        policy = ValidationPolicy(storage_root=str(tmp_path / "a" / "b" / "c"))
        result = persist_payload(make_payload(), policy)
        assert os.path.isfile(result.path)

    def test_no_temp_files_left(self, policy, make_payload):
        persist_payload(make_payload(), policy)
        assert leftover_temp_files(policy.storage_root) == []

    def test_factory(self, policy):
        store = create_file_store(policy)
        assert isinstance(store, FileStore)
        assert store.storage_root == policy.storage_root

    def test_float_round_trip(self, policy):
        data = {"price": 19.99, "ratio": -0.125, "huge": 1e308, "tiny": 5e-324, "count": 3}
        payload = WebhookPayload(title="Floats", data=data)
        result = persist_payload(payload, policy)

        with open(result.path, encoding="utf-8") as handle:
            text = handle.read()

        def reject_constant(token):
            raise ValueError(f"non-standard JSON token {token}")

        document = json.loads(text, parse_constant=reject_constant)
        assert document["data"] == data


class TestUniqueness:
    """Distinct payloads never share a path."""

    def test_sequential(self, policy, make_payload):
        paths = {persist_payload(make_payload(), policy).path for _ in range(50)}
        assert len(paths) == 50
        assert len(os.listdir(policy.storage_root)) == 50

    def test_concurrent_threads(self, policy, make_payload):
        store = FileStore(policy)
        results = []
        errors = []
        lock = threading.Lock()

        def worker():
            try:
                for _ in range(10):
                    result = store.persist(make_payload())
                    with lock:
                        results.append(result)
            except Exception as e:  # noqa: BLE001
                with lock:
                    errors.append(e)

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert errors == []
        assert len({r.path for r in results}) == 80
        assert len(os.listdir(policy.storage_root)) == 80
        for result in results:
            with open(result.path, encoding="utf-8") as handle:
                assert json.load(handle)["id"] == result.identifier


class TestFailures:
    """Typed errors and cleanup on failure."""

    def test_file_too_large(self, storage_root):
        policy = ValidationPolicy(storage_root=storage_root, max_file_size=100)
        with pytest.raises(StorageError) as exc_info:
            persist_payload(WebhookPayload(title="X", data={"a": "x" * 200}), policy)

        assert exc_info.value.kind == ErrorKind.FILE_TOO_LARGE
        assert not os.path.exists(storage_root) or os.listdir(storage_root) == []

    def test_directory_blocked_by_file(self, tmp_path, make_payload):
        blocker = tmp_path / "storage"
        blocker.write_text("not a directory")
        policy = ValidationPolicy(storage_root=str(blocker))

        with pytest.raises(StorageError) as exc_info:
            persist_payload(make_payload(), policy)
        assert exc_info.value.kind == ErrorKind.DIRECTORY_CREATE_FAILED

    def test_rename_failure_removes_temp_file(self, policy, make_payload, monkeypatch):
        def failing_replace(src, dst):
            raise OSError("rename refused")

        monkeypatch.setattr("hokku.storage.file_store.os.replace", failing_replace)

        with pytest.raises(StorageError) as exc_info:
            persist_payload(make_payload(), policy)

        assert exc_info.value.kind == ErrorKind.RENAME_FAILED
        assert exc_info.value.operation == "rename"
        assert isinstance(exc_info.value.__cause__, OSError)
        assert os.listdir(policy.storage_root) == []

    def test_write_failure_removes_temp_file(self, policy, make_payload, monkeypatch):
        def failing_fsync(fd):
            raise OSError("disk on fire")

        monkeypatch.setattr("hokku.storage.file_store.os.fsync", failing_fsync)

        with pytest.raises(StorageError) as exc_info:
            persist_payload(make_payload(), policy)

        assert exc_info.value.kind == ErrorKind.WRITE_FAILED
        assert os.listdir(policy.storage_root) == []

    @pytest.mark.parametrize("value", [float("nan"), float("inf"), float("-inf")])
    def test_non_finite_number_not_written(self, policy, value):
        with pytest.raises(StorageError) as exc_info:
            persist_payload(WebhookPayload(title="X", data={"a": value}), policy)

        assert exc_info.value.kind == ErrorKind.WRITE_FAILED
        assert exc_info.value.operation == "serialize"
        assert not os.path.exists(policy.storage_root)

    @pytest.mark.parametrize("value", [{1, 2}, object(), "bad\udc80"])
    def test_unserializable_data(self, policy, value):
        with pytest.raises(StorageError) as exc_info:
            persist_payload(WebhookPayload(title="X", data={"a": value}), policy)

        error = exc_info.value
        assert error.kind == ErrorKind.WRITE_FAILED
        assert error.operation == "serialize"
        assert error.path.startswith(policy.storage_root)
        assert isinstance(error.__cause__, (TypeError, ValueError))

    def test_disallowed_extension(self, storage_root, make_payload):
        policy = ValidationPolicy(storage_root=storage_root, allowed_extensions=frozenset({"txt"}))
        with pytest.raises(StorageError) as exc_info:
            persist_payload(make_payload(), policy)
        assert exc_info.value.kind == ErrorKind.INVALID_NAME

    def test_error_message_has_context(self, storage_root):
        policy = ValidationPolicy(storage_root=storage_root, max_file_size=10)
        with pytest.raises(StorageError) as exc_info:
            persist_payload(WebhookPayload(title="X", data={"a": 1}), policy)
        assert exc_info.value.message.startswith("file size check failed for ")
        assert exc_info.value.path.startswith(storage_root)


class TestCapacity:
    """Advisory free-space preflight."""

    def test_enough_space(self, policy, monkeypatch):
        monkeypatch.setattr(
            "hokku.storage.file_store.shutil.disk_usage",
            lambda path: DiskUsage(total=10 ** 12, used=0, free=10 ** 12),
        )
        assert check_capacity(policy) == 10 ** 12

    def test_exactly_twice_max_file_size(self, policy, monkeypatch):
        required = policy.max_file_size * 2
        monkeypatch.setattr(
            "hokku.storage.file_store.shutil.disk_usage",
            lambda path: DiskUsage(total=required, used=0, free=required),
        )
        assert check_capacity(policy) == required

    def test_insufficient_space(self, policy, monkeypatch):
        monkeypatch.setattr(
            "hokku.storage.file_store.shutil.disk_usage",
            lambda path: DiskUsage(total=10 ** 9, used=10 ** 9 - 1024, free=1024),
        )
        with pytest.raises(InsufficientSpaceError) as exc_info:
            check_capacity(policy)

        error = exc_info.value
        assert error.kind == ErrorKind.INSUFFICIENT_DISK_SPACE
        assert error.available_bytes == 1024
        assert error.required_bytes == policy.max_file_size * 2

    def test_creates_root(self, policy, monkeypatch):
        monkeypatch.setattr(
            "hokku.storage.file_store.shutil.disk_usage",
            lambda path: DiskUsage(total=10 ** 12, used=0, free=10 ** 12),
        )
        assert not os.path.exists(policy.storage_root)
        FileStore(policy).check_capacity()
        assert os.path.isdir(policy.storage_root)
