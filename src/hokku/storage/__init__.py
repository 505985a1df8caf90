"""Atomic file persistence engine."""

from .file_store import FileStore, check_capacity, create_file_store, persist_payload

__all__ = [
    "FileStore",
    "check_capacity",
    "create_file_store",
    "persist_payload",
]
