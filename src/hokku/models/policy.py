"""Validation policy value object.

ONLY validation policy - the immutable set of limits that governs payload
validation and storage. Built once at startup and passed by reference into
every validate/persist call.
"""

import os
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, FrozenSet, Iterable

from ..config.constants import (
    DEFAULT_ALLOWED_EXTENSIONS,
    DEFAULT_RESERVED_FIELD_NAMES,
    PayloadLimits,
    StorageDefaults,
)

if TYPE_CHECKING:
    from ..config.settings import HokkuSettings


@dataclass(frozen=True)
class ValidationPolicy:
    """Immutable limits for validation and storage.

    Set-valued fields are normalized to lower-case frozensets so membership
    checks are case-insensitive.
    """

    storage_root: str
    max_file_size: int = StorageDefaults.MAX_FILE_SIZE
    max_title_length: int = PayloadLimits.MAX_TITLE_LENGTH
    max_desc_length: int = PayloadLimits.MAX_DESC_LENGTH
    max_source_length: int = PayloadLimits.MAX_SOURCE_LENGTH
    max_type_length: int = PayloadLimits.MAX_TYPE_LENGTH
    max_data_size: int = PayloadLimits.MAX_DATA_SIZE
    max_nesting_depth: int = PayloadLimits.MAX_NESTING_DEPTH
    max_string_length: int = PayloadLimits.MAX_STRING_LENGTH
    max_array_length: int = PayloadLimits.MAX_ARRAY_LENGTH
    max_object_keys: int = PayloadLimits.MAX_OBJECT_KEYS
    max_key_length: int = PayloadLimits.MAX_KEY_LENGTH
    allowed_extensions: FrozenSet[str] = field(default=DEFAULT_ALLOWED_EXTENSIONS)
    reserved_field_names: FrozenSet[str] = field(default=DEFAULT_RESERVED_FIELD_NAMES)

    def __post_init__(self):
        """Normalize paths and name sets."""
        if not self.storage_root:
            raise ValueError("storage_root cannot be empty")
        object.__setattr__(self, "storage_root", os.path.abspath(self.storage_root))
        object.__setattr__(self, "allowed_extensions", _normalize(self.allowed_extensions, strip_dot=True))
        object.__setattr__(self, "reserved_field_names", _normalize(self.reserved_field_names))

    @classmethod
    def from_settings(cls, settings: "HokkuSettings") -> "ValidationPolicy":
        """Create the policy from loaded settings."""
        return cls(
            storage_root=settings.storage_path,
            max_file_size=settings.max_file_size,
            max_title_length=settings.max_title_length,
            max_desc_length=settings.max_desc_length,
            max_source_length=settings.max_source_length,
            max_type_length=settings.max_type_length,
            max_data_size=settings.max_data_size,
            max_nesting_depth=settings.max_nesting_depth,
            max_string_length=settings.max_string_length,
            max_array_length=settings.max_array_length,
            max_object_keys=settings.max_object_keys,
            max_key_length=settings.max_key_length,
            allowed_extensions=frozenset(settings.allowed_extensions),
            reserved_field_names=frozenset(settings.reserved_field_names),
        )

    def is_extension_allowed(self, extension: str) -> bool:
        """Check an extension (with or without leading dot) against the allow list."""
        return extension.lstrip(".").lower() in self.allowed_extensions

    def is_reserved_field(self, name: str) -> bool:
        """Check a top-level data key against the reserved names, ignoring case."""
        return name.lower() in self.reserved_field_names

    @property
    def required_free_space(self) -> int:
        """Free bytes the storage root must have before accepting writes."""
        return self.max_file_size * StorageDefaults.CAPACITY_FACTOR


def _normalize(values: Iterable[str], strip_dot: bool = False) -> FrozenSet[str]:
    if strip_dot:
        return frozenset(v.strip().lstrip(".").lower() for v in values if v.strip())
    return frozenset(v.strip().lower() for v in values if v.strip())
