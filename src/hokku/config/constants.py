"""Constants and defaults for hokku.

Limits applied to incoming payloads, sanitizer character sets and the
filesystem modes used for persisted files.
"""

from typing import Final, FrozenSet


class PayloadLimits:
    """Default validation limits for webhook payloads."""

    MAX_TITLE_LENGTH: Final[int] = 64
    MAX_DESC_LENGTH: Final[int] = 512
    MAX_SOURCE_LENGTH: Final[int] = 128
    MAX_TYPE_LENGTH: Final[int] = 32
    MAX_DATA_SIZE: Final[int] = 5 * 1024 * 1024     # 5MB for data field
    MAX_NESTING_DEPTH: Final[int] = 5
    MAX_STRING_LENGTH: Final[int] = 10000
    MAX_ARRAY_LENGTH: Final[int] = 1000
    MAX_OBJECT_KEYS: Final[int] = 100
    MAX_KEY_LENGTH: Final[int] = 100


class StorageDefaults:
    """Default storage configuration."""

    STORAGE_PATH: Final[str] = "./storage"
    MAX_FILE_SIZE: Final[int] = 10 * 1024 * 1024    # 10MB
    MAX_FILE_SIZE_CEILING: Final[int] = 100 * 1024 * 1024
    CAPACITY_FACTOR: Final[int] = 2
    FILE_EXTENSION: Final[str] = "json"
    FALLBACK_NAME: Final[str] = "webhook"
    TITLE_PREFIX_LENGTH: Final[int] = 32
    TEMP_FILE_PREFIX: Final[str] = ".tmp-webhook-"
    DIRECTORY_MODE: Final[int] = 0o755
    FILE_MODE: Final[int] = 0o644
    TIMESTAMP_FORMAT: Final[str] = "%Y-%m-%d_%H-%M-%S"


class SecurityLimits:
    """Sanitizer limits."""

    MAX_FILENAME_LENGTH: Final[int] = 255
    MAX_PATH_LENGTH: Final[int] = 4096
    MAX_EXTENSION_LENGTH: Final[int] = 10
    MIN_RANDOM_BYTES: Final[int] = 8
    PLACEHOLDER: Final[str] = "_"


DEFAULT_ALLOWED_EXTENSIONS: Final[FrozenSet[str]] = frozenset(
    {"json", "txt", "log", "csv", "xml", "yaml", "yml"}
)

# System-owned metadata names that submitters may not spoof through `data`
DEFAULT_RESERVED_FIELD_NAMES: Final[FrozenSet[str]] = frozenset(
    {"id", "timestamp", "title", "description", "source", "type"}
)

# Legacy device names that some filesystems refuse as file names
RESERVED_DEVICE_NAMES: Final[FrozenSet[str]] = frozenset(
    {"CON", "PRN", "AUX", "NUL"}
    | {f"COM{i}" for i in range(1, 10)}
    | {f"LPT{i}" for i in range(1, 10)}
)

DANGEROUS_IDENTIFIER_CHARS: Final[str] = "<>\"'&;|"

# Whitespace allowed inside free text; every other control character is unsafe
ALLOWED_CONTROL_CHARS: Final[FrozenSet[str]] = frozenset({"\t", "\n", "\r"})
