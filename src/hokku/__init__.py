"""Hokku - validated, atomic persistence of webhook payloads.

Incoming payloads are checked against a ValidationPolicy, given a
sanitized file name and written to the storage root with an atomic
temp-file-and-rename.
"""

# Initialize logging configuration on import
from .config.logging_config import setup_logging
setup_logging()

from .__version__ import __version__

from .config import (
    HokkuSettings,
    get_settings,
    load_settings,
)

from .core.exceptions import (
    ErrorKind,
    HokkuError,
    PayloadValidationError,
    SecurityError,
    StorageError,
    InsufficientSpaceError,
    ConfigurationError,
    AuthenticationError,
)

from .models import (
    PersistenceResult,
    ValidationPolicy,
    WebhookPayload,
)

from .security import (
    SanitizedName,
    generate_random_name,
    is_secure_path,
    sanitize_name,
    validate_path,
)

from .validation import (
    PayloadValidator,
    validate_payload,
)

from .storage import (
    FileStore,
    check_capacity,
    persist_payload,
)

from .services import (
    HealthService,
    IngestService,
)

__all__ = [
    "__version__",

    # Configuration
    "HokkuSettings",
    "get_settings",
    "load_settings",

    # Exceptions
    "ErrorKind",
    "HokkuError",
    "PayloadValidationError",
    "SecurityError",
    "StorageError",
    "InsufficientSpaceError",
    "ConfigurationError",
    "AuthenticationError",

    # Models
    "PersistenceResult",
    "ValidationPolicy",
    "WebhookPayload",

    # Security sanitizer
    "SanitizedName",
    "generate_random_name",
    "is_secure_path",
    "sanitize_name",
    "validate_path",

    # Validation
    "PayloadValidator",
    "validate_payload",

    # Persistence
    "FileStore",
    "check_capacity",
    "persist_payload",

    # Services
    "HealthService",
    "IngestService",
]
