"""Configuration for hokku: settings, logging and constants."""

from .constants import (
    DEFAULT_ALLOWED_EXTENSIONS,
    DEFAULT_RESERVED_FIELD_NAMES,
    RESERVED_DEVICE_NAMES,
    PayloadLimits,
    SecurityLimits,
    StorageDefaults,
)
from .logging_config import LoggingConfig, get_logger, setup_logging
from .settings import HokkuSettings, get_settings, load_settings

__all__ = [
    "DEFAULT_ALLOWED_EXTENSIONS",
    "DEFAULT_RESERVED_FIELD_NAMES",
    "RESERVED_DEVICE_NAMES",
    "PayloadLimits",
    "SecurityLimits",
    "StorageDefaults",
    "LoggingConfig",
    "get_logger",
    "setup_logging",
    "HokkuSettings",
    "get_settings",
    "load_settings",
]
