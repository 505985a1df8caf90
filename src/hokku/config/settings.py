"""
Environment-driven settings for hokku.

Settings are read once at startup from `HOKKU_*` environment variables (or a
`.env` file) and turned into an immutable ValidationPolicy that is passed by
reference into every core call.
"""
import os
from functools import lru_cache
from typing import Any, List, Optional, Union

from pydantic import Field, SecretStr, ValidationError, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..core.exceptions import ConfigurationError
from ..models.policy import ValidationPolicy
from .constants import (
    DEFAULT_ALLOWED_EXTENSIONS,
    DEFAULT_RESERVED_FIELD_NAMES,
    PayloadLimits,
    StorageDefaults,
)


def _split_csv(value: Any) -> Any:
    """Accept comma-separated strings for list settings."""
    if isinstance(value, str):
        return [part.strip() for part in value.split(",") if part.strip()]
    return value


class HokkuSettings(BaseSettings):
    """Application settings for the webhook persistence service."""

    model_config = SettingsConfigDict(
        env_prefix="HOKKU_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Service
    app_name: str = Field(default="hokku")
    environment: str = Field(default="development")
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=8080)
    auth_token: Optional[SecretStr] = Field(default=None)

    # Storage
    storage_path: str = Field(default=StorageDefaults.STORAGE_PATH)
    max_file_size: int = Field(default=StorageDefaults.MAX_FILE_SIZE)
    allowed_extensions: Union[List[str], str] = Field(
        default_factory=lambda: sorted(DEFAULT_ALLOWED_EXTENSIONS)
    )

    # Payload limits
    max_title_length: int = Field(default=PayloadLimits.MAX_TITLE_LENGTH)
    max_desc_length: int = Field(default=PayloadLimits.MAX_DESC_LENGTH)
    max_source_length: int = Field(default=PayloadLimits.MAX_SOURCE_LENGTH)
    max_type_length: int = Field(default=PayloadLimits.MAX_TYPE_LENGTH)
    max_data_size: int = Field(default=PayloadLimits.MAX_DATA_SIZE)
    max_nesting_depth: int = Field(default=PayloadLimits.MAX_NESTING_DEPTH)
    max_string_length: int = Field(default=PayloadLimits.MAX_STRING_LENGTH)
    max_array_length: int = Field(default=PayloadLimits.MAX_ARRAY_LENGTH)
    max_object_keys: int = Field(default=PayloadLimits.MAX_OBJECT_KEYS)
    max_key_length: int = Field(default=PayloadLimits.MAX_KEY_LENGTH)
    reserved_field_names: Union[List[str], str] = Field(
        default_factory=lambda: sorted(DEFAULT_RESERVED_FIELD_NAMES)
    )

    @field_validator("allowed_extensions", "reserved_field_names", mode="before")
    @classmethod
    def split_lists(cls, v):
        return _split_csv(v)

    @field_validator("storage_path")
    @classmethod
    def resolve_storage_path(cls, v: str) -> str:
        """Storage path must be present and is made absolute."""
        if not v or not v.strip():
            raise ValueError("storage path cannot be empty")
        return os.path.abspath(v)

    @field_validator("max_file_size")
    @classmethod
    def check_max_file_size(cls, v: int) -> int:
        if v <= 0:
            raise ValueError(f"max file size must be positive, got {v}")
        if v > StorageDefaults.MAX_FILE_SIZE_CEILING:
            raise ValueError(f"max file size too large: {v} bytes (max 100MB)")
        return v

    @field_validator("port")
    @classmethod
    def check_port(cls, v: int) -> int:
        if v <= 0 or v > 65535:
            raise ValueError(f"invalid port number: {v} (must be 1-65535)")
        return v

    @field_validator("max_title_length")
    @classmethod
    def check_title_length(cls, v: int) -> int:
        if v <= 0 or v > 1024:
            raise ValueError(f"invalid max title length: {v} (must be 1-1024)")
        return v

    @field_validator("max_desc_length")
    @classmethod
    def check_desc_length(cls, v: int) -> int:
        if v < 0 or v > 4096:
            raise ValueError(f"invalid max description length: {v} (must be 0-4096)")
        return v

    @field_validator(
        "max_data_size",
        "max_source_length",
        "max_type_length",
        "max_nesting_depth",
        "max_string_length",
        "max_array_length",
        "max_object_keys",
        "max_key_length",
    )
    @classmethod
    def check_positive(cls, v: int, info) -> int:
        if v <= 0:
            raise ValueError(f"{info.field_name} must be positive, got {v}")
        return v

    @field_validator("allowed_extensions")
    @classmethod
    def check_extensions(cls, v: List[str]) -> List[str]:
        for ext in v:
            if not ext:
                raise ValueError("empty extension in allowed extensions list")
            if "." in ext:
                raise ValueError(f"extension should not contain dot: {ext}")
        return [ext.lower() for ext in v]

    @model_validator(mode="after")
    def check_production_token(self) -> "HokkuSettings":
        if self.is_production and not self.auth_token:
            raise ValueError("auth token is required in production environment")
        return self

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment.lower() == "production"

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.environment.lower() == "development"

    def get_auth_token(self) -> Optional[str]:
        """Return the configured bearer token, if any."""
        return self.auth_token.get_secret_value() if self.auth_token else None

    def to_policy(self) -> ValidationPolicy:
        """Build the immutable policy passed into every core call."""
        return ValidationPolicy.from_settings(self)


def load_settings(**overrides: Any) -> HokkuSettings:
    """Load settings from the environment, applying explicit overrides.

    Raises:
        ConfigurationError: if any setting is missing or out of range
    """
    try:
        return HokkuSettings(**overrides)
    except ValidationError as e:
        raise ConfigurationError(
            f"Invalid hokku configuration: {e.error_count()} error(s)",
            details={"errors": [
                {"field": ".".join(str(p) for p in err["loc"]), "message": err["msg"]}
                for err in e.errors()
            ]},
        ) from e


@lru_cache()
def get_settings() -> HokkuSettings:
    """Get the process-wide settings instance (cached)."""
    return load_settings()
