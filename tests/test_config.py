"""
Test settings loading and logging configuration.
"""

import logging
import os

import pytest

from hokku.config import LoggingConfig, get_settings, load_settings
from hokku.config.logging_config import get_log_level_from_verbosity
from hokku.core.exceptions import ConfigurationError
from hokku.models import ValidationPolicy


class TestSettings:
    """HokkuSettings defaults, environment parsing and range checks."""

    def test_defaults(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        settings = load_settings(_env_file=None)

        assert settings.port == 8080
        assert settings.max_file_size == 10 * 1024 * 1024
        assert settings.storage_path == os.path.join(str(tmp_path), "storage")
        assert settings.is_development
        assert settings.get_auth_token() is None

    def test_environment_variables(self, monkeypatch, tmp_path):
        monkeypatch.setenv("HOKKU_STORAGE_PATH", str(tmp_path / "hooks"))
        monkeypatch.setenv("HOKKU_PORT", "9090")
        monkeypatch.setenv("HOKKU_MAX_NESTING_DEPTH", "3")
        monkeypatch.setenv("HOKKU_ALLOWED_EXTENSIONS", "json, TXT")
        monkeypatch.setenv("HOKKU_AUTH_TOKEN", "s3cret")

        settings = load_settings(_env_file=None)

        assert settings.storage_path == str(tmp_path / "hooks")
        assert settings.port == 9090
        assert settings.max_nesting_depth == 3
        assert settings.allowed_extensions == ["json", "txt"]
        assert settings.get_auth_token() == "s3cret"
        assert "s3cret" not in repr(settings)

    def test_relative_storage_path_made_absolute(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        settings = load_settings(storage_path="data", _env_file=None)
        assert settings.storage_path == os.path.join(str(tmp_path), "data")

    @pytest.mark.parametrize(
        "overrides",
        [
            {"storage_path": ""},
            {"storage_path": "   "},
            {"max_file_size": 0},
            {"max_file_size": 100 * 1024 * 1024 + 1},
            {"port": 0},
            {"port": 70000},
            {"max_title_length": 0},
            {"max_title_length": 1025},
            {"max_desc_length": -1},
            {"max_desc_length": 4097},
            {"max_data_size": 0},
            {"max_nesting_depth": 0},
            {"max_string_length": -5},
            {"max_array_length": 0},
            {"max_object_keys": 0},
            {"max_key_length": 0},
            {"allowed_extensions": [".json"]},
            {"allowed_extensions": ["json", ""]},
        ],
    )
    def test_invalid_values(self, overrides):
        with pytest.raises(ConfigurationError) as exc_info:
            load_settings(_env_file=None, **overrides)
        assert exc_info.value.details["errors"]

    def test_edge_values_accepted(self, storage_root):
        settings = load_settings(
            storage_path=storage_root,
            max_file_size=100 * 1024 * 1024,
            port=65535,
            max_title_length=1024,
            max_desc_length=0,
            _env_file=None,
        )
        assert settings.max_desc_length == 0

    def test_production_requires_token(self, storage_root):
        with pytest.raises(ConfigurationError):
            load_settings(storage_path=storage_root, environment="production", _env_file=None)

        settings = load_settings(
            storage_path=storage_root, environment="production", auth_token="t", _env_file=None
        )
        assert settings.is_production

    def test_to_policy(self, storage_root):
        settings = load_settings(
            storage_path=storage_root,
            max_title_length=10,
            reserved_field_names="id,Secret",
            _env_file=None,
        )
        policy = settings.to_policy()

        assert isinstance(policy, ValidationPolicy)
        assert policy.storage_root == storage_root
        assert policy.max_title_length == 10
        assert policy.reserved_field_names == frozenset({"id", "secret"})
        assert policy.required_free_space == 2 * settings.max_file_size

    def test_get_settings_is_cached(self, monkeypatch, tmp_path):
        monkeypatch.chdir(tmp_path)
        assert get_settings() is get_settings()


class TestValidationPolicy:
    """Policy normalization."""

    def test_normalizes_sets(self, storage_root):
        policy = ValidationPolicy(
            storage_root=storage_root,
            allowed_extensions=frozenset({".JSON", "txt"}),
            reserved_field_names=frozenset({"ID"}),
        )
        assert policy.allowed_extensions == frozenset({"json", "txt"})
        assert policy.is_extension_allowed(".json")
        assert policy.is_extension_allowed("TXT")
        assert not policy.is_extension_allowed("exe")
        assert policy.is_reserved_field("id")

    def test_empty_root(self):
        with pytest.raises(ValueError):
            ValidationPolicy(storage_root="")

    def test_immutable(self, policy):
        with pytest.raises(AttributeError):
            policy.max_title_length = 1


class TestLoggingConfig:
    """Environment-driven logging setup."""

    def test_verbosity_mapping(self):
        assert get_log_level_from_verbosity("quiet") == "ERROR"
        assert get_log_level_from_verbosity("NORMAL") == "WARNING"
        assert get_log_level_from_verbosity("verbose") == "INFO"
        assert get_log_level_from_verbosity("debug") == "DEBUG"
        assert get_log_level_from_verbosity("nonsense") == "WARNING"

    def test_explicit_level_wins(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "debug")
        monkeypatch.setenv("LOG_VERBOSITY", "QUIET")
        assert LoggingConfig.build()["loggers"]["hokku"]["level"] == "DEBUG"

    def test_invalid_level_falls_back_to_verbosity(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "LOUD")
        monkeypatch.setenv("LOG_VERBOSITY", "VERBOSE")
        assert LoggingConfig.build()["loggers"]["hokku"]["level"] == "INFO"

    def test_json_format(self, monkeypatch):
        monkeypatch.setenv("LOG_FORMAT", "json")
        config = LoggingConfig.build()
        assert config["formatters"]["default"]["format"].startswith('{"time"')

    def test_noisy_modules_error_only(self, monkeypatch):
        monkeypatch.delenv("LOG_LEVEL", raising=False)
        config = LoggingConfig.build()
        assert config["loggers"]["httpx"]["level"] == "ERROR"

    def test_configure_applies_level(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "ERROR")
        LoggingConfig.configure()
        assert logging.getLogger("hokku").level == logging.ERROR

        monkeypatch.setenv("LOG_LEVEL", "WARNING")
        LoggingConfig.configure()
        assert logging.getLogger("hokku").level == logging.WARNING
