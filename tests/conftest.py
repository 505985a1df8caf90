"""Pytest configuration and fixtures for hokku tests."""

import os

import pytest

from hokku.config.settings import get_settings, load_settings
from hokku.models import ValidationPolicy, WebhookPayload


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Keep HOKKU_* variables from the host out of the tests."""
    for name in list(os.environ):
        if name.startswith("HOKKU_"):
            monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def storage_root(tmp_path):
    """Storage root that does not exist yet."""
    return str(tmp_path / "storage")


@pytest.fixture
def policy(storage_root):
    """Default policy rooted in a temporary directory."""
    return ValidationPolicy(storage_root=storage_root)


@pytest.fixture
def make_payload():
    """Factory for valid payloads; keyword arguments override fields."""
    def _make(**overrides):
        fields = {
            "title": "Order created",
            "description": "Order 1042 was placed",
            "data": {"order_id": 1042, "items": [{"sku": "A-1", "qty": 2}]},
            "source": "shop.example.com",
            "type": "order.created",
        }
        fields.update(overrides)
        return WebhookPayload(**fields)

    return _make


@pytest.fixture
def settings(storage_root):
    """Development settings pointing at the temporary storage root."""
    return load_settings(storage_path=storage_root, _env_file=None)


@pytest.fixture
def nested():
    """Builder for {"l1": {"l2": ... {"l<depth>": leaf}}}."""
    def _nested(depth, leaf="v"):
        value = leaf
        for level in range(depth, 0, -1):
            value = {f"l{level}": value}
        return value

    return _nested
