"""Tests for application settings."""

import pytest
from pydantic import ValidationError

from src.config.settings import Settings


def test_defaults(settings):
    assert settings.gateway_mode == "local"
    assert settings.result_cache_ttl_ms == 300_000
    assert settings.search_page_size == 10
    assert settings.default_cross_timeout_ms == 30_000


def test_log_level_is_normalised():
    assert Settings(log_level="debug").log_level == "DEBUG"


def test_invalid_log_level():
    with pytest.raises(ValidationError):
        Settings(log_level="chatty")


def test_gateway_mode_is_normalised():
    assert Settings(gateway_mode="LOCAL").gateway_mode == "local"


def test_invalid_gateway_mode():
    with pytest.raises(ValidationError):
        Settings(gateway_mode="ftp")


def test_remote_mode_requires_base_url():
    with pytest.raises(ValidationError):
        Settings(gateway_mode="remote", registry_base_url="")


@pytest.mark.parametrize(
    "field", ["result_cache_ttl_ms", "result_cache_max_size", "search_page_size", "registry_timeout"]
)
def test_limits_must_be_positive(field):
    with pytest.raises(ValidationError):
        Settings(**{field: 0})


def test_settings_read_environment(monkeypatch):
    monkeypatch.setenv("RESULT_CACHE_TTL_MS", "1000")
    monkeypatch.setenv("GATEWAY_MODE", "local")
    assert Settings().result_cache_ttl_ms == 1000
