"""Tests for environment-based configuration."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from mcpgate.foundation.config import LoggingSettings, ServerSettings, Settings, clear_settings_cache, get_settings
from mcpgate.foundation.errors import ConfigurationError

_ENV = ("MCP_TRANSPORT", "MCP_HOST", "MCP_PORT", "MCP_API_KEY", "MCP_NAME", "MCP_VERSION",
        "MCP_JSON_RESPONSE", "LOG_LEVEL", "LOG_FORMAT")


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    for key in _ENV:
        monkeypatch.delenv(key, raising=False)
    # Keep a developer's .env out of the picture
    monkeypatch.chdir(tmp_path)


def test_defaults() -> None:
    settings = Settings()
    assert settings.transport == "stdio"
    assert settings.server.host == "0.0.0.0"
    assert settings.server.port == 3000
    assert settings.server.api_key is None
    assert settings.server.name == "mcpgate"
    assert settings.server.json_response is True
    assert settings.logging.level == "INFO"
    assert settings.logging.format == "console"
    assert settings.auth_enabled is False


def test_environment_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("MCP_TRANSPORT", "HTTP")
    monkeypatch.setenv("MCP_PORT", "8080")
    monkeypatch.setenv("MCP_API_KEY", "s3cret")
    monkeypatch.setenv("LOG_LEVEL", "debug")
    monkeypatch.setenv("LOG_FORMAT", "json")

    settings = Settings()
    assert settings.transport == "http"
    assert settings.server.port == 8080
    assert settings.require_api_key() == "s3cret"
    assert settings.auth_enabled is True
    assert settings.logging.level == "DEBUG"
    assert settings.logging.format == "json"


def test_api_key_is_not_printed(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("MCP_API_KEY", "s3cret")
    assert "s3cret" not in repr(ServerSettings())


def test_blank_api_key_is_unset(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("MCP_API_KEY", "   ")
    settings = Settings()
    assert settings.server.api_key is None
    with pytest.raises(ConfigurationError, match="MCP_API_KEY is not set"):
        settings.require_api_key()


def test_env_file(tmp_path) -> None:
    (tmp_path / ".env").write_text("MCP_API_KEY=from-file\nMCP_PORT=4000\n")
    settings = Settings()
    assert settings.server.port == 4000
    assert settings.require_api_key() == "from-file"


@pytest.mark.parametrize(("key", "value"), [("MCP_PORT", "0"), ("MCP_PORT", "70000"), ("MCP_TRANSPORT", "sse")])
def test_invalid_values(monkeypatch: pytest.MonkeyPatch, key: str, value: str) -> None:
    monkeypatch.setenv(key, value)
    with pytest.raises(ValidationError):
        Settings()


def test_invalid_log_level(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("LOG_LEVEL", "verbose")
    with pytest.raises(ValidationError):
        LoggingSettings()


def test_get_settings_is_cached(monkeypatch: pytest.MonkeyPatch) -> None:
    first = get_settings()
    assert get_settings() is first
    monkeypatch.setenv("MCP_PORT", "9000")
    assert get_settings().server.port == 3000
    clear_settings_cache()
    assert get_settings().server.port == 9000
