"""Environment-based configuration using pydantic-settings.

Provides type-safe, validated configuration from environment variables
with sensible defaults. Supports .env files.

Example:
    >>> from mcpgate.foundation.config import get_settings
    >>> settings = get_settings()
    >>> settings.server.port
    3000
    >>> settings.logging.level
    'INFO'

    # Or with environment variables:
    # MCP_PORT=8080
    # MCP_API_KEY=s3cret
    # LOG_LEVEL=DEBUG
"""

from __future__ import annotations

from functools import lru_cache
from typing import Annotated, Literal

from pydantic import Field, SecretStr, computed_field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from mcpgate.foundation.errors import ConfigurationError

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class ServerSettings(BaseSettings):
    """Protocol server and HTTP listener configuration."""

    model_config = SettingsConfigDict(
        env_prefix="MCP_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    host: str = "0.0.0.0"
    port: Annotated[int, Field(ge=1, le=65535)] = 3000
    api_key: SecretStr | None = Field(default=None, description="Shared bearer token for /mcp")
    name: str = Field(default="mcpgate", description="Server name reported to protocol clients")
    version: str = "1.0.0"
    json_response: bool = Field(default=True, description="Answer POST /mcp with JSON instead of an SSE stream")

    @field_validator("api_key", mode="before")
    @classmethod
    def _blank_is_unset(cls, v: object) -> object:
        """Treat an empty MCP_API_KEY the same as a missing one."""
        return None if isinstance(v, str) and not v.strip() else v


class LoggingSettings(BaseSettings):
    """Logging configuration."""

    model_config = SettingsConfigDict(
        env_prefix="LOG_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    level: LogLevel = "INFO"
    format: Literal["console", "json"] = "console"

    @field_validator("level", mode="before")
    @classmethod
    def _normalize_level(cls, v: str) -> str:
        """Accept lowercase level names (LOG_LEVEL=debug)."""
        return v.upper() if isinstance(v, str) else v


class Settings(BaseSettings):
    """Root settings for mcpgate.

    Loads configuration from environment variables and an optional .env file.

    Example environment variables:
        MCP_TRANSPORT=http
        MCP_HOST=127.0.0.1
        MCP_PORT=3000
        MCP_API_KEY=change-me
        LOG_LEVEL=DEBUG
        LOG_FORMAT=json
    """

    model_config = SettingsConfigDict(
        env_prefix="MCP_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        validate_default=True,
    )

    transport: Literal["stdio", "http"] = "stdio"

    # Nested settings (loaded with MCP_ and LOG_ prefixes)
    server: ServerSettings = Field(default_factory=ServerSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    @field_validator("transport", mode="before")
    @classmethod
    def _normalize_transport(cls, v: str) -> str:
        return v.lower() if isinstance(v, str) else v

    @computed_field
    @property
    def auth_enabled(self) -> bool:
        """Whether a bearer token is configured."""
        return self.server.api_key is not None

    def require_api_key(self) -> str:
        """Return the configured bearer token or fail fast."""
        if self.server.api_key is None:
            raise ConfigurationError(
                "MCP_API_KEY is not set. Server requires a Bearer token for authentication. "
                "Set MCP_API_KEY in your environment or .env file."
            )
        return self.server.api_key.get_secret_value()


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get the global settings instance (cached)."""
    return Settings()


def clear_settings_cache() -> None:
    """Clear the settings cache (useful for testing).

    After calling this, the next get_settings() call will
    reload configuration from environment.
    """
    get_settings.cache_clear()
