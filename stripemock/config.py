"""Configuration loading for the stripemock fake payment API.

This module provides centralized configuration management:
- Load settings from environment variables and .env files
- Validate configuration using pydantic
- Provide typed access to all settings
"""

from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment.

    Every variable is read with the STRIPEMOCK_ prefix, e.g.
    STRIPEMOCK_ID_PREFIX.
    """

    model_config = SettingsConfigDict(
        env_prefix="STRIPEMOCK_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Record configuration
    id_prefix: str = Field(
        default="test",
        description="Prefix of generated ids (<prefix>_<type>_<n>)",
    )
    schema_path: str = Field(
        default="",
        description="Optional JSON file with extra or replacement resource schemas",
    )

    # HTTP shim configuration
    api_base_url: str = Field(
        default="https://api.stripe.com",
        description="Base URL clients are configured with; requests never leave the process",
    )

    # Logging configuration
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Log level",
    )
    log_format: Literal["json", "text"] = Field(
        default="text",
        description="Log format",
    )

    @field_validator("id_prefix")
    @classmethod
    def validate_id_prefix(cls, v: str) -> str:
        """Ensure generated ids have a usable prefix."""
        v = v.strip()
        if not v:
            raise ValueError("id_prefix must be a non-empty string")
        if any(c.isspace() for c in v):
            raise ValueError("id_prefix must not contain whitespace")
        return v

    @field_validator("api_base_url")
    @classmethod
    def validate_api_base_url(cls, v: str) -> str:
        """Ensure the base URL is absolute and has no trailing slash."""
        if not v.startswith(("http://", "https://")):
            raise ValueError("api_base_url must start with http:// or https://")
        return v.rstrip("/")


def load_settings(env_file: str | None = None) -> Settings:
    """Load application settings from environment.

    Args:
        env_file: Optional path to .env file. If not provided,
                 uses the default .env in the current directory.

    Returns:
        Validated Settings instance.

    Raises:
        ValidationError: If settings validation fails.
    """
    if env_file:
        return Settings(_env_file=env_file)  # type: ignore[call-arg]
    return Settings()


__all__ = ["Settings", "load_settings"]
