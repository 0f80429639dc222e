"""Pydantic settings models for UniFi API configuration."""

from __future__ import annotations

import os
from typing import Any, Dict, Literal, Optional, Tuple, Type

import yaml
from pydantic import Field, field_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from unifi_api.store import DEFAULT_AUTH_FILE


class YamlConfigSettingsSource(PydanticBaseSettingsSource):
    """Custom settings source that loads values from a YAML file.

    The YAML file path is determined by the CONFIG_PATH environment variable.
    """

    def get_field_value(
        self, field: Any, field_name: str
    ) -> Tuple[Any, str, bool]:
        """Get field value from YAML config."""
        yaml_config = self._load_yaml_config()
        field_value = yaml_config.get(field_name)
        return field_value, field_name, False

    def _load_yaml_config(self) -> Dict[str, Any]:
        """Load YAML configuration file."""
        config_path = os.environ.get("CONFIG_PATH")
        if not config_path:
            return {}

        try:
            with open(config_path) as f:
                data = yaml.safe_load(f)
                return data if isinstance(data, dict) else {}
        except (FileNotFoundError, yaml.YAMLError, PermissionError):
            # Errors will be handled by loader.py
            return {}

    def __call__(self) -> Dict[str, Any]:
        """Return the YAML config values."""
        return self._load_yaml_config()


class UnifiSettings(BaseSettings):
    """UniFi API configuration settings.

    Credentials are not configured here; they live in the auth file named
    by ``auth_file``.

    Configuration is loaded in the following precedence (highest to lowest):
    1. Constructor arguments (CLI flags)
    2. Environment variables (UNIFI_ prefix)
    3. .env file
    4. YAML configuration file (via CONFIG_PATH)
    5. Default values
    """

    model_config = SettingsConfigDict(
        env_prefix="UNIFI_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    auth_file: str = Field(
        default=str(DEFAULT_AUTH_FILE),
        description="Path to the auth file holding credentials and session cookies",
    )
    site: str = Field(
        default="default",
        description="UniFi site name",
    )
    verify_ssl: bool = Field(
        default=False,
        description="Verify the controller's TLS certificate (controllers ship self-signed certs)",
    )
    timeout: Optional[float] = Field(
        default=None,
        description="Request timeout in seconds (unset keeps the HTTP client default)",
        gt=0,
    )

    log_level: str = Field(
        default="INFO",
        description="Logging level: DEBUG, INFO, WARNING, ERROR",
    )
    log_format: Literal["json", "text"] = Field(
        default="text",
        description="Log output format: json (production) or text (development)",
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: Type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> Tuple[PydanticBaseSettingsSource, ...]:
        """Customize settings sources to set precedence.

        Order (first = highest priority):
        1. init_settings (constructor arguments)
        2. env_settings (environment variables with UNIFI_ prefix)
        3. dotenv_settings (.env file)
        4. yaml_settings (CONFIG_PATH YAML file)
        """
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            YamlConfigSettingsSource(settings_cls),
        )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate and normalize log level."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "WARN", "ERROR", "CRITICAL"}
        normalized = v.upper()
        if normalized == "WARN":
            normalized = "WARNING"
        if normalized not in valid_levels:
            raise ValueError(
                f"Invalid log level '{v}'. Must be one of: DEBUG, INFO, WARNING, ERROR"
            )
        return normalized

    @field_validator("site")
    @classmethod
    def validate_site(cls, v: str) -> str:
        """Validate site is not empty."""
        if not v or not v.strip():
            raise ValueError("Site cannot be empty")
        return v.strip()
