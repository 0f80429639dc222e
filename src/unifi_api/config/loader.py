"""Configuration loading with YAML and environment override support."""

from __future__ import annotations

import os
from typing import Any, Dict, List, Optional

import yaml
from pydantic import ValidationError

from unifi_api.config.settings import UnifiSettings


class ConfigurationError(Exception):
    """Raised when configuration is invalid or cannot be loaded."""

    pass


def load_yaml_config(config_path: Optional[str] = None) -> Dict[str, Any]:
    """Load configuration from YAML file if specified.

    Args:
        config_path: Path to YAML config file. If None, checks CONFIG_PATH env var.

    Returns:
        Dict of configuration values from YAML, or empty dict if no file.
    """
    path = config_path or os.environ.get("CONFIG_PATH")

    if not path:
        return {}

    try:
        with open(path) as f:
            data = yaml.safe_load(f)
            return data if isinstance(data, dict) else {}
    except FileNotFoundError:
        raise ConfigurationError(
            f"Configuration file not found: {path}\n"
            "Ensure CONFIG_PATH points to a valid YAML file, or remove it to use environment variables only."
        )
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in configuration file {path}: {e}")
    except PermissionError:
        raise ConfigurationError(f"Cannot read configuration file {path}: permission denied")


def format_validation_errors(errors: List[Dict[str, Any]]) -> List[str]:
    """Format Pydantic validation errors into user-friendly messages."""
    messages: List[str] = []
    for error in errors:
        loc = ".".join(str(part) for part in error.get("loc", []))
        msg = error.get("msg", "Invalid value")
        input_val = error.get("input")

        if input_val is not None:
            messages.append(f"Configuration error: '{loc}' {msg}, got: {input_val}")
        else:
            messages.append(f"Configuration error: '{loc}' {msg}")

    return messages


def load_config(
    config_path: Optional[str] = None,
    **overrides: Any,
) -> UnifiSettings:
    """Load and validate configuration.

    Args:
        config_path: Optional path to YAML config file (sets CONFIG_PATH env).
        **overrides: Values that win over every other source (CLI flags).
            None values are ignored.

    Returns:
        Validated UnifiSettings instance.

    Raises:
        ConfigurationError: File cannot be read or validation fails.
    """
    if config_path:
        os.environ["CONFIG_PATH"] = config_path

    # Validate YAML file exists and is readable (gives better errors)
    # The actual loading happens in the pydantic settings source
    _ = load_yaml_config()

    init_values = {key: value for key, value in overrides.items() if value is not None}

    try:
        return UnifiSettings(**init_values)
    except ValidationError as e:
        raise ConfigurationError("\n".join(format_validation_errors(e.errors())))
