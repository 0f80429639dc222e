"""Configuration management for UniFi API."""

from unifi_api.config.loader import ConfigurationError, load_config
from unifi_api.config.settings import UnifiSettings

__all__ = [
    "ConfigurationError",
    "UnifiSettings",
    "load_config",
]
