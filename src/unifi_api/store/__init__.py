"""Credential persistence: identity plus session cookies."""

from unifi_api.store.file_store import (
    DEFAULT_AUTH_FILE,
    CredentialStore,
    FileCredentialStore,
)

__all__ = ["CredentialStore", "DEFAULT_AUTH_FILE", "FileCredentialStore"]
