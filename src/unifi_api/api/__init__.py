"""UniFi API client module.

This module provides the UnifiAPI class for talking to a UniFi controller,
along with the session wiring, the login handshake, the request pipeline
with single re-authentication, endpoint definitions and custom exceptions.
"""

from unifi_api.api.auth import login
from unifi_api.api.client import UnifiAPI
from unifi_api.api.endpoints import CONTROLLER_ENDPOINTS, CONTROLLER_PORT, Endpoints
from unifi_api.api.exceptions import (
    APIError,
    AuthenticationFailed,
    CredentialStoreError,
    DecodeError,
    HTTPError,
    NotFound,
    PermissionDenied,
    TransportError,
    UnifiError,
)
from unifi_api.api.pipeline import AttemptState, RequestPipeline, reauth_transition
from unifi_api.api.session import Session

__all__ = [
    # Client
    "UnifiAPI",
    # Core
    "AttemptState",
    "RequestPipeline",
    "Session",
    "login",
    "reauth_transition",
    # Exceptions
    "APIError",
    "AuthenticationFailed",
    "CredentialStoreError",
    "DecodeError",
    "HTTPError",
    "NotFound",
    "PermissionDenied",
    "TransportError",
    "UnifiError",
    # Endpoints
    "CONTROLLER_ENDPOINTS",
    "CONTROLLER_PORT",
    "Endpoints",
]
