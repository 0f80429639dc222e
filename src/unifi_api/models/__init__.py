"""Data models for UniFi API."""

from .credential import AuthRecord, Credential, SessionCookie
from .envelope import LOGIN_REQUIRED, RC_ERROR, RC_OK, Envelope, EnvelopeMeta
from .resources import Station, WirelessNetwork

__all__ = [
    "AuthRecord",
    "Credential",
    "Envelope",
    "EnvelopeMeta",
    "LOGIN_REQUIRED",
    "RC_ERROR",
    "RC_OK",
    "SessionCookie",
    "Station",
    "WirelessNetwork",
]
