"""
UniFi API - Typed client for the UniFi controller's private HTTP API.

This package provides an authenticated session against a UniFi controller,
keeps its cookies across process runs, and exposes typed access to stations
and wireless network configurations.

Features:
- Cookie-based sessions persisted to a permission-checked credential file
- Automatic re-authentication when the controller reports an expired session
- Typed response decoding with pydantic
- Structured logging (JSON for production, text for development)
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
