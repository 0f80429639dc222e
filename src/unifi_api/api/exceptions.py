"""Custom exceptions for UniFi API operations.

All exceptions inherit from UnifiError for consistent error handling.
Each exception includes helpful messages for non-expert users.
"""

from typing import Optional


class UnifiError(Exception):
    """Base exception for all UniFi API errors.

    Attributes:
        message: Human-readable error message.
        hint: Optional troubleshooting hint for non-experts.
        exit_code: Suggested exit code for CLI applications.
    """

    exit_code: int = 4

    def __init__(
        self,
        message: str,
        hint: Optional[str] = None,
        exit_code: Optional[int] = None,
    ) -> None:
        self.message = message
        self.hint = hint
        if exit_code is not None:
            self.exit_code = exit_code
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format the exception message with optional hint."""
        if self.hint:
            return f"{self.message}\n\nHint: {self.hint}"
        return self.message


class TransportError(UnifiError):
    """The request never produced an HTTP response.

    This typically occurs when:
    - Controller is not running or the port is wrong
    - Hostname does not resolve
    - The connection timed out
    """

    exit_code: int = 2

    def __init__(
        self,
        message: str = "Cannot connect to UniFi Controller",
        hint: Optional[str] = None,
    ) -> None:
        if hint is None:
            hint = (
                "Is the UniFi Controller running? Check network connectivity "
                "and that port 8443 is reachable."
            )
        super().__init__(message=message, hint=hint)


class DecodeError(UnifiError):
    """Response body is not a valid controller envelope."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        self.status_code = status_code
        super().__init__(message=message)


class AuthenticationFailed(UnifiError):
    """The login handshake was rejected or could not be completed.

    This typically occurs when:
    - Using cloud/SSO credentials instead of local admin account
    - Incorrect username or password
    - Account is locked or disabled
    """

    exit_code: int = 3

    def __init__(
        self,
        message: str = "Authentication failed",
        status_code: Optional[int] = None,
        hint: Optional[str] = None,
    ) -> None:
        self.status_code = status_code
        if hint is None:
            hint = (
                "Ensure the auth file holds a LOCAL admin account, not cloud SSO. "
                "Create a local admin in Settings > Admins."
            )
        super().__init__(message=message, hint=hint)


class APIError(UnifiError):
    """Controller answered 200 with a non-ok result code."""

    def __init__(self, code: str, msg: Optional[str] = None) -> None:
        self.code = code
        self.msg = msg
        message = f"Non-ok return code {code!r}"
        if msg:
            message = f"{message} ({msg})"
        super().__init__(message=message)


class HTTPError(UnifiError):
    """Controller answered with an unexpected HTTP status."""

    def __init__(self, status_code: int, reason: str = "", endpoint: str = "") -> None:
        self.status_code = status_code
        self.endpoint = endpoint
        message = f"HTTP response {status_code} {reason}".rstrip()
        if endpoint:
            message = f"{message} from {endpoint}"
        hint = None
        if status_code == 401:
            hint = "The controller rejected the session. Check your credentials."
        elif status_code == 404:
            hint = "Check the site name; the endpoint does not exist on this controller."
        super().__init__(message=message, hint=hint)


class CredentialStoreError(UnifiError):
    """The credential store could not be read or written."""

    exit_code: int = 1


class NotFound(CredentialStoreError):
    """The credential record does not exist."""

    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(
            message=f"Auth file not found: {path}",
            hint=(
                "Create it as JSON with username, password and controller_host, "
                "then restrict it with 'chmod 600'."
            ),
        )


class PermissionDenied(CredentialStoreError):
    """The credential record is too permissive or unreadable."""

    def __init__(self, message: str, hint: Optional[str] = None) -> None:
        super().__init__(message=message, hint=hint)
