"""Request pipeline: send, decode the envelope, classify, re-authenticate.

Every API call goes through ``RequestPipeline.execute``. The controller
reports an expired session as a 401 whose envelope says
``api.err.LoginRequired``, so the decision to log in again is made on the
decoded body, not on the status line alone.

Re-authentication is a two-state machine per logical call::

    FRESH --(401 + LoginRequired)--> REAUTHENTICATED --(anything)--> terminal

``reauth_transition`` is the only place the transition is decided, which
keeps the one-retry limit independent of the send loop.
"""

from enum import Enum
from typing import Any, Dict, Optional, Type, TypeVar

import httpx
import structlog
from pydantic import ValidationError

from unifi_api.models import Envelope

from .auth import login
from .exceptions import APIError, DecodeError, HTTPError, TransportError
from .session import Session

logger = structlog.get_logger(__name__)

T = TypeVar("T")


class AttemptState(str, Enum):
    """Re-authentication state of one logical call."""

    FRESH = "fresh"
    REAUTHENTICATED = "reauthenticated"


def reauth_transition(
    state: AttemptState,
    status_code: int,
    envelope: Envelope,
) -> Optional[AttemptState]:
    """Decide whether a failed response earns a login and a resend.

    Args:
        state: Current state of the call.
        status_code: HTTP status of the response.
        envelope: Decoded response body.

    Returns:
        The state to resend in, or None if the response is terminal.
    """
    if (
        state is AttemptState.FRESH
        and status_code == 401
        and envelope.login_required
    ):
        return AttemptState.REAUTHENTICATED
    return None


class RequestPipeline:
    """Executes API calls for one Session.

    Example:
        >>> pipeline = RequestPipeline(session)
        >>> stations = pipeline.execute("GET", "/api/s/default/stat/sta", List[Station])
    """

    def __init__(self, session: Session) -> None:
        self.session = session

    def execute(
        self,
        method: str,
        path: str,
        shape: Type[T],
        body: Optional[Any] = None,
        referer: Optional[str] = None,
    ) -> T:
        """Make an API request with automatic session recovery.

        Args:
            method: HTTP method (GET or POST).
            path: Endpoint path, appended to the session's base URL.
            shape: Expected type of the envelope's ``data`` payload.
            body: JSON body, sent when not None.
            referer: Optional Referer header.

        Returns:
            The decoded payload.

        Raises:
            TransportError: The request could not be sent.
            DecodeError: Body is not an envelope or payload does not match ``shape``.
            APIError: 200 with a non-ok result code.
            AuthenticationFailed: Re-authentication was needed and failed.
            HTTPError: Any other status, including a second 401.
        """
        state = AttemptState.FRESH

        while True:
            response = self._send(method, path, body, referer)
            envelope = self._decode(response, path)

            if response.status_code == 200:
                return self._payload(envelope, path, shape)

            next_state = reauth_transition(state, response.status_code, envelope)
            if next_state is None:
                logger.debug(
                    "request_failed",
                    method=method,
                    endpoint=path,
                    status_code=response.status_code,
                    rc=envelope.meta.rc,
                    msg=envelope.meta.msg,
                    state=state.value,
                )
                raise HTTPError(
                    status_code=response.status_code,
                    reason=response.reason_phrase,
                    endpoint=path,
                )

            logger.info(
                "session_expired",
                message="Session expired, re-authenticating",
                endpoint=path,
            )
            login(self.session)
            state = next_state
            logger.info("reauthenticated", host=self.session.host, endpoint=path)

    def _send(
        self,
        method: str,
        path: str,
        body: Optional[Any],
        referer: Optional[str],
    ) -> httpx.Response:
        """Send one HTTP request; the body is fully read on return."""
        url = f"{self.session.base_url}{path}"

        kwargs: Dict[str, Any] = {}
        if body is not None:
            kwargs["json"] = body
        if referer:
            kwargs["headers"] = {"Referer": referer}

        try:
            return self.session.client.request(method, url, **kwargs)
        except httpx.RequestError as e:
            logger.warning("transport_error", method=method, endpoint=path, error=str(e))
            raise TransportError(message=f"Request to {path} failed: {e}")

    def _decode(self, response: httpx.Response, path: str) -> Envelope:
        try:
            return Envelope.model_validate_json(response.content)
        except ValidationError as e:
            logger.warning(
                "response_decode_failed",
                endpoint=path,
                status_code=response.status_code,
                error_count=e.error_count(),
            )
            raise DecodeError(
                message=(
                    f"Parsing response body from {path} "
                    f"(HTTP {response.status_code}): {e}"
                ),
                status_code=response.status_code,
            )

    def _payload(self, envelope: Envelope, path: str, shape: Type[T]) -> T:
        if not envelope.ok:
            raise APIError(code=envelope.meta.rc, msg=envelope.meta.msg)

        try:
            return envelope.payload(shape)
        except ValidationError as e:
            raise DecodeError(
                message=f"Unexpected payload from {path}: {e}",
                status_code=200,
            )
