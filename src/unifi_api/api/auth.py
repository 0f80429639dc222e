"""Login handshake against the UniFi controller.

A successful login answers 200 and sets the session cookie through normal
Set-Cookie headers; the session's cookie jar captures it, so nothing is
read from the response body.
"""

import httpx
import structlog

from .endpoints import CONTROLLER_ENDPOINTS
from .exceptions import AuthenticationFailed
from .session import Session

logger = structlog.get_logger(__name__)


def login(session: Session) -> None:
    """Authenticate with the UniFi Controller.

    Sends the session's credentials to ``/api/login`` with the login page
    as Referer. Each call is a fresh handshake and may replace cookies from
    an earlier login. There is no internal retry.

    Args:
        session: Session whose cookie jar receives the session cookie.

    Raises:
        AuthenticationFailed: Non-200 status, or the request could not be sent.

    Note:
        Password is never logged at any level. Username is logged at DEBUG only.
    """
    credential = session.credential
    login_url = f"{session.base_url}{CONTROLLER_ENDPOINTS.login}"

    logger.debug("authenticating", username=credential.username, host=session.host)

    try:
        response = session.client.post(
            login_url,
            json={"username": credential.username, "password": credential.password},
            headers={"Referer": session.login_url},
        )
    except httpx.RequestError as e:
        logger.warning("authentication_failed", host=session.host, error=str(e))
        raise AuthenticationFailed(
            message=f"Connection failed during authentication: {e}",
            hint="Check that the controller is reachable on port 8443.",
        )

    if response.status_code == 200:
        logger.info("authentication_successful", host=session.host)
        return

    logger.warning(
        "authentication_failed",
        host=session.host,
        status_code=response.status_code,
    )

    if response.status_code in (400, 401, 403):
        raise AuthenticationFailed(
            message=f"Authentication failed with status code {response.status_code}",
            status_code=response.status_code,
        )

    raise AuthenticationFailed(
        message=f"Authentication failed with status code {response.status_code}",
        status_code=response.status_code,
        hint="Check controller logs for more details.",
    )
