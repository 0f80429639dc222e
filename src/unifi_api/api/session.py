"""Session state: one controller identity and the HTTP client carrying it.

The Session owns the httpx.Client and therefore its cookie jar. Cookies
persisted by an earlier run are seeded into the jar at construction, and
``snapshot_cookies()`` reads the jar back so the credential store can
save it again. Nothing else in the package touches the jar directly.
"""

from http.cookiejar import Cookie
from typing import Any, Dict, List, Optional

import httpx
import structlog

from unifi_api.models import Credential, SessionCookie

from .endpoints import CONTROLLER_ENDPOINTS, base_url_for

logger = structlog.get_logger(__name__)


def _effective_host(host: str) -> str:
    """Host name as the cookie jar records it for host-only cookies.

    Dotless names get ".local" appended (RFC 2965).
    """
    host = host.lower()
    if "." not in host:
        return host + ".local"
    return host


class Session:
    """Authenticated identity for one UniFi controller.

    Attributes:
        credential: Login identity, immutable for the process lifetime.
        base_url: ``https://{host}:8443``.
        client: The httpx.Client used for every request.
    """

    def __init__(
        self,
        credential: Credential,
        cookies: Optional[List[SessionCookie]] = None,
        verify_ssl: bool = False,
        timeout: Optional[float] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        """Build the transport and seed its cookie jar.

        Args:
            credential: Controller identity.
            cookies: Cookies saved by a previous run.
            verify_ssl: Verify the controller's TLS certificate. Controllers
                ship a self-signed certificate, so this is off by default.
            timeout: Request timeout in seconds. None keeps httpx's default.
            transport: Optional httpx transport (used by tests).
        """
        self.credential = credential
        self.base_url = base_url_for(credential.controller_host)
        self.verify_ssl = verify_ssl

        client_kwargs: Dict[str, Any] = {"verify": verify_ssl}
        if timeout is not None:
            client_kwargs["timeout"] = timeout
        if transport is not None:
            client_kwargs["transport"] = transport
        self.client = httpx.Client(**client_kwargs)

        if not verify_ssl:
            logger.debug("tls_verification_disabled", host=credential.controller_host)

        if cookies:
            self.load_cookies(cookies)

    @property
    def host(self) -> str:
        return self.credential.controller_host

    @property
    def login_url(self) -> str:
        """Controller login page, sent as Referer with the login request."""
        return f"{self.base_url}{CONTROLLER_ENDPOINTS.login_page}"

    def load_cookies(self, cookies: List[SessionCookie]) -> None:
        """Seed the jar with previously persisted cookies.

        Cookies without a domain are scoped to the controller host.
        """
        jar = self.client.cookies.jar
        default_domain = _effective_host(self.host)
        for cookie in cookies:
            domain = cookie.domain or default_domain
            expires = cookie.expires_timestamp()
            jar.set_cookie(
                Cookie(
                    version=0,
                    name=cookie.name,
                    value=cookie.value,
                    port=None,
                    port_specified=False,
                    domain=domain,
                    domain_specified=domain.startswith("."),
                    domain_initial_dot=domain.startswith("."),
                    path=cookie.path or "/",
                    path_specified=True,
                    secure=cookie.secure,
                    expires=expires,
                    discard=expires is None,
                    comment=None,
                    comment_url=None,
                    rest={},
                )
            )
        logger.debug("cookies_loaded", count=len(cookies), host=self.host)

    def snapshot_cookies(self) -> List[SessionCookie]:
        """Read back every live cookie the jar holds for the controller.

        Returns:
            Cookies in jar order, expired ones dropped.
        """
        jar = self.client.cookies.jar
        jar.clear_expired_cookies()

        snapshot: List[SessionCookie] = []
        for cookie in jar:
            if cookie.value is None or not self._applies_to_controller(cookie.domain):
                continue
            snapshot.append(
                SessionCookie(
                    name=cookie.name,
                    value=cookie.value,
                    domain=cookie.domain,
                    path=cookie.path,
                    expires=cookie.expires,
                    secure=bool(cookie.secure),
                )
            )
        return snapshot

    def _applies_to_controller(self, domain: str) -> bool:
        domain = domain.lower().lstrip(".")
        if not domain:
            return False
        for name in (self.host.lower(), _effective_host(self.host)):
            if name == domain or name.endswith("." + domain):
                return True
        return False

    def close(self) -> None:
        """Close the HTTP client and release its connections."""
        self.client.close()
