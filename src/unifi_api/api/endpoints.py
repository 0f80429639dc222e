"""API endpoint definitions for the self-hosted UniFi controller.

The controller listens on port 8443 with a self-signed certificate. Login
lives at /api/login; site-scoped endpoints sit under /api/s/{site}.
"""

from dataclasses import dataclass

CONTROLLER_PORT = 8443


@dataclass(frozen=True)
class Endpoints:
    """Collection of API endpoints used by this client.

    Attributes:
        login: Authentication endpoint (POST)
        login_page: Web login page, sent as Referer during login
        stations: Connected clients endpoint (GET)
        wlans: Wireless network configurations endpoint (GET)
        wlan_update: Wireless network update endpoint (POST)
    """

    login: str
    login_page: str
    stations: str
    wlans: str
    wlan_update: str


CONTROLLER_ENDPOINTS = Endpoints(
    login="/api/login",
    login_page="/login",
    stations="/api/s/{site}/stat/sta",
    wlans="/api/s/{site}/list/wlanconf",
    wlan_update="/api/s/{site}/upd/wlanconf/{network_id}",
)


def base_url_for(host: str, port: int = CONTROLLER_PORT) -> str:
    """Build the controller base URL.

    Example:
        >>> base_url_for("192.168.1.1")
        'https://192.168.1.1:8443'
    """
    return f"https://{host}:{port}"
