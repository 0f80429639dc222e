"""UniFi API client: typed resource access over one persistent session.

The UnifiAPI ties together the credential store, the Session and the
RequestPipeline, and exposes the resources this package covers. Accessors
only choose an endpoint and a payload shape; retry and error
classification live in the pipeline.

Example usage:
    from unifi_api.api import UnifiAPI
    from unifi_api.store import FileCredentialStore

    with UnifiAPI.from_store(FileCredentialStore("~/.unifi-auth")) as api:
        for station in api.list_clients("default"):
            print(station.name, station.ip)
"""

from typing import TYPE_CHECKING, Any, List, Optional

import httpx
import structlog

from unifi_api.models import AuthRecord, Station, WirelessNetwork

from .auth import login
from .endpoints import CONTROLLER_ENDPOINTS
from .pipeline import RequestPipeline
from .session import Session

if TYPE_CHECKING:
    from unifi_api.store import CredentialStore

logger = structlog.get_logger(__name__)


class UnifiAPI:
    """Interface to a UniFi controller.

    Attributes:
        session: Session holding the credential and cookie jar.
        pipeline: RequestPipeline every accessor goes through.

    Example:
        # As context manager (cookies are written back on exit)
        with UnifiAPI.from_store(store) as api:
            wlans = api.list_wireless_networks("default")

        # Manual lifecycle management
        api = UnifiAPI.from_store(store)
        try:
            wlans = api.list_wireless_networks("default")
        finally:
            api.write_config()
            api.close()
    """

    def __init__(
        self,
        session: Session,
        store: Optional["CredentialStore"] = None,
    ) -> None:
        """Initialize the API.

        Args:
            session: Session to issue requests on.
            store: Where write_config() saves credential and cookies.
        """
        self.session = session
        self.store = store
        self.pipeline = RequestPipeline(session)

    @classmethod
    def from_store(
        cls,
        store: "CredentialStore",
        verify_ssl: bool = False,
        timeout: Optional[float] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> "UnifiAPI":
        """Load the auth record and build a session seeded with its cookies.

        Raises:
            NotFound: No credential record.
            PermissionDenied: Credential record is too permissive.
            CredentialStoreError: Credential record is malformed.
        """
        record = store.load()
        session = Session(
            credential=record.credential(),
            cookies=record.cookies,
            verify_ssl=verify_ssl,
            timeout=timeout,
            transport=transport,
        )
        logger.debug(
            "session_created",
            base_url=session.base_url,
            cookie_count=len(record.cookies),
        )
        return cls(session, store=store)

    @property
    def base_url(self) -> str:
        return self.session.base_url

    def login(self) -> None:
        """Log in explicitly.

        Not normally needed: requests log in again on their own when the
        controller reports an expired session.
        """
        login(self.session)

    def write_config(self) -> None:
        """Save the credential and the current cookies to the store."""
        if self.store is None:
            return
        record = AuthRecord.from_credential(
            self.session.credential, self.session.snapshot_cookies()
        )
        self.store.save(record)

    def list_clients(self, site: str) -> List[Station]:
        """Get the stations currently known to the controller.

        Args:
            site: Site name, e.g. "default".

        Returns:
            Station records, freshly decoded on every call.
        """
        endpoint = CONTROLLER_ENDPOINTS.stations.format(site=site)
        stations = self.pipeline.execute("GET", endpoint, List[Station])
        logger.debug("stations_retrieved", count=len(stations), site=site)
        return stations

    def list_wireless_networks(self, site: str) -> List[WirelessNetwork]:
        """Get the wireless network configurations of a site."""
        endpoint = CONTROLLER_ENDPOINTS.wlans.format(site=site)
        wlans = self.pipeline.execute("GET", endpoint, List[WirelessNetwork])
        logger.debug("wlans_retrieved", count=len(wlans), site=site)
        return wlans

    def enable_wireless_network(self, site: str, network_id: str, enabled: bool) -> None:
        """Enable or disable one wireless network.

        Args:
            site: Site name.
            network_id: The network's ``_id``.
            enabled: New enabled state.

        Raises:
            APIError: The controller rejected the update.
        """
        endpoint = CONTROLLER_ENDPOINTS.wlan_update.format(site=site, network_id=network_id)
        self.pipeline.execute(
            "POST",
            endpoint,
            Any,
            body={"_id": network_id, "enabled": enabled},
        )
        logger.info("wlan_updated", site=site, network_id=network_id, enabled=enabled)

    def close(self) -> None:
        self.session.close()

    def __enter__(self) -> "UnifiAPI":
        return self

    def __exit__(
        self,
        exc_type: Any,
        exc_val: Any,
        exc_tb: Any,
    ) -> None:
        """Write cookies back (best-effort) and close the session."""
        try:
            self.write_config()
        except Exception as e:
            # Do not mask an exception already propagating from the block
            logger.error("write_config_failed", error=str(e))
        finally:
            self.close()
