"""
Entry point for the unifi-api CLI.

Usage:
    unifi-api list-sta                 List stations of the configured site
    unifi-api toggle-guest-wlan on     Enable every guest wireless network
    unifi-api toggle-guest-wlan off    Disable every guest wireless network
    unifi-api --help                   Show help message
    unifi-api --version                Show version and exit

Exit Codes:
    0 - Success
    1 - Configuration or auth file error
    2 - Usage error, or cannot reach the UniFi Controller
    3 - Authentication error (invalid credentials, wrong account type)
    4 - API error (controller rejected a request or sent a bad response)
"""

from __future__ import annotations

import argparse
import sys
from typing import TYPE_CHECKING, Any, List, Optional

if TYPE_CHECKING:
    from unifi_api.api import UnifiAPI

from unifi_api import __version__

# Exit codes
EXIT_SUCCESS = 0
EXIT_CONFIG_ERROR = 1
EXIT_USAGE_ERROR = 2
EXIT_AUTH_ERROR = 3
EXIT_API_ERROR = 4

ENABLE_WORDS = ("on", "true", "yes")
DISABLE_WORDS = ("off", "false", "no")


def parse_toggle_state(value: str) -> bool:
    """Map on|true|yes to True and off|false|no to False."""
    if value in ENABLE_WORDS:
        return True
    if value in DISABLE_WORDS:
        return False
    raise argparse.ArgumentTypeError(
        f"invalid state {value!r}: use one of {', '.join(ENABLE_WORDS + DISABLE_WORDS)}"
    )


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="unifi-api",
        description="Query and control a UniFi controller",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Exit Codes:
  0   Success
  1   Configuration or auth file error
  2   Usage error, or connection error (cannot reach controller)
  3   Authentication error (invalid credentials)
  4   API error

Environment Variables:
  CONFIG_PATH          Path to YAML configuration file
  UNIFI_AUTH_FILE      Auth file with credentials and cookies (default: ~/.unifi-auth)
  UNIFI_SITE           Site name (default: default)
  UNIFI_VERIFY_SSL     Verify the controller certificate (default: false)
  UNIFI_TIMEOUT        Request timeout in seconds
  UNIFI_LOG_LEVEL      Logging level: DEBUG, INFO, WARNING, ERROR
  UNIFI_LOG_FORMAT     Log format: json or text

The auth file must be JSON with username, password and controller_host,
and must not be readable by group or other (chmod 600).
""",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument("--config", help="Path to YAML configuration file")
    parser.add_argument("--auth-file", help="Path to the auth file")
    parser.add_argument("--site", help="UniFi site name")

    subparsers = parser.add_subparsers(dest="command", required=True)
    subparsers.add_parser("list-sta", help="List stations (connected clients)")
    toggle = subparsers.add_parser(
        "toggle-guest-wlan", help="Enable or disable every guest wireless network"
    )
    toggle.add_argument(
        "state",
        type=parse_toggle_state,
        metavar="{on,off}",
        help="on|true|yes to enable, off|false|no to disable",
    )
    return parser.parse_args(argv)


def format_station(station: Any) -> str:
    """One tab-separated line per station."""
    last_seen = station.last_seen.isoformat() if station.last_seen else "-"
    return "\t".join(
        [
            station.id,
            station.display_name or "-",
            station.mac or "-",
            station.ip or "-",
            "wired" if station.wired else "wireless",
            last_seen,
        ]
    )


def list_stations(api: "UnifiAPI", site: str, log: Any) -> int:
    """Print every station of the site."""
    log.info("fetching_clients", site=site)
    for station in api.list_clients(site):
        print(format_station(station))
    return EXIT_SUCCESS


def toggle_guest_wlans(api: "UnifiAPI", site: str, enable: bool, log: Any) -> int:
    """Set the enabled flag of every guest network.

    A failure on one network is logged and the loop moves on to the next.

    Returns:
        EXIT_SUCCESS if every guest network was updated, EXIT_API_ERROR otherwise.
    """
    from unifi_api.api.exceptions import UnifiError

    log.info("fetching_wlans", site=site)
    wlans = api.list_wireless_networks(site)

    failures = 0
    for wlan in wlans:
        if not wlan.guest:
            continue
        try:
            api.enable_wireless_network(site, wlan.id, enable)
        except UnifiError as e:
            failures += 1
            log.error("wlan_set_failed", wlan=wlan.name, error=e.message)
            continue
        log.info("wlan_set", wlan=wlan.name, enabled=enable)

    return EXIT_SUCCESS if failures == 0 else EXIT_API_ERROR


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for unifi-api.

    Returns:
        Exit code (see module docstring).
    """
    args = parse_args(argv)

    # Import here to allow --help without dependencies
    from unifi_api.api import UnifiAPI
    from unifi_api.api.exceptions import CredentialStoreError, UnifiError
    from unifi_api.config import ConfigurationError, load_config
    from unifi_api.logging import configure_logging, get_logger
    from unifi_api.store import FileCredentialStore

    try:
        config = load_config(args.config, auth_file=args.auth_file, site=args.site)
    except ConfigurationError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return EXIT_CONFIG_ERROR

    configure_logging(log_format=config.log_format, log_level=config.log_level)
    log = get_logger()

    store = FileCredentialStore(config.auth_file)
    try:
        api = UnifiAPI.from_store(
            store,
            verify_ssl=config.verify_ssl,
            timeout=config.timeout,
        )
    except CredentialStoreError as e:
        log.error("auth_file_error", error=e.message)
        print(f"\n{e}", file=sys.stderr)
        return e.exit_code

    with api:
        try:
            if args.command == "list-sta":
                return list_stations(api, config.site, log)
            return toggle_guest_wlans(api, config.site, args.state, log)
        except UnifiError as e:
            log.error("command_failed", command=args.command, error=e.message)
            print(f"\n{e}", file=sys.stderr)
            return e.exit_code


if __name__ == "__main__":
    sys.exit(main())
