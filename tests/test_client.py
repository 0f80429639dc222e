"""Tests for UnifiAPI resource accessors and lifecycle."""

import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterator
from unittest.mock import MagicMock

import pytest

from conftest import HOST, FakeController, login_required, ok, reply
from unifi_api.api.client import UnifiAPI
from unifi_api.api.exceptions import APIError, PermissionDenied
from unifi_api.models import AuthRecord, SessionCookie, Station
from unifi_api.store import FileCredentialStore

LOGIN = "/api/login"


@pytest.fixture
def auth_file(tmp_path: Path) -> Path:
    path = tmp_path / "unifi-auth"
    record = AuthRecord(username="admin", password="secret", controller_host=HOST)
    path.write_text(record.model_dump_json())
    os.chmod(path, 0o600)
    return path


@pytest.fixture
def api(auth_file: Path, controller: FakeController) -> Iterator[UnifiAPI]:
    api = UnifiAPI.from_store(FileCredentialStore(auth_file), transport=controller.transport)
    yield api
    api.close()


class TestListClients:
    """Tests for UnifiAPI.list_clients()."""

    def test_decodes_station(self, api: UnifiAPI, controller: FakeController) -> None:
        """A station record is decoded with exactly the fields the controller sent."""
        controller.on(
            "GET",
            "/api/s/default/stat/sta",
            reply(
                200,
                {
                    "data": [
                        {"_id": "a1", "name": "phone", "is_wired": False, "mac": "aa:bb", "ip": "10.0.0.5"}
                    ],
                    "meta": {"rc": "ok"},
                },
            ),
        )

        stations = api.list_clients("default")

        assert stations == [Station(id="a1", name="phone", wired=False, mac="aa:bb", ip="10.0.0.5")]
        assert stations[0].hostname == ""
        assert stations[0].last_seen is None

    def test_uses_site_in_path(self, api: UnifiAPI, controller: FakeController) -> None:
        """The site name selects the endpoint."""
        controller.on("GET", "/api/s/branch/stat/sta", ok([]))

        assert api.list_clients("branch") == []
        assert controller.requests[0].url.path == "/api/s/branch/stat/sta"

    def test_last_seen_decoded(self, api: UnifiAPI, controller: FakeController) -> None:
        """last_seen Unix seconds become a UTC datetime."""
        controller.on(
            "GET",
            "/api/s/default/stat/sta",
            ok([{"_id": "a1", "hostname": "laptop", "last_seen": 1705084800, "uptime": 42}]),
        )

        station = api.list_clients("default")[0]

        assert station.last_seen == datetime(2024, 1, 12, 18, 40, tzinfo=timezone.utc)
        assert station.display_name == "laptop"

    def test_fresh_records_every_call(self, api: UnifiAPI, controller: FakeController) -> None:
        """Nothing is cached between calls."""
        controller.on("GET", "/api/s/default/stat/sta", ok([{"_id": "a1"}]), ok([]))

        assert len(api.list_clients("default")) == 1
        assert api.list_clients("default") == []

    def test_relogin_scenario(self, api: UnifiAPI, controller: FakeController) -> None:
        """Expired session: GET 401 -> login -> GET 200; three requests, payload returned."""
        controller.on("GET", "/api/s/default/stat/sta", login_required(), ok([{"_id": "a1", "name": "phone"}]))
        controller.on("POST", LOGIN, reply(200, headers={"Set-Cookie": "unifises=new; Path=/"}))

        stations = api.list_clients("default")

        assert [s.name for s in stations] == ["phone"]
        assert len(controller.requests) == 3
        assert len(controller.calls("GET", "/api/s/default/stat/sta")) == 2


class TestWirelessNetworks:
    """Tests for listing and toggling wireless networks."""

    def test_list(self, api: UnifiAPI, controller: FakeController) -> None:
        """Wireless networks decode with the guest flag defaulting to False."""
        controller.on(
            "GET",
            "/api/s/default/list/wlanconf",
            ok(
                [
                    {"_id": "net1", "name": "Guests", "enabled": True, "security": "wpapsk", "wpa_mode": "wpa2", "is_guest": True},
                    {"_id": "net2", "name": "Home", "enabled": True},
                ]
            ),
        )

        wlans = api.list_wireless_networks("default")

        assert [(w.id, w.guest) for w in wlans] == [("net1", True), ("net2", False)]
        assert wlans[0].security == "wpapsk"
        assert wlans[0].wpa_mode == "wpa2"

    def test_enable_sends_id_and_flag(self, api: UnifiAPI, controller: FakeController) -> None:
        """Toggling posts the network ID and the new enabled flag."""
        controller.on("POST", "/api/s/default/upd/wlanconf/net1", ok([]))

        api.enable_wireless_network("default", "net1", True)

        request = controller.requests[0]
        assert request.method == "POST"
        assert controller.json_body(request) == {"_id": "net1", "enabled": True}

    def test_enable_error_rc(self, api: UnifiAPI, controller: FakeController) -> None:
        """rc=error on the update is an APIError."""
        controller.on(
            "POST",
            "/api/s/default/upd/wlanconf/net1",
            reply(200, {"data": [], "meta": {"rc": "error", "msg": "api.err.InvalidObject"}}),
        )

        with pytest.raises(APIError) as exc_info:
            api.enable_wireless_network("default", "net1", False)

        assert exc_info.value.msg == "api.err.InvalidObject"


class TestLifecycle:
    """Tests for loading from and writing back to the credential store."""

    def test_insecure_auth_file_fails_before_network(self, auth_file: Path, controller: FakeController) -> None:
        """A group/other readable auth file aborts before any request is made."""
        os.chmod(auth_file, 0o644)

        with pytest.raises(PermissionDenied):
            UnifiAPI.from_store(FileCredentialStore(auth_file), transport=controller.transport)

        assert controller.requests == []

    def test_write_config_persists_cookies(self, api: UnifiAPI, auth_file: Path, controller: FakeController) -> None:
        """Cookies gained by login are saved with the credential."""
        controller.on("POST", LOGIN, reply(200, headers={"Set-Cookie": "unifises=abc; Path=/"}))

        api.login()
        api.write_config()

        record = FileCredentialStore(auth_file).load()
        assert record.username == "admin"
        assert [(c.name, c.value) for c in record.cookies] == [("unifises", "abc")]

    def test_persisted_cookies_reused_without_login(self, auth_file: Path) -> None:
        """Cookies saved by one run are accepted by the controller in the next, with no login."""
        first = FakeController()
        first.on("POST", LOGIN, reply(200, headers={"Set-Cookie": "unifises=session-1; Path=/"}))
        with UnifiAPI.from_store(FileCredentialStore(auth_file), transport=first.transport) as api:
            api.login()

        def authorized(request):
            if "unifises=session-1" in request.headers.get("cookie", ""):
                return ok([{"_id": "a1"}])(request)
            return login_required()(request)

        second = FakeController()
        second.on("GET", "/api/s/default/stat/sta", authorized)
        with UnifiAPI.from_store(FileCredentialStore(auth_file), transport=second.transport) as api:
            stations = api.list_clients("default")

        assert [s.id for s in stations] == ["a1"]
        assert second.calls("POST", LOGIN) == []
        assert len(second.requests) == 1

    def test_context_manager_writes_on_error(self, auth_file: Path, controller: FakeController) -> None:
        """Cookies are written back even when the block raises."""
        controller.on("POST", LOGIN, reply(200, headers={"Set-Cookie": "unifises=kept; Path=/"}))

        with pytest.raises(RuntimeError):
            with UnifiAPI.from_store(FileCredentialStore(auth_file), transport=controller.transport) as api:
                api.login()
                raise RuntimeError("boom")

        record = FileCredentialStore(auth_file).load()
        assert [c.value for c in record.cookies] == ["kept"]

    def test_save_failure_does_not_mask_error(self, api: UnifiAPI) -> None:
        """A failing store save on exit is logged, not raised over the original error."""
        api.store = MagicMock()
        api.store.save.side_effect = OSError("disk full")

        with pytest.raises(RuntimeError, match="boom"):
            with api:
                raise RuntimeError("boom")

    def test_write_config_without_store(self, api: UnifiAPI) -> None:
        """Without a store, write_config is a no-op."""
        api.store = None
        api.write_config()

    def test_seeded_cookie_from_record(self, tmp_path: Path, controller: FakeController) -> None:
        """Cookies in the auth file are sent on the first request."""
        path = tmp_path / "auth"
        record = AuthRecord(
            username="admin",
            password="secret",
            controller_host=HOST,
            cookies=[SessionCookie(name="unifises", value="old")],
        )
        path.write_text(record.model_dump_json())
        os.chmod(path, 0o600)
        controller.on("GET", "/api/s/default/list/wlanconf", ok([]))

        with UnifiAPI.from_store(FileCredentialStore(path), transport=controller.transport) as api:
            api.list_wireless_networks("default")

        assert controller.requests[0].headers["cookie"] == "unifises=old"
