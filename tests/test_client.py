from __future__ import annotations

import json
from typing import Any

import aiohttp
import pytest

from pyparking.client import ParkingClient
from pyparking.config import ParkingConfig
from pyparking.connectivity import ConnectivityState
from pyparking.models.admin import ZoneAction
from pyparking.models.ticket import CheckinRequest, TicketType
from pyparking.models.user import UserRole
from pyparking.result import ErrorKind
from pyparking.storage import MemoryStore


class _FakeResponse:
    def __init__(self, status: int, body: Any = None) -> None:
        self.status = status
        self._text = "" if body is None else json.dumps(body)

    async def text(self) -> str:
        return self._text

    async def __aenter__(self) -> _FakeResponse:
        return self

    async def __aexit__(self, *exc: Any) -> None:
        return None


class _FakeHttpSession:
    """Answers by ``(method, path)``; unknown routes fail as unreachable."""

    closed = False

    def __init__(self, routes: dict[tuple[str, str], _FakeResponse] | None = None, *, offline: bool = False) -> None:
        self._routes = routes or {}
        self._offline = offline
        self.calls: list[tuple[str, str, dict[str, Any]]] = []

    def request(self, method: str, url: str, **kwargs: Any) -> _FakeResponse:
        self.calls.append((method, url, kwargs))
        path = url.removeprefix("http://api.test/v1")
        if self._offline or (method, path) not in self._routes:
            raise aiohttp.ClientConnectionError(f"cannot reach {url}")
        return self._routes[(method, path)]

    async def close(self) -> None:
        self.closed = True


def _client(http: _FakeHttpSession, *, store: MemoryStore | None = None, **config: Any) -> ParkingClient:
    return ParkingClient(
        ParkingConfig(base_url="http://api.test/v1", **config),
        session=http,  # type: ignore[arg-type]
        store=store or MemoryStore(),
    )


@pytest.mark.asyncio
async def test_offline_admin_login_succeeds() -> None:
    http = _FakeHttpSession(offline=True)

    async with _client(http) as client:
        result = await client.login("admin", "admin")

        assert result.is_success
        assert result.data is not None
        assert result.data.user.role is UserRole.ADMIN
        assert client.degraded is True
        assert client.token == "demo-token-admin-1"
    # first attempt went to the network and switched the client offline
    assert len(http.calls) == 1


@pytest.mark.asyncio
async def test_degraded_login_bypasses_network() -> None:
    http = _FakeHttpSession(offline=True)
    client = ParkingClient(
        ParkingConfig(base_url="http://api.test/v1"),
        session=http,  # type: ignore[arg-type]
        store=MemoryStore(),
        connectivity=ConnectivityState(degraded=True),
    )

    async with client:
        result = await client.login("employee", "employee")

    assert result.data is not None
    assert result.data.user.role is UserRole.EMPLOYEE
    assert http.calls == []


@pytest.mark.asyncio
async def test_offline_login_rejects_unknown_credentials() -> None:
    async with _client(_FakeHttpSession(offline=True)) as client:
        result = await client.login("admin", "wrong")

        assert result.message == "Invalid username or password"
        assert client.token is None


@pytest.mark.asyncio
async def test_remote_login_stores_token_and_logout_clears_it() -> None:
    login_body = {"user": {"id": "u1", "username": "ops", "role": "employee"}, "token": "jwt-1"}
    http = _FakeHttpSession({("POST", "/auth/login"): _FakeResponse(200, login_body)})
    store = MemoryStore()

    async with _client(http, store=store) as client:
        result = await client.login("ops", "pw")
        assert result.is_success
        assert store.get("parking_token") == "jwt-1"

        client.logout()
        assert client.token is None
        assert store.get("parking_token") is None


@pytest.mark.asyncio
async def test_remote_login_rejection_keeps_client_online() -> None:
    http = _FakeHttpSession({("POST", "/auth/login"): _FakeResponse(401, {"message": "Bad credentials"})})

    async with _client(http) as client:
        result = await client.login("admin", "admin")

        assert result.message == "Bad credentials"
        assert client.degraded is False


@pytest.mark.asyncio
async def test_stored_token_is_attached_to_requests() -> None:
    http = _FakeHttpSession({("GET", "/master/gates"): _FakeResponse(200, [])})

    async with _client(http, store=MemoryStore({"parking_token": "abc"})) as client:
        await client.get_gates()

    assert http.calls[0][2]["headers"]["authorization"] == "Bearer abc"


@pytest.mark.asyncio
async def test_listings_fall_back_when_degraded() -> None:
    async with _client(_FakeHttpSession(offline=True)) as client:
        gates = await client.get_gates()
        zones = await client.get_zones()
        gate_two_zones = await client.get_zones("gate-2")
        categories = await client.get_categories()
        state = await client.get_parking_state()
        subscriptions = await client.get_subscriptions()

    assert [g.id for g in gates.data or []] == ["gate-1", "gate-2"]
    assert [z.id for z in zones.data or []] == ["zone-1", "zone-2", "zone-3"]
    assert [z.id for z in gate_two_zones.data or []] == ["zone-3"]
    assert [c.name for c in categories.data or []] == ["VIP", "Regular", "Economy"]
    assert [s.zone_id for s in state.data or []] == ["zone-1", "zone-2", "zone-3"]
    assert subscriptions.data is not None
    assert subscriptions.data[1].current_checkins[0].ticket_id == "t_123"


@pytest.mark.asyncio
async def test_live_zones_are_decoded() -> None:
    body = [{"id": "z9", "name": "Roof", "gateIds": ["g1"], "totalSlots": 10, "occupied": 4, "open": False}]
    http = _FakeHttpSession({("GET", "/master/zones?gateId=g1"): _FakeResponse(200, body)})

    async with _client(http) as client:
        result = await client.get_zones("g1")

    assert result.data is not None
    zone = result.data[0]
    assert (zone.id, zone.total_slots, zone.occupied, zone.open) == ("z9", 10, 4, False)


@pytest.mark.asyncio
async def test_toggle_zone_echoes_locally_when_degraded() -> None:
    http = _FakeHttpSession(offline=True)

    async with _client(http, store=MemoryStore()) as client:
        await client.get_gates()
        calls_before = len(http.calls)
        result = await client.toggle_zone("zone-1", "close")

    assert result.data is not None
    assert (result.data.zone_id, result.data.open) == ("zone-1", False)
    assert len(http.calls) == calls_before


@pytest.mark.asyncio
async def test_toggle_zone_online_sends_request() -> None:
    route = ("PUT", "/admin/zones/zone-1/open")
    http = _FakeHttpSession({route: _FakeResponse(200, {"id": "zone-1", "open": True})})

    async with _client(http) as client:
        result = await client.toggle_zone("zone-1", ZoneAction.OPEN)

    assert result.data is not None
    assert result.data.open is True
    assert json.loads(http.calls[0][2]["data"]) == {"open": True}


@pytest.mark.asyncio
async def test_unknown_zone_action_is_validation_error() -> None:
    http = _FakeHttpSession({})
    async with _client(http) as client:
        result = await client.toggle_zone("zone-1", "explode")
    assert result.error_kind is ErrorKind.VALIDATION
    assert http.calls == []


@pytest.mark.asyncio
async def test_admin_edits_are_simulated_when_degraded() -> None:
    connectivity = ConnectivityState(degraded=True)
    http = _FakeHttpSession(offline=True)
    client = ParkingClient(
        ParkingConfig(base_url="http://api.test/v1"),
        session=http,  # type: ignore[arg-type]
        store=MemoryStore(),
        connectivity=connectivity,
    )

    async with client:
        category = await client.update_category("cat-1", {"rateNormal": 30, "rateSpecial": 45})
        rush = await client.add_rush_hour(1, "07:00", "09:00")
        vacation = await client.add_vacation("Eid", "2024-04-09", "2024-04-12")

    assert http.calls == []
    assert category.data is not None
    assert (category.data.id, category.data.rate_normal) == ("cat-1", 30)
    assert rush.data is not None
    assert rush.data.id.startswith("rush_")
    assert (rush.data.week_day, rush.data.from_, rush.data.to) == (1, "07:00", "09:00")
    assert vacation.data is not None
    assert vacation.data.id.startswith("vac_")
    assert vacation.data.name == "Eid"


@pytest.mark.asyncio
async def test_checkin_has_no_offline_answer() -> None:
    async with _client(_FakeHttpSession(offline=True)) as client:
        await client.get_gates()
        result = await client.checkin(CheckinRequest(gate_id="gate-1", zone_id="zone-1"))

    assert result.error_kind is ErrorKind.NETWORK
    assert result.message == "Backend server not available (offline mode)"


@pytest.mark.asyncio
async def test_checkin_sends_camel_case_body() -> None:
    response = {"ticket": {"id": "t1", "type": "subscriber", "zoneId": "zone-1", "checkinAt": "2024-01-01T10:00:00Z"}}
    http = _FakeHttpSession({("POST", "/tickets/checkin"): _FakeResponse(201, response)})

    async with _client(http) as client:
        result = await client.checkin(
            {"gateId": "gate-1", "zoneId": "zone-1", "type": "subscriber", "subscriptionId": "sub-1"}
        )

    assert json.loads(http.calls[0][2]["data"]) == {
        "gateId": "gate-1",
        "zoneId": "zone-1",
        "type": "subscriber",
        "subscriptionId": "sub-1",
    }
    assert result.data is not None
    assert result.data.ticket.type is TicketType.SUBSCRIBER


@pytest.mark.asyncio
async def test_invalid_checkin_never_reaches_network() -> None:
    http = _FakeHttpSession({})
    async with _client(http) as client:
        result = await client.checkin({"gateId": "gate-1", "zoneId": "zone-1", "type": "subscriber"})

    assert result.error_kind is ErrorKind.VALIDATION
    assert http.calls == []


@pytest.mark.asyncio
async def test_checkout_returns_receipt() -> None:
    http = _FakeHttpSession({("POST", "/tickets/checkout"): _FakeResponse(200, {"ticketId": "t1", "amount": 37.5})})

    async with _client(http) as client:
        result = await client.checkout({"ticketId": "t1", "forceConvertToVisitor": True})

    assert json.loads(http.calls[0][2]["data"]) == {"ticketId": "t1", "forceConvertToVisitor": True}
    assert result.data is not None
    assert result.data.amount == 37.5


@pytest.mark.asyncio
async def test_lookups_quote_ids_and_have_no_offline_answer() -> None:
    routes = {
        ("GET", "/tickets/t%2F1"): _FakeResponse(200, {"id": "t/1", "type": "visitor"}),
    }
    http = _FakeHttpSession(routes)

    async with _client(http) as client:
        ticket = await client.get_ticket("t/1")
        subscription = await client.get_subscription("sub-1")

    assert ticket.data is not None
    assert ticket.data.type is TicketType.VISITOR
    assert subscription.is_error
    assert subscription.error_kind is ErrorKind.NETWORK
    assert subscription.data is None


@pytest.mark.asyncio
async def test_register_is_offline_in_both_states() -> None:
    http = _FakeHttpSession({})
    async with _client(http) as client:
        registered = await client.register("nightguard", "secret1")
        short = await client.register("nightguard2", "12345")
        login = await client.login("nightguard", "secret1")

    assert registered.is_success
    assert short.message == "Password must be at least 6 characters long"
    assert not any(url.endswith("/auth/register") for _m, url, _kw in http.calls)
    # the fake session cannot reach /auth/login, a network failure that switches this dev client offline
    assert login.is_success
    assert login.data is not None
    assert login.data.user.username == "nightguard"


@pytest.mark.asyncio
async def test_register_validation_while_degraded() -> None:
    http = _FakeHttpSession(offline=True)
    client = ParkingClient(
        ParkingConfig(base_url="http://api.test/v1"),
        session=http,  # type: ignore[arg-type]
        store=MemoryStore(),
        connectivity=ConnectivityState(degraded=True),
    )

    async with client:
        short_name = await client.register("ab", "secret1")
        short_password = await client.register("nightguard", "12345")
        taken = await client.register(" Admin ", "secret1")
        created = await client.register("nightguard", "secret1")
        duplicate = await client.register("NightGuard", "secret2")

    assert short_name.message == "Username must be at least 3 characters long"
    assert short_password.message == "Password must be at least 6 characters long"
    taken_message = "This username is already taken. Please choose a different username."
    assert taken.message == taken_message
    assert duplicate.message == taken_message
    for rejected in (short_name, short_password, taken, duplicate):
        assert rejected.error_kind is ErrorKind.VALIDATION
    assert created.is_success
    assert created.data is not None
    assert created.data.user.username == "nightguard"
    assert client.token is None
    assert http.calls == []


@pytest.mark.asyncio
async def test_operations_outside_context_return_errors() -> None:
    client = _client(_FakeHttpSession({}))
    result = await client.get_gates()
    assert result.is_error


@pytest.mark.asyncio
async def test_external_session_not_closed() -> None:
    http = _FakeHttpSession({})
    async with _client(http):
        pass
    assert http.closed is False
