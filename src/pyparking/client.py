"""High-level async client for the parking-operations API."""

from __future__ import annotations

import logging
from typing import Any

import aiohttp
from pydantic import ValidationError

from pyparking._api import admin as _admin_api
from pyparking._api import master as _master_api
from pyparking._api import tickets as _tickets_api
from pyparking._api._common import validation_error
from pyparking._api.auth import (
    AuthenticationStrategy,
    LocalAccountRegistry,
    LocalAuthentication,
    RemoteAuthentication,
    register_account,
)
from pyparking._transport import RequestGateway
from pyparking.config import ParkingConfig
from pyparking.connectivity import ConnectivityState
from pyparking.exceptions import ParkingError
from pyparking.fallback import OfflineFallbackPolicy
from pyparking.models.admin import (
    CategoryRates,
    CategoryUpdate,
    RushHour,
    RushHourRequest,
    Vacation,
    VacationRequest,
    ZoneAction,
    ZoneState,
    ZoneToggle,
)
from pyparking.models.master import Category, Gate, Zone
from pyparking.models.subscription import Subscription
from pyparking.models.ticket import CheckinRequest, CheckinResult, CheckoutReceipt, CheckoutRequest, Ticket
from pyparking.models.user import LoginData, RegistrationData, UserRole
from pyparking.realtime import RealtimeChannel
from pyparking.result import ErrorKind, Result
from pyparking.session import SessionTokenStore
from pyparking.storage import KeyValueStore, open_store

_logger = logging.getLogger(__name__)


class ParkingClient:
    """Async client for the parking-operations API.

    Every operation resolves to a :class:`~pyparking.result.Result`; none
    raises. After the first network failure in a non-production
    environment the client stays degraded: listings answer from canned
    data, admin edits are simulated locally and login is checked offline.

    Usage::

        async with ParkingClient(ParkingConfig.from_env()) as client:
            await client.login("admin", "admin")
            zones = await client.get_zones()
    """

    def __init__(
        self,
        config: ParkingConfig | None = None,
        *,
        session: aiohttp.ClientSession | None = None,
        store: KeyValueStore | None = None,
        connectivity: ConnectivityState | None = None,
    ) -> None:
        self._config = config or ParkingConfig()
        self._external_session = session is not None
        self._http_session = session
        self._store = store if store is not None else open_store(self._config.storage_path)
        self._connectivity = connectivity or ConnectivityState()
        self._tokens = SessionTokenStore(self._store, key=self._config.token_key)
        self._registry = LocalAccountRegistry(self._store, key=self._config.registered_users_key)
        self._gateway: RequestGateway | None = None
        self._policy: OfflineFallbackPolicy | None = None

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> ParkingClient:
        if self._http_session is None:
            self._http_session = aiohttp.ClientSession()
        self._gateway = RequestGateway(self._config, self._http_session, self._tokens, self._connectivity)
        self._policy = OfflineFallbackPolicy(self._gateway, self._connectivity)
        return self

    async def __aexit__(self, *exc: Any) -> None:
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None
        self._gateway = None
        self._policy = None

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def config(self) -> ParkingConfig:
        return self._config

    @property
    def degraded(self) -> bool:
        return self._connectivity.degraded

    @property
    def connectivity(self) -> ConnectivityState:
        return self._connectivity

    @property
    def token(self) -> str | None:
        return self._tokens.get()

    @property
    def tokens(self) -> SessionTokenStore:
        return self._tokens

    @property
    def registry(self) -> LocalAccountRegistry:
        return self._registry

    def _require_policy(self) -> OfflineFallbackPolicy:
        if self._policy is None:
            raise ParkingError("Client not initialized. Use 'async with ParkingClient(...) as client:'")
        return self._policy

    def _local_authentication(self) -> LocalAuthentication:
        registry = self._registry if self._config.offline_login_registered_accounts else None
        return LocalAuthentication(registry)

    def authentication_strategy(self) -> AuthenticationStrategy:
        """Strategy for the current connectivity state."""
        if self._connectivity.degraded:
            return self._local_authentication()
        return RemoteAuthentication(self._require_policy())

    # ------------------------------------------------------------------
    # Authentication
    # ------------------------------------------------------------------

    async def login(self, username: str, password: str) -> Result[LoginData]:
        """Authenticate and store the returned token."""
        _logger.debug("Login attempt username=%r password_length=%d", username, len(password))
        try:
            strategy = self.authentication_strategy()
        except ParkingError as exc:
            return Result.from_exception(exc)

        was_degraded = self._connectivity.degraded
        result = await strategy.authenticate(username, password)
        if result.is_error and not was_degraded and self._connectivity.degraded:
            # This very call switched us offline; answer it locally too.
            result = await self._local_authentication().authenticate(username, password)

        if result.is_success and result.data is not None:
            self._tokens.set(result.data.token)
            _logger.debug("Login succeeded for %r", result.data.user.username)
        else:
            _logger.debug("Login failed: %s", result.message)
        return result

    def logout(self) -> None:
        """Forget the stored token."""
        self._tokens.clear()

    async def register(
        self,
        username: str,
        password: str,
        role: UserRole | str = UserRole.EMPLOYEE,
    ) -> Result[RegistrationData]:
        """Create a local account. Always offline; the user must log in afterwards."""
        _logger.debug("Registration attempt username=%r role=%s password_length=%d", username, role, len(password))
        return register_account(self._registry, username, password, role)

    # ------------------------------------------------------------------
    # Reference data
    # ------------------------------------------------------------------

    async def get_gates(self) -> Result[list[Gate]]:
        return await self._call(_master_api.fetch_gates)

    async def get_zones(self, gate_id: str | None = None) -> Result[list[Zone]]:
        return await self._call(_master_api.fetch_zones, gate_id)

    async def get_categories(self) -> Result[list[Category]]:
        return await self._call(_master_api.fetch_categories)

    # ------------------------------------------------------------------
    # Tickets and subscriptions
    # ------------------------------------------------------------------

    async def get_subscription(self, subscription_id: str) -> Result[Subscription]:
        return await self._call(_tickets_api.fetch_subscription, subscription_id)

    async def checkin(self, request: CheckinRequest | dict[str, Any]) -> Result[CheckinResult]:
        try:
            body = request if isinstance(request, CheckinRequest) else CheckinRequest.model_validate(request)
        except ValidationError as exc:
            return validation_error(exc)
        return await self._call(_tickets_api.checkin, body)

    async def checkout(self, request: CheckoutRequest | dict[str, Any]) -> Result[CheckoutReceipt]:
        try:
            body = request if isinstance(request, CheckoutRequest) else CheckoutRequest.model_validate(request)
        except ValidationError as exc:
            return validation_error(exc)
        return await self._call(_tickets_api.checkout, body)

    async def get_ticket(self, ticket_id: str) -> Result[Ticket]:
        return await self._call(_tickets_api.fetch_ticket, ticket_id)

    # ------------------------------------------------------------------
    # Admin
    # ------------------------------------------------------------------

    async def get_parking_state(self) -> Result[list[ZoneState]]:
        return await self._call(_admin_api.fetch_parking_state)

    async def get_subscriptions(self) -> Result[list[Subscription]]:
        return await self._call(_admin_api.fetch_subscriptions)

    async def update_category(
        self,
        category_id: str,
        update: CategoryUpdate | dict[str, Any],
    ) -> Result[CategoryRates]:
        try:
            body = update if isinstance(update, CategoryUpdate) else CategoryUpdate.model_validate(update)
        except ValidationError as exc:
            return validation_error(exc)
        return await self._call(_admin_api.update_category, category_id, body)

    async def toggle_zone(self, zone_id: str, action: ZoneAction | str) -> Result[ZoneToggle]:
        try:
            zone_action = ZoneAction(action)
        except ValueError:
            return Result.error(
                f"Unknown zone action: {action}",
                error_kind=ErrorKind.VALIDATION,
                field_errors={"action": [f"must be one of {[a.value for a in ZoneAction]}"]},
            )
        return await self._call(_admin_api.toggle_zone, zone_id, zone_action)

    async def add_rush_hour(self, week_day: int, from_: str, to: str) -> Result[RushHour]:
        try:
            body = RushHourRequest(week_day=week_day, from_=from_, to=to)
        except ValidationError as exc:
            return validation_error(exc)
        return await self._call(_admin_api.add_rush_hour, body)

    async def add_vacation(self, name: str, from_: str, to: str) -> Result[Vacation]:
        try:
            body = VacationRequest(name=name, from_=from_, to=to)
        except ValidationError as exc:
            return validation_error(exc)
        return await self._call(_admin_api.add_vacation, body)

    # ------------------------------------------------------------------
    # Realtime
    # ------------------------------------------------------------------

    def realtime_channel(self) -> RealtimeChannel:
        """Build a realtime channel sharing this client's HTTP session."""
        return RealtimeChannel(self._config, http_session=self._http_session)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    async def _call(self, fn: Any, *args: Any) -> Result[Any]:
        try:
            policy = self._require_policy()
        except ParkingError as exc:
            return Result.from_exception(exc)
        return await fn(policy, *args)
