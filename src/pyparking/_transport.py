"""HTTP request gateway with bearer auth and result normalisation."""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any, Protocol

import aiohttp

from pyparking._constants import (
    GENERIC_ERROR_MESSAGE,
    INVALID_RESPONSE_MESSAGE,
    NETWORK_ERROR_MESSAGE,
    OFFLINE_ERROR_MESSAGE,
    USER_AGENT,
)
from pyparking._redact import redact_for_log
from pyparking.config import ParkingConfig
from pyparking.connectivity import ConnectivityState
from pyparking.exceptions import ParkingApiError, ParkingTransportError
from pyparking.result import ErrorKind, Result
from pyparking.session import SessionTokenStore

_logger = logging.getLogger(__name__)


class Transport(Protocol):
    """Structural interface used by the fallback policy and endpoint modules.

    Tests pass small fakes that satisfy this protocol instead of a live
    :class:`RequestGateway`.
    """

    async def request(self, endpoint: str, method: str = "GET", body: Any = None) -> Result[Any]:
        ...


def _field_errors(payload: Any) -> dict[str, list[str]] | None:
    if not isinstance(payload, dict):
        return None
    errors = payload.get("errors")
    if not isinstance(errors, dict):
        return None
    normalized: dict[str, list[str]] = {}
    for field_name, messages in errors.items():
        if isinstance(messages, str):
            normalized[str(field_name)] = [messages]
        elif isinstance(messages, list):
            normalized[str(field_name)] = [str(m) for m in messages]
    return normalized or None


def _error_message(payload: Any) -> str:
    if isinstance(payload, dict):
        message = payload.get("message")
        if isinstance(message, str) and message.strip():
            return message
    return GENERIC_ERROR_MESSAGE


class RequestGateway:
    """Issues one JSON request/response exchange per call.

    No retries happen here. Every call reads the current token, so a
    login or logout between two calls takes effect immediately. Concurrent
    calls are independent and complete in no particular order.
    """

    def __init__(
        self,
        config: ParkingConfig,
        http_session: aiohttp.ClientSession,
        tokens: SessionTokenStore,
        connectivity: ConnectivityState,
    ) -> None:
        self._config = config
        self._http = http_session
        self._tokens = tokens
        self._connectivity = connectivity
        self._timeout = (
            aiohttp.ClientTimeout(total=config.request_timeout) if config.request_timeout is not None else None
        )

    @property
    def connectivity(self) -> ConnectivityState:
        return self._connectivity

    def _build_headers(self) -> dict[str, str]:
        headers: dict[str, str] = {
            "accept": "application/json",
            "content-type": "application/json",
            "user-agent": USER_AGENT,
        }
        token = self._tokens.get()
        if token:
            headers["authorization"] = f"Bearer {token}"
        return headers

    async def _exchange(self, endpoint: str, method: str, body: Any) -> Any:
        """Perform the HTTP call and return the decoded success body.

        Raises
        ------
        ParkingTransportError
            If no response was obtained.
        ParkingApiError
            If the response is not a 2xx or its body cannot be decoded.
        """
        url = f"{self._config.base_url}{endpoint}"
        headers = self._build_headers()
        data = json.dumps(body, separators=(",", ":")) if body is not None else None

        _logger.debug("%s %s headers=%s body=%s", method, url, redact_for_log(headers), redact_for_log(body))

        kwargs: dict[str, Any] = {"data": data, "headers": headers}
        if self._timeout is not None:
            kwargs["timeout"] = self._timeout

        try:
            async with self._http.request(method, url, **kwargs) as resp:
                status = resp.status
                try:
                    text: str | None = await resp.text()
                except UnicodeDecodeError:
                    _logger.debug("%s %s returned a body that is not valid text", method, url)
                    text = None
        except (aiohttp.ClientError, asyncio.TimeoutError, OSError) as exc:
            raise ParkingTransportError(
                f"Request to {endpoint} failed: {exc}",
                endpoint=endpoint,
            ) from exc

        _logger.debug("%s %s -> HTTP %s", method, url, status)

        payload: Any = None
        decoded = text is not None
        if text is not None and text.strip():
            try:
                payload = json.loads(text)
            except json.JSONDecodeError:
                decoded = False

        if not 200 <= status < 300:
            raise ParkingApiError(
                _error_message(payload),
                status_code=status,
                endpoint=endpoint,
                field_errors=_field_errors(payload),
            )

        if not decoded:
            raise ParkingApiError(
                INVALID_RESPONSE_MESSAGE,
                status_code=status,
                endpoint=endpoint,
            )
        return payload

    async def request(self, endpoint: str, method: str = "GET", body: Any = None) -> Result[Any]:
        """Send a request and normalise the outcome into a :class:`Result`."""
        try:
            payload = await self._exchange(endpoint, method.upper(), body)
        except ParkingTransportError as exc:
            _logger.debug("%s", exc)
            if self._config.offline_mode_enabled:
                self._connectivity.mark_degraded()
            message = OFFLINE_ERROR_MESSAGE if self._connectivity.degraded else NETWORK_ERROR_MESSAGE
            return Result.error(message, error_kind=ErrorKind.NETWORK)
        except ParkingApiError as exc:
            _logger.debug("%s %s failed: HTTP %s %s", method, endpoint, exc.status_code, exc)
            return Result.from_exception(exc)
        return Result.success(payload)
