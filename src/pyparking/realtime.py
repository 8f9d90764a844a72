"""Self-healing realtime channel over an aiohttp WebSocket.

Owns:
- one WebSocket connection and the task reading from it
- linear-backoff reconnection after unexpected closes, bounded by
  ``max_reconnect_attempts``
- the set of subscribed topics (gate ids), replayed after each open
"""

from __future__ import annotations

import asyncio
import contextlib
import enum
import json
import logging
from collections.abc import Awaitable, Callable
from typing import Any, Protocol

import aiohttp

from pyparking._constants import SUBSCRIBE, UNSUBSCRIBE
from pyparking.config import ParkingConfig
from pyparking.exceptions import ParkingRealtimeError

_logger = logging.getLogger(__name__)

MessageHandler = Callable[[Any], None]
ErrorHandler = Callable[[ParkingRealtimeError], None]

_CLOSE_TYPES = frozenset({aiohttp.WSMsgType.CLOSE, aiohttp.WSMsgType.CLOSING, aiohttp.WSMsgType.CLOSED})


class ChannelState(enum.StrEnum):
    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"
    RECONNECTING = "reconnecting"
    PERMANENTLY_DISCONNECTED = "permanently_disconnected"


class WebSocketLike(Protocol):
    """The subset of :class:`aiohttp.ClientWebSocketResponse` the channel uses."""

    @property
    def closed(self) -> bool:
        ...

    async def receive(self) -> Any:
        ...

    async def send_str(self, data: str) -> None:
        ...

    async def close(self) -> Any:
        ...

    def exception(self) -> BaseException | None:
        ...


Connector = Callable[[str], Awaitable[WebSocketLike]]


class RealtimeChannel:
    """Duplex push channel with bounded reconnection.

    Usage::

        channel = RealtimeChannel(config)
        await channel.connect(on_message=print)
        await channel.subscribe("gate-1")
        ...
        await channel.disconnect()

    Parameters
    ----------
    config : ParkingConfig
        Supplies ``ws_url`` and the reconnection policy.
    http_session : aiohttp.ClientSession or None
        Session used by the default connector. When omitted the channel
        creates one and closes it on :meth:`disconnect`.
    connector : callable or None
        ``async (url) -> socket`` replacing ``http_session.ws_connect``.
    sleep : callable
        Awaitable delay used between reconnection attempts.
    """

    def __init__(
        self,
        config: ParkingConfig,
        *,
        http_session: aiohttp.ClientSession | None = None,
        connector: Connector | None = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ) -> None:
        self._config = config
        self._url = config.ws_url
        self._http_session = http_session
        self._owns_session = False
        self._connector: Connector = connector or self._default_connector
        self._sleep = sleep

        self._ws: WebSocketLike | None = None
        self._state = ChannelState.DISCONNECTED
        self._reconnect_attempts = 0
        self._offline = False
        self._closing = False
        self._last_failure: BaseException | None = None
        # dict keeps subscription order for deterministic replay
        self._topics: dict[str, None] = {}
        self._reader: asyncio.Task[None] | None = None
        self._reconnect_task: asyncio.Task[None] | None = None
        self._on_message: MessageHandler | None = None
        self._on_error: ErrorHandler | None = None

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    @property
    def url(self) -> str:
        return self._url

    @property
    def state(self) -> ChannelState:
        return self._state

    @property
    def reconnect_attempts(self) -> int:
        return self._reconnect_attempts

    @property
    def subscribed_topics(self) -> frozenset[str]:
        return frozenset(self._topics)

    @property
    def is_offline(self) -> bool:
        """Whether the channel has given up (error or exhausted reconnects)."""
        return self._offline

    @property
    def is_open(self) -> bool:
        ws = self._ws
        return self._state is ChannelState.CONNECTED and ws is not None and not ws.closed

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def _default_connector(self, url: str) -> WebSocketLike:
        if self._http_session is None or self._http_session.closed:
            self._http_session = aiohttp.ClientSession()
            self._owns_session = True
        return await self._http_session.ws_connect(url)

    async def connect(
        self,
        on_message: MessageHandler | None = None,
        on_error: ErrorHandler | None = None,
    ) -> None:
        """Open the connection once; later reconnects reuse these callbacks."""
        if on_message is not None:
            self._on_message = on_message
        if on_error is not None:
            self._on_error = on_error

        if self._state in (ChannelState.CONNECTING, ChannelState.CONNECTED):
            _logger.debug("Realtime connect ignored in state %s", self._state)
            return

        pending = self._reconnect_task
        if pending is not None and pending is not asyncio.current_task() and not pending.done():
            pending.cancel()
        self._reconnect_task = None

        self._closing = False
        self._state = ChannelState.CONNECTING
        _logger.debug("Realtime connecting to %s", self._url)

        try:
            ws = await self._connector(self._url)
        except (aiohttp.ClientError, asyncio.TimeoutError, OSError) as exc:
            _logger.debug("Realtime connection to %s failed: %s", self._url, exc)
            self._last_failure = exc
            self._handle_close()
            return

        if self._closing:
            # disconnect() won the race while the handshake was in flight
            await ws.close()
            return

        self._ws = ws
        self._state = ChannelState.CONNECTED
        self._reconnect_attempts = 0
        self._offline = False
        self._last_failure = None
        _logger.debug("Realtime connected to %s", self._url)

        self._reader = asyncio.create_task(self._read_loop(ws))
        if self._config.replay_subscriptions:
            for topic in list(self._topics):
                await self._send(SUBSCRIBE, topic)

    async def disconnect(self) -> None:
        """Close the socket and cancel any pending reconnection."""
        self._closing = True
        current = asyncio.current_task()

        pending = self._reconnect_task
        self._reconnect_task = None
        if pending is not None and pending is not current and not pending.done():
            pending.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await pending

        ws = self._ws
        self._ws = None
        if ws is not None:
            await ws.close()

        reader = self._reader
        self._reader = None
        if reader is not None and reader is not current and not reader.done():
            reader.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await reader

        if self._owns_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None
            self._owns_session = False

        self._state = ChannelState.DISCONNECTED
        _logger.debug("Realtime disconnected from %s", self._url)

    async def wait_closed(self) -> None:
        """Wait until no read or reconnect task is pending."""
        while True:
            pending = [
                task
                for task in (self._reader, self._reconnect_task)
                if task is not None and not task.done() and task is not asyncio.current_task()
            ]
            if not pending:
                return
            await asyncio.gather(*pending, return_exceptions=True)

    # ------------------------------------------------------------------
    # Subscriptions
    # ------------------------------------------------------------------

    async def subscribe(self, topic: str) -> bool:
        """Observe *topic*. Returns whether the request was sent now."""
        self._topics[topic] = None
        return await self._send(SUBSCRIBE, topic)

    async def unsubscribe(self, topic: str) -> bool:
        """Stop observing *topic*. Returns whether the request was sent now."""
        self._topics.pop(topic, None)
        return await self._send(UNSUBSCRIBE, topic)

    async def _send(self, message_type: str, topic: str) -> bool:
        ws = self._ws
        if not self.is_open or ws is None:
            _logger.debug("Realtime %s %s skipped: channel not open", message_type, topic)
            return False
        envelope = {"type": message_type, "payload": {"gateId": topic}}
        try:
            await ws.send_str(json.dumps(envelope, separators=(",", ":")))
        except (aiohttp.ClientError, ConnectionError) as exc:
            _logger.debug("Realtime %s %s failed: %s", message_type, topic, exc)
            return False
        return True

    # ------------------------------------------------------------------
    # Inbound
    # ------------------------------------------------------------------

    async def _read_loop(self, ws: WebSocketLike) -> None:
        failed = False
        try:
            while True:
                msg = await ws.receive()
                if msg.type is aiohttp.WSMsgType.TEXT:
                    self._dispatch(msg.data)
                elif msg.type is aiohttp.WSMsgType.BINARY:
                    try:
                        self._dispatch(msg.data.decode("utf-8"))
                    except UnicodeDecodeError:
                        _logger.warning("Dropping non UTF-8 realtime frame")
                elif msg.type is aiohttp.WSMsgType.ERROR:
                    failed = True
                    self._handle_error(ws.exception() or msg.data)
                    break
                elif msg.type in _CLOSE_TYPES:
                    break
        except asyncio.CancelledError:
            raise
        except Exception as exc:
            failed = True
            self._handle_error(exc)

        if self._ws is ws:
            self._ws = None
        if failed:
            with contextlib.suppress(Exception):
                await ws.close()
            return
        self._handle_close()

    def _dispatch(self, text: str) -> None:
        try:
            payload = json.loads(text)
        except json.JSONDecodeError:
            _logger.warning("Failed to parse realtime message: %.128s", text)
            return
        if self._on_message is None:
            return
        try:
            self._on_message(payload)
        except Exception:
            _logger.debug("Realtime on_message callback failed", exc_info=True)

    def _handle_error(self, cause: Any) -> None:
        self._offline = True
        self._state = ChannelState.PERMANENTLY_DISCONNECTED
        error = ParkingRealtimeError(f"Realtime connection error: {cause}", url=self._url)
        if isinstance(cause, BaseException):
            error.__cause__ = cause
        self._notify_error(error)

    def _notify_error(self, error: ParkingRealtimeError) -> None:
        _logger.debug("%s", error)
        if self._on_error is None:
            return
        try:
            self._on_error(error)
        except Exception:
            _logger.debug("Realtime on_error callback failed", exc_info=True)

    # ------------------------------------------------------------------
    # Reconnection
    # ------------------------------------------------------------------

    def _handle_close(self) -> None:
        if self._closing:
            self._state = ChannelState.DISCONNECTED
            return
        if self._offline:
            self._state = ChannelState.PERMANENTLY_DISCONNECTED
            return

        self._state = ChannelState.RECONNECTING
        self._reconnect_attempts += 1
        if self._reconnect_attempts > self._config.max_reconnect_attempts:
            self._offline = True
            self._state = ChannelState.PERMANENTLY_DISCONNECTED
            error = ParkingRealtimeError(
                f"Realtime gave up on {self._url} after {self._reconnect_attempts - 1} reconnect attempts",
                url=self._url,
            )
            error.__cause__ = self._last_failure
            self._notify_error(error)
            return

        delay = self._config.reconnect_base_delay * self._reconnect_attempts
        _logger.debug("Realtime reconnect attempt %d in %.1fs", self._reconnect_attempts, delay)
        self._reconnect_task = asyncio.create_task(self._reconnect_after(delay))

    async def _reconnect_after(self, delay: float) -> None:
        await self._sleep(delay)
        if self._closing:
            return
        await self.connect()
