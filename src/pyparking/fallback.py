"""Offline fallback policy layered over the request gateway.

Once the shared :class:`~pyparking.connectivity.ConnectivityState` is
degraded, read-mostly endpoints answer from canned datasets and a few
admin mutations are simulated locally. Everything else propagates the
gateway's error unchanged.
"""

from __future__ import annotations

import copy
import logging
from collections.abc import Callable
from typing import Any, TypeVar

from pyparking._transport import Transport
from pyparking.connectivity import ConnectivityState
from pyparking.result import Result

_logger = logging.getLogger(__name__)

T = TypeVar("T")


def _resolve(fallback: Any) -> Any:
    # Canned data may be a value or a zero-argument factory.
    value = fallback() if callable(fallback) else fallback
    return copy.deepcopy(value)


class OfflineFallbackPolicy:
    """Substitutes local answers for failed calls while degraded."""

    def __init__(self, transport: Transport, connectivity: ConnectivityState) -> None:
        self._transport = transport
        self._connectivity = connectivity

    @property
    def degraded(self) -> bool:
        return self._connectivity.degraded

    async def request(self, endpoint: str, method: str = "GET", body: Any = None) -> Result[Any]:
        """Plain delegation for endpoints that carry no fallback."""
        return await self._transport.request(endpoint, method, body)

    async def request_with_fallback(
        self,
        endpoint: str,
        method: str = "GET",
        body: Any = None,
        fallback: Any = None,
    ) -> Result[Any]:
        """Delegate to the gateway; on error while degraded return *fallback* instead.

        Without a fallback the gateway's error is returned as is.
        """
        result = await self._transport.request(endpoint, method, body)
        if result.is_error and self._connectivity.degraded and fallback is not None:
            _logger.debug("Serving offline data for %s %s", method, endpoint)
            return Result.success(_resolve(fallback))
        return result

    async def simulate_when_degraded(
        self,
        endpoint: str,
        method: str,
        body: Any,
        simulate: Callable[[], T],
    ) -> Result[Any]:
        """Answer locally with ``simulate()`` when degraded, skipping the network entirely."""
        if self._connectivity.degraded:
            _logger.debug("Simulating %s %s offline", method, endpoint)
            return Result.success(simulate())
        return await self._transport.request(endpoint, method, body)
