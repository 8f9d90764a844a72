"""Degraded-mode flag shared by the request gateway and fallback policy."""

from __future__ import annotations

import logging

_logger = logging.getLogger(__name__)


class ConnectivityState:
    """One-way switch into degraded (offline) mode.

    Construct one per client and inject it wherever the flag is read or
    set. Once degraded the state never resets; a new client (or a new
    instance) is the only way back.
    """

    def __init__(self, *, degraded: bool = False) -> None:
        self._degraded = degraded

    @property
    def degraded(self) -> bool:
        return self._degraded

    def mark_degraded(self) -> bool:
        """Switch to degraded mode. Returns ``True`` only on the first switch."""
        if self._degraded:
            return False
        self._degraded = True
        _logger.warning("Backend server not available. Switching to offline mode.")
        return True

    def __repr__(self) -> str:
        return f"ConnectivityState(degraded={self._degraded})"
