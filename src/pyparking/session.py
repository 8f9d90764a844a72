"""Bearer token persistence across client restarts."""

from __future__ import annotations

import logging

from pyparking._constants import TOKEN_KEY
from pyparking.storage import KeyValueStore, MemoryStore

_logger = logging.getLogger(__name__)


class SessionTokenStore:
    """Holds at most one opaque bearer token.

    The in-memory copy is authoritative; the durable slot only seeds it at
    construction. Storage failures are logged and never raised, after which
    the token lives in memory only.

    Parameters
    ----------
    store : KeyValueStore or None
        Durable backing store. Defaults to a fresh :class:`MemoryStore`.
    key : str
        Storage slot holding the token.
    """

    def __init__(self, store: KeyValueStore | None = None, *, key: str = TOKEN_KEY) -> None:
        self._store: KeyValueStore | None = store if store is not None else MemoryStore()
        self._key = key
        self._token: str | None = None
        try:
            self._token = self._store.get(key) or None
        except Exception:
            _logger.warning("Token storage unavailable; using memory only", exc_info=True)
            self._store = None

    def get(self) -> str | None:
        return self._token

    def set(self, token: str) -> None:
        self._token = token or None
        if self._store is None:
            return
        try:
            if self._token is None:
                self._store.remove(self._key)
            else:
                self._store.set(self._key, token)
        except Exception:
            _logger.warning("Failed to persist token; using memory only", exc_info=True)
            self._store = None

    def clear(self) -> None:
        self._token = None
        if self._store is None:
            return
        try:
            self._store.remove(self._key)
        except Exception:
            _logger.warning("Failed to remove persisted token; using memory only", exc_info=True)
            self._store = None

    @property
    def is_persistent(self) -> bool:
        """False once the durable slot has failed and the token is memory-only."""
        return self._store is not None
