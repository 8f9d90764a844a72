"""Durable key-value storage for the bearer token and local accounts.

Writes are best-effort: a store that cannot persist logs a warning and
keeps serving values from memory for the rest of the process.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Protocol

from pyparking.exceptions import ParkingStorageError

_logger = logging.getLogger(__name__)


class KeyValueStore(Protocol):
    """String key-value capability injected into the token store and account registry."""

    def get(self, key: str) -> str | None:
        ...

    def set(self, key: str, value: str) -> None:
        ...

    def remove(self, key: str) -> None:
        ...


class MemoryStore:
    """Process-local store for environments without persistent storage."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._values: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._values.get(key)

    def set(self, key: str, value: str) -> None:
        self._values[key] = value

    def remove(self, key: str) -> None:
        self._values.pop(key, None)


class JsonFileStore:
    """Key-value store persisted as a single JSON object on disk.

    The file is read once at construction. Every mutation rewrites it
    atomically; the first failed write switches the store to memory-only.
    """

    def __init__(self, path: str | os.PathLike[str]) -> None:
        self._path = Path(path)
        self._values: dict[str, str] = {}
        self._persistent = True
        try:
            self._values = self._load()
        except ParkingStorageError:
            _logger.warning("Storage file %s unreadable; starting empty", self._path, exc_info=True)

    @property
    def path(self) -> Path:
        return self._path

    @property
    def is_persistent(self) -> bool:
        """False once a write has failed and the store runs from memory."""
        return self._persistent

    def _load(self) -> dict[str, str]:
        try:
            text = self._path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        except OSError as exc:
            raise ParkingStorageError(f"Cannot read {self._path}: {exc}") from exc

        try:
            loaded = json.loads(text) if text.strip() else {}
        except json.JSONDecodeError as exc:
            raise ParkingStorageError(f"{self._path} is not valid JSON") from exc
        if not isinstance(loaded, dict):
            raise ParkingStorageError(f"{self._path} does not hold a JSON object")
        return {str(k): v for k, v in loaded.items() if isinstance(v, str)}

    def _flush(self) -> None:
        if not self._persistent:
            return
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=self._path.parent, prefix=f".{self._path.name}.")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as fh:
                    json.dump(self._values, fh, separators=(",", ":"))
                os.replace(tmp_name, self._path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError:
            self._persistent = False
            _logger.warning(
                "Cannot persist storage to %s; continuing in memory only",
                self._path,
                exc_info=True,
            )

    def get(self, key: str) -> str | None:
        return self._values.get(key)

    def set(self, key: str, value: str) -> None:
        self._values[key] = value
        self._flush()

    def remove(self, key: str) -> None:
        if self._values.pop(key, None) is not None:
            self._flush()


def open_store(path: str | os.PathLike[str] | None) -> KeyValueStore:
    """Return a file-backed store for *path*, or a memory store when ``None``."""
    if path is None:
        return MemoryStore()
    return JsonFileStore(path)
