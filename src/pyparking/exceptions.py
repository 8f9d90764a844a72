"""Custom exception hierarchy for pyparking.

Public client operations never raise these; they are converted into a
:class:`~pyparking.result.Result` at the client boundary. The realtime
channel hands :class:`ParkingRealtimeError` to its ``on_error`` callback.
"""

from __future__ import annotations


class ParkingError(Exception):
    """Base exception for all pyparking errors."""


class ParkingConfigError(ParkingError):
    """Invalid or missing configuration."""


class ParkingStorageError(ParkingError):
    """Durable key-value storage could not be read or written."""


class ParkingValidationError(ParkingError):
    """Client-side precondition failed before reaching the network."""

    def __init__(self, message: str, *, field: str = "") -> None:
        self.field = field
        super().__init__(message)


class ParkingTransportError(ParkingError):
    """No response was obtained (connection refused, DNS, timeout)."""

    def __init__(self, message: str, *, endpoint: str = "") -> None:
        self.endpoint = endpoint
        super().__init__(message)


class ParkingApiError(ParkingError):
    """A response was obtained but it is not a success."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        endpoint: str = "",
        field_errors: dict[str, list[str]] | None = None,
    ) -> None:
        self.status_code = status_code
        self.endpoint = endpoint
        self.field_errors = field_errors
        super().__init__(message)


class ParkingRealtimeError(ParkingError):
    """Socket-level failure on the realtime push channel."""

    def __init__(self, message: str, *, url: str = "") -> None:
        self.url = url
        super().__init__(message)
