"""Uniform result shape returned by every public operation."""

from __future__ import annotations

import enum
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from pyparking._constants import GENERIC_ERROR_MESSAGE
from pyparking.exceptions import (
    ParkingApiError,
    ParkingError,
    ParkingTransportError,
    ParkingValidationError,
)

T = TypeVar("T")
U = TypeVar("U")


class ResultKind(enum.StrEnum):
    """Tag of a :class:`Result`."""

    SUCCESS = "success"
    ERROR = "error"


class ErrorKind(enum.StrEnum):
    """Failure taxonomy carried by error results."""

    VALIDATION = "validation"
    NETWORK = "network"
    APPLICATION = "application"


@dataclass(frozen=True)
class Result(Generic[T]):
    """Tagged value: either ``success`` with ``data`` or ``error`` with ``message``.

    ``field_errors`` maps a field name to its ordered messages when the
    server reported per-field validation failures.
    """

    kind: ResultKind
    data: T | None = None
    message: str | None = None
    field_errors: dict[str, list[str]] | None = None
    error_kind: ErrorKind | None = None

    def __post_init__(self) -> None:
        if self.kind is ResultKind.SUCCESS:
            if self.error_kind is not None or self.field_errors is not None:
                raise ValueError("success result cannot carry error details")
        elif self.data is not None:
            raise ValueError("error result cannot carry data")

    @classmethod
    def success(cls, data: T) -> Result[T]:
        return cls(kind=ResultKind.SUCCESS, data=data)

    @classmethod
    def error(
        cls,
        message: str,
        *,
        error_kind: ErrorKind = ErrorKind.APPLICATION,
        field_errors: dict[str, list[str]] | None = None,
    ) -> Result[Any]:
        return cls(
            kind=ResultKind.ERROR,
            message=message or GENERIC_ERROR_MESSAGE,
            field_errors=field_errors,
            error_kind=error_kind,
        )

    @classmethod
    def from_exception(cls, exc: ParkingError) -> Result[Any]:
        """Map an internal exception onto an error result."""
        if isinstance(exc, ParkingValidationError):
            field_errors = {exc.field: [str(exc)]} if exc.field else None
            return cls.error(str(exc), error_kind=ErrorKind.VALIDATION, field_errors=field_errors)
        if isinstance(exc, ParkingTransportError):
            return cls.error(str(exc), error_kind=ErrorKind.NETWORK)
        if isinstance(exc, ParkingApiError):
            return cls.error(str(exc), error_kind=ErrorKind.APPLICATION, field_errors=exc.field_errors)
        return cls.error(str(exc))

    @property
    def is_success(self) -> bool:
        return self.kind is ResultKind.SUCCESS

    @property
    def is_error(self) -> bool:
        return self.kind is ResultKind.ERROR

    def map(self, fn: Callable[[T], U]) -> Result[U]:
        """Transform the success payload; errors pass through unchanged."""
        if self.kind is ResultKind.ERROR:
            return self  # type: ignore[return-value]
        return Result.success(fn(self.data))  # type: ignore[arg-type]
