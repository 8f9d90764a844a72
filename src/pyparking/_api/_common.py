"""Shared helpers for parking API endpoint modules.

It is internal to pyparking and may change at any time.
"""

from __future__ import annotations

import logging
import time
from functools import lru_cache
from typing import Any

from pydantic import TypeAdapter, ValidationError

from pyparking._constants import INVALID_RESPONSE_MESSAGE
from pyparking.result import ErrorKind, Result

_logger = logging.getLogger(__name__)


def now_ms() -> int:
    """Current epoch timestamp in milliseconds."""
    return int(time.time() * 1000)


@lru_cache(maxsize=None)
def _adapter(target: Any) -> TypeAdapter[Any]:
    return TypeAdapter(target)


def decode_result(endpoint: str, result: Result[Any], target: Any) -> Result[Any]:
    """Validate the success payload of *result* into *target*.

    *target* is a model class or a typing form such as ``list[Zone]``.
    A payload that does not fit becomes an application error.
    """
    try:
        return result.map(_adapter(target).validate_python)
    except ValidationError as exc:
        _logger.debug("Unexpected payload from %s: %s", endpoint, exc)
        return Result.error(INVALID_RESPONSE_MESSAGE, error_kind=ErrorKind.APPLICATION)


def validation_error(exc: ValidationError) -> Result[Any]:
    """Map a pydantic validation failure on a request body to a validation result."""
    field_errors: dict[str, list[str]] = {}
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ())) or "__root__"
        field_errors.setdefault(location, []).append(str(error.get("msg", "")))
    first = next(iter(field_errors.values()))[0] if field_errors else str(exc)
    return Result.error(first, error_kind=ErrorKind.VALIDATION, field_errors=field_errors)
