"""Redaction of credentials before they reach DEBUG logs.

Login bodies carry plain passwords, every authenticated request carries a
bearer token, and the local account registry stores password hashes and
salts. :func:`redact_for_log` masks all of them.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any

REDACTED = "<redacted>"

_SENSITIVE_KEYS = frozenset(
    {
        "password",
        "passwordhash",
        "passwordsalt",
        "token",
        "accesstoken",
        "authorization",
        "cookie",
    }
)

_BEARER = re.compile(r"(?i)\bbearer\s+\S+")
_MAX_DEPTH = 20


def _is_sensitive(key: object) -> bool:
    return str(key).lower().replace("_", "").replace("-", "") in _SENSITIVE_KEYS


def _redact_text(text: str, max_string: int) -> str:
    text = _BEARER.sub(f"Bearer {REDACTED}", text)
    if len(text) > max_string:
        return f"{text[:max_string]}…<truncated>"
    return text


def redact_for_log(value: Any, *, max_string: int = 512, _depth: int = 0) -> Any:
    """Return a copy of *value* with credentials masked.

    Mapping keys are matched case-insensitively, ignoring ``_`` and ``-``,
    so ``passwordHash``, ``password_hash`` and ``Password-Hash`` are all
    masked. Bearer tokens are also masked inside free text.
    """
    if _depth > _MAX_DEPTH:
        return "<max-depth>"
    if value is None or isinstance(value, (bool, int, float)):
        return value
    if isinstance(value, str):
        return _redact_text(value, max_string)
    if isinstance(value, (bytes, bytearray)):
        return f"<bytes:{len(value)}b>"
    if isinstance(value, Mapping):
        return {
            str(key): REDACTED
            if _is_sensitive(key)
            else redact_for_log(item, max_string=max_string, _depth=_depth + 1)
            for key, item in value.items()
        }
    if isinstance(value, (list, tuple, set, frozenset)):
        return [redact_for_log(item, max_string=max_string, _depth=_depth + 1) for item in value]
    return repr(value)
