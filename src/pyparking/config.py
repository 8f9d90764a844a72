"""Client configuration for pyparking."""

from __future__ import annotations

import dataclasses
import os
from typing import Any

from pyparking._constants import (
    BASE_URL,
    MAX_RECONNECT_ATTEMPTS,
    PRODUCTION_ENVIRONMENT,
    RECONNECT_BASE_DELAY,
    REGISTERED_USERS_KEY,
    TOKEN_KEY,
    WS_URL,
)
from pyparking.exceptions import ParkingConfigError


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


def _env_number(env_key: str, value: str, kind: type[float] | type[int]) -> float | int:
    try:
        return kind(value)
    except ValueError as exc:
        raise ParkingConfigError(f"{env_key} must be a {kind.__name__}, got {value!r}") from exc


@dataclasses.dataclass(frozen=True)
class ParkingConfig:
    """Client configuration.

    Parameters
    ----------
    base_url : str
        HTTP API base path. Endpoint paths are appended verbatim.
    ws_url : str
        URL of the realtime push channel.
    environment : str
        Deployment environment name. Any value other than
        ``"production"`` enables automatic offline-mode detection.
    storage_path : str or None
        JSON file backing the durable key-value store. ``None`` keeps
        the token and local accounts in memory only.
    token_key : str
        Storage key of the bearer token slot.
    registered_users_key : str
        Storage key of the locally registered accounts list.
    reconnect_base_delay : float
        Base interval in seconds for the realtime linear backoff.
    max_reconnect_attempts : int
        Unexpected closes tolerated before the realtime channel gives up.
    replay_subscriptions : bool
        Resend every subscribed topic after each successful realtime open.
    offline_login_registered_accounts : bool
        Allow locally registered accounts to sign in while offline.
    request_timeout : float or None
        Total timeout in seconds for one HTTP exchange. ``None`` keeps
        the aiohttp defaults.
    """

    base_url: str = BASE_URL
    ws_url: str = WS_URL
    environment: str = "development"
    storage_path: str | None = None
    token_key: str = TOKEN_KEY
    registered_users_key: str = REGISTERED_USERS_KEY
    reconnect_base_delay: float = RECONNECT_BASE_DELAY
    max_reconnect_attempts: int = MAX_RECONNECT_ATTEMPTS
    replay_subscriptions: bool = True
    offline_login_registered_accounts: bool = True
    request_timeout: float | None = None

    def __post_init__(self) -> None:
        if self.reconnect_base_delay < 0:
            raise ParkingConfigError("reconnect_base_delay must not be negative")
        if self.max_reconnect_attempts < 0:
            raise ParkingConfigError("max_reconnect_attempts must not be negative")

    @property
    def offline_mode_enabled(self) -> bool:
        """Whether network failures may switch the client into degraded mode."""
        return self.environment.strip().lower() != PRODUCTION_ENVIRONMENT

    @classmethod
    def from_env(cls, **overrides: Any) -> ParkingConfig:
        """Create configuration from environment variables.

        Reads the optional ``PARKING_*`` variables. Explicit keyword
        arguments override environment values.

        Raises
        ------
        ParkingConfigError
            If a numeric variable cannot be parsed.
        """
        env = os.environ

        _ENV_CONFIG_MAP = {
            "PARKING_BASE_URL": "base_url",
            "PARKING_WS_URL": "ws_url",
            "PARKING_ENV": "environment",
            "PARKING_STORAGE_PATH": "storage_path",
        }
        config_kwargs: dict[str, Any] = {}
        for env_key, field_name in _ENV_CONFIG_MAP.items():
            val = env.get(env_key)
            if val is not None:
                config_kwargs[field_name] = val

        delay_env = env.get("PARKING_RECONNECT_BASE_DELAY")
        if delay_env is not None and "reconnect_base_delay" not in overrides:
            config_kwargs["reconnect_base_delay"] = _env_number("PARKING_RECONNECT_BASE_DELAY", delay_env, float)

        attempts_env = env.get("PARKING_MAX_RECONNECT_ATTEMPTS")
        if attempts_env is not None and "max_reconnect_attempts" not in overrides:
            config_kwargs["max_reconnect_attempts"] = _env_number(
                "PARKING_MAX_RECONNECT_ATTEMPTS",
                attempts_env,
                int,
            )

        timeout_env = env.get("PARKING_REQUEST_TIMEOUT")
        if timeout_env is not None and "request_timeout" not in overrides:
            config_kwargs["request_timeout"] = _env_number("PARKING_REQUEST_TIMEOUT", timeout_env, float)

        if "replay_subscriptions" not in overrides:
            config_kwargs["replay_subscriptions"] = _env_bool(env.get("PARKING_REPLAY_SUBSCRIPTIONS"), True)

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
