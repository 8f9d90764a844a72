"""Authentication strategies and offline account registration.

Endpoints:
  - /auth/login (remote strategy only)

The service has no usable registration endpoint, so registration always
runs locally against :class:`LocalAccountRegistry`. While degraded, login
is answered by :class:`LocalAuthentication` from the fixed demo accounts
and, optionally, locally registered ones.
"""

from __future__ import annotations

import hashlib
import hmac
import json
import logging
import secrets
from datetime import UTC, datetime
from typing import Any, Protocol

from pyparking._api._common import decode_result, now_ms
from pyparking._constants import (
    INVALID_CREDENTIALS_MESSAGE,
    MIN_PASSWORD_LENGTH,
    MIN_USERNAME_LENGTH,
    PASSWORD_TOO_SHORT_MESSAGE,
    REGISTERED_MESSAGE,
    REGISTERED_USERS_KEY,
    USERNAME_TAKEN_MESSAGE,
    USERNAME_TOO_SHORT_MESSAGE,
)
from pyparking._fallback_data import DEMO_ACCOUNTS
from pyparking._transport import Transport
from pyparking.exceptions import ParkingValidationError
from pyparking.models.user import LoginData, RegistrationData, UserRole
from pyparking.result import ErrorKind, Result
from pyparking.storage import KeyValueStore

_logger = logging.getLogger(__name__)

LOGIN_ENDPOINT = "/auth/login"

_PBKDF2_ITERATIONS = 100_000


def normalize_username(username: str) -> str:
    """Case-folded username with all whitespace removed."""
    return "".join(username.lower().split())


def _hash_password(password: str, salt: str) -> str:
    digest = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), bytes.fromhex(salt), _PBKDF2_ITERATIONS)
    return digest.hex()


class LocalAccountRegistry:
    """Durable list of accounts registered on this client.

    The list is loaded once; later storage failures keep the in-memory
    copy current without raising.
    """

    def __init__(self, store: KeyValueStore, *, key: str = REGISTERED_USERS_KEY) -> None:
        self._store = store
        self._key = key
        self._accounts: list[dict[str, Any]] = self._load()

    def _load(self) -> list[dict[str, Any]]:
        try:
            raw = self._store.get(self._key)
        except Exception:
            _logger.warning("Account storage unavailable; starting empty", exc_info=True)
            return []
        if not raw:
            return []
        try:
            loaded = json.loads(raw)
        except json.JSONDecodeError:
            _logger.warning("Ignoring corrupt %s slot", self._key)
            return []
        if not isinstance(loaded, list):
            _logger.warning("Ignoring %s slot that is not a list", self._key)
            return []
        return [entry for entry in loaded if isinstance(entry, dict) and isinstance(entry.get("username"), str)]

    def _persist(self) -> None:
        try:
            self._store.set(self._key, json.dumps(self._accounts, separators=(",", ":")))
        except Exception:
            _logger.warning("Failed to persist registered accounts; kept in memory", exc_info=True)

    @property
    def accounts(self) -> list[dict[str, Any]]:
        return [dict(entry) for entry in self._accounts]

    def usernames(self) -> list[str]:
        return [entry["username"] for entry in self._accounts]

    def find(self, username: str) -> dict[str, Any] | None:
        wanted = normalize_username(username)
        for entry in self._accounts:
            if normalize_username(entry["username"]) == wanted:
                return entry
        return None

    def add(self, username: str, password: str, role: UserRole) -> dict[str, Any]:
        """Append a new account and return its public fields."""
        salt = secrets.token_hex(16)
        public = {
            "id": f"user_{now_ms()}{secrets.token_hex(2)}",
            "username": username,
            "role": role.value,
            "registeredAt": datetime.now(tz=UTC).isoformat().replace("+00:00", "Z"),
        }
        self._accounts.append({**public, "passwordSalt": salt, "passwordHash": _hash_password(password, salt)})
        self._persist()
        return public

    def verify(self, username: str, password: str) -> dict[str, Any] | None:
        """Return the account when *password* matches its stored hash."""
        entry = self.find(username)
        if entry is None:
            return None
        salt = entry.get("passwordSalt")
        stored = entry.get("passwordHash")
        if not isinstance(salt, str) or not isinstance(stored, str):
            return None
        try:
            candidate = _hash_password(password, salt)
        except ValueError:
            return None
        return entry if hmac.compare_digest(candidate, stored) else None


class AuthenticationStrategy(Protocol):
    async def authenticate(self, username: str, password: str) -> Result[LoginData]:
        ...


class RemoteAuthentication:
    """Login through the service."""

    def __init__(self, transport: Transport) -> None:
        self._transport = transport

    async def authenticate(self, username: str, password: str) -> Result[LoginData]:
        result = await self._transport.request(
            LOGIN_ENDPOINT,
            "POST",
            {"username": username, "password": password},
        )
        return decode_result(LOGIN_ENDPOINT, result, LoginData)


class LocalAuthentication:
    """Offline login against the fixed account set and the local registry."""

    def __init__(
        self,
        registry: LocalAccountRegistry | None = None,
        *,
        accounts: tuple[tuple[str, str, str, str], ...] = DEMO_ACCOUNTS,
    ) -> None:
        self._registry = registry
        self._accounts = accounts

    def _match_fixed(self, username: str, password: str) -> dict[str, str] | None:
        wanted = normalize_username(username)
        for known_username, known_password, role, user_id in self._accounts:
            if normalize_username(known_username) == wanted and hmac.compare_digest(
                known_password.encode("utf-8"), password.encode("utf-8")
            ):
                return {"id": user_id, "username": known_username, "role": role}
        return None

    async def authenticate(self, username: str, password: str) -> Result[LoginData]:
        user = self._match_fixed(username, password)
        if user is None and self._registry is not None:
            entry = self._registry.verify(username, password)
            if entry is not None:
                user = {"id": entry["id"], "username": entry["username"], "role": entry["role"]}
        if user is None:
            _logger.debug("Offline login rejected for %r", username)
            return Result.error(INVALID_CREDENTIALS_MESSAGE, error_kind=ErrorKind.APPLICATION)

        _logger.debug("Offline login accepted for %r", user["username"])
        data = LoginData.model_validate({"user": user, "token": f"demo-token-{user['id']}"})
        return Result.success(data)


def fixed_usernames(accounts: tuple[tuple[str, str, str, str], ...] = DEMO_ACCOUNTS) -> list[str]:
    return [username for username, *_ in accounts]


def register_account(
    registry: LocalAccountRegistry,
    username: str,
    password: str,
    role: UserRole | str = UserRole.EMPLOYEE,
) -> Result[RegistrationData]:
    """Validate and store a new local account. No token is issued."""
    try:
        role = UserRole(role)
        if role is UserRole.GUEST:
            raise ValueError(role)
    except ValueError:
        return Result.from_exception(ParkingValidationError(f"Unsupported role: {role}", field="role"))

    try:
        if len(username) < MIN_USERNAME_LENGTH:
            raise ParkingValidationError(USERNAME_TOO_SHORT_MESSAGE, field="username")
        if len(password) < MIN_PASSWORD_LENGTH:
            raise ParkingValidationError(PASSWORD_TOO_SHORT_MESSAGE, field="password")
        wanted = normalize_username(username)
        existing = [*fixed_usernames(), *registry.usernames()]
        if any(normalize_username(name) == wanted for name in existing):
            raise ParkingValidationError(USERNAME_TAKEN_MESSAGE, field="username")
    except ParkingValidationError as exc:
        _logger.debug("Registration rejected for %r: %s", username, exc)
        return Result.from_exception(exc)

    public = registry.add(username, password, role)
    _logger.debug("Registered local account %r", username)
    return Result.success(RegistrationData.model_validate({"user": public, "message": REGISTERED_MESSAGE}))
