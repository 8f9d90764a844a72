from __future__ import annotations

import json
from typing import Any

import pytest

from pyparking._api.auth import (
    LocalAccountRegistry,
    LocalAuthentication,
    RemoteAuthentication,
    normalize_username,
    register_account,
)
from pyparking.models.user import UserRole
from pyparking.result import ErrorKind, Result
from pyparking.storage import MemoryStore


class _FakeTransport:
    def __init__(self, result: Result[Any]) -> None:
        self._result = result
        self.calls: list[tuple[str, str, Any]] = []

    async def request(self, endpoint: str, method: str = "GET", body: Any = None) -> Result[Any]:
        self.calls.append((endpoint, method, body))
        return self._result


def test_normalize_username() -> None:
    assert normalize_username("  Reda Salem\t") == "redasalem"


@pytest.mark.parametrize("username", ["", "ab", "x"])
def test_short_username_rejected(username: str) -> None:
    result = register_account(LocalAccountRegistry(MemoryStore()), username, "secret1")
    assert result.error_kind is ErrorKind.VALIDATION
    assert result.message == "Username must be at least 3 characters long"


@pytest.mark.parametrize("password", ["", "12345"])
def test_short_password_rejected(password: str) -> None:
    result = register_account(LocalAccountRegistry(MemoryStore()), "newuser", password)
    assert result.error_kind is ErrorKind.VALIDATION
    assert result.message == "Password must be at least 6 characters long"


@pytest.mark.parametrize("username", ["admin", "ADMIN", "Employee", "reda salem", " redasalem "])
def test_fixed_usernames_are_taken(username: str) -> None:
    result = register_account(LocalAccountRegistry(MemoryStore()), username, "secret1")
    assert result.is_error
    assert result.message == "This username is already taken. Please choose a different username."


def test_registration_persists_and_blocks_duplicates() -> None:
    store = MemoryStore()
    first = register_account(LocalAccountRegistry(store), "Night Guard", "secret1", UserRole.ADMIN)

    assert first.is_success
    assert first.data is not None
    assert first.data.user.username == "Night Guard"
    assert first.data.user.role is UserRole.ADMIN
    assert first.data.message.startswith("Account created successfully!")
    assert not hasattr(first.data, "token")

    stored = json.loads(store.get("registered_users") or "[]")
    assert [entry["username"] for entry in stored] == ["Night Guard"]
    assert "secret1" not in (store.get("registered_users") or "")

    duplicate = register_account(LocalAccountRegistry(store), "nightguard", "another1")
    assert duplicate.message == "This username is already taken. Please choose a different username."


def test_guest_role_cannot_register() -> None:
    result = register_account(LocalAccountRegistry(MemoryStore()), "visitor", "secret1", "guest")
    assert result.error_kind is ErrorKind.VALIDATION


def test_corrupt_registry_slot_is_treated_as_empty() -> None:
    registry = LocalAccountRegistry(MemoryStore({"registered_users": "{broken"}))
    assert registry.accounts == []
    assert register_account(registry, "newuser", "secret1").is_success


def test_legacy_entries_without_password_count_for_uniqueness() -> None:
    legacy = json.dumps([{"id": "user_1", "username": "legacy", "role": "employee"}])
    registry = LocalAccountRegistry(MemoryStore({"registered_users": legacy}))

    assert register_account(registry, "Legacy", "secret1").is_error
    assert registry.verify("legacy", "anything") is None


@pytest.mark.asyncio
async def test_local_login_fixed_admin() -> None:
    result = await LocalAuthentication().authenticate("admin", "admin")

    assert result.is_success
    assert result.data is not None
    assert result.data.user.role is UserRole.ADMIN
    assert result.data.user.id == "admin-1"
    assert result.data.token == "demo-token-admin-1"


@pytest.mark.asyncio
async def test_local_login_normalizes_username_not_password() -> None:
    auth = LocalAuthentication()
    assert (await auth.authenticate("Reda Salem", "012345678")).is_success
    wrong = await auth.authenticate("admin", "ADMIN")
    assert wrong.message == "Invalid username or password"


@pytest.mark.asyncio
async def test_registered_account_logs_in_offline() -> None:
    registry = LocalAccountRegistry(MemoryStore())
    registered = register_account(registry, "nightguard", "secret1")
    assert registered.data is not None

    result = await LocalAuthentication(registry).authenticate("NightGuard", "secret1")

    assert result.is_success
    assert result.data is not None
    assert result.data.user.id == registered.data.user.id
    assert (await LocalAuthentication(registry).authenticate("nightguard", "secret2")).is_error


@pytest.mark.asyncio
async def test_registered_account_ignored_without_registry() -> None:
    registry = LocalAccountRegistry(MemoryStore())
    register_account(registry, "nightguard", "secret1")

    result = await LocalAuthentication().authenticate("nightguard", "secret1")

    assert result.is_error


@pytest.mark.asyncio
async def test_remote_login_decodes_payload() -> None:
    payload = {"user": {"id": "u1", "username": "ops", "role": "employee"}, "token": "jwt"}
    transport = _FakeTransport(Result.success(payload))

    result = await RemoteAuthentication(transport).authenticate("ops", "pw")

    assert transport.calls == [("/auth/login", "POST", {"username": "ops", "password": "pw"})]
    assert result.data is not None
    assert result.data.token == "jwt"
    assert result.data.user.role is UserRole.EMPLOYEE


@pytest.mark.asyncio
async def test_remote_login_with_unexpected_payload_is_error() -> None:
    result = await RemoteAuthentication(_FakeTransport(Result.success({"token": 1}))).authenticate("ops", "pw")
    assert result.error_kind is ErrorKind.APPLICATION
