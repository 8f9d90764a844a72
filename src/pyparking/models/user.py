"""Account models returned by login and registration."""

from __future__ import annotations

import enum

from pyparking.models._base import ParkingBaseModel


class UserRole(enum.StrEnum):
    ADMIN = "admin"
    EMPLOYEE = "employee"
    GUEST = "guest"


class User(ParkingBaseModel):
    """Authenticated operator."""

    id: str
    username: str
    role: UserRole = UserRole.GUEST


class LoginData(ParkingBaseModel):
    """Successful login payload: the user plus its bearer token."""

    user: User
    token: str


class RegisteredUser(User):
    """Locally registered account as shown to callers (no password material)."""

    registered_at: str | None = None


class RegistrationData(ParkingBaseModel):
    user: RegisteredUser
    message: str = ""
