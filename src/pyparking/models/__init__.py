"""Data models for parking API payloads."""

from pyparking.models._base import ParkingBaseModel, ParkingRequestModel
from pyparking.models.admin import (
    CategoryRates,
    CategoryUpdate,
    RushHour,
    RushHourRequest,
    Vacation,
    VacationRequest,
    ZoneAction,
    ZoneState,
    ZoneToggle,
)
from pyparking.models.master import Category, Gate, Zone
from pyparking.models.subscription import CurrentCheckin, Subscription
from pyparking.models.ticket import (
    CheckinRequest,
    CheckinResult,
    CheckoutReceipt,
    CheckoutRequest,
    Ticket,
    TicketType,
)
from pyparking.models.user import LoginData, RegisteredUser, RegistrationData, User, UserRole

__all__ = [
    "Category",
    "CategoryRates",
    "CategoryUpdate",
    "CheckinRequest",
    "CheckinResult",
    "CheckoutReceipt",
    "CheckoutRequest",
    "CurrentCheckin",
    "Gate",
    "LoginData",
    "ParkingBaseModel",
    "ParkingRequestModel",
    "RegisteredUser",
    "RegistrationData",
    "RushHour",
    "RushHourRequest",
    "Subscription",
    "Ticket",
    "TicketType",
    "User",
    "UserRole",
    "Vacation",
    "VacationRequest",
    "Zone",
    "ZoneAction",
    "ZoneState",
    "ZoneToggle",
]
