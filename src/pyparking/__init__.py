"""pyparking - Async Python client for the parking-operations API."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("pyparking")
except PackageNotFoundError:
    __version__ = "0+local"
from pyparking._transport import RequestGateway
from pyparking.client import ParkingClient
from pyparking.config import ParkingConfig
from pyparking.connectivity import ConnectivityState
from pyparking.exceptions import (
    ParkingApiError,
    ParkingConfigError,
    ParkingError,
    ParkingRealtimeError,
    ParkingStorageError,
    ParkingTransportError,
    ParkingValidationError,
)
from pyparking.fallback import OfflineFallbackPolicy
from pyparking.models import (
    Category,
    CategoryUpdate,
    CheckinRequest,
    CheckoutRequest,
    Gate,
    LoginData,
    Subscription,
    Ticket,
    TicketType,
    User,
    UserRole,
    Zone,
    ZoneAction,
    ZoneState,
)
from pyparking.realtime import ChannelState, RealtimeChannel
from pyparking.result import ErrorKind, Result, ResultKind
from pyparking.session import SessionTokenStore
from pyparking.storage import JsonFileStore, KeyValueStore, MemoryStore

__all__ = [
    "__version__",
    "Category",
    "CategoryUpdate",
    "ChannelState",
    "CheckinRequest",
    "CheckoutRequest",
    "ConnectivityState",
    "ErrorKind",
    "Gate",
    "JsonFileStore",
    "KeyValueStore",
    "LoginData",
    "MemoryStore",
    "OfflineFallbackPolicy",
    "ParkingApiError",
    "ParkingClient",
    "ParkingConfig",
    "ParkingConfigError",
    "ParkingError",
    "ParkingRealtimeError",
    "ParkingStorageError",
    "ParkingTransportError",
    "ParkingValidationError",
    "RealtimeChannel",
    "RequestGateway",
    "Result",
    "ResultKind",
    "SessionTokenStore",
    "Subscription",
    "Ticket",
    "TicketType",
    "User",
    "UserRole",
    "Zone",
    "ZoneAction",
    "ZoneState",
]
