"""Reference data: gates, zones and categories."""

from __future__ import annotations

from pydantic import Field

from pyparking.models._base import ParkingBaseModel


class Gate(ParkingBaseModel):
    """Entrance gate and the zones reachable from it."""

    id: str
    name: str = ""
    zone_ids: list[str] = Field(default_factory=list)
    location: str = ""


class Zone(ParkingBaseModel):
    """Parking zone with its live occupancy counters.

    The counters and rates are computed by the service; the client only
    transports them.
    """

    id: str
    name: str = ""
    category_id: str = ""
    gate_ids: list[str] = Field(default_factory=list)
    total_slots: int = 0
    occupied: int = 0
    free: int = 0
    reserved: int = 0
    available_for_visitors: int = 0
    available_for_subscribers: int = 0
    rate_normal: float = 0.0
    rate_special: float = 0.0
    open: bool = True


class Category(ParkingBaseModel):
    id: str
    name: str = ""
    description: str = ""
    rate_normal: float = 0.0
    rate_special: float = 0.0
