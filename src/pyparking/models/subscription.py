"""Subscriber models."""

from __future__ import annotations

from pydantic import Field

from pyparking.models._base import ParkingBaseModel


class CurrentCheckin(ParkingBaseModel):
    """An open ticket held by a subscriber."""

    ticket_id: str
    zone_id: str = ""
    checkin_at: str | None = None


class Subscription(ParkingBaseModel):
    id: str
    user_id: str = ""
    category: str = ""
    active: bool = False
    start_date: str | None = None
    end_date: str | None = None
    current_checkins: list[CurrentCheckin] = Field(default_factory=list)
