"""Ticket request and response models."""

from __future__ import annotations

import enum
from typing import Any

from pydantic import Field, model_validator

from pyparking.models._base import ParkingBaseModel, ParkingRequestModel
from pyparking.models.admin import ZoneState


class TicketType(enum.StrEnum):
    VISITOR = "visitor"
    SUBSCRIBER = "subscriber"


class CheckinRequest(ParkingRequestModel):
    """Body of ``POST /tickets/checkin``.

    ``subscription_id`` is required for subscriber tickets.
    """

    gate_id: str = Field(min_length=1)
    zone_id: str = Field(min_length=1)
    type: TicketType = TicketType.VISITOR
    subscription_id: str | None = None

    @model_validator(mode="after")
    def _subscriber_needs_subscription(self) -> CheckinRequest:
        if self.type is TicketType.SUBSCRIBER and not self.subscription_id:
            raise ValueError("subscription_id is required for subscriber check-in")
        return self


class CheckoutRequest(ParkingRequestModel):
    """Body of ``POST /tickets/checkout``."""

    ticket_id: str = Field(min_length=1)
    force_convert_to_visitor: bool | None = None


class Ticket(ParkingBaseModel):
    id: str
    type: TicketType | None = None
    gate_id: str | None = None
    zone_id: str | None = None
    subscription_id: str | None = None
    checkin_at: str | None = None
    checkout_at: str | None = None


class CheckinResult(ParkingBaseModel):
    """Check-in response: the issued ticket and, when reported, the zone after entry."""

    ticket: Ticket
    zone_state: ZoneState | None = None


class CheckoutReceipt(ParkingBaseModel):
    """Check-out response. The amount is computed by the service."""

    ticket_id: str | None = None
    checkin_at: str | None = None
    checkout_at: str | None = None
    duration_hours: float | None = None
    amount: float = 0.0
    breakdown: list[dict[str, Any]] = Field(default_factory=list)
