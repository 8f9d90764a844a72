"""Admin models: parking-state report, rate edits, zone toggles, rush hours and vacations."""

from __future__ import annotations

import enum

from pydantic import AliasChoices, Field, field_validator, model_validator

from pyparking.models._base import ParkingBaseModel, ParkingRequestModel


class ZoneAction(enum.StrEnum):
    OPEN = "open"
    CLOSE = "close"


class ZoneState(ParkingBaseModel):
    """Per-zone row of the live parking-state report."""

    zone_id: str
    name: str = ""
    total_slots: int = 0
    occupied: int = 0
    free: int = 0
    reserved: int = 0
    available_for_visitors: int = 0
    available_for_subscribers: int = 0
    subscriber_count: int = 0
    open: bool = True


class ZoneToggle(ParkingBaseModel):
    """Zone open/closed state after a toggle. Accepts ``zoneId`` or ``id``."""

    zone_id: str = Field(validation_alias=AliasChoices("zoneId", "zone_id", "id"))
    open: bool


class CategoryUpdate(ParkingRequestModel):
    """Body of ``PUT /admin/categories/{id}``."""

    name: str | None = None
    description: str | None = None
    rate_normal: float | None = Field(default=None, ge=0)
    rate_special: float | None = Field(default=None, ge=0)


class CategoryRates(ParkingBaseModel):
    """Category as echoed back after an update."""

    id: str
    name: str | None = None
    description: str | None = None
    rate_normal: float | None = None
    rate_special: float | None = None


class RushHourRequest(ParkingRequestModel):
    """Body of ``POST /admin/rush-hours``. ``week_day`` is 0 (Sunday) to 6."""

    week_day: int = Field(ge=0, le=6)
    from_: str = Field(alias="from", min_length=1)
    to: str = Field(min_length=1)


class VacationRequest(ParkingRequestModel):
    """Body of ``POST /admin/vacations``."""

    name: str = Field(min_length=1)
    from_: str = Field(alias="from", min_length=1)
    to: str = Field(min_length=1)

    @model_validator(mode="after")
    def _ordered(self) -> VacationRequest:
        if self.to < self.from_:
            raise ValueError("vacation must end on or after its start date")
        return self


class RushHour(ParkingBaseModel):
    id: str
    week_day: int
    from_: str = Field(alias="from")
    to: str

    @field_validator("week_day", mode="before")
    @classmethod
    def _coerce_week_day(cls, value: object) -> object:
        return int(value) if isinstance(value, str) and value.strip().isdigit() else value


class Vacation(ParkingBaseModel):
    id: str
    name: str
    from_: str = Field(alias="from")
    to: str
