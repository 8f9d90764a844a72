"""Base models for parking API payloads.

Response models inherit from :class:`ParkingBaseModel` which provides:

* ``alias_generator=to_camel`` so camelCase API keys map
  automatically to snake_case fields.
* A ``model_validator(mode="before")`` that drops ``None`` values so
  the field default is used.
* A ``raw`` dict that captures the original payload.

Request bodies inherit from :class:`ParkingRequestModel`, which forbids
unknown fields and serialises back to camelCase with
:meth:`ParkingRequestModel.to_payload`.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel


class ParkingBaseModel(BaseModel):
    """Base for parking API response models."""

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
        alias_generator=to_camel,
    )

    raw: dict[str, Any] = Field(default_factory=dict, exclude=True)
    """Original API response dict."""

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, values: Any) -> Any:
        """Drop ``None`` values and stash the raw payload."""
        if not isinstance(values, dict):
            return values
        cleaned = {key: value for key, value in values.items() if value is not None}
        # Keep an explicit raw= when constructing with keyword arguments.
        if "raw" not in values:
            cleaned["raw"] = dict(values)
        return cleaned


class ParkingRequestModel(BaseModel):
    """Base for request bodies sent to the parking API."""

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        populate_by_name=True,
        alias_generator=to_camel,
        str_strip_whitespace=True,
    )

    def to_payload(self) -> dict[str, Any]:
        """JSON-ready camelCase body without unset optional fields."""
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")
