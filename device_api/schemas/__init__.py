"""Pydantic schemas used across the project."""
from datetime import date, datetime
from typing import Any, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from device_api.modules.devices import DeviceState

_DAY_FIRST_FORMAT = "%d-%m-%Y"
_CREATION_TIME_INPUT = AliasChoices("creationTime", "creation_time")


def _parse_state(value: Any) -> Any:
    if value is None:
        return None
    return DeviceState.parse(value)


def _require_text(value: Optional[str]) -> Optional[str]:
    if value is not None and not value.strip():
        raise ValueError("must not be blank")
    return value


class DeviceBase(BaseModel):
    name: str = Field(..., max_length=100)
    brand: str = Field(..., max_length=100)
    state: DeviceState

    @field_validator("name", "brand")
    @classmethod
    def check_text(cls, value: Optional[str]) -> Optional[str]:
        return _require_text(value)

    @field_validator("state", mode="before")
    @classmethod
    def parse_state(cls, value: Any) -> Any:
        return _parse_state(value)


class DeviceCreate(DeviceBase):
    creation_time: date = Field(..., validation_alias=_CREATION_TIME_INPUT)

    @field_validator("creation_time", mode="before")
    @classmethod
    def parse_day_first(cls, value: Any) -> Any:
        # Accept "21-03-2025" alongside ISO dates.
        if isinstance(value, str):
            try:
                return datetime.strptime(value.strip(), _DAY_FIRST_FORMAT).date()
            except ValueError:
                return value
        return value


class DeviceUpdate(DeviceBase):
    """Full replacement; a creation time sent by the client is ignored."""


class DevicePatch(BaseModel):
    name: Optional[str] = Field(default=None, max_length=100)
    brand: Optional[str] = Field(default=None, max_length=100)
    state: Optional[DeviceState] = None

    @field_validator("name", "brand")
    @classmethod
    def check_text(cls, value: Optional[str]) -> Optional[str]:
        return _require_text(value)

    @field_validator("state", mode="before")
    @classmethod
    def parse_state(cls, value: Any) -> Any:
        return _parse_state(value)


class DeviceResponse(BaseModel):
    id: int
    name: str
    brand: str
    state: DeviceState
    creation_time: date = Field(
        ..., validation_alias=_CREATION_TIME_INPUT, serialization_alias="creationTime"
    )

    model_config = ConfigDict(from_attributes=True)


class HealthResponse(BaseModel):
    status: str = "ok"
