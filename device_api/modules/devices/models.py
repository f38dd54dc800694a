"""Device domain models."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import TYPE_CHECKING, Optional

from .exceptions import InvalidDeviceStateError

if TYPE_CHECKING:
    from device_api.db import models as orm


class DeviceState(str, Enum):
    AVAILABLE = "AVAILABLE"
    IN_USE = "IN_USE"
    INACTIVE = "INACTIVE"

    @classmethod
    def parse(cls, value: "DeviceState | str") -> "DeviceState":
        """Resolve ``value`` case-insensitively, raising ``InvalidDeviceStateError`` otherwise."""
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            raise InvalidDeviceStateError()
        try:
            return cls[value.strip().upper()]
        except KeyError as exc:
            raise InvalidDeviceStateError() from exc


@dataclass(slots=True)
class Device:
    id: int
    name: str
    brand: str
    state: DeviceState
    creation_time: date

    @classmethod
    def from_orm(cls, instance: "orm.Device") -> "Device":
        return cls(
            id=int(instance.id),
            name=instance.name,
            brand=instance.brand,
            state=DeviceState.parse(instance.state),
            creation_time=instance.creation_time,
        )


@dataclass(slots=True)
class DeviceCreateInput:
    name: str
    brand: str
    state: DeviceState
    creation_time: Optional[date] = None


@dataclass(slots=True)
class DeviceReplaceInput:
    name: str
    brand: str
    state: DeviceState


# Sentinel used to differentiate between "not provided" and an explicit value.
UNSET = object()


@dataclass(slots=True)
class DevicePatchInput:
    name: Optional[str] | object = UNSET
    brand: Optional[str] | object = UNSET
    state: Optional[DeviceState] | object = UNSET

    @staticmethod
    def is_present(value: object) -> bool:
        return value is not UNSET and value is not None
