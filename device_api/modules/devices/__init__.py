"""Device lifecycle: domain models, repository contract and service."""

from .exceptions import (
    DeviceAlreadyExistsError,
    DeviceError,
    DeviceInUseError,
    DeviceNotFoundError,
    InvalidDeviceStateError,
)
from .models import (
    UNSET,
    Device,
    DeviceCreateInput,
    DevicePatchInput,
    DeviceReplaceInput,
    DeviceState,
)
from .repository import DeviceRepository
from .service import DeviceService

__all__ = [
    "UNSET",
    "Device",
    "DeviceCreateInput",
    "DevicePatchInput",
    "DeviceReplaceInput",
    "DeviceState",
    "DeviceRepository",
    "DeviceService",
    "DeviceError",
    "DeviceAlreadyExistsError",
    "DeviceInUseError",
    "DeviceNotFoundError",
    "InvalidDeviceStateError",
]
