"""Device domain specific exceptions."""


class DeviceError(Exception):
    """Base class for device related domain errors."""


class DeviceNotFoundError(DeviceError):
    """Raised when the requested device (or any device matching a query) could not be found."""

    def __init__(self, message: str = "Device not found!") -> None:
        super().__init__(message)


class DeviceAlreadyExistsError(DeviceError):
    """Raised when attempting to create a device with an existing name and brand."""


class DeviceInUseError(DeviceError):
    """Raised when a device in use is modified in a way its state forbids."""


class InvalidDeviceStateError(DeviceError, ValueError):
    """Raised when a value cannot be parsed into a device state."""

    def __init__(self, message: str = "Invalid state!") -> None:
        super().__init__(message)
