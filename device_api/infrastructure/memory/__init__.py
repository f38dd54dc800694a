"""In-process device store."""

from .device_repository import InMemoryDeviceRepository, InMemoryDeviceStore

__all__ = ["InMemoryDeviceRepository", "InMemoryDeviceStore"]
