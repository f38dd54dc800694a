"""Repository protocol for device persistence operations."""

from __future__ import annotations

from datetime import date
from typing import AsyncContextManager, Protocol

from .models import Device, DeviceState


class DeviceRepository(Protocol):
    """Persistence contract the lifecycle service relies on.

    ``get_by_id_for_update`` locks the returned record exclusively until the
    enclosing ``transaction()`` ends. ``update_device`` and ``delete_device``
    must only be called while holding that lock.
    """

    def transaction(self) -> AsyncContextManager[None]:
        ...

    async def get_by_id(self, device_id: int) -> Device | None:
        ...

    async def get_by_id_for_update(self, device_id: int) -> Device | None:
        ...

    async def exists_by_name_and_brand(self, name: str, brand: str) -> bool:
        ...

    async def list_devices(
        self,
        *,
        brand: str | None = None,
        state: DeviceState | None = None,
    ) -> list[Device]:
        ...

    async def create_device(
        self,
        *,
        name: str,
        brand: str,
        state: DeviceState,
        creation_time: date | None = None,
    ) -> Device:
        ...

    async def update_device(self, device: Device) -> Device:
        ...

    async def delete_device(self, device: Device) -> None:
        ...
