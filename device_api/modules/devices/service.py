"""Domain service enforcing the device lifecycle rules.

Every mutation of an existing device goes through here. Full and partial
updates read the device with ``get_by_id_for_update`` inside a repository
transaction, so the read-decide-write sequence is serialized per device and
the lock is released however the transaction ends.
"""

from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from .exceptions import DeviceAlreadyExistsError, DeviceInUseError, DeviceNotFoundError
from .models import (
    Device,
    DeviceCreateInput,
    DevicePatchInput,
    DeviceReplaceInput,
    DeviceState,
)
from .repository import DeviceRepository

logger = logging.getLogger(__name__)


class DeviceService:
    """Encapsulates the device use cases."""

    def __init__(self, repository: DeviceRepository) -> None:
        self._repository = repository

    @classmethod
    def with_session(cls, session: AsyncSession) -> "DeviceService":
        from device_api.infrastructure.database.repositories.device_repository import (
            SqlDeviceRepository,
        )

        return cls(SqlDeviceRepository(session))

    async def create_device(self, payload: DeviceCreateInput) -> Device:
        # The existence check is not lock protected: two concurrent creations of
        # the same pair can both pass it.
        async with self._repository.transaction():
            if await self._repository.exists_by_name_and_brand(payload.name, payload.brand):
                raise DeviceAlreadyExistsError(
                    f"A Device with name {payload.name} and brand {payload.brand} already exists!"
                )
            device = await self._repository.create_device(
                name=payload.name,
                brand=payload.brand,
                state=payload.state,
                creation_time=payload.creation_time,
            )
        logger.info("Device %s created (%s / %s)", device.id, device.name, device.brand)
        return device

    async def get_device(self, device_id: int) -> Device:
        device = await self._repository.get_by_id(device_id)
        if device is None:
            raise DeviceNotFoundError()
        return device

    async def list_devices(
        self,
        *,
        brand: Optional[str] = None,
        state: Optional[DeviceState] = None,
    ) -> list[Device]:
        devices = await self._repository.list_devices(brand=brand, state=state)
        if not devices:
            raise DeviceNotFoundError()
        return devices

    async def replace_device(self, device_id: int, payload: DeviceReplaceInput) -> Device:
        """Overwrite name, brand and state; the creation time is kept.

        Neither the in-use rule nor the name/brand uniqueness is checked here.
        """
        async with self._repository.transaction():
            device = await self._repository.get_by_id_for_update(device_id)
            if device is None:
                raise DeviceNotFoundError()

            device.name = payload.name
            device.brand = payload.brand
            device.state = payload.state
            updated = await self._repository.update_device(device)
        logger.info("Device %s replaced", device_id)
        return updated

    async def patch_device(self, device_id: int, payload: DevicePatchInput) -> Device:
        async with self._repository.transaction():
            device = await self._repository.get_by_id_for_update(device_id)
            if device is None:
                raise DeviceNotFoundError()

            # State goes first: the in-use guard looks at the requested state.
            if DevicePatchInput.is_present(payload.state):
                device.state = DeviceState.parse(payload.state)

            changes_identity = DevicePatchInput.is_present(payload.name) or DevicePatchInput.is_present(
                payload.brand
            )
            if device.state is DeviceState.IN_USE and changes_identity:
                raise DeviceInUseError("Device is in use and its properties cannot be updated!")

            if DevicePatchInput.is_present(payload.name):
                device.name = payload.name
            if DevicePatchInput.is_present(payload.brand):
                device.brand = payload.brand
            updated = await self._repository.update_device(device)
        logger.info("Device %s patched", device_id)
        return updated

    async def delete_device(self, device_id: int) -> None:
        # Read without the exclusive lock: a concurrent move to IN_USE can slip
        # in between the check and the delete.
        async with self._repository.transaction():
            device = await self._repository.get_by_id(device_id)
            if device is None:
                raise DeviceNotFoundError()
            if device.state is DeviceState.IN_USE:
                raise DeviceInUseError("The device is in use and cannot be deleted!")
            await self._repository.delete_device(device)
        logger.info("Device %s deleted", device_id)
