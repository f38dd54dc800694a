"""SQLAlchemy powered repository for device persistence."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import date
from typing import Optional

from sqlalchemy import exists, select
from sqlalchemy.ext.asyncio import AsyncSession

from device_api.db.models import Device as DeviceModel
from device_api.modules.devices.models import Device, DeviceState

logger = logging.getLogger(__name__)


class SqlDeviceRepository:
    """Device store backed by one ``AsyncSession``.

    The exclusive lock is a ``SELECT ... FOR UPDATE`` row lock and lives as
    long as the database transaction. SQLite has no row locks and ignores the
    clause; it serializes writers for the whole database instead.
    """

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[None]:
        if self._session.in_transaction():
            async with self._session.begin_nested():
                yield
        else:
            async with self._session.begin():
                yield

    async def get_by_id(self, device_id: int) -> Device | None:
        model = await self._fetch_model(device_id)
        return Device.from_orm(model) if model else None

    async def get_by_id_for_update(self, device_id: int) -> Device | None:
        model = await self._fetch_model(device_id, for_update=True)
        if model is None:
            return None
        logger.debug("Row lock acquired on device %s", device_id)
        return Device.from_orm(model)

    async def exists_by_name_and_brand(self, name: str, brand: str) -> bool:
        stmt = select(
            exists().where(DeviceModel.name == name, DeviceModel.brand == brand)
        )
        result = await self._session.execute(stmt)
        return bool(result.scalar())

    async def list_devices(
        self,
        *,
        brand: Optional[str] = None,
        state: Optional[DeviceState] = None,
    ) -> list[Device]:
        query = select(DeviceModel).order_by(DeviceModel.id)
        if brand is not None:
            query = query.where(DeviceModel.brand == brand)
        if state is not None:
            query = query.where(DeviceModel.state == state.value)

        result = await self._session.execute(query)
        return [Device.from_orm(model) for model in result.scalars().all()]

    async def create_device(
        self,
        *,
        name: str,
        brand: str,
        state: DeviceState,
        creation_time: Optional[date] = None,
    ) -> Device:
        model = DeviceModel(
            name=name,
            brand=brand,
            state=state.value,
            creation_time=creation_time or date.today(),
        )
        self._session.add(model)
        await self._session.flush()
        await self._session.refresh(model)
        return Device.from_orm(model)

    async def update_device(self, device: Device) -> Device:
        model = await self._fetch_model(device.id)
        if model is None:
            raise ValueError(f"Device not found: {device.id}")

        model.name = device.name
        model.brand = device.brand
        model.state = device.state.value
        await self._session.flush()
        await self._session.refresh(model)
        return Device.from_orm(model)

    async def delete_device(self, device: Device) -> None:
        model = await self._fetch_model(device.id)
        if model is None:
            return
        await self._session.delete(model)
        await self._session.flush()

    async def _fetch_model(self, device_id: int, *, for_update: bool = False) -> DeviceModel | None:
        stmt = select(DeviceModel).where(DeviceModel.id == device_id)
        if for_update:
            # Refresh the identity-map copy with the locked row's values.
            stmt = stmt.with_for_update().execution_options(populate_existing=True)
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()
