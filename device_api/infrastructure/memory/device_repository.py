"""Process-local device store for single-worker deployments and tests."""

from __future__ import annotations

import asyncio
import itertools
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import replace
from datetime import date
from typing import Optional

from device_api.modules.devices.models import Device, DeviceState

logger = logging.getLogger(__name__)


class InMemoryDeviceStore:
    """Committed device records plus one ``asyncio.Lock`` per device id.

    Shared by every ``InMemoryDeviceRepository``; must be used from a single
    event loop.
    """

    def __init__(self) -> None:
        self._records: dict[int, Device] = {}
        self._row_locks: dict[int, asyncio.Lock] = {}
        self._ids = itertools.count(1)

    def next_id(self) -> int:
        # Ids are handed out even if the creating transaction rolls back.
        return next(self._ids)

    def snapshot(self) -> dict[int, Device]:
        return dict(self._records)

    def row_lock(self, device_id: int) -> asyncio.Lock:
        lock = self._row_locks.get(device_id)
        if lock is None:
            lock = self._row_locks[device_id] = asyncio.Lock()
        return lock

    def apply(self, changes: dict[int, Optional[Device]]) -> None:
        for device_id, device in changes.items():
            if device is None:
                self._records.pop(device_id, None)
                self._row_locks.pop(device_id, None)
            else:
                self._records[device_id] = replace(device)


class InMemoryDeviceRepository:
    """One unit of work over an ``InMemoryDeviceStore``.

    Inside ``transaction()`` writes are staged and published on commit; the
    row locks taken by ``get_by_id_for_update`` and ``delete_device`` are
    released when the transaction ends either way. Outside a transaction
    writes apply at once.
    """

    def __init__(self, store: InMemoryDeviceStore) -> None:
        self._store = store
        self._staged: dict[int, Optional[Device]] | None = None
        self._held: list[asyncio.Lock] = []

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[None]:
        if self._staged is not None:
            # Nested blocks join the outer unit of work.
            yield
            return

        self._staged = {}
        try:
            yield
            self._store.apply(self._staged)
        finally:
            self._staged = None
            while self._held:
                self._held.pop().release()

    async def get_by_id(self, device_id: int) -> Device | None:
        device = self._view().get(device_id)
        return replace(device) if device else None

    async def get_by_id_for_update(self, device_id: int) -> Device | None:
        if self._staged is None:
            raise RuntimeError("get_by_id_for_update() requires an open transaction()")
        if device_id not in self._view():
            return None

        await self._hold_row_lock(device_id)
        # Re-read: the record may have changed or vanished while we waited.
        return await self.get_by_id(device_id)

    async def exists_by_name_and_brand(self, name: str, brand: str) -> bool:
        return any(
            device.name == name and device.brand == brand
            for device in self._view().values()
        )

    async def list_devices(
        self,
        *,
        brand: Optional[str] = None,
        state: Optional[DeviceState] = None,
    ) -> list[Device]:
        return [
            replace(device)
            for _, device in sorted(self._view().items())
            if (brand is None or device.brand == brand)
            and (state is None or device.state is state)
        ]

    async def create_device(
        self,
        *,
        name: str,
        brand: str,
        state: DeviceState,
        creation_time: Optional[date] = None,
    ) -> Device:
        device = Device(
            id=self._store.next_id(),
            name=name,
            brand=brand,
            state=state,
            creation_time=creation_time or date.today(),
        )
        self._write(device.id, device)
        return replace(device)

    async def update_device(self, device: Device) -> Device:
        current = self._view().get(device.id)
        if current is None:
            raise ValueError(f"Device not found: {device.id}")

        updated = replace(
            current,
            name=device.name,
            brand=device.brand,
            state=device.state,
        )
        self._write(device.id, updated)
        return replace(updated)

    async def delete_device(self, device: Device) -> None:
        # Like a DELETE on a locked row: wait for the current holder to finish.
        if self._staged is None:
            async with self._store.row_lock(device.id):
                self._write(device.id, None)
            return
        await self._hold_row_lock(device.id)
        self._write(device.id, None)

    async def _hold_row_lock(self, device_id: int) -> None:
        lock = self._store.row_lock(device_id)
        if lock in self._held:
            return
        logger.debug("Waiting for lock on device %s", device_id)
        await lock.acquire()
        self._held.append(lock)
        logger.debug("Lock acquired on device %s", device_id)

    def _view(self) -> dict[int, Device]:
        records = self._store.snapshot()
        if self._staged:
            for device_id, device in self._staged.items():
                if device is None:
                    records.pop(device_id, None)
                else:
                    records[device_id] = device
        return records

    def _write(self, device_id: int, device: Optional[Device]) -> None:
        if self._staged is not None:
            self._staged[device_id] = replace(device) if device else None
        else:
            self._store.apply({device_id: device})
