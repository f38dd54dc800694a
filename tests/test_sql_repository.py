"""
Tests for SqlDeviceRepository and the service over it, on in-memory SQLite.
"""
from datetime import date

import pytest

from device_api.infrastructure.database.repositories import SqlDeviceRepository
from device_api.modules.devices import (
    DeviceAlreadyExistsError,
    DeviceCreateInput,
    DeviceInUseError,
    DevicePatchInput,
    DeviceService,
    DeviceState,
)


async def _seed(session_factory, name="Router", brand="Acme", state=DeviceState.AVAILABLE):
    async with session_factory() as session:
        repo = SqlDeviceRepository(session)
        async with repo.transaction():
            device = await repo.create_device(
                name=name, brand=brand, state=state, creation_time=date(2024, 1, 1)
            )
    return device


class TestSqlDeviceRepository:
    @pytest.mark.asyncio
    async def test_create_and_get(self, session_factory):
        device = await _seed(session_factory)

        async with session_factory() as session:
            stored = await SqlDeviceRepository(session).get_by_id(device.id)

        assert stored == device
        assert stored.state is DeviceState.AVAILABLE
        assert stored.creation_time == date(2024, 1, 1)

    @pytest.mark.asyncio
    async def test_create_defaults_creation_time_to_today(self, session_factory):
        async with session_factory() as session:
            repo = SqlDeviceRepository(session)
            async with repo.transaction():
                device = await repo.create_device(name="A", brand="B", state=DeviceState.INACTIVE)

        assert device.creation_time == date.today()

    @pytest.mark.asyncio
    async def test_exists_by_name_and_brand(self, session_factory):
        await _seed(session_factory)

        async with session_factory() as session:
            repo = SqlDeviceRepository(session)
            assert await repo.exists_by_name_and_brand("Router", "Acme")
            assert not await repo.exists_by_name_and_brand("Router", "Globex")

    @pytest.mark.asyncio
    async def test_list_filters(self, session_factory):
        await _seed(session_factory, name="A", brand="Acme", state=DeviceState.AVAILABLE)
        await _seed(session_factory, name="B", brand="Acme", state=DeviceState.IN_USE)
        await _seed(session_factory, name="C", brand="Globex", state=DeviceState.IN_USE)

        async with session_factory() as session:
            repo = SqlDeviceRepository(session)
            assert [d.name for d in await repo.list_devices()] == ["A", "B", "C"]
            assert [d.name for d in await repo.list_devices(brand="Acme")] == ["A", "B"]
            assert [d.name for d in await repo.list_devices(state=DeviceState.IN_USE)] == ["B", "C"]
            assert await repo.list_devices(brand="Globex", state=DeviceState.AVAILABLE) == []

    @pytest.mark.asyncio
    async def test_locked_update_commits(self, session_factory):
        device = await _seed(session_factory)

        async with session_factory() as session:
            repo = SqlDeviceRepository(session)
            async with repo.transaction():
                locked = await repo.get_by_id_for_update(device.id)
                locked.name = "Switch"
                locked.state = DeviceState.IN_USE
                await repo.update_device(locked)

        async with session_factory() as session:
            stored = await SqlDeviceRepository(session).get_by_id(device.id)
        assert (stored.name, stored.state) == ("Switch", DeviceState.IN_USE)
        assert stored.creation_time == date(2024, 1, 1)

    @pytest.mark.asyncio
    async def test_failed_transaction_rolls_back(self, session_factory):
        device = await _seed(session_factory)

        async with session_factory() as session:
            repo = SqlDeviceRepository(session)
            with pytest.raises(RuntimeError):
                async with repo.transaction():
                    locked = await repo.get_by_id_for_update(device.id)
                    locked.brand = "Globex"
                    await repo.update_device(locked)
                    raise RuntimeError("boom")

        async with session_factory() as session:
            assert (await SqlDeviceRepository(session).get_by_id(device.id)).brand == "Acme"

    @pytest.mark.asyncio
    async def test_ids_are_not_reused(self, session_factory):
        device = await _seed(session_factory)

        async with session_factory() as session:
            repo = SqlDeviceRepository(session)
            async with repo.transaction():
                await repo.delete_device(device)

        again = await _seed(session_factory)
        assert again.id > device.id

    @pytest.mark.asyncio
    async def test_missing_device_for_update(self, session_factory):
        async with session_factory() as session:
            repo = SqlDeviceRepository(session)
            async with repo.transaction():
                assert await repo.get_by_id_for_update(404) is None


class TestServiceOverSql:
    @pytest.mark.asyncio
    async def test_duplicate_creation_is_rejected(self, session_factory):
        payload = DeviceCreateInput(name="Router", brand="Acme", state=DeviceState.AVAILABLE)
        async with session_factory() as session:
            await DeviceService.with_session(session).create_device(payload)

        async with session_factory() as session:
            with pytest.raises(DeviceAlreadyExistsError):
                await DeviceService.with_session(session).create_device(payload)

    @pytest.mark.asyncio
    async def test_rejected_patch_persists_nothing(self, session_factory):
        device = await _seed(session_factory, state=DeviceState.AVAILABLE)

        async with session_factory() as session:
            with pytest.raises(DeviceInUseError):
                await DeviceService.with_session(session).patch_device(
                    device.id, DevicePatchInput(state=DeviceState.IN_USE, name="X")
                )

        async with session_factory() as session:
            stored = await DeviceService.with_session(session).get_device(device.id)
        assert (stored.name, stored.state) == ("Router", DeviceState.AVAILABLE)

    @pytest.mark.asyncio
    async def test_patch_out_of_in_use_then_delete(self, session_factory):
        device = await _seed(session_factory, state=DeviceState.IN_USE)

        async with session_factory() as session:
            with pytest.raises(DeviceInUseError):
                await DeviceService.with_session(session).delete_device(device.id)

        async with session_factory() as session:
            patched = await DeviceService.with_session(session).patch_device(
                device.id, DevicePatchInput(state=DeviceState.INACTIVE, brand="Globex")
            )
        assert (patched.state, patched.brand) == (DeviceState.INACTIVE, "Globex")

        async with session_factory() as session:
            await DeviceService.with_session(session).delete_device(device.id)

        async with session_factory() as session:
            assert await SqlDeviceRepository(session).get_by_id(device.id) is None
