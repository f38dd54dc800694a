"""Device related dependency providers."""

from collections.abc import AsyncGenerator

from fastapi import Depends, Request

from device_api.core.container import ApplicationContainer
from device_api.infrastructure.database.repositories.device_repository import SqlDeviceRepository
from device_api.infrastructure.database.session import session_scope
from device_api.infrastructure.memory import InMemoryDeviceRepository
from device_api.modules.devices import DeviceRepository, DeviceService


def get_app_container(request: Request) -> ApplicationContainer:
    return request.app.state.container


async def get_device_repository(
    container: ApplicationContainer = Depends(get_app_container),
) -> AsyncGenerator[DeviceRepository, None]:
    if not container.uses_database:
        assert container.memory_store is not None
        yield InMemoryDeviceRepository(container.memory_store)
        return

    async with session_scope() as session:
        yield SqlDeviceRepository(session)


def get_device_service(repository: DeviceRepository = Depends(get_device_repository)) -> DeviceService:
    return DeviceService(repository)


__all__ = [
    "get_app_container",
    "get_device_repository",
    "get_device_service",
]
