"""Simple dependency container for wiring core services."""

from __future__ import annotations

from dataclasses import dataclass, field
from functools import lru_cache
from typing import Optional

from device_api.core.config import Settings, get_settings
from device_api.infrastructure.database.session import get_engine
from device_api.infrastructure.memory import InMemoryDeviceStore


@dataclass(slots=True)
class ApplicationContainer:
    settings: Settings
    memory_store: Optional[InMemoryDeviceStore] = field(default=None)

    @property
    def uses_database(self) -> bool:
        return self.settings.storage.backend == "sql"

    def init_infrastructure(self) -> None:
        """Ensure the storage singletons (database engine or in-memory store) exist."""
        if self.uses_database:
            get_engine(self.settings)
        elif self.memory_store is None:
            self.memory_store = InMemoryDeviceStore()

    @classmethod
    def build(cls, settings: Settings) -> "ApplicationContainer":
        container = cls(settings=settings)
        container.init_infrastructure()
        return container


@lru_cache()
def get_container() -> ApplicationContainer:
    return ApplicationContainer.build(get_settings())


__all__ = ["ApplicationContainer", "get_container"]
