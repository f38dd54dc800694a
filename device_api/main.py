import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI

from device_api import __version__
from device_api.api import create_api_router
from device_api.core.container import ApplicationContainer, get_container
from device_api.core.logging import configure_logging
from device_api.infrastructure.database.session import dispose_engine, init_db
from device_api.schemas import HealthResponse

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    container: ApplicationContainer = app.state.container
    if container.uses_database:
        await init_db()
    logger.info(
        "Device API started (storage=%s, environment=%s)",
        container.settings.storage.backend,
        container.settings.environment,
    )
    yield
    if container.uses_database:
        await dispose_engine()


def create_app(container: Optional[ApplicationContainer] = None) -> FastAPI:
    container = container or get_container()
    settings = container.settings
    configure_logging(settings)

    app = FastAPI(
        title=settings.project_name,
        description="Device lifecycle management service",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.container = container

    app.include_router(create_api_router(settings.api_prefix))

    @app.get("/health", response_model=HealthResponse, tags=["health"])
    async def health() -> HealthResponse:
        return HealthResponse()

    return app


app = create_app()
