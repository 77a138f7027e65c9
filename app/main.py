"""Main FastAPI application."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app import __version__
from app.api.endpoints import router
from app.api.errors import register_error_handlers
from app.services.patients import PatientService
from app.services.sql_store import SqlPatientStore
from app.services.store import InMemoryPatientStore, PatientStore
from app.utils.config import AppConfig, load_config
from app.utils.logging import get_logger, setup_logging

logger = get_logger(__name__)


def build_store(config: AppConfig) -> PatientStore:
    """Pick the patient store implementation named by the configuration."""
    if config.store == "sql":
        return SqlPatientStore(config.database_url, echo=config.database_echo)
    return InMemoryPatientStore()


def create_app(service: PatientService | None = None, config: AppConfig | None = None) -> FastAPI:
    """Build the application around a single patient service.

    Args:
        service: Pre-built service, otherwise one is built from configuration
        config: Configuration, otherwise read from the environment
    """
    config = config or load_config()
    if service is None:
        service = PatientService(build_store(config))

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        setup_logging(config.log)
        await service.store.open()
        logger.info(f"Patient service started (v{__version__})")
        try:
            yield
        finally:
            await service.store.close()

    app = FastAPI(
        title="Patient Service",
        description="Patient records management: register, list, update and remove patients.",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_tags=[
            {
                "name": "Patient Management",
                "description": "Operations related to patient management.",
            },
            {
                "name": "Health",
                "description": "Service health monitoring and status checks.",
            },
        ],
        lifespan=lifespan,
    )
    app.state.patient_service = service

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # Configure appropriately for production
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_error_handlers(app)
    app.include_router(router)
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("app.main:app", host="0.0.0.0", port=8000, reload=True, log_level="info")
