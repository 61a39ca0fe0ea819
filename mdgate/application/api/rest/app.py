import logging
from contextlib import asynccontextmanager

import logfire
from dishka import AsyncContainer
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from sqlalchemy.ext.asyncio import AsyncEngine

from mdgate.application.api.presenter import ErrorPresenter
from mdgate.application.api.routes import auth, data, health
from mdgate.application.di import create_container
from mdgate.config import Config, configure_logging
from mdgate.domain.shared.error import MDGateError, ValidationError
from mdgate.infrastructure.persistence.database import create_tables
from mdgate.util.di.fastapi import setup_dishka

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    container = app.state.dishka_container
    config: Config = app.state.config

    if config.database.auto_create:
        await create_tables(await container.get(AsyncEngine))

    if not config.auth.session.secret:
        logger.warning(
            "auth.session.secret is not set; session cookies are not signed"
        )

    yield

    await container.close()


def create_app(config: Config | None = None, container: AsyncContainer | None = None) -> FastAPI:
    """Create FastAPI application."""
    config = config or Config()

    # Configure logging early
    configure_logging(config.logging)
    logger.info("Starting %s v%s", config.server.name, config.server.version)

    app_instance = FastAPI(
        title=config.server.name,
        description=config.server.description,
        version=config.server.version,
        lifespan=lifespan,
    )
    app_instance.state.config = config
    app_instance.state.presenter = ErrorPresenter(config)

    # Instrument FastAPI for automatic tracing of HTTP requests
    logfire.instrument_fastapi(app_instance)

    # Setup dependency injection
    setup_dishka(container or create_container(config), app_instance)

    # Register routes
    app_instance.include_router(health.router)
    app_instance.include_router(auth.router)
    app_instance.include_router(data.router)

    # Every failure is rendered by the presenter with status 200
    @app_instance.exception_handler(MDGateError)
    async def domain_exception_handler(request: Request, exc: MDGateError):
        return request.app.state.presenter.error(request, exc)

    @app_instance.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        fields = ", ".join(".".join(str(p) for p in err["loc"]) for err in exc.errors())
        error = ValidationError(f"Invalid request fields: {fields}", code="invalid_request")
        return request.app.state.presenter.error(request, error)

    @app_instance.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        return request.app.state.presenter.error(request, exc)

    return app_instance


# Create app instance for uvicorn
# Note: Logfire must be configured before this module is imported
# In production: the `mdgate serve` command handles this
# In tests: configure in conftest.py
app = create_app()
