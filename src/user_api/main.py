"""FastAPI application factory.

Creates the FastAPI app with lifespan management, exception handlers,
and OpenAPI metadata.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from loguru import logger

from user_api import __version__
from user_api.core.config import Settings, get_settings
from user_api.core.database import dispose_engine, init_engine
from user_api.core.logging import setup_logging
from user_api.lib.discovery import ConsulServiceLocator, DiscoveryError, ServiceRegistration


def build_service_locator(settings: Settings) -> ConsulServiceLocator:
    """Create the Consul locator, with self-registration when discovery is enabled.

    Args:
        settings: Application settings.

    Returns:
        A locator whose ``start()``/``stop()`` register and deregister this process.
    """
    registration = None
    if settings.discovery_enabled:
        registration = ServiceRegistration(
            service_id=settings.service_id,
            name=settings.service_name,
            address=settings.service_address,
            port=settings.service_port,
        )
    return ConsulServiceLocator(
        settings.consul_base_url,
        registration=registration,
        timeout=settings.consul_timeout,
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Manage application lifecycle.

    Startup initializes logging, registers with Consul, then creates the
    database engine. Shutdown deregisters and disposes the engine.
    """
    settings = get_settings()
    setup_logging(settings.log_level, log_dir=settings.log_dir)

    locator = build_service_locator(settings)
    await locator.start()
    app.state.service_locator = locator

    init_engine(settings.database_url, echo=False, schema=settings.database_schema)

    yield

    try:
        await locator.stop()
    except DiscoveryError as e:
        logger.error(f"Error deregistering service from Consul: {e.message}")
    await dispose_engine()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Returns:
        Configured FastAPI application instance.
    """
    settings = get_settings()

    app = FastAPI(
        title="User API",
        description="User accounts, session tokens, and discovery-backed login",
        version=__version__,
        lifespan=lifespan,
    )

    from user_api.api.errors import register_exception_handlers
    from user_api.api.router import create_router, setup_middleware

    register_exception_handlers(app)
    setup_middleware(app, settings)
    app.include_router(create_router(settings))

    return app
