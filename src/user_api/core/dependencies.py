"""FastAPI dependency injection for database sessions and the service locator."""

from collections.abc import AsyncGenerator

from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncSession

from user_api.core.database import get_session_factory
from user_api.lib.discovery import BaseServiceLocator


async def get_async_session() -> AsyncGenerator[AsyncSession]:
    """Yield an async database session with per-request lifecycle."""
    factory = get_session_factory()
    async with factory() as session:
        yield session


def get_service_locator(request: Request) -> BaseServiceLocator:
    """Return the service locator created by the application lifespan.

    Raises:
        RuntimeError: If the application was started without a locator.
    """
    locator = getattr(request.app.state, "service_locator", None)
    if locator is None:
        msg = "Service locator not initialized. Is the application lifespan running?"
        raise RuntimeError(msg)
    return locator
