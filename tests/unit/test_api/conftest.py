"""Fixtures for API tests: a minimal app wired to the in-memory test database."""

from collections.abc import AsyncGenerator

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from user_api.api.errors import register_exception_handlers
from user_api.api.router import create_router
from user_api.core.config import Settings, get_settings
from user_api.core.dependencies import get_async_session


@pytest.fixture
def app(settings: Settings, async_engine: AsyncEngine, fake_locator) -> FastAPI:
    """Create a FastAPI app with all routers, test settings, and a fake locator."""
    app = FastAPI()
    register_exception_handlers(app)
    app.include_router(create_router(settings))

    session_factory = async_sessionmaker(async_engine, expire_on_commit=False)

    async def _session() -> AsyncGenerator[AsyncSession]:
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_async_session] = _session
    app.dependency_overrides[get_settings] = lambda: settings
    app.state.service_locator = fake_locator
    return app


@pytest.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient]:
    """Create an async test client."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client
