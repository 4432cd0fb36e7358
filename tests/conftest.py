"""Shared test fixtures for async database, sessions, users, and service discovery."""

from collections.abc import AsyncGenerator, Awaitable, Callable

import pytest
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from user_api.core.config import Settings
from user_api.core.security import hash_password
from user_api.lib.discovery import BaseServiceLocator, DiscoveryError, ServiceInstance
from user_api.models.base import Base
from user_api.models.user import User, new_user_id

TEST_SECRET = "test-secret-key-not-for-production-use"


class FakeServiceLocator(BaseServiceLocator):
    """In-memory locator that records every lookup."""

    def __init__(
        self,
        instances: list[ServiceInstance] | None = None,
        error: DiscoveryError | None = None,
    ) -> None:
        self.instances = instances or []
        self.error = error
        self.calls: list[str] = []

    @property
    def backend_name(self) -> str:
        return "fake"

    async def resolve(self, service_name: str) -> list[ServiceInstance]:
        self.calls.append(service_name)
        if self.error is not None:
            raise self.error
        return list(self.instances)


@pytest.fixture
def settings() -> Settings:
    """Test application settings."""
    return Settings(
        database_url="sqlite+aiosqlite:///:memory:",
        jwt_secret_key=TEST_SECRET,
        jwt_algorithm="HS256",
        discovery_enabled=False,
    )


@pytest.fixture
async def async_engine() -> AsyncGenerator[AsyncEngine]:
    """Create an in-memory async SQLite engine for testing."""
    engine = create_async_engine("sqlite+aiosqlite:///:memory:", echo=False, poolclass=StaticPool)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
async def async_session(async_engine: AsyncEngine) -> AsyncGenerator[AsyncSession]:
    """Create a per-test async session."""
    session_factory = async_sessionmaker(async_engine, expire_on_commit=False)
    async with session_factory() as session:
        yield session


@pytest.fixture
def make_user(async_session: AsyncSession) -> Callable[..., Awaitable[User]]:
    """Factory that stores a user with a hashed password.

    Keyword arguments override the defaults; ``password`` is the plaintext.
    """

    async def _make(**overrides: object) -> User:
        password = str(overrides.pop("password", "secret-pass"))
        fields: dict[str, object] = {
            "user_id": new_user_id(),
            "full_name": "Test Student",
            "email": "student@example.com",
            "department": "CSE",
            "college": "Test College",
            "rollno": "R001",
            "mobile_no": "9876543210",
            "status": True,
            "admin": False,
        }
        fields.update(overrides)
        user = User(password=hash_password(password), **fields)
        async_session.add(user)
        await async_session.commit()
        await async_session.refresh(user)
        return user

    return _make


@pytest.fixture
async def sample_user(make_user: Callable[..., Awaitable[User]]) -> User:
    """A non-admin user with password ``secret-pass``."""
    return await make_user()


@pytest.fixture
async def admin_user(make_user: Callable[..., Awaitable[User]]) -> User:
    """An admin user with password ``admin-pass``."""
    return await make_user(
        full_name="Site Admin",
        email="admin@example.com",
        password="admin-pass",
        department="",
        college="",
        rollno=None,
        mobile_no=None,
        admin=True,
    )


@pytest.fixture
def peer_instance() -> ServiceInstance:
    """A complete peer service instance."""
    return ServiceInstance(address="10.0.0.5", port=3000)


@pytest.fixture
def fake_locator(peer_instance: ServiceInstance) -> FakeServiceLocator:
    """Locator resolving every name to ``peer_instance``; tests may replace its instances or error."""
    return FakeServiceLocator(instances=[peer_instance])
