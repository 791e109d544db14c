import os

# Must be set before src.config is imported
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("SECRET_KEY", "test-secret-key")

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

import src.models  # noqa: F401
from src.database import Base, enable_sqlite_foreign_keys, get_db
from src.main import app
from src.notifications.dependencies import get_connection_manager
from tests.helpers import create_user


@pytest_asyncio.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    enable_sqlite_foreign_keys(engine)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)


@pytest_asyncio.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def client(session_factory):
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture(autouse=True)
def clear_connections():
    manager = get_connection_manager()
    manager.active_connections.clear()
    yield
    manager.active_connections.clear()


@pytest_asyncio.fixture
async def users(session_factory):
    """alice, bob and carol; alice is an administrator"""
    await create_user(session_factory, "alice", first_name="Alice", last_name="Smith", is_admin=True)
    await create_user(session_factory, "bob", first_name="Bob", last_name="Jones")
    await create_user(session_factory, "carol", first_name="Carol", last_name="White")
    return ["alice", "bob", "carol"]
