"""Pytest configuration and fixtures."""

from collections.abc import AsyncGenerator

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from task_api.config import Settings
from task_api.database import Database
from task_api.main import create_app
from task_api.services.task import TaskService

from .fakes import FakeTaskCache

# Test database URL (use in-memory SQLite for tests)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest.fixture
def settings() -> Settings:
    """Settings isolated from the developer's environment and .env file."""
    return Settings(
        _env_file=None,
        database_url=TEST_DATABASE_URL,
        cache_enabled=False,
        log_level="WARNING",
        log_format="simple",
    )


@pytest.fixture
async def database(settings: Settings) -> AsyncGenerator[Database, None]:
    """Fresh in-memory database with all tables, disposed after the test."""
    db = Database(settings)
    await db.create_all()
    yield db
    await db.dispose()


@pytest.fixture
async def db_session(database: Database) -> AsyncGenerator[AsyncSession, None]:
    """Session on the test database."""
    async with database.session_maker() as session:
        yield session


@pytest.fixture
def cache() -> FakeTaskCache:
    """Recording in-memory cache."""
    return FakeTaskCache()


@pytest.fixture
def service(db_session: AsyncSession, cache: FakeTaskCache) -> TaskService:
    """Task service with the recording cache."""
    return TaskService(db_session, cache)


@pytest.fixture
def uncached_service(db_session: AsyncSession) -> TaskService:
    """Task service running with caching disabled."""
    return TaskService(db_session)


@pytest.fixture
def app(settings: Settings, database: Database, cache: FakeTaskCache) -> FastAPI:
    """Application wired to the test database and the recording cache."""
    return create_app(settings, database=database, cache=cache)


@pytest.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client talking to the app in-process."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac
