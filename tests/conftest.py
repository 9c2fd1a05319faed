"""
Pytest configuration and shared fixtures.

Tests run against a throwaway SQLite database by default. Set
TEST_DATABASE_URL to a PostgreSQL URL to exercise row locking for real.
"""

import os
from collections.abc import AsyncGenerator
from typing import Any

import pytest
import pytest_asyncio
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from print_queue.api.auth import create_access_token
from print_queue.api.main import create_app
from print_queue.config import get_settings
from print_queue.db import Base, JobStore, UserRepository, create_session_factory
from print_queue.db.connection import get_test_engine
from print_queue.queue import HistoryService, QueueEngine

TEST_DATABASE_URL = os.getenv("TEST_DATABASE_URL")

UNIT_ID = 1
OTHER_UNIT_ID = 2


@pytest.fixture
def database_url(tmp_path) -> str:
    """Get the test database URL."""
    return TEST_DATABASE_URL or f"sqlite+aiosqlite:///{tmp_path / 'print_queue.db'}"


@pytest_asyncio.fixture
async def async_engine(database_url: str) -> AsyncGenerator[AsyncEngine]:
    """Create an async database engine with a fresh schema."""
    engine = get_test_engine(database_url)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(async_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create a session factory bound to the test engine."""
    return create_session_factory(async_engine)


@pytest.fixture
def store(session_factory: async_sessionmaker[AsyncSession]) -> JobStore:
    """Create a job store."""
    return JobStore(session_factory)


@pytest.fixture
def queue_engine(store: JobStore) -> QueueEngine:
    """Create a queue engine over the test store."""
    return QueueEngine(store)


@pytest.fixture
def history(queue_engine: QueueEngine) -> HistoryService:
    """Create a history and reprint service."""
    return HistoryService(queue_engine)


@pytest.fixture
def users(session_factory: async_sessionmaker[AsyncSession]) -> UserRepository:
    """Create a user repository."""
    return UserRepository(session_factory)


@pytest.fixture
def app(session_factory: async_sessionmaker[AsyncSession]) -> FastAPI:
    """Create a FastAPI app wired to the test database."""
    return create_app(session_factory=session_factory)


@pytest_asyncio.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient]:
    """Create an async HTTP client for testing."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def auth_headers() -> dict[str, str]:
    """Bearer headers for an agent of unit 1."""
    token = create_access_token(tenant_id=UNIT_ID, user_id=1, username="agent-1")
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def other_unit_headers() -> dict[str, str]:
    """Bearer headers for an agent of unit 2."""
    token = create_access_token(tenant_id=OTHER_UNIT_ID, user_id=2, username="agent-2")
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def producer_headers() -> dict[str, str]:
    """Headers carrying the producer API key."""
    return {"X-API-Key": get_settings().producer_api_key}


@pytest.fixture
def sample_payload() -> dict[str, Any]:
    """Create a sample print document."""
    return {"orderId": "A1", "copies": 1, "lines": ["1x Margherita"]}
