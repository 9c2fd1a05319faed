"""
Database connection management.
Builds async SQLAlchemy engines and session factories.

Nothing here is cached at module level: callers own the engine they
create and hand the session factory to the store that needs it.
"""

import logging

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import NullPool

from print_queue.config import Settings
from print_queue.db.models import Base

logger = logging.getLogger(__name__)


def create_engine(settings: Settings) -> AsyncEngine:
    """
    Create the async database engine described by the settings.

    Args:
        settings: Application settings.

    Returns:
        AsyncEngine: The SQLAlchemy async engine instance.
    """
    url = make_url(settings.database_url)
    options = {
        "echo": settings.log_level == "DEBUG",
        "pool_pre_ping": True,
    }
    if url.get_backend_name() != "sqlite":
        options["pool_size"] = settings.database_pool_size
        options["max_overflow"] = settings.database_max_overflow

    return create_async_engine(url, **options)


def get_test_engine(database_url: str) -> AsyncEngine:
    """
    Create a test database engine with NullPool.

    Args:
        database_url: The database URL for testing.

    Returns:
        AsyncEngine: The test SQLAlchemy async engine instance.
    """
    return create_async_engine(
        database_url,
        poolclass=NullPool,
        echo=False,
    )


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """
    Create a session factory bound to the engine.

    Sessions keep loaded attributes after commit so rows returned by
    the store stay readable once their transaction has ended.
    """
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


async def create_schema(engine: AsyncEngine) -> None:
    """
    Create all tables that do not exist yet.

    Production deployments run the Alembic migrations instead; this is
    used by tests and local development.
    """
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database schema ensured")


async def dispose_engine(engine: AsyncEngine) -> None:
    """Close every pooled connection of the engine."""
    await engine.dispose()
    logger.info("Database connection closed")
