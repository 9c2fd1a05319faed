"""
FastAPI application entry point.
"""

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from print_queue import __version__
from print_queue.api.errors import register_exception_handlers
from print_queue.api.routes import auth_router, health_router, jobs_router
from print_queue.config import Settings, get_settings
from print_queue.db import (
    JobStore,
    UserRepository,
    create_engine,
    create_session_factory,
    dispose_engine,
)
from print_queue.observability.logging import setup_logging
from print_queue.observability.tracing import (
    instrument_fastapi,
    instrument_sqlalchemy,
    setup_tracing,
)
from print_queue.queue import HistoryService, QueueEngine

logger = logging.getLogger(__name__)


def wire_services(
    app: FastAPI,
    session_factory: async_sessionmaker[AsyncSession],
) -> None:
    """
    Attach the store and the services built on it to the application.

    Args:
        app: The FastAPI application.
        session_factory: Session factory the store and repositories use.
    """
    settings: Settings = app.state.settings
    engine = QueueEngine(JobStore(session_factory))

    app.state.session_factory = session_factory
    app.state.queue_engine = engine
    app.state.history_service = HistoryService(engine, max_limit=settings.history_max_limit)
    app.state.users = UserRepository(session_factory)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    Sets up logging and tracing, and opens the database unless services
    were wired in already.
    """
    settings: Settings = app.state.settings
    setup_logging(settings)
    setup_tracing(settings)

    db_engine = None
    if getattr(app.state, "queue_engine", None) is None:
        db_engine = create_engine(settings)
        instrument_sqlalchemy(db_engine)
        wire_services(app, create_session_factory(db_engine))
        logger.info("Database connection initialized")

    logger.info("Application started")

    yield

    if db_engine is not None:
        await dispose_engine(db_engine)
    logger.info("Application shutdown")


def create_app(
    settings: Settings | None = None,
    session_factory: async_sessionmaker[AsyncSession] | None = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        settings: Application settings. Defaults to the cached settings.
        session_factory: Optional pre-built session factory; when given the
            application uses it instead of opening its own engine.

    Returns:
        FastAPI: The configured application instance.
    """
    settings = settings or get_settings()

    app = FastAPI(
        title="Print Queue API",
        description="Multi-tenant print job queue with exclusive claims and reprints",
        version=__version__,
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )
    app.state.settings = settings

    if session_factory is not None:
        wire_services(app, session_factory)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    app.include_router(health_router)
    app.include_router(auth_router)
    app.include_router(jobs_router)

    instrument_fastapi(app)

    return app


def run() -> None:
    """Run the API server."""
    settings = get_settings()

    uvicorn.run(
        create_app(settings),
        host=settings.api_host,
        port=settings.api_port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()
