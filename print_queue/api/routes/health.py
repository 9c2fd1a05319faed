"""
Status, health check and metrics routes.
"""

import logging
from datetime import UTC, datetime

from fastapi import APIRouter
from fastapi.responses import Response
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from print_queue import __version__
from print_queue.api.dependencies import SessionFactoryDep
from print_queue.observability.metrics import get_metrics
from print_queue.types.api import HealthResponse, StatusResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])


async def _database_ok(session_factory) -> bool:
    try:
        async with session_factory() as session:
            await session.execute(text("SELECT 1"))
    except (SQLAlchemyError, OSError):
        logger.exception("Database health check failed")
        return False
    return True


@router.get(
    "/",
    response_model=StatusResponse,
    summary="Service status",
)
async def root() -> StatusResponse:
    """Report that the API is up."""
    return StatusResponse(
        status="online",
        message="Print queue API is operational.",
        timestamp=datetime.now(UTC),
    )


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check",
    description="Check the health of the API and database connection.",
)
async def health_check(session_factory: SessionFactoryDep) -> HealthResponse:
    """
    Perform a health check.

    Returns:
        HealthResponse with service status.
    """
    db_ok = await _database_ok(session_factory)

    return HealthResponse(
        status="healthy" if db_ok else "degraded",
        version=__version__,
        database="healthy" if db_ok else "unhealthy",
        timestamp=datetime.now(UTC),
    )


@router.get(
    "/ready",
    summary="Readiness check",
)
async def readiness_check(session_factory: SessionFactoryDep) -> dict:
    """Kubernetes readiness probe endpoint."""
    return {"ready": await _database_ok(session_factory)}


@router.get(
    "/live",
    summary="Liveness check",
)
async def liveness_check() -> dict:
    """Kubernetes liveness probe endpoint."""
    return {"alive": True}


@router.get(
    "/metrics",
    summary="Prometheus metrics",
)
async def metrics() -> Response:
    """Expose Prometheus metrics."""
    metrics_collector = get_metrics()
    return Response(
        content=metrics_collector.get_metrics(),
        media_type=metrics_collector.get_content_type(),
    )
