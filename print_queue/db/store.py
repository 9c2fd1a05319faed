"""
Job store for print job persistence.
Implements the atomic claim and transition primitives of the queue.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from datetime import UTC, datetime
from typing import Any

from sqlalchemy import func, insert, select, update
from sqlalchemy.exc import (
    DBAPIError,
    InterfaceError,
    OperationalError,
    SQLAlchemyError,
)
from sqlalchemy.exc import TimeoutError as PoolTimeoutError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.orm import aliased

from print_queue.constants import JobStatus
from print_queue.db.models import Job
from print_queue.exceptions import StoreError

logger = logging.getLogger(__name__)


def is_transient(error: SQLAlchemyError) -> bool:
    """
    Tell connectivity faults apart from permanent failures.

    Args:
        error: The error raised by SQLAlchemy.

    Returns:
        True if retrying the whole operation may succeed.
    """
    if isinstance(error, DBAPIError) and error.connection_invalidated:
        return True
    return isinstance(error, (OperationalError, InterfaceError, PoolTimeoutError))


class JobStore:
    """
    Durable store for print jobs.

    Every operation runs in its own transaction, so each call either
    commits entirely or leaves nothing behind. Tenant scoping is part of
    every query. Implements:
    - Insertion of pending jobs
    - Claiming with FOR UPDATE SKIP LOCKED
    - Conditional completion (compare-and-set on status)
    - Tenant-scoped history reads
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        """
        Initialize the store with a session factory.

        Args:
            session_factory: Factory producing async database sessions.
        """
        self._session_factory = session_factory

    def _failure(
        self,
        operation: str,
        error: SQLAlchemyError,
        unsent: bool = False,
    ) -> StoreError:
        """Log a store failure with its traceback and wrap it."""
        transient = is_transient(error)
        logger.exception(
            "Store operation failed",
            extra={
                "operation": operation,
                "transient": transient,
                "unsent": unsent,
                "error": error.__class__.__name__,
            },
        )
        return StoreError(
            f"{operation} failed: {error.__class__.__name__}",
            transient=transient,
            unsent=unsent,
        )

    @asynccontextmanager
    async def _transaction(self, operation: str) -> AsyncGenerator[AsyncSession]:
        """
        Run a block inside one transaction, translating store failures.

        The transaction commits when the block exits normally and rolls
        back on any exception, including cancellation. A connection is
        checked out before the block runs, so a failure to obtain one is
        reported as unsent.
        """
        try:
            async with self._session_factory() as session:
                async with session.begin():
                    try:
                        await session.connection()
                    except SQLAlchemyError as e:
                        raise self._failure(operation, e, unsent=True) from e
                    yield session
        except SQLAlchemyError as e:
            raise self._failure(operation, e) from e

    async def insert(self, tenant_id: int, payload: dict[str, Any]) -> Job:
        """
        Insert a new pending job.

        Args:
            tenant_id: The owning unit.
            payload: The print document.

        Returns:
            The inserted Job with its assigned id.
        """
        stmt = (
            insert(Job)
            .values(
                tenant_id=tenant_id,
                payload=payload,
                status=JobStatus.PENDING,
            )
            .returning(Job)
        )

        async with self._transaction("insert") as session:
            result = await session.execute(stmt)
            job = result.scalar_one()

        logger.info(
            "Inserted job",
            extra={"job_id": job.id, "tenant_id": tenant_id},
        )
        return job

    async def claim_one_eligible(self, tenant_id: int) -> Job | None:
        """
        Claim the oldest pending job of a tenant.

        Selection and transition are a single UPDATE statement whose
        subquery locks the candidate row with FOR UPDATE SKIP LOCKED, so
        concurrent claimers never see the same row: a row locked by one
        claimer is skipped by the others. Order is created_at, then id.

        Args:
            tenant_id: The claiming unit.

        Returns:
            The job after its move to PROCESSING, or None if nothing is pending.
        """
        candidate = aliased(Job, name="candidate")
        next_id = (
            select(candidate.id)
            .where(
                candidate.tenant_id == tenant_id,
                candidate.status == JobStatus.PENDING,
            )
            .order_by(candidate.created_at.asc(), candidate.id.asc())
            .limit(1)
            .with_for_update(skip_locked=True)
            .scalar_subquery()
        )
        stmt = (
            update(Job)
            .where(
                Job.id == next_id,
                Job.status == JobStatus.PENDING,
            )
            .values(status=JobStatus.PROCESSING)
            .returning(Job)
        )

        async with self._transaction("claim_one_eligible") as session:
            result = await session.execute(stmt)
            job = result.scalar_one_or_none()

        if job is not None:
            logger.info(
                "Claimed job",
                extra={"job_id": job.id, "tenant_id": tenant_id},
            )
        return job

    async def complete_if_processing(self, tenant_id: int, job_id: int) -> Job | None:
        """
        Mark a claimed job as completed.

        Compare-and-set: the row changes only if it exists, belongs to the
        tenant and is PROCESSING right now.

        Args:
            tenant_id: The unit reporting completion.
            job_id: The job id.

        Returns:
            The completed Job, or None if no row matched.
        """
        stmt = (
            update(Job)
            .where(
                Job.id == job_id,
                Job.tenant_id == tenant_id,
                Job.status == JobStatus.PROCESSING,
            )
            .values(
                status=JobStatus.COMPLETED,
                completed_at=datetime.now(UTC),
            )
            .returning(Job)
        )

        async with self._transaction("complete_if_processing") as session:
            result = await session.execute(stmt)
            job = result.scalar_one_or_none()

        if job is not None:
            logger.info(
                "Completed job",
                extra={"job_id": job_id, "tenant_id": tenant_id},
            )
        return job

    async def list_history(self, tenant_id: int, limit: int) -> list[Job]:
        """
        List a tenant's jobs of every status, newest first.

        Args:
            tenant_id: The unit.
            limit: Maximum number of jobs to return.

        Returns:
            Jobs ordered by created_at then id, descending.
        """
        stmt = (
            select(Job)
            .where(Job.tenant_id == tenant_id)
            .order_by(Job.created_at.desc(), Job.id.desc())
            .limit(limit)
        )

        async with self._transaction("list_history") as session:
            result = await session.execute(stmt)
            return list(result.scalars().all())

    async def fetch_payload(self, tenant_id: int, job_id: int) -> dict[str, Any] | None:
        """
        Read a job's payload.

        Args:
            tenant_id: The unit.
            job_id: The job id.

        Returns:
            A copy of the payload, or None if the tenant has no such job.
        """
        stmt = select(Job.payload).where(
            Job.id == job_id,
            Job.tenant_id == tenant_id,
        )

        async with self._transaction("fetch_payload") as session:
            result = await session.execute(stmt)
            payload = result.scalar_one_or_none()

        return dict(payload) if payload is not None else None

    async def get_job(self, tenant_id: int, job_id: int) -> Job | None:
        """Get a single job owned by the tenant."""
        stmt = select(Job).where(
            Job.id == job_id,
            Job.tenant_id == tenant_id,
        )

        async with self._transaction("get_job") as session:
            result = await session.execute(stmt)
            return result.scalar_one_or_none()

    async def count_by_status(self, tenant_id: int) -> dict[str, int]:
        """
        Count a tenant's jobs per status.

        Returns:
            Dictionary of status -> count, with zero for absent statuses.
        """
        stmt = (
            select(Job.status, func.count())
            .where(Job.tenant_id == tenant_id)
            .group_by(Job.status)
        )

        async with self._transaction("count_by_status") as session:
            result = await session.execute(stmt)
            counts = {status.value: count for status, count in result.all()}

        return {status.value: counts.get(status.value, 0) for status in JobStatus}
