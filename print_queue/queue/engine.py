"""
Queue engine.

Exposes the print job lifecycle (enqueue, claim, complete) as a small
protocol over an injected JobStore:

    pending --claim--> processing --complete--> completed

Every operation returns a QueueResult. Malformed input raises
ValidationError before the store is touched; store failures propagate
as StoreError. Nothing is retried here.
"""

import logging
from collections.abc import Mapping
from typing import Any

from opentelemetry import trace

from print_queue.constants import (
    SPAN_CLAIM_JOB,
    SPAN_COMPLETE_JOB,
    SPAN_ENQUEUE_JOB,
    JobStatus,
)
from print_queue.db.models import Job
from print_queue.db.store import JobStore
from print_queue.exceptions import ValidationError
from print_queue.types.job import QueueResult

logger = logging.getLogger(__name__)
tracer = trace.get_tracer(__name__)


def validate_tenant_id(tenant_id: Any) -> int:
    """Reject anything that is not a positive integer unit id."""
    if isinstance(tenant_id, bool) or not isinstance(tenant_id, int) or tenant_id < 1:
        raise ValidationError("Tenant id must be a positive integer")
    return tenant_id


def validate_job_id(job_id: Any) -> int:
    """Reject anything that is not a positive integer job id."""
    if isinstance(job_id, bool) or not isinstance(job_id, int) or job_id < 1:
        raise ValidationError("Job id must be a positive integer")
    return job_id


def validate_payload(payload: Any) -> dict[str, Any]:
    """
    Check that a payload is a non-empty structured document.

    Args:
        payload: The candidate print document.

    Returns:
        A plain dict copy of the payload.

    Raises:
        ValidationError: If the payload is not a non-empty mapping.
    """
    if not isinstance(payload, Mapping):
        raise ValidationError("Job payload must be a JSON object")
    if not payload:
        raise ValidationError("Job payload must not be empty")
    return dict(payload)


class QueueEngine:
    """
    Print job lifecycle on top of a JobStore.

    Tenant scoping is enforced by passing the caller's tenant into every
    store query; the engine never reads a status and writes it back in
    separate steps.
    """

    def __init__(self, store: JobStore):
        """
        Initialize the engine.

        Args:
            store: The job store every operation delegates to.
        """
        self._store = store

    @property
    def store(self) -> JobStore:
        return self._store

    async def enqueue(self, tenant_id: int, payload: Mapping[str, Any]) -> QueueResult[Job]:
        """
        Add a pending print job for a tenant.

        Args:
            tenant_id: The owning unit.
            payload: The print document.

        Returns:
            SUCCESS with the new job.
        """
        tenant_id = validate_tenant_id(tenant_id)
        document = validate_payload(payload)

        with tracer.start_as_current_span(SPAN_ENQUEUE_JOB) as span:
            span.set_attribute("tenant_id", tenant_id)
            job = await self._store.insert(tenant_id, document)
            span.set_attribute("job_id", job.id)

        return QueueResult.success(job)

    async def claim_next(self, tenant_id: int) -> QueueResult[Job]:
        """
        Claim the oldest pending job of a tenant.

        Safe under any number of concurrent callers: each pending job is
        handed to at most one of them.

        Args:
            tenant_id: The claiming unit.

        Returns:
            SUCCESS with the job now PROCESSING, or EMPTY.
        """
        tenant_id = validate_tenant_id(tenant_id)

        with tracer.start_as_current_span(SPAN_CLAIM_JOB) as span:
            span.set_attribute("tenant_id", tenant_id)
            job = await self._store.claim_one_eligible(tenant_id)
            if job is None:
                span.set_attribute("empty", True)
                return QueueResult.empty()
            span.set_attribute("job_id", job.id)

        return QueueResult.success(job)

    async def complete_job(self, tenant_id: int, job_id: int) -> QueueResult[Job]:
        """
        Report that a claimed job has been printed.

        Completing a job twice, a job never claimed, a missing job or
        another tenant's job all yield NOT_FOUND.

        Args:
            tenant_id: The reporting unit.
            job_id: The job id.

        Returns:
            SUCCESS with the completed job, or NOT_FOUND.
        """
        tenant_id = validate_tenant_id(tenant_id)
        job_id = validate_job_id(job_id)

        with tracer.start_as_current_span(SPAN_COMPLETE_JOB) as span:
            span.set_attribute("tenant_id", tenant_id)
            span.set_attribute("job_id", job_id)
            job = await self._store.complete_if_processing(tenant_id, job_id)

        if job is None:
            logger.info(
                "Completion rejected",
                extra={"job_id": job_id, "tenant_id": tenant_id},
            )
            return QueueResult.not_found(f"Job {job_id} not found or not processing")

        return QueueResult.success(job)

    async def get_job(self, tenant_id: int, job_id: int) -> QueueResult[Job]:
        """Look up one of the tenant's jobs."""
        tenant_id = validate_tenant_id(tenant_id)
        job_id = validate_job_id(job_id)

        job = await self._store.get_job(tenant_id, job_id)
        if job is None:
            return QueueResult.not_found(f"Job {job_id} not found")
        return QueueResult.success(job)

    async def stats(self, tenant_id: int) -> QueueResult[dict[str, Any]]:
        """
        Count the tenant's jobs per status.

        Returns:
            SUCCESS with {"stats": {...}, "queue_depth": <pending count>}.
        """
        tenant_id = validate_tenant_id(tenant_id)

        counts = await self._store.count_by_status(tenant_id)
        return QueueResult.success(
            {
                "stats": counts,
                "queue_depth": counts[JobStatus.PENDING.value],
            }
        )
