"""
History and reprint service.
"""

import logging

from opentelemetry import trace

from print_queue.constants import (
    DEFAULT_HISTORY_LIMIT,
    MAX_HISTORY_LIMIT,
    REPRINT_OF_KEY,
    SPAN_REPRINT_JOB,
)
from print_queue.db.models import Job
from print_queue.exceptions import ValidationError
from print_queue.queue.engine import QueueEngine, validate_job_id, validate_tenant_id
from print_queue.types.job import QueueResult

logger = logging.getLogger(__name__)
tracer = trace.get_tracer(__name__)


class HistoryService:
    """
    Read-only job history and non-destructive reprints.

    A reprint never touches the original row: it enqueues a new job whose
    payload is the original's plus a ``reprintOf`` back-reference.
    """

    def __init__(self, engine: QueueEngine, max_limit: int = MAX_HISTORY_LIMIT):
        """
        Initialize the service.

        Args:
            engine: Queue engine used to read the store and enqueue reprints.
            max_limit: Largest page size callers may request.
        """
        self._engine = engine
        self._max_limit = max_limit

    async def get_history(
        self,
        tenant_id: int,
        limit: int = DEFAULT_HISTORY_LIMIT,
    ) -> QueueResult[list[Job]]:
        """
        List the tenant's jobs of every status, newest first.

        Args:
            tenant_id: The unit.
            limit: Maximum number of jobs, 1 to max_limit.

        Returns:
            SUCCESS with a possibly empty list.
        """
        tenant_id = validate_tenant_id(tenant_id)
        if isinstance(limit, bool) or not isinstance(limit, int) or not 1 <= limit <= self._max_limit:
            raise ValidationError(f"Limit must be between 1 and {self._max_limit}")

        jobs = await self._engine.store.list_history(tenant_id, limit)
        return QueueResult.success(jobs)

    async def reprint(self, tenant_id: int, original_id: int) -> QueueResult[Job]:
        """
        Enqueue a copy of one of the tenant's jobs.

        Args:
            tenant_id: The requesting unit.
            original_id: The job to print again.

        Returns:
            SUCCESS with the new pending job, or NOT_FOUND if the tenant
            has no job with that id.
        """
        tenant_id = validate_tenant_id(tenant_id)
        original_id = validate_job_id(original_id)

        with tracer.start_as_current_span(SPAN_REPRINT_JOB) as span:
            span.set_attribute("tenant_id", tenant_id)
            span.set_attribute("original_job_id", original_id)

            payload = await self._engine.store.fetch_payload(tenant_id, original_id)
            if payload is None:
                return QueueResult.not_found(f"Job {original_id} not found")

            payload[REPRINT_OF_KEY] = original_id
            result = await self._engine.enqueue(tenant_id, payload)
            span.set_attribute("job_id", result.value.id)

        logger.info(
            "Reprinted job",
            extra={
                "job_id": result.value.id,
                "original_job_id": original_id,
                "tenant_id": tenant_id,
            },
        )
        return result
