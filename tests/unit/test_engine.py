"""
Unit tests for the queue engine.
"""

import pytest

from print_queue.constants import JobStatus, Outcome
from print_queue.exceptions import NotFoundOrInvalidStateError, ValidationError
from print_queue.queue import QueueEngine


class TestQueueEngine:
    """Tests for QueueEngine."""

    async def test_enqueue(self, queue_engine: QueueEngine, sample_payload: dict):
        """Test enqueue returns the new pending job."""
        result = await queue_engine.enqueue(1, sample_payload)

        assert result.outcome == Outcome.SUCCESS
        assert result.value.status == JobStatus.PENDING
        assert result.value.payload == sample_payload

    @pytest.mark.parametrize("payload", [{}, None, "text", ["a", "b"]])
    async def test_enqueue_rejects_bad_payload(self, queue_engine: QueueEngine, payload):
        """Test only non-empty documents are accepted."""
        with pytest.raises(ValidationError):
            await queue_engine.enqueue(1, payload)

    @pytest.mark.parametrize("tenant_id", [0, -1, "1", None, True])
    async def test_rejects_bad_tenant(self, queue_engine: QueueEngine, tenant_id):
        """Test tenant ids must be positive integers."""
        with pytest.raises(ValidationError):
            await queue_engine.claim_next(tenant_id)

    async def test_claim_next(self, queue_engine: QueueEngine, sample_payload: dict):
        """Test claim returns the job in processing."""
        created = (await queue_engine.enqueue(1, sample_payload)).value

        result = await queue_engine.claim_next(1)

        assert result.is_success
        assert result.value.id == created.id
        assert result.value.status == JobStatus.PROCESSING

    async def test_claim_next_empty(self, queue_engine: QueueEngine):
        """Test an empty queue is a normal empty result."""
        result = await queue_engine.claim_next(1)

        assert result.outcome == Outcome.EMPTY
        assert result.value is None
        assert result.unwrap() is None

    async def test_complete_job(self, queue_engine: QueueEngine, sample_payload: dict):
        """Test completing a claimed job."""
        await queue_engine.enqueue(1, sample_payload)
        claimed = (await queue_engine.claim_next(1)).value

        result = await queue_engine.complete_job(1, claimed.id)

        assert result.is_success
        assert result.value.status == JobStatus.COMPLETED
        assert result.value.completed_at is not None

    async def test_complete_job_twice(self, queue_engine: QueueEngine, sample_payload: dict):
        """Test double completion is NOT_FOUND, never a second success."""
        await queue_engine.enqueue(1, sample_payload)
        claimed = (await queue_engine.claim_next(1)).value

        first = await queue_engine.complete_job(1, claimed.id)
        second = await queue_engine.complete_job(1, claimed.id)

        assert first.is_success
        assert second.outcome == Outcome.NOT_FOUND
        with pytest.raises(NotFoundOrInvalidStateError):
            second.unwrap()

    async def test_complete_unclaimed_job(self, queue_engine: QueueEngine, sample_payload: dict):
        """Test a pending job cannot be completed."""
        created = (await queue_engine.enqueue(1, sample_payload)).value

        result = await queue_engine.complete_job(1, created.id)

        assert result.outcome == Outcome.NOT_FOUND

    @pytest.mark.parametrize("claim", [False, True])
    async def test_complete_other_tenant_job(
        self,
        queue_engine: QueueEngine,
        sample_payload: dict,
        claim: bool,
    ):
        """Test cross-tenant completion is NOT_FOUND whatever the status."""
        created = (await queue_engine.enqueue(2, sample_payload)).value
        if claim:
            await queue_engine.claim_next(2)

        result = await queue_engine.complete_job(1, created.id)

        assert result.outcome == Outcome.NOT_FOUND

    async def test_complete_rejects_bad_id(self, queue_engine: QueueEngine):
        """Test job ids must be positive integers."""
        with pytest.raises(ValidationError):
            await queue_engine.complete_job(1, 0)

    async def test_get_job_scoped(self, queue_engine: QueueEngine, sample_payload: dict):
        """Test a unit only sees its own jobs."""
        created = (await queue_engine.enqueue(1, sample_payload)).value

        assert (await queue_engine.get_job(1, created.id)).is_success
        assert (await queue_engine.get_job(2, created.id)).outcome == Outcome.NOT_FOUND

    async def test_stats(self, queue_engine: QueueEngine, sample_payload: dict):
        """Test stats report counts and queue depth."""
        await queue_engine.enqueue(1, sample_payload)
        await queue_engine.enqueue(1, sample_payload)
        await queue_engine.claim_next(1)

        summary = (await queue_engine.stats(1)).value

        assert summary["stats"] == {"pending": 1, "processing": 1, "completed": 0}
        assert summary["queue_depth"] == 1
