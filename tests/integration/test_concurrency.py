"""
Integration tests for concurrent claims.

Against SQLite writers are serialized by the database lock; set
TEST_DATABASE_URL to run the same checks against PostgreSQL row locks.
"""

import asyncio

import pytest

from print_queue.constants import JobStatus
from print_queue.queue import QueueEngine


class TestConcurrentClaims:
    """Concurrent claimers must never share a job."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize(("claimers", "jobs"), [(10, 3), (5, 5), (3, 8)])
    async def test_each_job_claimed_once(
        self,
        queue_engine: QueueEngine,
        claimers: int,
        jobs: int,
    ):
        """Test min(claimers, jobs) claimers win and no job is handed out twice."""
        for i in range(jobs):
            await queue_engine.enqueue(1, {"index": i})

        results = await asyncio.gather(
            *(queue_engine.claim_next(1) for _ in range(claimers))
        )

        claimed = [result.value.id for result in results if result.is_success]
        assert len(claimed) == min(claimers, jobs)
        assert len(set(claimed)) == len(claimed)
        assert sum(result.is_empty for result in results) == claimers - len(claimed)

        counts = (await queue_engine.stats(1)).value["stats"]
        assert counts[JobStatus.PROCESSING] == len(claimed)
        assert counts[JobStatus.PENDING] == jobs - len(claimed)

    @pytest.mark.asyncio
    async def test_concurrent_completion(self, queue_engine: QueueEngine):
        """Test only one of many racing completions succeeds."""
        await queue_engine.enqueue(1, {"orderId": "A1"})
        job = (await queue_engine.claim_next(1)).value

        results = await asyncio.gather(
            *(queue_engine.complete_job(1, job.id) for _ in range(5))
        )

        assert sum(result.is_success for result in results) == 1

    @pytest.mark.asyncio
    async def test_tenants_do_not_interfere(self, queue_engine: QueueEngine):
        """Test claims for one unit never take another unit's jobs."""
        for i in range(3):
            await queue_engine.enqueue(1, {"index": i})
            await queue_engine.enqueue(2, {"index": i})

        results = await asyncio.gather(
            *(queue_engine.claim_next(tenant) for tenant in (1, 2) for _ in range(4))
        )

        claimed_by_tenant = {1: 0, 2: 0}
        for result in results:
            if result.is_success:
                claimed_by_tenant[result.value.tenant_id] += 1
        assert claimed_by_tenant == {1: 3, 2: 3}

    @pytest.mark.asyncio
    async def test_claims_drain_in_creation_order(self, queue_engine: QueueEngine):
        """Test sequential claims follow enqueue order."""
        ids = [
            (await queue_engine.enqueue(1, {"index": i})).value.id
            for i in range(4)
        ]

        claimed = [(await queue_engine.claim_next(1)).value.id for _ in range(4)]

        assert claimed == ids
        assert (await queue_engine.claim_next(1)).is_empty
