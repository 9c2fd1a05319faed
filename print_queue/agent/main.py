"""
Print agent process.

The agent polls one unit's queue, claims jobs one at a time, hands each
print document to a handler and reports completion.

A job whose handler raises stays in PROCESSING: there is no failure
state and no requeue, so it has to be dealt with by an operator.
"""

import asyncio
import logging
import signal
import time
from collections.abc import Awaitable, Callable

from opentelemetry import trace

from print_queue.config import get_settings
from print_queue.constants import SPAN_PRINT_JOB
from print_queue.db import JobStore, create_engine, create_session_factory, dispose_engine
from print_queue.db.models import Job
from print_queue.exceptions import StoreError
from print_queue.observability.logging import bind_context, setup_logging
from print_queue.queue import QueueEngine

logger = logging.getLogger(__name__)
tracer = trace.get_tracer(__name__)

# Receives a claimed job; returning normally means it was printed
PrintHandler = Callable[[Job], Awaitable[None]]


async def log_print_handler(job: Job) -> None:
    """Default handler: log the print document instead of printing it."""
    logger.info(
        "Printing job",
        extra={"job_id": job.id, "payload": job.payload},
    )


class PrintAgent:
    """
    Polling consumer bound to one unit.

    Features:
    - Exclusive claims through the queue engine, safe to run many agents
    - Completion reported only after the handler returns
    - Graceful shutdown on SIGTERM/SIGINT
    """

    def __init__(
        self,
        engine: QueueEngine,
        tenant_id: int,
        handler: PrintHandler = log_print_handler,
        poll_interval: float | None = None,
    ):
        """
        Initialize the agent.

        Args:
            engine: Queue engine to claim and complete jobs through.
            tenant_id: The unit whose queue is consumed.
            handler: Coroutine printing a claimed job.
            poll_interval: Seconds between polls when the queue is empty.
        """
        settings = get_settings()

        self.engine = engine
        self.tenant_id = tenant_id
        self.handler = handler
        if poll_interval is None:
            poll_interval = settings.agent_poll_interval_seconds
        self.poll_interval = poll_interval
        self._running = False

    async def start(self) -> None:
        """Poll until stopped."""
        bind_context(tenant_id=self.tenant_id)
        logger.info("Print agent starting", extra={"poll_interval": self.poll_interval})

        self._running = True

        while self._running:
            try:
                printed = await self.run_once()
                if not printed:
                    await asyncio.sleep(self.poll_interval)
            except StoreError as e:
                logger.warning(
                    "Store error in agent loop",
                    extra={"transient": e.transient, "error": e.detail},
                )
                await asyncio.sleep(self.poll_interval)

        logger.info("Print agent stopped")

    def stop(self) -> None:
        """Stop after the job in hand, if any."""
        logger.info("Print agent stopping")
        self._running = False

    async def run_once(self) -> bool:
        """
        Claim and print at most one job.

        Returns:
            True if a job was claimed, whether or not printing succeeded.
        """
        result = await self.engine.claim_next(self.tenant_id)
        if result.is_empty:
            return False

        job = result.value
        start_time = time.monotonic()

        with tracer.start_as_current_span(SPAN_PRINT_JOB) as span:
            span.set_attribute("job_id", job.id)
            span.set_attribute("tenant_id", self.tenant_id)
            try:
                await self.handler(job)
            except Exception as e:
                span.record_exception(e)
                logger.exception(
                    "Print handler failed, job left processing",
                    extra={"job_id": job.id},
                )
                return True

        completed = await self.engine.complete_job(self.tenant_id, job.id)
        if not completed.is_success:
            logger.warning("Job could not be completed", extra={"job_id": job.id})
            return True

        logger.info(
            "Job printed",
            extra={"job_id": job.id, "duration": f"{time.monotonic() - start_time:.2f}s"},
        )
        return True


async def run_async() -> None:
    """Run the agent asynchronously."""
    settings = get_settings()
    setup_logging(settings)

    db_engine = create_engine(settings)
    engine = QueueEngine(JobStore(create_session_factory(db_engine)))
    agent = PrintAgent(engine, tenant_id=settings.agent_tenant_id)

    loop = asyncio.get_running_loop()
    for sig in (signal.SIGTERM, signal.SIGINT):
        loop.add_signal_handler(sig, agent.stop)

    try:
        await agent.start()
    finally:
        await dispose_engine(db_engine)


def run() -> None:
    """Run the print agent."""
    asyncio.run(run_async())


if __name__ == "__main__":
    run()
