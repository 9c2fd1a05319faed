"""
Retry and deadline policy for store calls made by the API.

A store call is run again only when doing so cannot apply it twice:
either the operation is read-only, or the failure happened before any
statement reached the database. A deadline expiry is never retried,
since the transaction may already have committed.

Empty and not-found outcomes are results, not failures, and are
returned as they are.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import TypeVar

from print_queue.config import Settings
from print_queue.exceptions import StoreError
from print_queue.observability.metrics import get_metrics

logger = logging.getLogger(__name__)

T = TypeVar("T")


def should_retry(error: StoreError, read_only: bool) -> bool:
    """Tell whether a failed attempt may be run again."""
    if not error.transient:
        return False
    return read_only or error.unsent


async def call_store(
    operation: str,
    call: Callable[[], Awaitable[T]],
    settings: Settings,
    read_only: bool = False,
) -> T:
    """
    Run a queue operation under a deadline, retrying where it is safe.

    Each attempt gets its own deadline of store_timeout_seconds. An
    attempt that runs out of time is reported as a transient StoreError
    (503) straight away: its outcome is unknown, so a claim, enqueue,
    reprint or completion is never attempted a second time.

    Args:
        operation: Name used in logs and metrics.
        call: Zero-argument callable starting one attempt.
        settings: Supplies retry count and timeout.
        read_only: True for lookups, which are retried on any transient
            failure.

    Returns:
        Whatever the operation returned.

    Raises:
        StoreError: On timeout, on a failure that is unsafe to retry, or
            when retries run out.
    """
    attempts = settings.store_retry_attempts + 1

    attempt = 1
    while True:
        try:
            async with asyncio.timeout(settings.store_timeout_seconds):
                return await call()
        except TimeoutError as e:
            get_metrics().record_store_error(operation, transient=True)
            logger.warning(
                "Store call timed out, outcome unknown",
                extra={"operation": operation, "timeout": settings.store_timeout_seconds},
            )
            raise StoreError(f"{operation} timed out", transient=True) from e
        except StoreError as e:
            get_metrics().record_store_error(operation, e.transient)
            if attempt >= attempts or not should_retry(e, read_only):
                raise

            logger.warning(
                "Retrying store call",
                extra={
                    "operation": operation,
                    "attempt": attempt,
                    "max_attempts": attempts,
                },
            )
            attempt += 1
