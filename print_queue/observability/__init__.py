"""
Observability module.
Contains logging, metrics, and tracing setup.
"""

from print_queue.observability.logging import bind_context, setup_logging
from print_queue.observability.metrics import MetricsCollector, get_metrics
from print_queue.observability.tracing import (
    instrument_fastapi,
    instrument_sqlalchemy,
    setup_tracing,
)

__all__ = [
    "setup_logging",
    "bind_context",
    "get_metrics",
    "MetricsCollector",
    "setup_tracing",
    "instrument_fastapi",
    "instrument_sqlalchemy",
]
