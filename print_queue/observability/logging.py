"""
Structured logging for the API, the print agents and the admin command.

Queue modules log through ``logging.getLogger(__name__)`` and pass job
and tenant ids as ``extra``; the formatter installed here lifts those
into structured keys next to the service name and the active trace.
"""

import logging
import sys
from typing import Any

import structlog
from opentelemetry import trace

from print_queue import __version__
from print_queue.config import Settings, get_settings

# Libraries that log once per request or statement
NOISY_LOGGERS = ("uvicorn.access", "sqlalchemy.engine", "httpx")


def add_trace_context(logger: Any, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    """Attach the current trace and span ids, if a span is recording."""
    span = trace.get_current_span()
    if span.is_recording():
        ctx = span.get_span_context()
        event_dict["trace_id"] = format(ctx.trace_id, "032x")
        event_dict["span_id"] = format(ctx.span_id, "016x")
    return event_dict


def service_context(service_name: str) -> structlog.types.Processor:
    """
    Build a processor stamping every record with the emitting service.

    Args:
        service_name: Value of the ``service`` key, e.g. "print-queue".

    Returns:
        A structlog processor.
    """

    def add_service(logger: Any, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
        event_dict.setdefault("service", service_name)
        event_dict.setdefault("version", __version__)
        return event_dict

    return add_service


def build_renderer(log_format: str) -> structlog.types.Processor:
    """Pick the final renderer: JSON for "json", colored console otherwise."""
    if log_format == "json":
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())


def setup_logging(settings: Settings | None = None) -> None:
    """
    Route standard library and structlog records through one handler.

    Safe to call more than once; the root handler is replaced each time.

    Args:
        settings: Supplies log level, format and service name.
    """
    settings = settings or get_settings()

    pre_chain: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        service_context(settings.otel_service_name),
        add_trace_context,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.stdlib.ExtraAdder(),
    ]

    structlog.configure(
        processors=[*pre_chain, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=pre_chain,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                build_renderer(settings.log_format),
            ],
        )
    )

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(getattr(logging, settings.log_level.upper(), logging.INFO))

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def bind_context(**kwargs: Any) -> None:
    """Add keys (e.g. tenant_id) to every later record of this context."""
    structlog.contextvars.bind_contextvars(**kwargs)
