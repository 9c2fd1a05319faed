"""
OpenTelemetry tracing setup.
"""

import logging
from typing import Any

from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.instrumentation.sqlalchemy import SQLAlchemyInstrumentor
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter

from print_queue import __version__
from print_queue.config import Settings, get_settings

logger = logging.getLogger(__name__)


def setup_tracing(
    settings: Settings | None = None,
    enable_console_export: bool = False,
) -> TracerProvider:
    """
    Install the global tracer provider.

    Queue modules obtain tracers through ``opentelemetry.trace`` and emit
    no-op spans until this has been called.

    Args:
        settings: Application settings.
        enable_console_export: If True, also export spans to console.

    Returns:
        TracerProvider: The installed provider.
    """
    settings = settings or get_settings()

    resource = Resource.create(
        {
            "service.name": settings.otel_service_name,
            "service.version": __version__,
        }
    )
    provider = TracerProvider(resource=resource)

    otlp_exporter = OTLPSpanExporter(
        endpoint=settings.otel_exporter_otlp_endpoint,
        insecure=True,
    )
    provider.add_span_processor(BatchSpanProcessor(otlp_exporter))

    if enable_console_export:
        provider.add_span_processor(BatchSpanProcessor(ConsoleSpanExporter()))

    trace.set_tracer_provider(provider)
    logger.info(
        "Tracing configured",
        extra={"endpoint": settings.otel_exporter_otlp_endpoint},
    )
    return provider


def instrument_fastapi(app: Any) -> None:
    """
    Instrument FastAPI application with OpenTelemetry.

    Args:
        app: The FastAPI application instance.
    """
    FastAPIInstrumentor.instrument_app(app)


def instrument_sqlalchemy(engine: Any) -> None:
    """
    Instrument an async SQLAlchemy engine with OpenTelemetry.

    Args:
        engine: The AsyncEngine instance.
    """
    SQLAlchemyInstrumentor().instrument(engine=engine.sync_engine)
