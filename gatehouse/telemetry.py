"""OpenTelemetry configuration for Gatehouse."""

from fastapi import FastAPI
from opentelemetry import trace
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.instrumentation.sqlalchemy import SQLAlchemyInstrumentor
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter

from .config import Settings
from .logging_config import get_logger

logger = get_logger(__name__)


def setup_telemetry(app: FastAPI, settings: Settings) -> bool:
    """Configure OpenTelemetry tracing when enabled in the settings.

    Returns:
        True if instrumentation was installed
    """
    if not settings.enable_telemetry:
        return False

    try:
        tracer_provider = TracerProvider()
        # Console exporter for now; swap for OTLP once a collector is deployed
        tracer_provider.add_span_processor(
            BatchSpanProcessor(ConsoleSpanExporter())
        )
        trace.set_tracer_provider(tracer_provider)

        FastAPIInstrumentor.instrument_app(app, tracer_provider=tracer_provider)
        logger.info("FastAPI instrumentation enabled")

        # Engines are created after this point, so global instrumentation covers them
        SQLAlchemyInstrumentor().instrument(tracer_provider=tracer_provider)
        logger.info("SQLAlchemy instrumentation enabled")
    except Exception as e:
        logger.error(f"Failed to setup OpenTelemetry: {e}")
        # Don't fail the application if telemetry setup fails
        return False

    return True
