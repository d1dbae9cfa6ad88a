"""OpenTelemetry instrumentation for scrapeflow.

Task runs and individual actions are recorded as spans. Export is opt-in:
traces go to an OTLP gRPC collector (e.g. Grafana Tempo) only when
OTEL_ENABLED=true and an endpoint is configured. Without that, the tracer
from `get_tracer()` is a no-op.
"""

import logging
import os

from opentelemetry import trace

logger = logging.getLogger(__name__)

# Configuration from environment
OTEL_ENABLED = os.getenv("OTEL_ENABLED", "false").lower() == "true"
OTEL_SERVICE_NAME = os.getenv("OTEL_SERVICE_NAME", "scrapeflow")
OTEL_EXPORTER_OTLP_ENDPOINT = os.getenv("OTEL_EXPORTER_OTLP_ENDPOINT", "")

TRACER_NAME = "scrapeflow"


def get_tracer() -> trace.Tracer:
    return trace.get_tracer(TRACER_NAME)


def init_telemetry() -> None:
    """Install a TracerProvider with an OTLP exporter if enabled."""
    if not OTEL_ENABLED:
        logger.debug("OpenTelemetry tracing disabled (OTEL_ENABLED=false)")
        return

    if not OTEL_EXPORTER_OTLP_ENDPOINT:
        logger.warning(
            "OTEL_ENABLED=true but OTEL_EXPORTER_OTLP_ENDPOINT not set. "
            "Skipping OpenTelemetry initialization."
        )
        return

    try:
        from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import (
            OTLPSpanExporter,
        )
        from opentelemetry.sdk.resources import Resource
        from opentelemetry.sdk.trace import TracerProvider
        from opentelemetry.sdk.trace.export import BatchSpanProcessor
        from opentelemetry.semconv.resource import ResourceAttributes
    except ImportError as e:
        logger.error(
            f"OpenTelemetry packages not installed: {e}. "
            "Install with: pip install 'scrapeflow[telemetry]'"
        )
        return

    resource = Resource.create(
        {
            ResourceAttributes.SERVICE_NAME: OTEL_SERVICE_NAME,
            ResourceAttributes.DEPLOYMENT_ENVIRONMENT: os.getenv("ENVIRONMENT", "development"),
        }
    )
    provider = TracerProvider(resource=resource)
    provider.add_span_processor(
        BatchSpanProcessor(OTLPSpanExporter(endpoint=OTEL_EXPORTER_OTLP_ENDPOINT, insecure=True))
    )
    trace.set_tracer_provider(provider)
    logger.info(
        f"OpenTelemetry initialized: service={OTEL_SERVICE_NAME}, "
        f"endpoint={OTEL_EXPORTER_OTLP_ENDPOINT}"
    )


def shutdown_telemetry() -> None:
    """Flush and shut down the tracer provider."""
    if not OTEL_ENABLED:
        return

    provider = trace.get_tracer_provider()
    if hasattr(provider, "shutdown"):
        provider.shutdown()
        logger.info("OpenTelemetry tracer provider shut down")
