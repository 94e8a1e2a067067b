"""
OpenTelemetry tracing.

Spans wrap the order operations (create, status update, pickup confirmation).
Export goes to a Jaeger agent when the exporter package is installed.
"""

import logging
from typing import Optional

from opentelemetry import trace
from opentelemetry.instrumentation.django import DjangoInstrumentor
from opentelemetry.sdk.resources import SERVICE_NAME, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor

logger = logging.getLogger(__name__)

_initialized = False


def setup_tracing(
    service_name: str = "printhub-backend",
    jaeger_host: str = "localhost",
    jaeger_port: int = 6831,
    enable: bool = True,
) -> None:
    """
    Install a tracer provider and instrument Django.

    Args:
        service_name: Service name reported on every span
        jaeger_host: Jaeger agent hostname
        jaeger_port: Jaeger agent UDP port
        enable: When False tracing stays a no-op
    """
    global _initialized

    if _initialized:
        logger.debug("Tracing already initialized. Skipping.")
        return

    if not enable:
        logger.info("Tracing disabled via configuration")
        return

    try:
        resource = Resource(attributes={SERVICE_NAME: service_name})
        tracer_provider = TracerProvider(resource=resource)
        trace.set_tracer_provider(tracer_provider)

        try:
            from opentelemetry.exporter.jaeger.thrift import JaegerExporter

            jaeger_exporter = JaegerExporter(agent_host_name=jaeger_host, agent_port=jaeger_port)
            tracer_provider.add_span_processor(BatchSpanProcessor(jaeger_exporter))
            logger.info(f"Jaeger tracing configured: {jaeger_host}:{jaeger_port}")
        except ImportError:
            logger.warning("Jaeger exporter not installed. Spans are recorded but not exported.")

        DjangoInstrumentor().instrument()

        _initialized = True
        logger.info(f"OpenTelemetry tracing initialized for service: {service_name}")

    except Exception as e:
        logger.error(f"Failed to initialize tracing: {e}")


def get_tracer(name: Optional[str] = None) -> trace.Tracer:
    """Return a tracer from the global provider (a no-op tracer until set up)."""
    return trace.get_tracer(name or "printhub")


def add_span_attributes(span: trace.Span, **attributes) -> None:
    """Attach stringified key/value attributes to a span."""
    for key, value in attributes.items():
        span.set_attribute(key, str(value))


# Proxy tracer: spans go to whichever provider is installed at call time.
tracer = get_tracer("printhub")
