"""
Observability infrastructure: OpenTelemetry tracing setup and helpers.
"""

from .tracing import add_span_attributes, get_tracer, setup_tracing, tracer

__all__ = [
    "setup_tracing",
    "get_tracer",
    "add_span_attributes",
    "tracer",
]
