"""Observability module for OpenTelemetry-aligned tracing, metrics, and logging."""

from embedded_search.observability.context import bind_span_context, get_trace_context, unbind_span_context
from embedded_search.observability.logging import JsonFormatter, configure_logging
from embedded_search.observability.metrics import (
    INDEX_OPERATIONS,
    LIVE_DOCUMENTS,
    SEARCH_LATENCY,
    TOMBSTONED_DOCUMENTS,
    track_latency,
)
from embedded_search.observability.tracing import create_span, get_tracer, reset_tracer


__all__ = [
    "INDEX_OPERATIONS",
    "LIVE_DOCUMENTS",
    "SEARCH_LATENCY",
    "TOMBSTONED_DOCUMENTS",
    "JsonFormatter",
    "bind_span_context",
    "configure_logging",
    "create_span",
    "get_trace_context",
    "get_tracer",
    "reset_tracer",
    "track_latency",
    "unbind_span_context",
]
