"""Prometheus metrics for index operations."""

from __future__ import annotations

from contextlib import contextmanager
import time
from typing import TYPE_CHECKING

from prometheus_client import Counter, Gauge, Histogram


if TYPE_CHECKING:
    from collections.abc import Generator


SEARCH_LATENCY = Histogram(
    "embedded_search_query_latency_seconds",
    "Search query latency",
    ["index"],
    buckets=(0.0005, 0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5),
)

INDEX_OPERATIONS = Counter(
    "embedded_search_operations_total",
    "Index mutations and queries by operation",
    ["index", "operation"],
)

LIVE_DOCUMENTS = Gauge(
    "embedded_search_live_documents",
    "Live (non-tombstoned) documents in the index",
    ["index"],
)

TOMBSTONED_DOCUMENTS = Gauge(
    "embedded_search_tombstoned_documents",
    "Removed documents awaiting vacuum",
    ["index"],
)


@contextmanager
def track_latency(histogram: Histogram, **labels: str) -> Generator[None, None, None]:
    """Context manager to track operation latency."""
    start = time.perf_counter()
    try:
        yield
    finally:
        histogram.labels(**labels).observe(time.perf_counter() - start)
