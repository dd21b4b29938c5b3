"""Trace identifiers attached to log records.

Inside ``create_span`` the ids of the recording OpenTelemetry span are bound
here, so JSON logs emitted by index operations join the trace. Outside any
span a random pair is generated once per execution context.
"""

from __future__ import annotations

from contextvars import ContextVar, Token
from typing import TYPE_CHECKING
from uuid import uuid4


if TYPE_CHECKING:
    from opentelemetry.trace import SpanContext

_correlation: ContextVar[dict[str, str] | None] = ContextVar("embedded_search_correlation", default=None)


def get_trace_context() -> dict[str, str]:
    """Return the ``trace_id``/``span_id`` pair log records should carry."""
    ids = _correlation.get()
    if ids is None:
        ids = {"trace_id": uuid4().hex, "span_id": uuid4().hex[:16]}
        _correlation.set(ids)
    return ids


def bind_span_context(span_context: SpanContext) -> Token[dict[str, str] | None] | None:
    """Correlate logs with ``span_context``; no-op for non-recording spans."""
    if not span_context.is_valid:
        return None
    return _correlation.set(
        {
            "trace_id": format(span_context.trace_id, "032x"),
            "span_id": format(span_context.span_id, "016x"),
        }
    )


def unbind_span_context(token: Token[dict[str, str] | None] | None) -> None:
    """Restore the ids that were active before ``bind_span_context``."""
    if token is not None:
        _correlation.reset(token)
