"""
Ambient Log Context
===================

Bounded Context: Event Enrichment

Context variables carrying the current trace/span identifiers and extra
properties, so events logged inside a block pick them up without passing
them explicitly.

Example:
    >>> with trace_context("4bf92f3577b34da6a3ce929d0e0e4736", "00f067aa0ba902b7"):
    ...     logger.info("Handled request")   # carries _tr and _sp
    >>> with log_context(RequestId="r-17"):
    ...     logger.info("Handled request")   # carries RequestId

Thread Safety:
    contextvars are per-thread and per-asyncio-task.
"""

from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any, Dict, Iterator, Optional, Union

from ..schemas.tracing import TraceId, SpanId


_trace_id: ContextVar[Optional[TraceId]] = ContextVar("compactlog_trace_id", default=None)
_span_id: ContextVar[Optional[SpanId]] = ContextVar("compactlog_span_id", default=None)
_properties: ContextVar[Dict[str, Any]] = ContextVar("compactlog_properties", default={})


def coerce_trace_id(value: Union[TraceId, str, bytes, None]) -> Optional[TraceId]:
    """Accept a TraceId, hex string or raw bytes."""
    if value is None or isinstance(value, TraceId):
        return value
    if isinstance(value, str):
        return TraceId.from_hex(value)
    return TraceId(value)


def coerce_span_id(value: Union[SpanId, str, bytes, None]) -> Optional[SpanId]:
    """Accept a SpanId, hex string or raw bytes."""
    if value is None or isinstance(value, SpanId):
        return value
    if isinstance(value, str):
        return SpanId.from_hex(value)
    return SpanId(value)


def current_trace_id() -> Optional[TraceId]:
    """Trace id of the enclosing trace_context, if any."""
    return _trace_id.get()


def current_span_id() -> Optional[SpanId]:
    """Span id of the enclosing trace_context, if any."""
    return _span_id.get()


def current_properties() -> Dict[str, Any]:
    """Properties pushed by enclosing log_context blocks (outermost first)."""
    return dict(_properties.get())


@contextmanager
def trace_context(
    trace_id: Union[TraceId, str, bytes, None] = None,
    span_id: Union[SpanId, str, bytes, None] = None
) -> Iterator[None]:
    """Set the ambient trace/span identifiers for the enclosed block."""
    trace_token = _trace_id.set(coerce_trace_id(trace_id))
    span_token = _span_id.set(coerce_span_id(span_id))
    try:
        yield
    finally:
        _span_id.reset(span_token)
        _trace_id.reset(trace_token)


@contextmanager
def log_context(**properties: Any) -> Iterator[None]:
    """Add ambient properties for the enclosed block (inner values win)."""
    merged = dict(_properties.get())
    merged.update(properties)
    token = _properties.set(merged)
    try:
        yield
    finally:
        _properties.reset(token)
