"""
Compactlog Schemas
==================

Bounded Context: Data Structures

This package defines the immutable inputs of one encoding pass.

Design:
- Frozen dataclasses (immutability)
- Type hints for all fields
- Tagged union for property values

Public API
----------
Levels:
    LogEventLevel: Ordered severity enum

Property Values:
    ScalarValue, SequenceValue, StructureValue, DictionaryValue
    LogEventProperty

Tracing:
    TraceId, SpanId

Events:
    LogEvent
    format_utc_timestamp, parse_utc_timestamp, render_exception
"""

from .levels import LogEventLevel
from .values import (
    ScalarValue,
    SequenceValue,
    StructureValue,
    DictionaryValue,
    LogEventProperty,
    PropertyValue,
)
from .tracing import TraceId, SpanId
from .events import (
    LogEvent,
    format_utc_timestamp,
    parse_utc_timestamp,
    render_exception,
    to_utc,
)

__all__ = [
    # Levels
    'LogEventLevel',
    # Property values
    'ScalarValue',
    'SequenceValue',
    'StructureValue',
    'DictionaryValue',
    'LogEventProperty',
    'PropertyValue',
    # Tracing
    'TraceId',
    'SpanId',
    # Events
    'LogEvent',
    'format_utc_timestamp',
    'parse_utc_timestamp',
    'render_exception',
    'to_utc',
]
