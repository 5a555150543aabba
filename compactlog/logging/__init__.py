"""
Structured Logging for Compactlog
=================================

Bounded Context: Observability

This package connects Python's logging module to the compact JSON encoder.

Design:
- Message-template events (properties captured, not interpolated)
- JSON output parseable by CloudWatch, ELK, Loki
- Ambient trace/span ids and properties via contextvars
- Thread-safe

Public API
----------
    StructuredLogger: Message-template logger
    create_logger: Factory function
    CompactJsonLogFormatter: logging.Formatter for any handler
    PropertyValueConverter: Capture rules for property values
    trace_context, log_context: Ambient enrichment

Example:
    >>> from compactlog.logging import create_logger
    >>> logger = create_logger("orders")
    >>> logger.info("Order {OrderId} placed", 17)

Output:
    {"_t":"2025-10-24T15:30:45.1234560Z","_mt":"Order {OrderId} placed","OrderId":17,"SourceContext":"compactlog.orders"}
"""

from .capture import PropertyValueConverter
from .context import (
    trace_context,
    log_context,
    current_trace_id,
    current_span_id,
    current_properties,
)
from .formatter import CompactJsonLogFormatter, SOURCE_CONTEXT_PROPERTY
from .structured import StructuredLogger, create_logger

__all__ = [
    'PropertyValueConverter',
    'trace_context',
    'log_context',
    'current_trace_id',
    'current_span_id',
    'current_properties',
    'CompactJsonLogFormatter',
    'SOURCE_CONTEXT_PROPERTY',
    'StructuredLogger',
    'create_logger',
]
