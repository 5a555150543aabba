"""
Compact JSON Logging Formatter
==============================

Bounded Context: Observability Infrastructure

Bridges Python's logging module to the compact JSON encoder.

Design:
- logging.Formatter subclass (plug into any Handler)
- Records produced by StructuredLogger carry a ready-built event
  (record.compact_event) and are encoded as-is
- Plain records are converted: the message becomes the template (or the
  %-interpolated text when the record has args), exc_info the exception,
  record.trace_id / record.span_id or the ambient trace context the trace
  identifiers, record.properties extra properties

Example:
    >>> handler = logging.StreamHandler()
    >>> handler.setFormatter(CompactJsonLogFormatter())
    >>> logging.getLogger().addHandler(handler)
    >>> logging.getLogger("orders").info(
    ...     "Order {OrderId} placed", extra={"properties": {"OrderId": 17}}
    ... )

Output:
    {"_t":"2025-10-24T15:30:45.1234560Z","_mt":"Order {OrderId} placed","OrderId":17,"SourceContext":"orders"}
"""

import logging
from datetime import datetime, timezone
from typing import Optional

from ..formatting.compact import CompactJsonFormatter, encode
from ..formatting.json_value import JsonValueFormatter
from ..parsing.parser import parse_template
from ..parsing.template import MessageTemplate, TextToken
from ..schemas.events import LogEvent
from ..schemas.levels import LogEventLevel
from .capture import PropertyValueConverter
from .context import (
    coerce_span_id,
    coerce_trace_id,
    current_properties,
    current_span_id,
    current_trace_id,
)


SOURCE_CONTEXT_PROPERTY = "SourceContext"


class CompactJsonLogFormatter(logging.Formatter):
    """
    Formats log records as compact JSON lines.

    The handler appends the line terminator; format() returns the bare line.
    """

    def __init__(
        self,
        value_formatter: Optional[JsonValueFormatter] = None,
        converter: Optional[PropertyValueConverter] = None
    ):
        """
        Initialize formatter.

        Args:
            value_formatter: Property value formatter (default: "$type" tags)
            converter: Capture rules for record.properties values
        """
        super().__init__()
        self.event_formatter = CompactJsonFormatter(value_formatter)
        self.converter = converter or PropertyValueConverter()

    def format(self, record: logging.LogRecord) -> str:
        """
        Format log record as a compact JSON line.

        Args:
            record: Python logging record

        Returns:
            JSON line without newline
        """
        event = getattr(record, "compact_event", None)
        if event is None:
            event = self.to_log_event(record)
        return encode(event, self.event_formatter.value_formatter)

    def to_log_event(self, record: logging.LogRecord) -> LogEvent:
        """Build a LogEvent from a plain logging record."""
        if record.args:
            text = record.getMessage()
            template = MessageTemplate(text=text, tokens=(TextToken(text),))
        else:
            template = parse_template(str(record.msg))

        exception = None
        if record.exc_info and record.exc_info[1] is not None:
            exception = record.exc_info[1]

        properties = {}
        for name, value in (getattr(record, "properties", None) or {}).items():
            properties[name] = self.converter.create_value(value)
        for name, value in current_properties().items():
            properties.setdefault(name, self.converter.create_value(value))
        properties.setdefault(
            SOURCE_CONTEXT_PROPERTY, self.converter.create_value(record.name)
        )

        trace_id = coerce_trace_id(getattr(record, "trace_id", None)) or current_trace_id()
        span_id = coerce_span_id(getattr(record, "span_id", None)) or current_span_id()

        return LogEvent(
            timestamp=datetime.fromtimestamp(record.created, tz=timezone.utc),
            level=LogEventLevel.from_logging_level(record.levelno),
            message_template=template,
            properties=properties,
            exception=exception,
            trace_id=trace_id,
            span_id=span_id,
        )
