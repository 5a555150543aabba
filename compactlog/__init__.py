"""
Compactlog - CloudWatch-friendly Compact JSON Log Events
========================================================

Bounded Context: Structured Log Encoding

This package encodes structured log events (timestamp, message template,
level, exception, trace/span ids, named properties) as single-line JSON
documents for log aggregators that apply metric filters and queries.

Architecture:
- schemas/: Immutable event data structures
- parsing/: Message template parsing and token rendering
- formatting/: Compact JSON encoder and property value formatter
- logging/: Bridge to Python's logging module
- config: YAML configuration

Design Philosophy:
- Reserved keys use '_' (_t, _mt, _l, ...) instead of '@'
- Property names starting with '@' have that character rewritten to '_'
- Deterministic field order for reproducible output
- One line per event, no trailing newline from encode()

Public API
----------
Schemas:
    LogEvent, LogEventLevel, LogEventProperty
    ScalarValue, SequenceValue, StructureValue, DictionaryValue
    TraceId, SpanId

Templates:
    MessageTemplate, MessageTemplateParser, parse_template

Formatting:
    CompactJsonFormatter, JsonValueFormatter, encode

Logging:
    StructuredLogger, create_logger, CompactJsonLogFormatter

Configuration:
    CompactLogConfig, configure_logging

Example:
    >>> from compactlog import CompactJsonFormatter, LogEvent, LogEventLevel, LogEventProperty, ScalarValue
    >>> event = LogEvent.create(
    ...     level=LogEventLevel.WARNING,
    ...     message_template="Disk {Drive} at {Usage:P0}",
    ...     properties=[
    ...         LogEventProperty("Drive", ScalarValue("C")),
    ...         LogEventProperty("Usage", ScalarValue(0.93)),
    ...     ],
    ... )
    >>> print(CompactJsonFormatter().format_to_string(event))
    {"_t":"...","_mt":"Disk {Drive} at {Usage:P0}","_r":["93 %"],"_l":"Warning","Drive":"C","Usage":0.93}
"""

# Version
__version__ = "1.0.0"

# Schemas (imported first: the other packages depend on them)
from .schemas import (
    LogEvent,
    LogEventLevel,
    LogEventProperty,
    ScalarValue,
    SequenceValue,
    StructureValue,
    DictionaryValue,
    TraceId,
    SpanId,
)

# Templates
from .parsing import MessageTemplate, MessageTemplateParser, parse_template

# Formatting
from .formatting import CompactJsonFormatter, JsonValueFormatter, encode

# Errors
from .errors import (
    CompactLogError,
    InvalidArgumentError,
    TemplateRenderingError,
    ValueRenderingError,
)

# Logging
from .logging import (
    StructuredLogger,
    create_logger,
    CompactJsonLogFormatter,
)

# Configuration
from .config import CompactLogConfig, configure_logging

__all__ = [
    # Version
    '__version__',
    # Schemas
    'LogEvent',
    'LogEventLevel',
    'LogEventProperty',
    'ScalarValue',
    'SequenceValue',
    'StructureValue',
    'DictionaryValue',
    'TraceId',
    'SpanId',
    # Templates
    'MessageTemplate',
    'MessageTemplateParser',
    'parse_template',
    # Formatting
    'CompactJsonFormatter',
    'JsonValueFormatter',
    'encode',
    # Errors
    'CompactLogError',
    'InvalidArgumentError',
    'TemplateRenderingError',
    'ValueRenderingError',
    # Logging
    'StructuredLogger',
    'create_logger',
    'CompactJsonLogFormatter',
    # Configuration
    'CompactLogConfig',
    'configure_logging',
]
