"""
Compact JSON Event Formatter
============================

Bounded Context: Event Encoding

This module encodes one log event as one line of compact JSON whose
metadata keys are safe for CloudWatch metric filters and other tooling
that cannot query '@'-prefixed names.

Field Layout (order is fixed):
    _t    timestamp, UTC, round-trip ISO 8601          always
    _mt   message template text                        always
    _r    renderings of tokens with a format specifier if any
    _l    level name                                   if not Information
    _x    exception rendering                          if exception
    _tr   trace id, lowercase hex                      if set and non-zero
    _sp   span id, lowercase hex                       if set and non-zero
    ...   event properties, leading '@' replaced by '_'

Example:
    >>> event = LogEvent.create(
    ...     level=LogEventLevel.ERROR,
    ...     message_template="Value: {Value:D4}",
    ...     properties=[LogEventProperty("Value", ScalarValue(42))],
    ...     timestamp=datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc),
    ... )
    >>> encode(event, JsonValueFormatter())
    '{"_t":"2024-01-02T03:04:05.0000000Z","_mt":"Value: {Value:D4}","_r":["0042"],"_l":"Error","Value":42}'

Output:
    One JSON object per event. format() appends a newline; format_event()
    and encode() do not.
"""

import io
import logging
from typing import Optional, TextIO

from ..errors import InvalidArgumentError
from ..parsing.formats import INVARIANT
from ..schemas.events import LogEvent, format_utc_timestamp, render_exception
from ..schemas.levels import LogEventLevel
from .json_value import JsonValueFormatter, DEFAULT_TYPE_TAG_NAME


logger = logging.getLogger(__name__)


TIMESTAMP_PROPERTY = "_t"
MESSAGE_TEMPLATE_PROPERTY = "_mt"
RENDERINGS_PROPERTY = "_r"
LEVEL_PROPERTY = "_l"
EXCEPTION_PROPERTY = "_x"
TRACE_ID_PROPERTY = "_tr"
SPAN_ID_PROPERTY = "_sp"

RESERVED_SIGIL = "@"
ESCAPED_SIGIL = "_"


def escape_property_name(name: str) -> str:
    """
    Replace a leading '@' with '_'.

    Only the first character is rewritten: '@@level' -> '_@level'.
    """
    if name and name[0] == RESERVED_SIGIL:
        return ESCAPED_SIGIL + name[1:]
    return name


class CompactJsonFormatter:
    """
    Encodes log events as newline-delimited compact JSON.

    Attributes:
        value_formatter: Formatter for property values

    Example:
        >>> import sys
        >>> formatter = CompactJsonFormatter()
        >>> formatter.format(event, sys.stdout)

    Thread Safety:
        Stateless; safe to share given one output per call.
    """

    def __init__(self, value_formatter: Optional[JsonValueFormatter] = None):
        """
        Initialize formatter.

        Args:
            value_formatter: Property value formatter (default:
                JsonValueFormatter with type tag "$type")
        """
        if value_formatter is None:
            value_formatter = JsonValueFormatter(type_tag_name=DEFAULT_TYPE_TAG_NAME)
            logger.debug("Using default JsonValueFormatter (type tag %r)",
                         DEFAULT_TYPE_TAG_NAME)
        self.value_formatter = value_formatter

    def format(self, log_event: LogEvent, output: TextIO) -> None:
        """Write one event followed by a newline."""
        self.format_event(log_event, output, self.value_formatter)
        output.write("\n")

    def format_to_string(self, log_event: LogEvent) -> str:
        """Return one event's JSON line (no newline)."""
        return encode(log_event, self.value_formatter)

    @staticmethod
    def format_event(
        log_event: LogEvent,
        output: TextIO,
        value_formatter: JsonValueFormatter
    ) -> None:
        """
        Write one event as a JSON object, without a trailing newline.

        Args:
            log_event: Event to encode
            output: Character sink (anything with write(str))
            value_formatter: Formatter for property values

        Raises:
            InvalidArgumentError: If any argument is None (nothing is written)
            TemplateRenderingError: Propagated from token rendering
            ValueRenderingError: Propagated from value formatting
        """
        if log_event is None:
            raise InvalidArgumentError("log_event")
        if output is None:
            raise InvalidArgumentError("output")
        if value_formatter is None:
            raise InvalidArgumentError("value_formatter")

        quote = value_formatter.quote_string

        output.write(f'{{"{TIMESTAMP_PROPERTY}":"')
        output.write(format_utc_timestamp(log_event.timestamp))
        output.write(f'","{MESSAGE_TEMPLATE_PROPERTY}":')
        quote(log_event.message_template.text, output)

        tokens_with_format = log_event.message_template.formatted_tokens
        if tokens_with_format:
            output.write(f',"{RENDERINGS_PROPERTY}":[')
            delim = ""
            for token in tokens_with_format:
                output.write(delim)
                delim = ","
                quote(token.render_to_string(log_event.properties, INVARIANT), output)
            output.write("]")

        if log_event.level != LogEventLevel.INFORMATION:
            output.write(f',"{LEVEL_PROPERTY}":"')
            output.write(log_event.level.display_name)
            output.write('"')

        if log_event.exception is not None:
            output.write(f',"{EXCEPTION_PROPERTY}":')
            quote(render_exception(log_event.exception), output)

        if log_event.trace_id is not None and not log_event.trace_id.is_default:
            output.write(f',"{TRACE_ID_PROPERTY}":"')
            output.write(log_event.trace_id.to_hex())
            output.write('"')

        if log_event.span_id is not None and not log_event.span_id.is_default:
            output.write(f',"{SPAN_ID_PROPERTY}":"')
            output.write(log_event.span_id.to_hex())
            output.write('"')

        for name, value in log_event.properties.items():
            output.write(",")
            quote(escape_property_name(name), output)
            output.write(":")
            value_formatter.format(value, output)

        output.write("}")


def encode(log_event: LogEvent, value_formatter: JsonValueFormatter) -> str:
    """
    Encode one event as a compact JSON line (no trailing newline).

    Use CompactJsonFormatter().format_to_string() for the default
    "$type" value formatter.

    Args:
        log_event: Event to encode
        value_formatter: Property value formatter

    Raises:
        InvalidArgumentError: If log_event or value_formatter is None
    """
    if log_event is None:
        raise InvalidArgumentError("log_event")
    if value_formatter is None:
        raise InvalidArgumentError("value_formatter")
    buffer = io.StringIO()
    CompactJsonFormatter.format_event(log_event, buffer, value_formatter)
    return buffer.getvalue()
