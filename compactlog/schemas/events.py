"""
Log Event Schema
================

Bounded Context: Event Data Structures

This module defines the LogEvent snapshot consumed by the encoder, plus the
timestamp and exception renderings it relies on.

Design:
- Frozen dataclass (the event is an immutable snapshot)
- Properties are an insertion-ordered mapping (names are unique)
- Timestamps always normalize to UTC

Timestamp Format:
    Extended ISO 8601 with seven fractional digits and a 'Z' suffix
    (round-trippable): 2024-01-02T03:04:05.1234560Z
"""

import re
import traceback
from dataclasses import dataclass, field
from datetime import datetime, timezone, timedelta
from typing import Dict, Iterable, Mapping, Optional, Union

from .levels import LogEventLevel
from .tracing import TraceId, SpanId
from .values import LogEventProperty, PropertyValue
from ..parsing.template import MessageTemplate
from ..parsing.parser import parse_template


_TIMESTAMP_PATTERN = re.compile(
    r'^(\d{4})-(\d{2})-(\d{2})T(\d{2}):(\d{2}):(\d{2})'
    r'(?:\.(\d{1,7}))?'
    r'(Z|[+-]\d{2}:\d{2})$'
)


def to_utc(dt: datetime) -> datetime:
    """Normalize a datetime to UTC. Naive datetimes are taken as UTC."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def format_utc_timestamp(dt: datetime) -> str:
    """
    Render a timestamp in round-trip extended ISO 8601, UTC.

    Example:
        >>> format_utc_timestamp(datetime(2024, 1, 2, 3, 4, 5, 123456))
        '2024-01-02T03:04:05.1234560Z'
    """
    utc = to_utc(dt)
    # strftime %Y is not zero-padded below year 1000 on every platform
    return (
        f"{utc.year:04d}-{utc.month:02d}-{utc.day:02d}"
        f"T{utc.hour:02d}:{utc.minute:02d}:{utc.second:02d}"
        f".{utc.microsecond:06d}0Z"
    )


def parse_utc_timestamp(text: str) -> datetime:
    """
    Parse an extended ISO 8601 timestamp into an aware UTC datetime.

    Accepts 1-7 fractional digits (the seventh digit is below datetime
    resolution and is dropped) and a 'Z' or '+hh:mm' offset.

    Raises:
        ValueError: If the text is not a valid timestamp
    """
    # datetime.fromisoformat on 3.9 rejects both the Z suffix and 7 fraction digits
    match = _TIMESTAMP_PATTERN.match(text)
    if not match:
        raise ValueError(f"Invalid ISO timestamp: {text!r}")

    year, month, day, hour, minute, second, fraction, offset = match.groups()
    microsecond = int((fraction or '').ljust(7, '0')[:6])

    if offset == 'Z':
        tz = timezone.utc
    else:
        sign = -1 if offset[0] == '-' else 1
        hours, minutes = offset[1:].split(':')
        tz = timezone(sign * timedelta(hours=int(hours), minutes=int(minutes)))

    parsed = datetime(
        int(year), int(month), int(day),
        int(hour), int(minute), int(second),
        microsecond, tzinfo=tz
    )
    return parsed.astimezone(timezone.utc)


def render_exception(exc: BaseException) -> str:
    """
    Full descriptive rendering of an exception.

    Includes the traceback (when the exception was raised), the type name,
    the message and any chained cause or context.
    """
    lines = traceback.format_exception(type(exc), exc, exc.__traceback__)
    return ''.join(lines).rstrip('\n')


@dataclass(frozen=True)
class LogEvent:
    """
    Immutable structured log event.

    Attributes:
        timestamp: When the event occurred (normalized to UTC on output)
        level: Severity
        message_template: Parsed template (a str is parsed on construction)
        properties: Property name -> value, in insertion order
        exception: Exception attached to the event
        trace_id: Distributed trace identifier
        span_id: Distributed span identifier

    Example:
        >>> event = LogEvent.create(
        ...     level=LogEventLevel.ERROR,
        ...     message_template="Value: {Value:D4}",
        ...     properties=[LogEventProperty("Value", ScalarValue(42))],
        ... )
    """
    timestamp: datetime
    level: LogEventLevel
    message_template: MessageTemplate
    properties: Mapping[str, PropertyValue] = field(default_factory=dict)
    exception: Optional[BaseException] = None
    trace_id: Optional[TraceId] = None
    span_id: Optional[SpanId] = None

    def __post_init__(self):
        """Validate and normalize fields."""
        if not isinstance(self.timestamp, datetime):
            raise ValueError(
                f"timestamp must be a datetime, got {type(self.timestamp).__name__}"
            )
        if not isinstance(self.level, LogEventLevel):
            object.__setattr__(self, 'level', LogEventLevel(self.level))
        if isinstance(self.message_template, str):
            object.__setattr__(
                self, 'message_template', parse_template(self.message_template)
            )
        object.__setattr__(self, 'properties', dict(self.properties))

    @classmethod
    def create(
        cls,
        level: LogEventLevel = LogEventLevel.INFORMATION,
        message_template: Union[str, MessageTemplate] = "",
        properties: Iterable[LogEventProperty] = (),
        exception: Optional[BaseException] = None,
        timestamp: Optional[datetime] = None,
        trace_id: Optional[TraceId] = None,
        span_id: Optional[SpanId] = None,
    ) -> 'LogEvent':
        """
        Build an event from a property list.

        Later properties with the same name replace earlier ones.
        timestamp defaults to the current UTC time.
        """
        mapping: Dict[str, PropertyValue] = {}
        for prop in properties:
            mapping[prop.name] = prop.value

        return cls(
            timestamp=timestamp or datetime.now(timezone.utc),
            level=level,
            message_template=message_template,
            properties=mapping,
            exception=exception,
            trace_id=trace_id,
            span_id=span_id,
        )
