"""
Structured Template Logger
==========================

Bounded Context: Observability Infrastructure

This module provides a logger that captures message-template events and
writes them as compact JSON lines for production log pipelines.

Design:
- Message templates, not pre-formatted strings ("Order {OrderId} placed")
- Positional arguments bind to template holes in order
- Keyword arguments add extra properties
- Thread-safe (uses standard logging module)
- Ambient trace/span ids and properties from compactlog.logging.context

Architecture:
- Wraps Python's logging module
- Builds an immutable LogEvent per call
- CompactJsonLogFormatter encodes it on the handler

Example:
    >>> logger = StructuredLogger(component="orders")
    >>> logger.info("Order {OrderId} placed for {@Customer}", 17, customer)

Output:
    {"_t":"2025-10-24T15:30:45.1234560Z","_mt":"Order {OrderId} placed for {@Customer}","OrderId":17,"Customer":{"Name":"Ada","$type":"Customer"},"SourceContext":"compactlog.orders"}
"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional, TextIO, Union

from ..formatting.json_value import JsonValueFormatter
from ..parsing.parser import parse_template
from ..parsing.template import MessageTemplate
from ..schemas.events import LogEvent
from ..schemas.levels import LogEventLevel
from ..schemas.values import PropertyValue
from .capture import PropertyValueConverter
from .context import current_properties, current_span_id, current_trace_id
from .formatter import CompactJsonLogFormatter, SOURCE_CONTEXT_PROPERTY


diagnostics = logging.getLogger(__name__)

ExcInfo = Union[BaseException, bool, None]


def _as_logging_level(level: Union[LogEventLevel, int]) -> int:
    if isinstance(level, LogEventLevel):
        return level.to_logging_level()
    return level


class StructuredLogger:
    """
    Message-template logger writing compact JSON.

    Attributes:
        component: Component name (e.g., "orders", "billing")
        logger: Underlying Python logger instance
        converter: Capture rules for property values

    Example:
        >>> logger = StructuredLogger("orders")
        >>> logger.warning("Retrying {Attempt} of {MaxAttempts}", 2, 5)

    Thread Safety:
        Thread-safe via Python's logging module.
    """

    def __init__(
        self,
        component: str,
        level: Union[LogEventLevel, int] = logging.INFO,
        logger_name: Optional[str] = None,
        value_formatter: Optional[JsonValueFormatter] = None,
        converter: Optional[PropertyValueConverter] = None,
        stream: Optional[TextIO] = None
    ):
        """
        Initialize structured logger.

        Args:
            component: Component identifier (e.g., "orders")
            level: Minimum level, LogEventLevel or logging level (default: INFO)
            logger_name: Custom logger name (default: compactlog.<component>)
            value_formatter: Property value formatter (default: "$type" tags)
            converter: Capture rules (default: depth 10, no length limits)
            stream: Output stream for the default handler (default: stdout)
        """
        self.component = component
        self.logger_name = logger_name or f"compactlog.{component}"
        self.logger = logging.getLogger(self.logger_name)
        self.logger.setLevel(_as_logging_level(level))
        self.converter = converter or PropertyValueConverter()

        # Configure compact JSON handler if not already configured
        if not self.logger.handlers:
            handler = logging.StreamHandler(stream or sys.stdout)
            handler.setFormatter(CompactJsonLogFormatter(value_formatter, self.converter))
            self.logger.addHandler(handler)

    def is_enabled(self, level: LogEventLevel) -> bool:
        """True if events at level would be written."""
        return self.logger.isEnabledFor(level.to_logging_level())

    def write(
        self,
        level: LogEventLevel,
        message_template: str,
        /,
        *args: Any,
        exc_info: ExcInfo = None,
        **properties: Any
    ) -> None:
        """
        Capture and emit one event.

        Args:
            level: Event level
            message_template: Template text, e.g. "Order {OrderId} placed"
            *args: Values for the template's holes, in order
            exc_info: Exception to attach (True: the one being handled)
            **properties: Extra properties (any name, including "level")
        """
        if not self.is_enabled(level):
            return

        exception = self._resolve_exception(exc_info)
        event = self.create_event(level, message_template, args, properties, exception)

        self.logger.log(
            level.to_logging_level(),
            event.message_template.text,
            exc_info=exception,
            extra={'compact_event': event}
        )

    def create_event(
        self,
        level: LogEventLevel,
        message_template: str,
        args: tuple = (),
        properties: Optional[Dict[str, Any]] = None,
        exception: Optional[BaseException] = None
    ) -> LogEvent:
        """Build the LogEvent a write() call would emit."""
        template = parse_template(message_template)
        bound = self._bind(template, args)

        for name, value in (properties or {}).items():
            bound[name] = self.converter.create_value(value)
        for name, value in current_properties().items():
            if name not in bound:
                bound[name] = self.converter.create_value(value)
        if SOURCE_CONTEXT_PROPERTY not in bound:
            bound[SOURCE_CONTEXT_PROPERTY] = self.converter.create_value(self.logger_name)

        return LogEvent(
            timestamp=datetime.now(timezone.utc),
            level=level,
            message_template=template,
            properties=bound,
            exception=exception,
            trace_id=current_trace_id(),
            span_id=current_span_id(),
        )

    def _bind(self, template: MessageTemplate, args: tuple) -> Dict[str, PropertyValue]:
        """Bind positional arguments to template holes."""
        bound: Dict[str, PropertyValue] = {}
        tokens = template.property_tokens

        if template.has_positional_properties:
            for token in tokens:
                if token.position < len(args) and token.property_name not in bound:
                    bound[token.property_name] = self.converter.create_value(
                        args[token.position], token.destructuring
                    )
            return bound

        named = []
        for token in tokens:
            if token.property_name not in {t.property_name for t in named}:
                named.append(token)

        if len(args) != len(named):
            diagnostics.debug(
                "Template %r has %d named holes but %d arguments were supplied",
                template.text, len(named), len(args)
            )

        for token, value in zip(named, args):
            bound[token.property_name] = self.converter.create_value(
                value, token.destructuring
            )
        return bound

    @staticmethod
    def _resolve_exception(exc_info: ExcInfo) -> Optional[BaseException]:
        if exc_info is True:
            return sys.exc_info()[1]
        if isinstance(exc_info, BaseException):
            return exc_info
        return None

    def verbose(self, message_template: str, /, *args: Any, **properties: Any) -> None:
        """Log VERBOSE level event."""
        self.write(LogEventLevel.VERBOSE, message_template, *args, **properties)

    def debug(self, message_template: str, /, *args: Any, **properties: Any) -> None:
        """Log DEBUG level event."""
        self.write(LogEventLevel.DEBUG, message_template, *args, **properties)

    def info(self, message_template: str, /, *args: Any, **properties: Any) -> None:
        """
        Log INFORMATION level event.

        Example:
            >>> logger.info("Processed {Count} items", 3)
        """
        self.write(LogEventLevel.INFORMATION, message_template, *args, **properties)

    def warning(self, message_template: str, /, *args: Any, **properties: Any) -> None:
        """Log WARNING level event."""
        self.write(LogEventLevel.WARNING, message_template, *args, **properties)

    def error(
        self,
        message_template: str,
        /,
        *args: Any,
        exc_info: ExcInfo = None,
        **properties: Any
    ) -> None:
        """
        Log ERROR level event.

        Example:
            >>> try:
            ...     risky_operation()
            ... except ValueError as e:
            ...     logger.error("Failed to process {OrderId}", 17, exc_info=e)
        """
        self.write(LogEventLevel.ERROR, message_template, *args,
                   exc_info=exc_info, **properties)

    def fatal(
        self,
        message_template: str,
        /,
        *args: Any,
        exc_info: ExcInfo = None,
        **properties: Any
    ) -> None:
        """Log FATAL level event."""
        self.write(LogEventLevel.FATAL, message_template, *args,
                   exc_info=exc_info, **properties)

    def set_level(self, level: Union[LogEventLevel, int]) -> None:
        """
        Change logging level dynamically.

        Example:
            >>> logger.set_level(LogEventLevel.DEBUG)
        """
        self.logger.setLevel(_as_logging_level(level))


# Convenience factory function
def create_logger(
    component: str,
    level: Union[LogEventLevel, int] = logging.INFO
) -> StructuredLogger:
    """
    Factory function to create configured StructuredLogger.

    Example:
        >>> logger = create_logger("orders", level=LogEventLevel.DEBUG)
    """
    return StructuredLogger(component=component, level=level)
