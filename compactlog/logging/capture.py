"""
Property Value Capture
======================

Bounded Context: Event Construction

Turns arbitrary Python values into immutable property values.

Rules:
- None and primitives (str, int, float, bool, Decimal, datetime, date,
  time, timedelta, UUID, Enum, bytes) become ScalarValue
- Mappings become DictionaryValue
- Other iterables (list, tuple, set, generators) become SequenceValue
- With the '@' hint, dataclasses, named tuples and plain objects become
  StructureValue tagged with the class name
- With the '$' hint, anything becomes ScalarValue(str(value))
- Anything else is kept as a ScalarValue and rendered through str()

Limits:
- max_depth: nesting beyond this becomes ScalarValue(None)
- max_string_length: longer strings are cut and end with '…'
- max_collection_count: longer collections keep their first N elements
"""

import dataclasses
import logging
from collections.abc import Iterable, Mapping
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from enum import Enum
from itertools import islice
from typing import Any, Optional
from uuid import UUID

from ..parsing.template import Destructuring
from ..schemas.values import (
    ScalarValue,
    SequenceValue,
    StructureValue,
    DictionaryValue,
    LogEventProperty,
    PropertyValue,
)


logger = logging.getLogger(__name__)


SCALAR_TYPES = (
    str, bool, int, float, Decimal,
    datetime, date, time, timedelta,
    UUID, Enum, bytes, bytearray,
)

_PROPERTY_VALUE_TYPES = (ScalarValue, SequenceValue, StructureValue, DictionaryValue)

DEFAULT_MAX_DEPTH = 10


class PropertyValueConverter:
    """
    Captures Python values as property values.

    Attributes:
        max_depth: Maximum nesting depth
        max_string_length: Maximum string length (None = unlimited)
        max_collection_count: Maximum elements per collection (None = unlimited)

    Example:
        >>> converter = PropertyValueConverter()
        >>> converter.create_value([1, 2])
        SequenceValue(elements=(ScalarValue(value=1), ScalarValue(value=2)))
    """

    def __init__(
        self,
        max_depth: int = DEFAULT_MAX_DEPTH,
        max_string_length: Optional[int] = None,
        max_collection_count: Optional[int] = None
    ):
        if max_depth < 1:
            raise ValueError(f"max_depth must be >= 1, got {max_depth}")
        if max_string_length is not None and max_string_length < 2:
            raise ValueError(
                f"max_string_length must be >= 2, got {max_string_length}"
            )
        if max_collection_count is not None and max_collection_count < 1:
            raise ValueError(
                f"max_collection_count must be >= 1, got {max_collection_count}"
            )
        self.max_depth = max_depth
        self.max_string_length = max_string_length
        self.max_collection_count = max_collection_count

    def create_property(
        self,
        name: str,
        value: Any,
        destructuring: Destructuring = Destructuring.DEFAULT
    ) -> LogEventProperty:
        """Capture a named value."""
        return LogEventProperty(name, self.create_value(value, destructuring))

    def create_value(
        self,
        value: Any,
        destructuring: Destructuring = Destructuring.DEFAULT
    ) -> PropertyValue:
        """Capture a value."""
        return self._convert(value, destructuring, 1)

    def _convert(self, value: Any, destructuring: Destructuring, depth: int) -> PropertyValue:
        if isinstance(value, _PROPERTY_VALUE_TYPES):
            return value

        if depth > self.max_depth:
            logger.debug("Maximum capture depth %d reached", self.max_depth)
            return ScalarValue(None)

        if value is None:
            return ScalarValue(None)

        if destructuring is Destructuring.STRINGIFY:
            return ScalarValue(self._truncate(str(value)))

        if isinstance(value, str):
            return ScalarValue(self._truncate(value))

        if isinstance(value, SCALAR_TYPES):
            return ScalarValue(value)

        if destructuring is Destructuring.DESTRUCTURE:
            structure = self._destructure(value, depth)
            if structure is not None:
                return structure

        if isinstance(value, Mapping):
            return DictionaryValue(tuple(
                (ScalarValue(self._scalar_key(key)),
                 self._convert(element, destructuring, depth + 1))
                for key, element in self._limit(value.items())
            ))

        if isinstance(value, Iterable):
            return SequenceValue(tuple(
                self._convert(element, destructuring, depth + 1)
                for element in self._limit(value)
            ))

        return ScalarValue(value)

    def _destructure(self, value: Any, depth: int) -> Optional[StructureValue]:
        """Structure from a dataclass, named tuple or plain object; None if not one."""
        if dataclasses.is_dataclass(value) and not isinstance(value, type):
            items = [(f.name, getattr(value, f.name)) for f in dataclasses.fields(value)]
        elif isinstance(value, tuple) and hasattr(value, '_asdict'):
            items = list(value._asdict().items())
        elif hasattr(value, '__dict__') and not isinstance(value, (Mapping, type)):
            items = [(k, v) for k, v in vars(value).items() if not k.startswith('_')]
        else:
            return None

        return StructureValue(
            properties=tuple(
                LogEventProperty(name, self._convert(v, Destructuring.DESTRUCTURE, depth + 1))
                for name, v in self._limit(items)
            ),
            type_tag=type(value).__name__,
        )

    def _scalar_key(self, key: Any) -> Any:
        if key is None or isinstance(key, SCALAR_TYPES):
            return key
        return str(key)

    def _truncate(self, text: str) -> str:
        limit = self.max_string_length
        if limit is not None and len(text) > limit:
            return text[:limit - 1] + "…"
        return text

    def _limit(self, items):
        if self.max_collection_count is None:
            return items
        return islice(items, self.max_collection_count)
