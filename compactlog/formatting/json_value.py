"""
JSON Value Formatter
====================

Bounded Context: Value Serialization

This module writes property values as compact JSON.

Design:
- Recursive dispatch over the property value union
- One string escaper (quote_string) shared with the event encoder
- Structures carry their type tag under a configurable key ("$type")
- Non-finite floats are written as strings ("NaN", "Infinity")

Output Shapes:
    ScalarValue(42)                    -> 42
    ScalarValue("a")                   -> "a"
    SequenceValue([1, 2])              -> [1,2]
    StructureValue([X=1], "Point")     -> {"X":1,"$type":"Point"}
    DictionaryValue({"k": 1})          -> {"k":1}
"""

import io
import json
import math
import re
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from enum import Enum
from typing import Any, Optional, TextIO

from ..errors import ValueRenderingError
from ..parsing.formats import format_datetime, format_scalar, format_timedelta
from ..schemas.values import (
    ScalarValue,
    SequenceValue,
    StructureValue,
    DictionaryValue,
    PropertyValue,
)


DEFAULT_TYPE_TAG_NAME = "$type"

_SURROGATE = re.compile("[\ud800-\udfff]")


class JsonValueFormatter:
    """
    Writes property values as JSON.

    Attributes:
        type_tag_name: Key for a structure's type tag (None disables tags)

    Example:
        >>> import io
        >>> out = io.StringIO()
        >>> JsonValueFormatter().format(SequenceValue([ScalarValue(1)]), out)
        >>> out.getvalue()
        '[1]'

    Thread Safety:
        Stateless after construction; safe to share.
    """

    def __init__(self, type_tag_name: Optional[str] = DEFAULT_TYPE_TAG_NAME):
        """
        Initialize formatter.

        Args:
            type_tag_name: Key written for StructureValue.type_tag
                (default: "$type"; None omits type tags)
        """
        self.type_tag_name = type_tag_name

    def format(self, value: PropertyValue, output: TextIO) -> None:
        """
        Write the JSON form of a property value.

        Raises:
            ValueRenderingError: If the value is not a property value
        """
        if isinstance(value, ScalarValue):
            self.format_literal_value(value.value, output)
        elif isinstance(value, SequenceValue):
            self._format_sequence(value, output)
        elif isinstance(value, StructureValue):
            self._format_structure(value, output)
        elif isinstance(value, DictionaryValue):
            self._format_dictionary(value, output)
        else:
            raise ValueRenderingError(
                f"Unsupported property value type: {type(value).__name__}"
            )

    def format_to_string(self, value: PropertyValue) -> str:
        """Return the JSON form of a property value."""
        buffer = io.StringIO()
        self.format(value, buffer)
        return buffer.getvalue()

    def _format_sequence(self, sequence: SequenceValue, output: TextIO) -> None:
        output.write("[")
        delim = ""
        for element in sequence.elements:
            output.write(delim)
            delim = ","
            self.format(element, output)
        output.write("]")

    def _format_structure(self, structure: StructureValue, output: TextIO) -> None:
        output.write("{")
        delim = ""
        for prop in structure.properties:
            output.write(delim)
            delim = ","
            self.quote_string(prop.name, output)
            output.write(":")
            self.format(prop.value, output)

        if self.type_tag_name is not None and structure.type_tag is not None:
            output.write(delim)
            self.quote_string(self.type_tag_name, output)
            output.write(":")
            self.quote_string(structure.type_tag, output)

        output.write("}")

    def _format_dictionary(self, dictionary: DictionaryValue, output: TextIO) -> None:
        output.write("{")
        delim = ""
        for key, element in dictionary.elements:
            output.write(delim)
            delim = ","
            key_value = key.value if isinstance(key, ScalarValue) else key
            self.quote_string(format_scalar(key_value, "l"), output)
            output.write(":")
            self.format(element, output)
        output.write("}")

    def format_literal_value(self, value: Any, output: TextIO) -> None:
        """Write a scalar as a JSON literal."""
        if value is None:
            output.write("null")
        elif isinstance(value, str):
            self.quote_string(value, output)
        elif isinstance(value, bool):
            output.write("true" if value else "false")
        elif isinstance(value, Enum):
            self.quote_string(value.name, output)
        elif isinstance(value, int):
            output.write(str(value))
        elif isinstance(value, float):
            if math.isnan(value):
                self.quote_string("NaN", output)
            elif math.isinf(value):
                self.quote_string("Infinity" if value > 0 else "-Infinity", output)
            else:
                output.write(repr(value))
        elif isinstance(value, Decimal):
            if value.is_finite():
                output.write(str(value))
            else:
                self.quote_string(format_scalar(value), output)
        elif isinstance(value, datetime):
            self.quote_string(format_datetime(value, "O"), output)
        elif isinstance(value, date):
            self.quote_string(value.isoformat(), output)
        elif isinstance(value, time):
            self.quote_string(format_datetime(value, "HH:mm:ss.fffffff"), output)
        elif isinstance(value, timedelta):
            self.quote_string(format_timedelta(value), output)
        elif isinstance(value, (bytes, bytearray)):
            self.quote_string(bytes(value).hex(), output)
        else:
            self.quote_string(str(value), output)

    @staticmethod
    def quote_string(text: str, output: TextIO) -> None:
        """
        Write text as a JSON string literal.

        Escapes quotes, backslashes and control characters; non-ASCII text
        is written as-is (UTF-8 output). Lone surrogates are written as
        \\uXXXX escapes since they have no UTF-8 encoding.
        """
        quoted = json.dumps(text, ensure_ascii=False)
        output.write(_SURROGATE.sub(lambda m: f"\\u{ord(m.group()):04x}", quoted))
