"""
Property Value Schemas
======================

Bounded Context: Event Data Structures

This module defines the four shapes a log event property value can take.

Design:
- Frozen dataclasses (immutable snapshots)
- Tagged union: ScalarValue | SequenceValue | StructureValue | DictionaryValue
- Nested values are tuples so a value tree is never mutated after capture

Types:
- ScalarValue: a single primitive (str, int, float, datetime, None, ...)
- SequenceValue: ordered elements
- StructureValue: named properties with an optional type tag
- DictionaryValue: scalar keys mapped to values
- LogEventProperty: a (name, value) pair

Example:
    >>> point = StructureValue(
    ...     properties=(
    ...         LogEventProperty("X", ScalarValue(1)),
    ...         LogEventProperty("Y", ScalarValue(2)),
    ...     ),
    ...     type_tag="Point",
    ... )
"""

from dataclasses import dataclass
from typing import Any, Tuple, Union


@dataclass(frozen=True)
class ScalarValue:
    """
    Immutable primitive property value.

    Attributes:
        value: The primitive (None, str, bool, int, float, Decimal,
            datetime, date, time, timedelta, UUID, Enum or any object
            rendered through str())
    """
    value: Any = None


@dataclass(frozen=True)
class SequenceValue:
    """Ordered list of property values."""
    elements: Tuple['PropertyValue', ...] = ()

    def __post_init__(self):
        """Normalize elements to a tuple."""
        if not isinstance(self.elements, tuple):
            object.__setattr__(self, 'elements', tuple(self.elements))


@dataclass(frozen=True)
class LogEventProperty:
    """
    Named property value.

    Invariants:
        - name is a non-empty string
    """
    name: str
    value: 'PropertyValue'

    def __post_init__(self):
        """Validate invariants."""
        if not isinstance(self.name, str) or not self.name:
            raise ValueError(
                f"Property name must be a non-empty string, got {self.name!r}"
            )


@dataclass(frozen=True)
class StructureValue:
    """
    Structured object: named properties plus an optional type tag.

    Attributes:
        properties: Properties in declaration order
        type_tag: Type name written under the formatter's type tag key
    """
    properties: Tuple[LogEventProperty, ...] = ()
    type_tag: Union[str, None] = None

    def __post_init__(self):
        """Normalize properties to a tuple."""
        if not isinstance(self.properties, tuple):
            object.__setattr__(self, 'properties', tuple(self.properties))


@dataclass(frozen=True)
class DictionaryValue:
    """
    Mapping with scalar keys.

    Attributes:
        elements: (key, value) pairs in insertion order
    """
    elements: Tuple[Tuple[ScalarValue, 'PropertyValue'], ...] = ()

    def __post_init__(self):
        """Normalize elements to a tuple of pairs."""
        if isinstance(self.elements, dict):
            pairs = tuple(self.elements.items())
        else:
            pairs = tuple(tuple(pair) for pair in self.elements)
        object.__setattr__(self, 'elements', pairs)


PropertyValue = Union[ScalarValue, SequenceValue, StructureValue, DictionaryValue]
