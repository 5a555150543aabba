"""
Message Template Tokens
=======================

Bounded Context: Template Rendering

This module defines a parsed message template and renders its tokens
against an event's property values.

Design:
- Frozen dataclasses (a parsed template is shared between events)
- TextToken: literal text, written verbatim
- PropertyToken: a `{Name,alignment:format}` hole, rendered through the
  invariant format specifiers in formats.py
- Missing properties render as the token's raw text

Rendering Shapes:
    Scalar:     42, "text", 2024-01-02
    Sequence:   [1, 2, 3]
    Structure:  Point { X: 1, Y: 2 }
    Dictionary: [("a": 1), ("b": 2)]
"""

import io
from dataclasses import dataclass
from enum import Enum
from typing import Mapping, Optional, TextIO, Tuple, Union

from ..schemas.values import (
    ScalarValue,
    SequenceValue,
    StructureValue,
    DictionaryValue,
    PropertyValue,
)
from .formats import FormatProvider, INVARIANT, format_scalar


class Destructuring(str, Enum):
    """How a captured argument is turned into a property value."""

    DEFAULT = "default"
    """Scalars as-is, collections as sequences/dictionaries, others stringified."""

    STRINGIFY = "stringify"
    """`{$Name}`: always captured as str(value)."""

    DESTRUCTURE = "destructure"
    """`{@Name}`: objects captured as structures."""


def render_value(
    value: PropertyValue,
    format_spec: Optional[str] = None,
    provider: FormatProvider = INVARIANT
) -> str:
    """
    Human-readable rendering of a property value.

    Args:
        value: Property value of any shape
        format_spec: Format specifier applied to every scalar inside
        provider: Culture conventions

    Returns:
        Rendered text
    """
    if isinstance(value, ScalarValue):
        return format_scalar(value.value, format_spec, provider)

    if isinstance(value, SequenceValue):
        inner = ", ".join(
            render_value(element, format_spec, provider) for element in value.elements
        )
        return f"[{inner}]"

    if isinstance(value, StructureValue):
        inner = ", ".join(
            f"{prop.name}: {render_value(prop.value, format_spec, provider)}"
            for prop in value.properties
        )
        prefix = f"{value.type_tag} " if value.type_tag is not None else ""
        return f"{prefix}{{ {inner} }}"

    if isinstance(value, DictionaryValue):
        inner = ", ".join(
            f"({render_value(key, None, provider)}: "
            f"{render_value(element, format_spec, provider)})"
            for key, element in value.elements
        )
        return f"[{inner}]"

    return format_scalar(value, format_spec, provider)


@dataclass(frozen=True)
class TextToken:
    """Literal template text (braces already unescaped)."""
    text: str

    def render(
        self,
        properties: Mapping[str, PropertyValue],
        output: TextIO,
        provider: FormatProvider = INVARIANT
    ) -> None:
        """Write the literal text."""
        output.write(self.text)


@dataclass(frozen=True)
class PropertyToken:
    """
    Template hole bound to a named (or positional) property.

    Attributes:
        property_name: Name between the braces (without @ or $)
        raw_text: Original hole text including braces, e.g. "{Value:D4}"
        format: Format specifier after ':' (None when absent)
        alignment: Width after ','; positive pads left, negative pads right
        destructuring: Capture hint from the @ / $ prefix

    Example:
        >>> token = PropertyToken("Value", "{Value:D4}", format="D4")
        >>> token.render_to_string({"Value": ScalarValue(42)})
        '0042'
    """
    property_name: str
    raw_text: str
    format: Optional[str] = None
    alignment: Optional[int] = None
    destructuring: Destructuring = Destructuring.DEFAULT

    @property
    def is_positional(self) -> bool:
        """True for holes like {0}."""
        return self.property_name.isdigit()

    @property
    def position(self) -> Optional[int]:
        """Index of a positional hole, else None."""
        return int(self.property_name) if self.is_positional else None

    def render(
        self,
        properties: Mapping[str, PropertyValue],
        output: TextIO,
        provider: FormatProvider = INVARIANT
    ) -> None:
        """
        Write this token's rendering to output.

        Raises:
            TemplateRenderingError: If the format does not apply to the value
        """
        if self.property_name not in properties:
            output.write(self.raw_text)
            return

        text = render_value(properties[self.property_name], self.format, provider)
        if self.alignment is not None:
            width = abs(self.alignment)
            text = text.rjust(width) if self.alignment > 0 else text.ljust(width)
        output.write(text)

    def render_to_string(
        self,
        properties: Mapping[str, PropertyValue],
        provider: FormatProvider = INVARIANT
    ) -> str:
        """Render into a new string."""
        buffer = io.StringIO()
        self.render(properties, buffer, provider)
        return buffer.getvalue()


MessageTemplateToken = Union[TextToken, PropertyToken]


@dataclass(frozen=True)
class MessageTemplate:
    """
    Parsed message template.

    Attributes:
        text: Raw template text (written verbatim to `_mt`)
        tokens: Text and property tokens in template order
    """
    text: str
    tokens: Tuple[MessageTemplateToken, ...] = ()

    def __post_init__(self):
        """Normalize tokens to a tuple."""
        if not isinstance(self.tokens, tuple):
            object.__setattr__(self, 'tokens', tuple(self.tokens))

    @property
    def property_tokens(self) -> Tuple[PropertyToken, ...]:
        """Property tokens in template order."""
        return tuple(t for t in self.tokens if isinstance(t, PropertyToken))

    @property
    def formatted_tokens(self) -> Tuple[PropertyToken, ...]:
        """Property tokens carrying a format specifier, in template order."""
        return tuple(t for t in self.property_tokens if t.format is not None)

    @property
    def has_positional_properties(self) -> bool:
        """True when every property token is positional ({0}, {1}, ...)."""
        tokens = self.property_tokens
        return bool(tokens) and all(t.is_positional for t in tokens)

    def render(
        self,
        properties: Mapping[str, PropertyValue],
        output: Optional[TextIO] = None,
        provider: FormatProvider = INVARIANT
    ) -> Optional[str]:
        """
        Render the full human-readable message.

        Writes to output when given, otherwise returns the text.
        """
        target = output if output is not None else io.StringIO()
        for token in self.tokens:
            token.render(properties, target, provider)
        if output is None:
            return target.getvalue()
        return None
