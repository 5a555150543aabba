"""
Compactlog Template Parsing
===========================

Bounded Context: Template Rendering

Parsing of message templates and rendering of their property tokens with
locale-independent format specifiers.

Public API
----------
Templates:
    MessageTemplate, TextToken, PropertyToken, Destructuring
    MessageTemplateParser, parse_template

Rendering:
    render_value
    FormatProvider, INVARIANT, format_scalar

Example:
    >>> from compactlog.parsing import parse_template
    >>> from compactlog.schemas import ScalarValue
    >>> template = parse_template("Value: {Value:D4}")
    >>> template.render({"Value": ScalarValue(42)})
    'Value: 0042'
"""

from .formats import FormatProvider, INVARIANT, format_scalar
from .template import (
    Destructuring,
    MessageTemplate,
    PropertyToken,
    TextToken,
    render_value,
)
from .parser import MessageTemplateParser, parse_template

__all__ = [
    # Templates
    'MessageTemplate',
    'TextToken',
    'PropertyToken',
    'Destructuring',
    'MessageTemplateParser',
    'parse_template',
    # Rendering
    'render_value',
    'FormatProvider',
    'INVARIANT',
    'format_scalar',
]
