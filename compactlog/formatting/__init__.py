"""
Compactlog Formatting
=====================

Bounded Context: Event Encoding

Public API
----------
    CompactJsonFormatter: Event -> one compact JSON line
    JsonValueFormatter: Property value -> JSON
    encode: Convenience function returning the line as a string
    escape_property_name: '@'-prefix rewrite applied to property names
"""

from .json_value import JsonValueFormatter, DEFAULT_TYPE_TAG_NAME
from .compact import (
    CompactJsonFormatter,
    encode,
    escape_property_name,
    TIMESTAMP_PROPERTY,
    MESSAGE_TEMPLATE_PROPERTY,
    RENDERINGS_PROPERTY,
    LEVEL_PROPERTY,
    EXCEPTION_PROPERTY,
    TRACE_ID_PROPERTY,
    SPAN_ID_PROPERTY,
)

__all__ = [
    'CompactJsonFormatter',
    'JsonValueFormatter',
    'DEFAULT_TYPE_TAG_NAME',
    'encode',
    'escape_property_name',
    'TIMESTAMP_PROPERTY',
    'MESSAGE_TEMPLATE_PROPERTY',
    'RENDERINGS_PROPERTY',
    'LEVEL_PROPERTY',
    'EXCEPTION_PROPERTY',
    'TRACE_ID_PROPERTY',
    'SPAN_ID_PROPERTY',
]
