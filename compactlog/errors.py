"""
Compactlog Errors
=================

Bounded Context: Error Taxonomy

Error classes raised by the encoder and its collaborators.

Taxonomy:
- InvalidArgumentError: a required input is missing (raised before any output)
- TemplateRenderingError: a template token could not be rendered
- ValueRenderingError: a property value has no JSON representation

Rendering errors are never caught by the encoder: they reach the caller
unchanged, and the sink may hold a truncated line.
"""

from typing import Optional


class CompactLogError(Exception):
    """Base class for compactlog errors."""
    pass


class InvalidArgumentError(CompactLogError, ValueError):
    """
    Raised when a required argument is None.

    Attributes:
        param_name: Name of the offending parameter
    """

    def __init__(self, param_name: str, message: Optional[str] = None):
        self.param_name = param_name
        super().__init__(message or f"Argument '{param_name}' must not be None")


class TemplateRenderingError(CompactLogError):
    """Raised when a property token cannot be rendered with its format."""
    pass


class ValueRenderingError(CompactLogError, TypeError):
    """Raised when a property value cannot be written as JSON."""
    pass
