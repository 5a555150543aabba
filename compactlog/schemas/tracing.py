"""
Distributed Trace Identifiers
=============================

Bounded Context: Trace Correlation

Fixed-width binary identifiers for W3C trace context.

Types:
- TraceId: 16-byte trace identifier
- SpanId: 8-byte span identifier

Both render to lowercase hex and treat the all-zero value as "default"
(not set).

Example:
    >>> TraceId.from_hex("4bf92f3577b34da6a3ce929d0e0e4736").to_hex()
    '4bf92f3577b34da6a3ce929d0e0e4736'
"""

import secrets
from dataclasses import dataclass
from typing import ClassVar


@dataclass(frozen=True)
class _HexIdentifier:
    """Fixed-width identifier stored as raw bytes."""
    value: bytes

    WIDTH: ClassVar[int] = 0

    def __post_init__(self):
        """Validate width."""
        if not isinstance(self.value, (bytes, bytearray)):
            raise ValueError(
                f"{type(self).__name__} value must be bytes, got {type(self.value).__name__}"
            )
        if len(self.value) != self.WIDTH:
            raise ValueError(
                f"{type(self).__name__} must be {self.WIDTH} bytes, got {len(self.value)}"
            )
        object.__setattr__(self, 'value', bytes(self.value))

    @classmethod
    def from_hex(cls, text: str):
        """Parse from a hex string (case-insensitive).

        Raises:
            ValueError: If the text is not valid hex of the right width
        """
        try:
            raw = bytes.fromhex(text.strip())
        except ValueError as e:
            raise ValueError(f"Invalid {cls.__name__} hex: {text!r}") from e
        return cls(raw)

    @classmethod
    def create_random(cls):
        """Create a random non-default identifier."""
        while True:
            raw = secrets.token_bytes(cls.WIDTH)
            if any(raw):
                return cls(raw)

    @property
    def is_default(self) -> bool:
        """True for the all-zero identifier."""
        return not any(self.value)

    def to_hex(self) -> str:
        """Lowercase hex encoding."""
        return self.value.hex()

    def __str__(self) -> str:
        return self.to_hex()


@dataclass(frozen=True)
class TraceId(_HexIdentifier):
    """16-byte trace identifier."""
    WIDTH: ClassVar[int] = 16


@dataclass(frozen=True)
class SpanId(_HexIdentifier):
    """8-byte span identifier."""
    WIDTH: ClassVar[int] = 8
