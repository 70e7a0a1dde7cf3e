"""Exception types raised while turning a value into Rust source text.

Every fault the package raises on purpose derives from ``EncodeError``.
Each concrete error also derives from the matching builtin (``TypeError`` or
``ValueError``) so callers that only know the builtins still catch it.

Faults from the output sink (``OSError`` and subclasses) are never wrapped:
they reach the caller exactly as the sink raised them.
"""

from __future__ import annotations

__all__ = [
    "EncodeError",
    "InvalidNameError",
    "LiteralRangeError",
    "UnsupportedShapeError",
]


class EncodeError(Exception):
    """Base class for encoding faults."""


class UnsupportedShapeError(EncodeError, TypeError):
    """The value (or its declared type) has no unambiguous Rust rendering.

    Raised for unknown Python types, cyclic values, trees deeper than
    ``EncoderConfig.max_depth``, hint/value mismatches, and zero-field
    positional records when ``EncoderConfig.strict_zero_arity`` is set.
    """


class LiteralRangeError(EncodeError, ValueError):
    """A scalar does not fit the primitive kind it was declared as."""


class InvalidNameError(EncodeError, ValueError):
    """A type, variant or field name cannot be written as a Rust identifier."""
