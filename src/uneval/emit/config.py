"""EncoderConfig: formatting and strictness switches for the encoder.

EncoderConfig is a frozen (immutable) dataclass. The defaults produce the
shortest text that still type-checks when spliced into a typed position.
"""

from __future__ import annotations

from dataclasses import dataclass

__all__ = ["EncoderConfig"]


@dataclass(frozen=True, slots=True)
class EncoderConfig:
    """Immutable configuration for the Encoder.

    Attributes:
        integer_suffixes: Append the declared width to integer literals
            (``7u8``).  Integers without a declared width never get one.
            Default False.
        float_suffixes: Append the declared width to float literals
            (``0.5f32``).  Default False.
        strict_zero_arity: Raise UnsupportedShapeError for a positional
            record with no fields instead of rendering it as a bare name
            (which is indistinguishable from a unit record).  Default False.
        max_depth: Maximum nesting depth of the value tree (>= 1).
            Deeper trees raise UnsupportedShapeError.  Default 256.
    """

    integer_suffixes: bool = False
    float_suffixes: bool = False
    strict_zero_arity: bool = False
    max_depth: int = 256

    def __post_init__(self) -> None:
        if self.max_depth < 1:
            msg = f"max_depth must be >= 1, got {self.max_depth}"
            raise ValueError(msg)
