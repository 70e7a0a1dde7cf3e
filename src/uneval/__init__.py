"""uneval - render Python values as Rust expressions that rebuild them."""

from __future__ import annotations

from uneval.api import encode_node, to_file, to_string, write
from uneval.emit.config import EncoderConfig
from uneval.encoder import Encoder
from uneval.errors import (
    EncodeError,
    InvalidNameError,
    LiteralRangeError,
    UnsupportedShapeError,
)
from uneval.model.marks import positional, rust_enum

__version__: str = "0.1.0"
__all__: list[str] = [
    "EncodeError",
    "Encoder",
    "EncoderConfig",
    "InvalidNameError",
    "LiteralRangeError",
    "UnsupportedShapeError",
    "encode_node",
    "positional",
    "rust_enum",
    "to_file",
    "to_string",
    "write",
]
