"""ScalarFormatter: exact Rust literal text for primitive values.

Every literal parses back to the identical value:
- integers are plain decimal, range-checked against the declared width;
- floats use the shortest decimal text that round-trips (``repr`` for f64,
  numpy's shortest representation for f32), and the ``NAN`` / ``INFINITY`` /
  ``NEG_INFINITY`` associated constants for non-finite values;
- chars and strings escape backslashes, the enclosing quote, and every
  non-printable code point.

Width suffixes (``7u8``, ``0.5f32``) are only written when EncoderConfig asks
for them and the width was declared.
"""

from __future__ import annotations

import math

import numpy as np

from uneval.emit.config import EncoderConfig
from uneval.errors import LiteralRangeError
from uneval.model.nodes import ScalarKind, ScalarNode

__all__ = ["ScalarFormatter", "declared_type", "natural_type"]

_INT_BOUNDS: dict[ScalarKind, tuple[int, int]] = {
    ScalarKind.I8: (-(2**7), 2**7 - 1),
    ScalarKind.I16: (-(2**15), 2**15 - 1),
    ScalarKind.I32: (-(2**31), 2**31 - 1),
    ScalarKind.I64: (-(2**63), 2**63 - 1),
    ScalarKind.I128: (-(2**127), 2**127 - 1),
    # isize / usize are checked against 64-bit targets.
    ScalarKind.ISIZE: (-(2**63), 2**63 - 1),
    ScalarKind.U8: (0, 2**8 - 1),
    ScalarKind.U16: (0, 2**16 - 1),
    ScalarKind.U32: (0, 2**32 - 1),
    ScalarKind.U64: (0, 2**64 - 1),
    ScalarKind.U128: (0, 2**128 - 1),
    ScalarKind.USIZE: (0, 2**64 - 1),
    # Undeclared width: anything some Rust integer type can hold.
    ScalarKind.INT: (-(2**127), 2**128 - 1),
}

_ESCAPES = {
    "\\": "\\\\",
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
    "\0": "\\0",
}

_STATIC_STR = "&'static str"


def natural_type(kind: ScalarKind) -> str | None:
    """Rust type of the bare literal for ``kind`` (None when inferred)."""
    if kind in (ScalarKind.STR, ScalarKind.STRING):
        return _STATIC_STR
    return declared_type(kind)


def declared_type(kind: ScalarKind) -> str | None:
    """Rust type a ``kind`` value is declared as (None when unknown)."""
    if kind in (ScalarKind.INT, ScalarKind.FLOAT):
        return None
    if kind is ScalarKind.STR:
        return _STATIC_STR
    if kind is ScalarKind.STRING:
        return "String"
    if kind is ScalarKind.UNIT:
        return "()"
    return kind.value


def _escape(text: str, quote: str) -> str:
    out: list[str] = []
    for ch in text:
        if ch == quote:
            out.append("\\" + ch)
        elif ch in _ESCAPES:
            out.append(_ESCAPES[ch])
        elif 0xD800 <= ord(ch) <= 0xDFFF:
            msg = f"lone surrogate U+{ord(ch):04X} cannot appear in Rust text"
            raise LiteralRangeError(msg)
        elif not ch.isprintable():
            out.append(f"\\u{{{ord(ch):x}}}")
        else:
            out.append(ch)
    return "".join(out)


class ScalarFormatter:
    """Renders ScalarNodes as Rust literal text.

    Stateless apart from the (immutable) config, so one instance can serve
    any number of nodes.

    Example::

        fmt = ScalarFormatter()
        fmt.format(ScalarNode(ScalarKind.F64, 0.1))        # "0.1"
        fmt.format(ScalarNode(ScalarKind.STRING, 'a"b'))   # '"a\\"b"'
    """

    def __init__(self, config: EncoderConfig | None = None) -> None:
        self._config = config if config is not None else EncoderConfig()

    def format(self, node: ScalarNode) -> str:
        """Return the literal text for ``node``.

        Raises:
            LiteralRangeError: If the value does not fit its declared kind.
        """
        kind = node.kind
        if kind is ScalarKind.UNIT:
            return "()"
        if kind is ScalarKind.BOOL:
            return self.format_bool(node.value)
        if kind.is_integer:
            return self.format_int(kind, node.value)
        if kind.is_float:
            return self.format_float(kind, node.value)
        if kind is ScalarKind.CHAR:
            return self.format_char(node.value)
        return self.format_str(node.value)

    def format_bool(self, value: bool) -> str:
        return "true" if value else "false"

    def format_int(self, kind: ScalarKind, value: int) -> str:
        low, high = _INT_BOUNDS[kind]
        if not low <= value <= high:
            msg = f"{value} is out of range for {kind} [{low}, {high}]"
            raise LiteralRangeError(msg)
        text = str(value)
        if self._config.integer_suffixes and kind is not ScalarKind.INT:
            text += kind.value
        return text

    def format_float(self, kind: ScalarKind, value: float) -> str:
        """Shortest round-trip text for ``value`` at the declared width."""
        width = "f32" if kind is ScalarKind.F32 else "f64"
        if math.isnan(value):
            return f"{width}::NAN"
        if math.isinf(value):
            return f"{width}::INFINITY" if value > 0 else f"{width}::NEG_INFINITY"

        if kind is ScalarKind.F32:
            with np.errstate(over="ignore"):
                single = np.float32(value)
            if not np.isfinite(single):
                msg = f"{value!r} overflows f32"
                raise LiteralRangeError(msg)
            # numpy scalars print the shortest text that round-trips at
            # their own precision (Dragon4, unique mode).
            text = str(single)
        else:
            text = repr(float(value))

        if self._config.float_suffixes and kind is not ScalarKind.FLOAT:
            text += width
        return text

    def format_char(self, value: str) -> str:
        if len(value) != 1:
            msg = f"char literal needs exactly one code point, got {value!r}"
            raise LiteralRangeError(msg)
        return "'" + _escape(value, "'") + "'"

    def format_str(self, value: str) -> str:
        return '"' + _escape(value, '"') + '"'
