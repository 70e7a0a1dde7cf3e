"""emit subpackage — the rendering components behind the Encoder.

Each component owns one family of shapes: ScalarFormatter (primitive
literals), ExpressionWriter (delimiting and the conversion wrapper),
CompositeEmitter (tuples, sequences, maps), StructVariantEmitter (records),
EnumPathResolver (variants).  Import from this module to stay on the stable
interface.

Example::

    from uneval.emit import ExpressionWriter, Fragment

    writer = ExpressionWriter()
    writer.embed(Fragment('"a"', "&'static str", "String"))   # '"a".into()'
"""

from __future__ import annotations

from uneval.emit.composite import CompositeEmitter
from uneval.emit.config import EncoderConfig
from uneval.emit.records import StructVariantEmitter
from uneval.emit.scalars import ScalarFormatter
from uneval.emit.variants import EnumPathResolver
from uneval.emit.writer import ArgsKind, ExpressionWriter, Fragment

__all__ = [
    "ArgsKind",
    "CompositeEmitter",
    "EncoderConfig",
    "EnumPathResolver",
    "ExpressionWriter",
    "Fragment",
    "ScalarFormatter",
    "StructVariantEmitter",
]
