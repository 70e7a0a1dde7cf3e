"""Annotated type markers carrying Rust type information on Python hints.

Python has one ``int``, one ``float`` and one ``str``; Rust has many. The
markers below attach the missing information through ``typing.Annotated``
so that ordinary dataclass annotations describe the target type::

    from dataclasses import dataclass
    from uneval.model.types import U8, F32, Vec, StaticStr

    @dataclass
    class Pixel:
        channels: Vec[U8]
        gamma: F32
        label: StaticStr

The builder reads the first ``ScalarKind`` / ``Container`` found in the
``Annotated`` metadata; other metadata is ignored.
"""

from __future__ import annotations

from typing import Annotated, TypeVar

from uneval.model.nodes import Container, ScalarKind

__all__ = [
    "I8",
    "I16",
    "I32",
    "I64",
    "I128",
    "U8",
    "U16",
    "U32",
    "U64",
    "U128",
    "Array",
    "Char",
    "Collect",
    "F32",
    "F64",
    "Isize",
    "StaticStr",
    "String",
    "Usize",
    "Vec",
]

T = TypeVar("T")

I8 = Annotated[int, ScalarKind.I8]
I16 = Annotated[int, ScalarKind.I16]
I32 = Annotated[int, ScalarKind.I32]
I64 = Annotated[int, ScalarKind.I64]
I128 = Annotated[int, ScalarKind.I128]
Isize = Annotated[int, ScalarKind.ISIZE]
U8 = Annotated[int, ScalarKind.U8]
U16 = Annotated[int, ScalarKind.U16]
U32 = Annotated[int, ScalarKind.U32]
U64 = Annotated[int, ScalarKind.U64]
U128 = Annotated[int, ScalarKind.U128]
Usize = Annotated[int, ScalarKind.USIZE]

F32 = Annotated[float, ScalarKind.F32]
F64 = Annotated[float, ScalarKind.F64]

Char = Annotated[str, ScalarKind.CHAR]
StaticStr = Annotated[str, ScalarKind.STR]
String = Annotated[str, ScalarKind.STRING]

# Generic container aliases: Vec[U8] -> Annotated[list[U8], Container.VEC]
Vec = Annotated[list[T], Container.VEC]
Array = Annotated[list[T], Container.ARRAY]
Collect = Annotated[list[T], Container.COLLECT]
