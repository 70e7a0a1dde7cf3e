"""Value Node dataclasses and kind enums for the structural value model.

A Value Node is exactly one of the shapes below. The union is closed and
flat: ``walk`` dispatches on the concrete class, and every class maps to
exactly one visitor callback.

Nodes are frozen. A parent holds its children in tuples, so a tree built by
``NodeBuilder`` can be walked any number of times with identical results.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum, auto
from typing import Any

__all__ = [
    "BytesNode",
    "Container",
    "MapNode",
    "OptionalNode",
    "PayloadKind",
    "PositionalRecordNode",
    "RecordNode",
    "ScalarKind",
    "ScalarNode",
    "SequenceNode",
    "TupleNode",
    "UnitRecordNode",
    "ValueNode",
    "VariantNode",
]


class ScalarKind(StrEnum):
    """Primitive kinds a ScalarNode can carry.

    Member values are the Rust spelling of the type where one exists:
    - I8 ... USIZE, F32, F64, BOOL, CHAR -> the primitive of the same name
    - STR    -> "str"    : a static text slice (``&'static str``)
    - STRING -> "string" : an owned ``String``
    - INT / FLOAT        : a number whose width was never declared
    - UNIT   -> "unit"   : ``()``
    """

    BOOL = auto()
    I8 = auto()
    I16 = auto()
    I32 = auto()
    I64 = auto()
    I128 = auto()
    ISIZE = auto()
    U8 = auto()
    U16 = auto()
    U32 = auto()
    U64 = auto()
    U128 = auto()
    USIZE = auto()
    F32 = auto()
    F64 = auto()
    CHAR = auto()
    STR = auto()
    STRING = auto()
    INT = auto()
    FLOAT = auto()
    UNIT = auto()

    @property
    def is_integer(self) -> bool:
        return self in _INTEGER_KINDS

    @property
    def is_float(self) -> bool:
        return self in (ScalarKind.F32, ScalarKind.F64, ScalarKind.FLOAT)

    @property
    def is_text(self) -> bool:
        return self in (ScalarKind.CHAR, ScalarKind.STR, ScalarKind.STRING)


_INTEGER_KINDS = frozenset(
    {
        ScalarKind.I8,
        ScalarKind.I16,
        ScalarKind.I32,
        ScalarKind.I64,
        ScalarKind.I128,
        ScalarKind.ISIZE,
        ScalarKind.U8,
        ScalarKind.U16,
        ScalarKind.U32,
        ScalarKind.U64,
        ScalarKind.U128,
        ScalarKind.USIZE,
        ScalarKind.INT,
    }
)


class Container(StrEnum):
    """How a growable sequence (or byte string) is constructed.

    - ARRAY   -> "array"   : ``[a, b]``                       (literal)
    - VEC     -> "vec"     : ``vec![a, b]``                   (literal)
    - COLLECT -> "collect" : ``vec![a, b].into_iter().collect()``
    """

    ARRAY = auto()
    VEC = auto()
    COLLECT = auto()

    @property
    def is_literal(self) -> bool:
        return self is not Container.COLLECT


class PayloadKind(StrEnum):
    """Shape of the data carried by a VariantNode."""

    NONE = auto()
    POSITIONAL = auto()
    NAMED = auto()


@dataclass(frozen=True, slots=True)
class ScalarNode:
    """A primitive leaf.

    Attributes:
        kind:  Declared primitive kind (see ScalarKind).
        value: The Python value (bool, int, float, str, or None for UNIT).
    """

    kind: ScalarKind
    value: Any = None


@dataclass(frozen=True, slots=True)
class OptionalNode:
    """An optional value; ``value is None`` means absent."""

    value: ValueNode | None = None

    @property
    def present(self) -> bool:
        return self.value is not None


@dataclass(frozen=True, slots=True)
class BytesNode:
    """A raw byte string, rendered as a list of unsigned byte literals."""

    data: bytes
    container: Container = Container.COLLECT


@dataclass(frozen=True, slots=True)
class SequenceNode:
    """A growable sequence.

    Attributes:
        items:     Element nodes in visit order.
        container: Construction form for the target container.
        unordered: True for set-like sources whose iteration order carries no
                   meaning; the encoder then fixes an order of its own.
    """

    items: tuple[ValueNode, ...] = ()
    container: Container = Container.COLLECT
    unordered: bool = False


@dataclass(frozen=True, slots=True)
class TupleNode:
    """A fixed-arity heterogeneous group."""

    items: tuple[ValueNode, ...] = ()


@dataclass(frozen=True, slots=True)
class MapNode:
    """Key/value pairs in insertion order."""

    entries: tuple[tuple[ValueNode, ValueNode], ...] = ()


@dataclass(frozen=True, slots=True)
class RecordNode:
    """A record with named fields, in declaration order."""

    name: str
    fields: tuple[tuple[str, ValueNode], ...] = ()


@dataclass(frozen=True, slots=True)
class PositionalRecordNode:
    """A record whose fields are identified by position."""

    name: str
    fields: tuple[ValueNode, ...] = ()


@dataclass(frozen=True, slots=True)
class UnitRecordNode:
    """A record with no fields at all."""

    name: str


@dataclass(frozen=True, slots=True)
class VariantNode:
    """One alternative of a tagged union.

    Attributes:
        enum_name:    Unqualified name of the enum type.
        variant_name: Unqualified name of the variant.
        payload:      Which shape the variant carries.
        fields:       Payload values (empty for PayloadKind.NONE).
        field_names:  Names matching ``fields`` one to one; only set for
                      PayloadKind.NAMED.
    """

    enum_name: str
    variant_name: str
    payload: PayloadKind = PayloadKind.NONE
    fields: tuple[ValueNode, ...] = ()
    field_names: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if self.payload is PayloadKind.NAMED:
            if len(self.field_names) != len(self.fields):
                msg = (
                    f"{self.enum_name}::{self.variant_name}: "
                    f"{len(self.field_names)} names for {len(self.fields)} fields"
                )
                raise ValueError(msg)
        elif self.field_names:
            msg = f"field_names are only valid for named payloads, got {self.payload}"
            raise ValueError(msg)
        if self.payload is PayloadKind.NONE and self.fields:
            msg = f"{self.enum_name}::{self.variant_name}: unit variant with fields"
            raise ValueError(msg)


ValueNode = (
    ScalarNode
    | OptionalNode
    | BytesNode
    | SequenceNode
    | TupleNode
    | MapNode
    | RecordNode
    | PositionalRecordNode
    | UnitRecordNode
    | VariantNode
)
