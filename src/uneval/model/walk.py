"""Depth-first driver that feeds a Value Node tree to a ValueVisitor.

Children are walked before their parent, left to right, and each node is
visited exactly once.  The parent's callback receives the children's results
in visit order, so a visitor never needs to recurse on its own and never
sees a node twice.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Generic, TypeVar

from uneval.errors import UnsupportedShapeError
from uneval.model.nodes import (
    BytesNode,
    MapNode,
    OptionalNode,
    PayloadKind,
    PositionalRecordNode,
    RecordNode,
    ScalarNode,
    SequenceNode,
    TupleNode,
    UnitRecordNode,
    ValueNode,
    VariantNode,
)

if TYPE_CHECKING:
    from uneval.protocols import ValueVisitor

__all__ = ["walk"]

T = TypeVar("T")


def walk(node: ValueNode, visitor: ValueVisitor[T], max_depth: int = 256) -> T:
    """Walk ``node`` depth-first and return the visitor's result for it.

    Args:
        node:      Root of the tree.
        visitor:   Receiver of the callbacks.
        max_depth: Maximum nesting depth; deeper trees raise
                   UnsupportedShapeError.  Defaults to 256.

    Raises:
        UnsupportedShapeError: For objects that are not Value Nodes and for
            trees deeper than ``max_depth``.
    """
    try:
        return _Walker(visitor, max_depth).visit(node, 0)
    except RecursionError as err:
        msg = (
            "value tree nested too deeply for the interpreter stack "
            f"(max_depth={max_depth})"
        )
        raise UnsupportedShapeError(msg) from err


class _Walker(Generic[T]):
    __slots__ = ("_max_depth", "_visitor")

    def __init__(self, visitor: ValueVisitor[T], max_depth: int) -> None:
        self._visitor = visitor
        self._max_depth = max_depth

    # Children are visited in plain loops: one interpreter frame per level.
    def visit(self, node: ValueNode, depth: int) -> T:
        if depth > self._max_depth:
            msg = f"value tree nested deeper than max_depth={self._max_depth}"
            raise UnsupportedShapeError(msg)
        v = self._visitor
        below = depth + 1

        if isinstance(node, ScalarNode):
            return v.visit_scalar(node)

        if isinstance(node, OptionalNode):
            if node.value is None:
                return v.visit_none(node)
            return v.visit_some(node, self.visit(node.value, below))

        if isinstance(node, BytesNode):
            return v.visit_bytes(node)

        if isinstance(node, SequenceNode):
            items: list[T] = []
            for item in node.items:
                items.append(self.visit(item, below))
            return v.visit_sequence(node, items)

        if isinstance(node, TupleNode):
            members: list[T] = []
            for member in node.items:
                members.append(self.visit(member, below))
            return v.visit_tuple(node, members)

        if isinstance(node, MapNode):
            entries: list[tuple[T, T]] = []
            for key, value in node.entries:
                entries.append((self.visit(key, below), self.visit(value, below)))
            return v.visit_map(node, entries)

        if isinstance(node, RecordNode):
            fields: list[tuple[str, T]] = []
            for name, field in node.fields:
                fields.append((name, self.visit(field, below)))
            return v.visit_record(node, fields)

        if isinstance(node, PositionalRecordNode):
            positional: list[T] = []
            for field in node.fields:
                positional.append(self.visit(field, below))
            return v.visit_positional_record(node, positional)

        if isinstance(node, UnitRecordNode):
            return v.visit_unit_record(node)

        if isinstance(node, VariantNode):
            if node.payload is PayloadKind.NONE:
                return v.visit_unit_variant(node)
            values: list[T] = []
            for field in node.fields:
                values.append(self.visit(field, below))
            if node.payload is PayloadKind.POSITIONAL:
                return v.visit_tuple_variant(node, values)
            named = list(zip(node.field_names, values, strict=True))
            return v.visit_struct_variant(node, named)

        msg = f"not a value node: {type(node).__qualname__!r}"
        raise UnsupportedShapeError(msg)
