"""Protocols for the two extension points of uneval.

``ValueVisitor`` is the walk contract: ``uneval.model.walk.walk`` calls
exactly one of its callbacks per Value Node, children first, and hands the
children's results to the parent's callback.  Every callback is abstract, so
a visitor class that forgets a shape cannot be instantiated (and a static
type checker rejects it before that).

``Sink`` is the output side: anything with a ``write(text)`` method.
``uneval.sink`` provides stream and atomic-file implementations.

Example::

    from uneval.model.walk import walk
    from uneval.protocols import ValueVisitor

    class NodeCounter(ValueVisitor[int]):
        def visit_scalar(self, node):
            return 1
        def visit_sequence(self, node, items):
            return 1 + sum(items)
        ...  # every other callback

    walk(tree, NodeCounter())
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Protocol, TypeVar, runtime_checkable

if TYPE_CHECKING:
    from uneval.model.nodes import (
        BytesNode,
        MapNode,
        OptionalNode,
        PositionalRecordNode,
        RecordNode,
        ScalarNode,
        SequenceNode,
        TupleNode,
        UnitRecordNode,
        VariantNode,
    )

__all__ = ["Sink", "ValueVisitor"]

T = TypeVar("T")


class ValueVisitor(Protocol[T]):
    """Receiver of a depth-first walk over a Value Node tree."""

    @abstractmethod
    def visit_scalar(self, node: ScalarNode) -> T: ...

    @abstractmethod
    def visit_none(self, node: OptionalNode) -> T: ...

    @abstractmethod
    def visit_some(self, node: OptionalNode, inner: T) -> T: ...

    @abstractmethod
    def visit_bytes(self, node: BytesNode) -> T: ...

    @abstractmethod
    def visit_sequence(self, node: SequenceNode, items: list[T]) -> T: ...

    @abstractmethod
    def visit_tuple(self, node: TupleNode, items: list[T]) -> T: ...

    @abstractmethod
    def visit_map(self, node: MapNode, entries: list[tuple[T, T]]) -> T: ...

    @abstractmethod
    def visit_record(self, node: RecordNode, fields: list[tuple[str, T]]) -> T: ...

    @abstractmethod
    def visit_positional_record(
        self, node: PositionalRecordNode, fields: list[T]
    ) -> T: ...

    @abstractmethod
    def visit_unit_record(self, node: UnitRecordNode) -> T: ...

    @abstractmethod
    def visit_unit_variant(self, node: VariantNode) -> T: ...

    @abstractmethod
    def visit_tuple_variant(self, node: VariantNode, fields: list[T]) -> T: ...

    @abstractmethod
    def visit_struct_variant(
        self, node: VariantNode, fields: list[tuple[str, T]]
    ) -> T: ...


@runtime_checkable
class Sink(Protocol):
    """Structural protocol for output sinks.

    ``write`` receives the complete rendered expression exactly once per
    top-level encode call.  Implementations either commit all of it or raise.
    """

    def write(self, text: str) -> None: ...
