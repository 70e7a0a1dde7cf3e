"""Model subpackage: the structural value model the encoder walks.

Re-exports the public API for the model:
- Value Node dataclasses and the ScalarKind / Container / PayloadKind enums
- NodeBuilder: converts Python values (plus optional type hints) into nodes
- walk: depth-first driver that feeds a node tree to a ValueVisitor
- positional / rust_enum: class decorators selecting record and enum shapes
"""

from uneval.model.builder import NodeBuilder
from uneval.model.marks import positional, rust_enum
from uneval.model.nodes import (
    BytesNode,
    Container,
    MapNode,
    OptionalNode,
    PayloadKind,
    PositionalRecordNode,
    RecordNode,
    ScalarKind,
    ScalarNode,
    SequenceNode,
    TupleNode,
    UnitRecordNode,
    ValueNode,
    VariantNode,
)
from uneval.model.walk import walk

__all__ = [
    "BytesNode",
    "Container",
    "MapNode",
    "NodeBuilder",
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
    "positional",
    "rust_enum",
    "walk",
]
