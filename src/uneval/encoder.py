"""Encoder: orchestrator that wires the walk to the rendering components.

The Encoder is the ``ValueVisitor[Fragment]`` the walk drives.  Each
callback hands its node (and its children's finished Fragments) to the
component that owns that shape:

- ScalarFormatter       scalars, and the u8 items of byte strings
- ExpressionWriter      delimiting, and the ``.into()`` conversion wrapper
- CompositeEmitter      tuples, sequences, byte strings, maps
- StructVariantEmitter  named, positional and unit records
- EnumPathResolver      ``Enum::Variant`` plus payload

``encode`` renders the whole tree into a string before anything is written
anywhere, so a fault while rendering never leaves partial output behind.
"""

from __future__ import annotations

import logging

from uneval.emit.composite import CompositeEmitter
from uneval.emit.config import EncoderConfig
from uneval.emit.identifiers import identifier
from uneval.emit.records import StructVariantEmitter
from uneval.emit.scalars import ScalarFormatter, declared_type, natural_type
from uneval.emit.variants import EnumPathResolver
from uneval.emit.writer import ExpressionWriter, Fragment
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
    ValueNode,
    VariantNode,
)
from uneval.model.walk import walk
from uneval.protocols import ValueVisitor

__all__ = ["Encoder"]

logger = logging.getLogger(__name__)


class Encoder(ValueVisitor[Fragment]):
    """Renders Value Node trees as Rust expression text.

    Holds no per-call state: every callback builds a new Fragment from its
    arguments only, so one Encoder may encode any number of trees, and two
    threads may share one as long as each walks its own tree.

    Example::

        from uneval.encoder import Encoder
        from uneval.model import NodeBuilder

        tree = NodeBuilder().build({"a": [1, 2]})
        Encoder().encode(tree)
        # 'vec![("a".into(), vec![1, 2].into_iter().collect())].into_iter().collect()'
    """

    def __init__(self, config: EncoderConfig | None = None) -> None:
        """Initialise the encoder and its components.

        Args:
            config: Formatting and strictness switches.  Defaults to
                ``EncoderConfig()``.
        """
        self._config: EncoderConfig = config if config is not None else EncoderConfig()
        self._writer = ExpressionWriter()
        self._scalars = ScalarFormatter(self._config)
        self._composite = CompositeEmitter(self._writer, self._scalars)
        self._records = StructVariantEmitter(self._writer, self._config)
        self._variants = EnumPathResolver(self._records)

    @property
    def config(self) -> EncoderConfig:
        return self._config

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def encode(self, node: ValueNode) -> str:
        """Render ``node`` as a single Rust expression.

        The top-level fragment goes through the same embedding rule as any
        child, so a bare string still gets its ``.into()``.

        Raises:
            UnsupportedShapeError, LiteralRangeError, InvalidNameError:
                When some part of the tree cannot be rendered.
        """
        logger.debug("encoding %s", type(node).__name__)
        fragment = walk(node, self, max_depth=self._config.max_depth)
        text = self._writer.embed(fragment)
        logger.debug("encoded %s into %d characters", type(node).__name__, len(text))
        return text

    # ------------------------------------------------------------------
    # Scalars and optionals
    # ------------------------------------------------------------------

    def visit_scalar(self, node: ScalarNode) -> Fragment:
        return self._writer.literal(
            self._scalars.format(node),
            natural_type(node.kind),
            declared_type(node.kind),
        )

    def visit_none(self, node: OptionalNode) -> Fragment:
        return self._records.render_unit("None")

    def visit_some(self, node: OptionalNode, inner: Fragment) -> Fragment:
        return self._records.render_positional("Some", [inner])

    # ------------------------------------------------------------------
    # Groupings
    # ------------------------------------------------------------------

    def visit_bytes(self, node: BytesNode) -> Fragment:
        return self._composite.render_bytes(node.data, node.container)

    def visit_sequence(self, node: SequenceNode, items: list[Fragment]) -> Fragment:
        return self._composite.render_sequence(items, node.container, node.unordered)

    def visit_tuple(self, node: TupleNode, items: list[Fragment]) -> Fragment:
        return self._composite.render_tuple(items)

    def visit_map(
        self, node: MapNode, entries: list[tuple[Fragment, Fragment]]
    ) -> Fragment:
        return self._composite.render_map(entries)

    # ------------------------------------------------------------------
    # Records
    # ------------------------------------------------------------------

    def visit_record(
        self, node: RecordNode, fields: list[tuple[str, Fragment]]
    ) -> Fragment:
        return self._records.render_record(identifier(node.name), fields)

    def visit_positional_record(
        self, node: PositionalRecordNode, fields: list[Fragment]
    ) -> Fragment:
        return self._records.render_positional(identifier(node.name), fields)

    def visit_unit_record(self, node: UnitRecordNode) -> Fragment:
        return self._records.render_unit(identifier(node.name))

    # ------------------------------------------------------------------
    # Variants
    # ------------------------------------------------------------------

    def visit_unit_variant(self, node: VariantNode) -> Fragment:
        return self._variants.render_unit(node)

    def visit_tuple_variant(self, node: VariantNode, fields: list[Fragment]) -> Fragment:
        return self._variants.render_tuple(node, fields)

    def visit_struct_variant(
        self, node: VariantNode, fields: list[tuple[str, Fragment]]
    ) -> Fragment:
        return self._variants.render_struct(node, fields)
