"""EnumPathResolver: tagged-union values as ``Enum::Variant`` plus payload.

Only the unqualified enum and variant names are known, so the path is
always the two-segment ``Enum::Variant``.  If two enums in scope at the
inclusion site share a name, the text still parses but resolves against
whichever one is in scope; that is for the including program to prevent.
"""

from __future__ import annotations

from collections.abc import Sequence

from uneval.emit.identifiers import path
from uneval.emit.records import StructVariantEmitter
from uneval.emit.writer import Fragment
from uneval.model.nodes import VariantNode

__all__ = ["EnumPathResolver"]


class EnumPathResolver:
    """Builds variant paths and hands the payload to StructVariantEmitter."""

    def __init__(self, records: StructVariantEmitter) -> None:
        self._records = records

    def resolve(self, node: VariantNode) -> str:
        return path(node.enum_name, node.variant_name)

    def render_unit(self, node: VariantNode) -> Fragment:
        return self._records.render_unit(self.resolve(node))

    def render_tuple(self, node: VariantNode, fields: Sequence[Fragment]) -> Fragment:
        return self._records.render_positional(self.resolve(node), fields)

    def render_struct(
        self, node: VariantNode, fields: Sequence[tuple[str, Fragment]]
    ) -> Fragment:
        return self._records.render_record(self.resolve(node), fields)
