"""CompositeEmitter: tuples, growable sequences, byte strings and maps.

Construction forms::

    tuple            (a, b)        one element: (a,)   none: ()
    Container.ARRAY  [a, b]
    Container.VEC    vec![a, b]
    Container.COLLECT / map
                     vec![a, b].into_iter().collect()

The collect chain is the form for every target that has no literal syntax
(``HashMap``, ``BTreeSet``, ``VecDeque``, ...): anything implementing
``FromIterator`` accepts it.  Map pairs are written in the order they were
visited; nothing is re-sorted, so the same input always yields the same text.
"""

from __future__ import annotations

from collections.abc import Sequence

from uneval.emit.scalars import ScalarFormatter
from uneval.emit.writer import ExpressionWriter, Fragment
from uneval.model.nodes import Container, ScalarKind

__all__ = ["CompositeEmitter"]

_COLLECT = ".into_iter().collect()"


class CompositeEmitter:
    """Renders homogeneous and heterogeneous groupings of Fragments."""

    def __init__(self, writer: ExpressionWriter, scalars: ScalarFormatter) -> None:
        self._writer = writer
        self._scalars = scalars

    def render_tuple(self, items: Sequence[Fragment]) -> Fragment:
        if not items:
            return Fragment("()")
        if len(items) == 1:
            # (a) is a parenthesised expression, (a,) is a 1-tuple.
            return Fragment(f"({self._writer.embed(items[0])},)")
        return Fragment(self._writer.delimited("(", items, ")"))

    def render_sequence(
        self,
        items: Sequence[Fragment],
        container: Container,
        unordered: bool = False,
    ) -> Fragment:
        """Render a growable sequence in the requested construction form.

        Args:
            items:     Element fragments in visit order.
            container: Construction form (see module docstring).
            unordered: Sort elements by their embedded text first.  Used for
                       set-like sources, whose iteration order is arbitrary.
        """
        if unordered:
            items = sorted(items, key=self._writer.embed)
        if container is Container.ARRAY:
            return Fragment(self._writer.delimited("[", items, "]"))
        literal = self._writer.delimited("vec![", items, "]")
        if container is Container.VEC:
            return Fragment(literal)
        return Fragment(literal + _COLLECT)

    def render_bytes(self, data: bytes, container: Container) -> Fragment:
        """Render raw bytes as unsigned byte literals, never as a string."""
        fmt = self._scalars.format_int
        items = [Fragment(fmt(ScalarKind.U8, b), "u8", "u8") for b in data]
        return self.render_sequence(items, container)

    def render_map(self, entries: Sequence[tuple[Fragment, Fragment]]) -> Fragment:
        pairs = [
            Fragment(f"({self._writer.embed(key)}, {self._writer.embed(value)})")
            for key, value in entries
        ]
        return self.render_sequence(pairs, Container.COLLECT)
