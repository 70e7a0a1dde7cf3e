"""StructVariantEmitter: product types (records) and their unit forms.

    named fields        Name{x: a, y: b}
    positional fields   Name(a, b)
    unit                Name

A positional record with no fields also renders as the bare ``Name``.  The
value model cannot tell ``struct Name();`` from ``struct Name;`` in general,
and the bare form is the one that compiles for unit records, so the two
collide on purpose.  Declaring a zero-field positional record in the target
program is therefore unsupported; ``EncoderConfig.strict_zero_arity`` turns
the collision into an UnsupportedShapeError for callers who want to hear
about it.
"""

from __future__ import annotations

from collections.abc import Sequence

from uneval.emit.config import EncoderConfig
from uneval.emit.writer import ArgsKind, ExpressionWriter, Fragment
from uneval.errors import UnsupportedShapeError

__all__ = ["StructVariantEmitter"]


class StructVariantEmitter:
    """Renders records given an already-checked head path."""

    def __init__(self, writer: ExpressionWriter, config: EncoderConfig) -> None:
        self._writer = writer
        self._config = config

    def render_record(
        self, head: str, fields: Sequence[tuple[str, Fragment]]
    ) -> Fragment:
        return self._writer.compose(head, fields, ArgsKind.NAMED)

    def render_positional(self, head: str, fields: Sequence[Fragment]) -> Fragment:
        """Render ``head(a, ...)``; a single field is a newtype and works the same.

        The conversion wrapper, when needed, lands on the inner field
        (``Name("a".into())``), never on the constructor call.
        """
        if not fields:
            return self._zero_arity(head)
        return self._writer.compose(head, fields, ArgsKind.ORDERED)

    def render_unit(self, head: str) -> Fragment:
        return self._writer.compose(head, kind=ArgsKind.NONE)

    def _zero_arity(self, head: str) -> Fragment:
        if self._config.strict_zero_arity:
            msg = (
                f"{head}: a positional record with no fields renders the same "
                "as a unit record; declare it as a unit type instead"
            )
            raise UnsupportedShapeError(msg)
        return self.render_unit(head)
