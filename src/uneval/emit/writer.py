"""ExpressionWriter and Fragment: composing rendered pieces into expressions.

A Fragment is a finished piece of Rust expression text together with the
type its literal naturally has and the type the surrounding position
declares.  When both are known and differ, the fragment cannot be embedded
bare: ``ExpressionWriter.embed`` appends the ``.into()`` conversion.  The
decision depends on nothing but those two fields, so it is deterministic and
free of side effects.

Fragments are immutable.  A parent's text is built from the embedded text
of its children and never changes afterwards.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from enum import StrEnum, auto
from typing import cast

from uneval.emit.identifiers import identifier

__all__ = ["ArgsKind", "ExpressionWriter", "Fragment"]


class ArgsKind(StrEnum):
    """Argument layout for ``ExpressionWriter.compose``.

    - ORDERED -> ``head(a, b)``
    - NAMED   -> ``head{x: a, y: b}``
    - NONE    -> ``head``
    """

    ORDERED = auto()
    NAMED = auto()
    NONE = auto()


@dataclass(frozen=True, slots=True)
class Fragment:
    """A rendered expression plus the metadata needed to embed it.

    Attributes:
        text:          Rust expression text.
        natural_type:  Type of ``text`` as written (``&'static str`` for a
                       string literal), or None when the compiler infers it.
        declared_type: Type the enclosing position expects, or None when it
                       is not known.
    """

    text: str
    natural_type: str | None = None
    declared_type: str | None = None

    @property
    def needs_conversion(self) -> bool:
        return (
            self.natural_type is not None
            and self.declared_type is not None
            and self.natural_type != self.declared_type
        )


class ExpressionWriter:
    """Builds delimited call / construction syntax from Fragments."""

    def literal(
        self,
        text: str,
        natural_type: str | None = None,
        declared_type: str | None = None,
    ) -> Fragment:
        return Fragment(text, natural_type, declared_type)

    def embed(self, fragment: Fragment) -> str:
        """Text of ``fragment`` as it appears inside a parent expression."""
        if not fragment.needs_conversion:
            return fragment.text
        text = fragment.text
        # `-1.into()` would parse as `-(1.into())`.
        if text.startswith("-"):
            text = f"({text})"
        return f"{text}.into()"

    def join(self, args: Iterable[Fragment]) -> str:
        return ", ".join(self.embed(arg) for arg in args)

    def delimited(self, open_: str, args: Sequence[Fragment], close: str) -> str:
        return f"{open_}{self.join(args)}{close}"

    def compose(
        self,
        head: str,
        args: Sequence[Fragment] | Sequence[tuple[str, Fragment]] = (),
        kind: ArgsKind = ArgsKind.ORDERED,
    ) -> Fragment:
        """Compose ``head`` with its arguments.

        Args:
            head: Constructor path or callee, already a valid Rust path.
            args: Fragments (ORDERED) or ``(field_name, Fragment)`` pairs
                (NAMED), in the order they should appear.
            kind: Argument layout.

        Returns:
            A Fragment with no conversion metadata: a constructor call
            already has exactly the type it names.

        Raises:
            ValueError: If arguments are supplied with ``ArgsKind.NONE``.
        """
        if kind is ArgsKind.NONE:
            if args:
                msg = f"{head}: ArgsKind.NONE takes no arguments, got {len(args)}"
                raise ValueError(msg)
            return Fragment(head)
        if kind is ArgsKind.NAMED:
            pairs = cast("Sequence[tuple[str, Fragment]]", args)
            body = ", ".join(
                f"{identifier(name)}: {self.embed(arg)}" for name, arg in pairs
            )
            return Fragment(f"{head}{{{body}}}")
        ordered = cast("Sequence[Fragment]", args)
        return Fragment(self.delimited(f"{head}(", ordered, ")"))
