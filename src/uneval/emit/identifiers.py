"""Rust identifier checks for type, variant and field names.

Names come from the value model unqualified and are emitted as-is, with
one adjustment: a name that is a Rust keyword is written as a raw
identifier (``r#type``).  The path keywords ``self``, ``Self``, ``super`` and
``crate`` cannot be raw identifiers, and ``_`` is not an expression name;
those, and anything that is not an identifier at all, are rejected.
"""

from __future__ import annotations

from uneval.errors import InvalidNameError

__all__ = ["KEYWORDS", "identifier", "path"]

# Strict and reserved keywords (all editions up to 2024).
KEYWORDS = frozenset(
    {
        "abstract", "as", "async", "await", "become", "box", "break", "const",
        "continue", "crate", "do", "dyn", "else", "enum", "extern", "false",
        "final", "fn", "for", "gen", "if", "impl", "in", "let", "loop", "macro",
        "match", "mod", "move", "mut", "override", "priv", "pub", "ref",
        "return", "self", "Self", "static", "struct", "super", "trait", "true",
        "try", "type", "typeof", "unsafe", "unsized", "use", "virtual", "where",
        "while", "yield",
    }
)  # fmt: skip

_NOT_RAW = frozenset({"self", "Self", "super", "crate", "_"})


def identifier(name: str) -> str:
    """Return ``name`` as a Rust identifier, raw-escaped if it is a keyword.

    Raises:
        InvalidNameError: If ``name`` cannot name a type, variant or field.
    """
    if name in _NOT_RAW:
        msg = f"{name!r} cannot be used as a type, variant or field name"
        raise InvalidNameError(msg)
    # XID_Start / XID_Continue, as Python and Rust both define identifiers.
    if not name.isidentifier():
        msg = f"{name!r} is not a valid identifier"
        raise InvalidNameError(msg)
    if name in KEYWORDS:
        return f"r#{name}"
    return name


def path(*segments: str) -> str:
    """Join checked identifiers into an unqualified path (``Shape::Circle``)."""
    return "::".join(identifier(s) for s in segments)
