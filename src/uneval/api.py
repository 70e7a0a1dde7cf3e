"""Public API functions for uneval.

This module provides the user-facing functions: to_string, write, to_file
and encode_node.  Each call creates a fresh NodeBuilder and Encoder, so no
state is carried from one call to the next.

Typical use is from a script that runs before ``cargo build``::

    uneval.to_file(settings, "src/generated/settings.rs")

and, in the Rust crate::

    let settings: Settings = include!("generated/settings.rs");

Every record and enum name in the output must be in scope, unqualified, at
the ``include!`` site.
"""

from __future__ import annotations

import io
import os
from typing import IO, Any

from uneval.emit.config import EncoderConfig
from uneval.encoder import Encoder
from uneval.model.builder import NodeBuilder
from uneval.model.nodes import ValueNode
from uneval.protocols import Sink
from uneval.sink import AtomicFileSink, StreamSink

__all__ = ["encode_node", "to_file", "to_string", "write"]


def to_string(
    value: Any,
    declared: Any = None,
    config: EncoderConfig | None = None,
) -> str:
    """Return the Rust expression that reconstructs ``value``.

    Args:
        value:    The value to render: scalars, ``None``, bytes, lists, tuples,
                  sets, dicts, dataclasses, NamedTuples and enum members,
                  nested in any combination.
        declared: Optional type hint for the top-level value, using the
                  markers of ``uneval.model.types`` (e.g. ``list[U8]``).
        config:   Formatting switches.  Defaults to ``EncoderConfig()``.

    Returns:
        A single Rust expression with no trailing newline.

    Raises:
        UnsupportedShapeError: If some part of ``value`` has no Rust shape.
        LiteralRangeError: If a scalar does not fit its declared type.
        InvalidNameError: If a type or field name is not a Rust identifier.
    """
    config = config if config is not None else EncoderConfig()
    node = NodeBuilder(max_depth=config.max_depth).build(value, declared)
    return Encoder(config).encode(node)


def encode_node(node: ValueNode, config: EncoderConfig | None = None) -> str:
    """Render an already built Value Node tree.

    Args:
        node:   Root of the tree (see ``uneval.model.nodes``).
        config: Formatting switches.  Defaults to ``EncoderConfig()``.

    Returns:
        A single Rust expression with no trailing newline.
    """
    return Encoder(config).encode(node)


def write(
    value: Any,
    target: IO[Any] | Sink,
    declared: Any = None,
    config: EncoderConfig | None = None,
) -> None:
    """Render ``value`` and write it to ``target`` in one piece.

    The expression is rendered completely before ``target`` is touched, so
    an encoding fault leaves ``target`` unchanged.

    Args:
        value:    The value to render (see ``to_string``).
        target:   An ``io.IOBase`` stream (text, or binary receiving UTF-8),
                  or a ``Sink``.  Any other object is treated as a ``Sink``
                  and receives ``str``; wrap binary writers that do not
                  derive from ``io.IOBase`` in ``StreamSink``.
        declared: Optional type hint for the top-level value.
        config:   Formatting switches.

    Raises:
        OSError: Whatever the target raises while writing, unchanged.
    """
    text = to_string(value, declared=declared, config=config)
    if isinstance(target, io.IOBase):
        StreamSink(target).write(text)
    else:
        target.write(text)


def to_file(
    value: Any,
    path: str | os.PathLike[str],
    declared: Any = None,
    config: EncoderConfig | None = None,
) -> None:
    """Render ``value`` into the file at ``path``, atomically.

    The file is replaced only once the full expression has been written to a
    temporary sibling file; on failure the old content (if any) survives.

    Args:
        value:    The value to render (see ``to_string``).
        path:     Destination file.  Its directory must exist.
        declared: Optional type hint for the top-level value.
        config:   Formatting switches.
    """
    text = to_string(value, declared=declared, config=config)
    AtomicFileSink(path).write(text)
