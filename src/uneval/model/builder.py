"""NodeBuilder: converts a Python value into a Value Node tree.

Uses recursive dispatch on the runtime type of the value, refined by the
declared type when one is available (a dataclass / NamedTuple field
annotation, or the ``declared`` argument of ``build``).  Declared types
supply what Python values cannot express on their own: integer and float
widths, optionality, owned versus static strings, and the construction
form of sequences.

Dispatch order matters:
- Optional hints are unwrapped before anything else, so ``None`` under an
  ``Optional[...]`` hint is an absent value and anything else is present.
- ``bool`` is checked before ``int`` (bool subclasses int), and ``Enum``
  members before ``int`` / ``str`` (IntEnum, StrEnum).
- NamedTuples are checked before plain tuples.
"""

from __future__ import annotations

import collections.abc
import dataclasses
import logging
import types
import typing
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Annotated, Any, Union, get_args, get_origin

import numpy as np
from cachetools import LRUCache

from uneval.errors import LiteralRangeError, UnsupportedShapeError
from uneval.model.marks import enum_base, is_positional, type_name
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

__all__ = ["NodeBuilder"]

logger = logging.getLogger(__name__)

_SEQUENCE_ORIGINS = frozenset(
    {
        list,
        set,
        frozenset,
        collections.abc.Sequence,
        collections.abc.MutableSequence,
        collections.abc.Set,
        collections.abc.MutableSet,
        collections.abc.Iterable,
        collections.abc.Collection,
    }
)
_SET_ORIGINS = frozenset(
    {set, frozenset, collections.abc.Set, collections.abc.MutableSet}
)

_NUMPY_KINDS: dict[np.dtype[Any], ScalarKind] = {
    np.dtype(np.bool_): ScalarKind.BOOL,
    np.dtype(np.int8): ScalarKind.I8,
    np.dtype(np.int16): ScalarKind.I16,
    np.dtype(np.int32): ScalarKind.I32,
    np.dtype(np.int64): ScalarKind.I64,
    np.dtype(np.uint8): ScalarKind.U8,
    np.dtype(np.uint16): ScalarKind.U16,
    np.dtype(np.uint32): ScalarKind.U32,
    np.dtype(np.uint64): ScalarKind.U64,
    np.dtype(np.float32): ScalarKind.F32,
    np.dtype(np.float64): ScalarKind.F64,
}


@dataclass(frozen=True, slots=True)
class _Hint:
    """A declared type reduced to what the builder needs.

    Attributes:
        base:      The hint with ``Annotated`` and ``Optional`` stripped
                   (e.g. ``list[int]``), or None when nothing is known.
        scalar:    ScalarKind found in ``Annotated`` metadata, if any.
        container: Container found in ``Annotated`` metadata, if any.
        optional:  True when the hint admits ``None``.
    """

    base: Any = None
    scalar: ScalarKind | None = None
    container: Container | None = None
    optional: bool = False

    @property
    def origin(self) -> Any:
        return get_origin(self.base) or self.base

    @property
    def args(self) -> tuple[Any, ...]:
        return get_args(self.base)


_NO_HINT = _Hint()


def _resolve(tp: Any) -> _Hint:
    """Reduce a type hint to a ``_Hint``."""
    if tp is None or tp is Any:
        return _NO_HINT

    scalar: ScalarKind | None = None
    container: Container | None = None
    if get_origin(tp) is Annotated:
        tp, *metadata = get_args(tp)
        scalar = next((m for m in metadata if isinstance(m, ScalarKind)), None)
        container = next((m for m in metadata if isinstance(m, Container)), None)

    if get_origin(tp) in (Union, types.UnionType):
        members = get_args(tp)
        rest = [m for m in members if m is not type(None)]
        # Only a single non-None alternative says anything about the value.
        inner = _resolve(rest[0]) if len(rest) == 1 else _NO_HINT
        return _Hint(
            base=inner.base,
            scalar=scalar or inner.scalar,
            container=container or inner.container,
            optional=len(rest) != len(members) or inner.optional,
        )

    return _Hint(base=tp, scalar=scalar, container=container)


def _element_hint(hint: _Hint, index: int = 0) -> _Hint:
    """Hint for the ``index``-th element (tuples) or for every element."""
    args = hint.args
    if not args:
        return _NO_HINT
    if hint.origin is tuple:
        if len(args) == 2 and args[1] is Ellipsis:
            return _resolve(args[0])
        return _resolve(args[index]) if index < len(args) else _NO_HINT
    return _resolve(args[index]) if index < len(args) else _NO_HINT


class NodeBuilder:
    """Converts Python values into Value Node trees.

    Each instance keeps its own ``LRUCache`` of per-class field plans (field
    names paired with their resolved hints), so repeated records of the same
    class resolve their annotations once.  Nothing is shared between
    instances.

    Args:
        max_depth: Maximum nesting depth; deeper values raise
            UnsupportedShapeError.  Defaults to 256.
        max_cache_size: Number of classes whose field plans are kept.
            Defaults to 256.

    Example::

        builder = NodeBuilder()
        builder.build({"a": 1})
        # MapNode(entries=((ScalarNode(STRING, "a"), ScalarNode(INT, 1)),))
    """

    def __init__(self, max_depth: int = 256, max_cache_size: int = 256) -> None:
        self._max_depth = max_depth
        self._plans: LRUCache[type, tuple[tuple[str, _Hint], ...]] = LRUCache(
            maxsize=max_cache_size
        )

    def build(self, value: Any, declared: Any = None) -> ValueNode:
        """Convert ``value`` into a Value Node tree.

        Args:
            value:    The Python value to convert.
            declared: Optional type hint describing the target type of the
                      top-level value (e.g. ``list[U8]`` or ``int | None``).

        Returns:
            The root ValueNode.

        Raises:
            UnsupportedShapeError: For values with no Rust shape, cycles,
                trees deeper than ``max_depth``, and hint/value mismatches.
            LiteralRangeError: For floats too large to convert.
        """
        try:
            return self._build(value, _resolve(declared), 0, set())
        except RecursionError as err:
            msg = (
                "value nested too deeply for the interpreter stack "
                f"(max_depth={self._max_depth})"
            )
            raise UnsupportedShapeError(msg) from err

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    def _build(
        self, value: Any, hint: _Hint, depth: int, ancestors: set[int]
    ) -> ValueNode:
        if depth > self._max_depth:
            msg = f"value nested deeper than max_depth={self._max_depth}"
            raise UnsupportedShapeError(msg)

        if hint.optional:
            if value is None:
                return OptionalNode()
            inner = dataclasses.replace(hint, optional=False)
            return OptionalNode(self._build(value, inner, depth + 1, ancestors))

        # CRITICAL: bool before int, Enum before int/str.
        if isinstance(value, bool):
            self._expect_scalar(hint, value, ScalarKind.BOOL)
            return ScalarNode(ScalarKind.BOOL, value)

        if isinstance(value, Enum):
            return VariantNode(type_name(type(value)), value.name)

        if isinstance(value, (np.generic, np.ndarray)):
            return self._build_numpy(value, hint, depth, ancestors)

        cls = type(value)
        if dataclasses.is_dataclass(value) and not isinstance(value, type):
            with _Guard(value, ancestors):
                base = enum_base(cls)
                if base is not None:
                    return self._build_variant(value, cls, base, depth, ancestors)
                return self._build_record(value, cls, depth, ancestors)

        if isinstance(value, tuple) and hasattr(cls, "_fields"):
            with _Guard(value, ancestors):
                fields = self._children(value, cls, depth, ancestors)
            return PositionalRecordNode(type_name(cls), tuple(c for _, c in fields))

        if isinstance(value, int):
            return self._build_int(value, hint)

        if isinstance(value, float):
            return self._build_float(value, hint)

        if isinstance(value, str):
            kind = hint.scalar or ScalarKind.STRING
            if not kind.is_text:
                raise _mismatch(value, kind)
            return ScalarNode(kind, value)

        if isinstance(value, (bytes, bytearray, memoryview)):
            return BytesNode(bytes(value), hint.container or Container.COLLECT)

        if value is None:
            return OptionalNode()

        if isinstance(value, (list, tuple)):
            with _Guard(value, ancestors):
                return self._build_list_like(value, hint, depth, ancestors)

        if isinstance(value, (set, frozenset)):
            with _Guard(value, ancestors):
                items = self._items(value, _element_hint(hint), depth, ancestors)
            return SequenceNode(
                items, hint.container or Container.COLLECT, unordered=True
            )

        if isinstance(value, Mapping):
            with _Guard(value, ancestors):
                return self._build_map(value, hint, depth, ancestors)

        msg = (
            f"unsupported value of type {cls.__qualname__!r}: only dataclasses, "
            "NamedTuples, enums, scalars and builtin containers can be encoded"
        )
        raise UnsupportedShapeError(msg)

    # ------------------------------------------------------------------
    # Scalars
    # ------------------------------------------------------------------

    def _build_int(self, value: int, hint: _Hint) -> ScalarNode:
        kind = hint.scalar
        if kind is None:
            kind = ScalarKind.FLOAT if hint.base is float else ScalarKind.INT
        if kind.is_integer:
            return ScalarNode(kind, int(value))
        if kind.is_float:
            try:
                return ScalarNode(kind, float(value))
            except OverflowError as err:
                msg = f"integer {value} is too large for {kind}"
                raise LiteralRangeError(msg) from err
        raise _mismatch(value, kind)

    def _build_float(self, value: float, hint: _Hint) -> ScalarNode:
        kind = hint.scalar or ScalarKind.FLOAT
        if not kind.is_float:
            raise _mismatch(value, kind)
        return ScalarNode(kind, float(value))

    @staticmethod
    def _expect_scalar(hint: _Hint, value: Any, kind: ScalarKind) -> None:
        if hint.scalar is not None and hint.scalar is not kind:
            raise _mismatch(value, hint.scalar)

    def _build_numpy(
        self, value: Any, hint: _Hint, depth: int, ancestors: set[int]
    ) -> ValueNode:
        """Numpy scalars keep their dtype width unless a scalar kind is declared.

        A declared kind takes precedence and goes through the same range and
        promotion rules as the equivalent Python scalar.  Arrays become
        nested sequences whose leaves follow the same rule.
        """
        if depth > self._max_depth:
            msg = f"value nested deeper than max_depth={self._max_depth}"
            raise UnsupportedShapeError(msg)
        kind = _NUMPY_KINDS.get(value.dtype)
        if kind is None:
            msg = f"unsupported numpy dtype {value.dtype}"
            raise UnsupportedShapeError(msg)
        if value.ndim == 0:
            item = value.item()
            if hint.scalar is None:
                return ScalarNode(kind, item)
            if isinstance(item, bool):
                self._expect_scalar(hint, item, ScalarKind.BOOL)
                return ScalarNode(ScalarKind.BOOL, item)
            if isinstance(item, int):
                return self._build_int(item, hint)
            return self._build_float(item, hint)
        row_hint = _element_hint(hint) if hint.args else hint
        rows: list[ValueNode] = []
        for row in value:
            rows.append(self._build_numpy(row, row_hint, depth + 1, ancestors))
        return SequenceNode(tuple(rows), hint.container or Container.COLLECT)

    # ------------------------------------------------------------------
    # Containers
    # ------------------------------------------------------------------

    def _build_list_like(
        self,
        value: list[Any] | tuple[Any, ...],
        hint: _Hint,
        depth: int,
        ancestors: set[int],
    ) -> ValueNode:
        wants_tuple = hint.origin is tuple
        wants_sequence = hint.container is not None or hint.origin in _SEQUENCE_ORIGINS

        if wants_tuple or (isinstance(value, tuple) and not wants_sequence):
            if not value:
                return ScalarNode(ScalarKind.UNIT)
            members: list[ValueNode] = []
            for i, item in enumerate(value):
                members.append(
                    self._build(item, _element_hint(hint, i), depth + 1, ancestors)
                )
            return TupleNode(tuple(members))

        element = _element_hint(hint)
        items: list[ValueNode] = []
        for item in value:
            items.append(self._build(item, element, depth + 1, ancestors))
        unordered = hint.origin in _SET_ORIGINS
        return SequenceNode(
            tuple(items), hint.container or Container.COLLECT, unordered
        )

    def _build_map(
        self, value: Mapping[Any, Any], hint: _Hint, depth: int, ancestors: set[int]
    ) -> MapNode:
        key_hint = _element_hint(hint, 0)
        value_hint = _element_hint(hint, 1)
        entries: list[tuple[ValueNode, ValueNode]] = []
        for k, v in value.items():
            entries.append(
                (
                    self._build(k, key_hint, depth + 1, ancestors),
                    self._build(v, value_hint, depth + 1, ancestors),
                )
            )
        return MapNode(tuple(entries))

    # Children are built in plain loops: one interpreter frame per level.
    def _items(
        self,
        value: collections.abc.Iterable[Any],
        hint: _Hint,
        depth: int,
        ancestors: set[int],
    ) -> tuple[ValueNode, ...]:
        items: list[ValueNode] = []
        for item in value:
            items.append(self._build(item, hint, depth + 1, ancestors))
        return tuple(items)

    # ------------------------------------------------------------------
    # Records and variants
    # ------------------------------------------------------------------

    def _build_record(
        self, value: Any, cls: type, depth: int, ancestors: set[int]
    ) -> ValueNode:
        name = type_name(cls)
        fields = self._children(value, cls, depth, ancestors)
        if is_positional(cls):
            return PositionalRecordNode(name, tuple(node for _, node in fields))
        if not fields:
            return UnitRecordNode(name)
        return RecordNode(name, fields)

    def _build_variant(
        self, value: Any, cls: type, base: type, depth: int, ancestors: set[int]
    ) -> VariantNode:
        enum_name = type_name(base)
        variant_name = type_name(cls)
        fields = self._children(value, cls, depth, ancestors)
        if is_positional(cls):
            return VariantNode(
                enum_name,
                variant_name,
                PayloadKind.POSITIONAL,
                tuple(node for _, node in fields),
            )
        if not fields:
            return VariantNode(enum_name, variant_name)
        return VariantNode(
            enum_name,
            variant_name,
            PayloadKind.NAMED,
            tuple(node for _, node in fields),
            tuple(field_name for field_name, _ in fields),
        )

    def _children(
        self, value: Any, cls: type, depth: int, ancestors: set[int]
    ) -> tuple[tuple[str, ValueNode], ...]:
        fields: list[tuple[str, ValueNode]] = []
        for name, hint in self._field_plan(cls):
            fields.append(
                (name, self._build(getattr(value, name), hint, depth + 1, ancestors))
            )
        return tuple(fields)

    def _field_plan(self, cls: type) -> tuple[tuple[str, _Hint], ...]:
        """Field names of ``cls`` in declaration order, with resolved hints."""
        plan = self._plans.get(cls)
        if plan is not None:
            return plan

        if dataclasses.is_dataclass(cls):
            names = [f.name for f in dataclasses.fields(cls)]
        else:
            names = list(cls._fields)  # type: ignore[attr-defined]

        try:
            hints = typing.get_type_hints(cls, include_extras=True)
        except (NameError, TypeError) as err:
            # Unresolvable forward references: encode from runtime types only.
            logger.warning(
                "could not resolve annotations of %s (%s); using runtime types",
                cls.__qualname__,
                err,
            )
            hints = {}

        plan = tuple((name, _resolve(hints.get(name))) for name in names)
        self._plans[cls] = plan
        return plan


class _Guard:
    """Tracks the ids of the containers currently being converted.

    Entering a value that is already on the stack means the value contains
    itself, which no finite Rust expression can reproduce.
    """

    __slots__ = ("_ancestors", "_key")

    def __init__(self, value: Any, ancestors: set[int]) -> None:
        self._key = id(value)
        self._ancestors = ancestors

    def __enter__(self) -> None:
        if self._key in self._ancestors:
            msg = "cyclic value: a container includes itself"
            raise UnsupportedShapeError(msg)
        self._ancestors.add(self._key)

    def __exit__(self, *exc_info: object) -> None:
        self._ancestors.discard(self._key)


def _mismatch(value: Any, kind: ScalarKind) -> UnsupportedShapeError:
    msg = f"value {value!r} of type {type(value).__name__} cannot be encoded as {kind}"
    return UnsupportedShapeError(msg)
