"""Tests for NodeBuilder: Python values (plus hints) to Value Node trees.

Verifies:
- Scalar dispatch (bool before int, enum before int/str) and declared widths
- Optional hints produce OptionalNode, bare None is an absent optional
- Builtin containers map to tuple / sequence / map nodes
- Dataclasses, NamedTuples, @positional and @rust_enum classes map to records
  and variants, with annotations supplying field widths
- numpy scalars keep their dtype; arrays become nested sequences
- Unsupported values, cycles and excessive depth raise UnsupportedShapeError
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import NamedTuple, Optional

import numpy as np
import pytest

from uneval.errors import UnsupportedShapeError
from uneval.model import (
    BytesNode,
    Container,
    MapNode,
    NodeBuilder,
    OptionalNode,
    PayloadKind,
    PositionalRecordNode,
    RecordNode,
    ScalarKind,
    ScalarNode,
    SequenceNode,
    TupleNode,
    UnitRecordNode,
    VariantNode,
    positional,
    rust_enum,
)
from uneval.model.types import F32, U8, Char, StaticStr, Vec

# ---------------------------------------------------------------------------
# Sample types
# ---------------------------------------------------------------------------


@dataclass
class Point:
    x: int
    y: int


@dataclass
class Pixel:
    channels: Vec[U8]
    gamma: F32
    label: StaticStr


@dataclass
class Marker:
    pass


@positional
@dataclass
class Meters:
    value: float


@dataclass
class Retry:
    attempts: Optional[U8] = None


class Pair(NamedTuple):
    left: U8
    right: str


class Color(Enum):
    Red = 1
    Green = 2


@rust_enum
class Shape:
    pass


@positional
@dataclass
class Circle(Shape):
    radius: float


@dataclass
class Rect(Shape):
    w: float
    h: float


@dataclass
class Empty(Shape):
    pass


@rust_enum(name="Figure")
class Drawing:
    pass


@positional(name="Dot")
@dataclass
class DotVariant(Drawing):
    size: int


@dataclass
class Broken:
    value: "Undefined"  # type: ignore[name-defined]  # noqa: F821


def _int(value: int) -> ScalarNode:
    return ScalarNode(ScalarKind.INT, value)


@pytest.fixture
def builder() -> NodeBuilder:
    return NodeBuilder()


# ---------------------------------------------------------------------------
# Scalars
# ---------------------------------------------------------------------------


class TestScalars:
    """Tests for scalar dispatch and declared widths."""

    def test_bool_before_int(self, builder: NodeBuilder) -> None:
        """bool is a subclass of int but maps to BOOL."""
        assert builder.build(True) == ScalarNode(ScalarKind.BOOL, True)

    def test_unhinted_int(self, builder: NodeBuilder) -> None:
        assert builder.build(5) == _int(5)

    def test_declared_width(self, builder: NodeBuilder) -> None:
        assert builder.build(5, U8) == ScalarNode(ScalarKind.U8, 5)

    def test_int_under_float_hint_becomes_float(self, builder: NodeBuilder) -> None:
        node = builder.build(5, float)
        assert isinstance(node, ScalarNode)
        assert node.kind is ScalarKind.FLOAT
        assert isinstance(node.value, float)

    def test_int_under_f32_hint(self, builder: NodeBuilder) -> None:
        node = builder.build(2, F32)
        assert node == ScalarNode(ScalarKind.F32, 2.0)

    def test_unhinted_float(self, builder: NodeBuilder) -> None:
        assert builder.build(1.5) == ScalarNode(ScalarKind.FLOAT, 1.5)

    def test_float_under_int_hint_rejected(self, builder: NodeBuilder) -> None:
        with pytest.raises(UnsupportedShapeError, match="cannot be encoded as u8"):
            builder.build(1.5, U8)

    def test_bool_under_int_hint_rejected(self, builder: NodeBuilder) -> None:
        with pytest.raises(UnsupportedShapeError):
            builder.build(True, U8)

    def test_str_defaults_to_owned_string(self, builder: NodeBuilder) -> None:
        assert builder.build("a") == ScalarNode(ScalarKind.STRING, "a")

    def test_str_under_char_hint(self, builder: NodeBuilder) -> None:
        assert builder.build("a", Char) == ScalarNode(ScalarKind.CHAR, "a")

    def test_str_under_int_hint_rejected(self, builder: NodeBuilder) -> None:
        with pytest.raises(UnsupportedShapeError):
            builder.build("a", U8)


# ---------------------------------------------------------------------------
# Optionals and bytes
# ---------------------------------------------------------------------------


class TestOptionals:
    """Tests for Optional hints and bare None."""

    def test_bare_none_is_absent(self, builder: NodeBuilder) -> None:
        assert builder.build(None) == OptionalNode()

    def test_present_under_union_hint(self, builder: NodeBuilder) -> None:
        assert builder.build(3, int | None) == OptionalNode(_int(3))

    def test_absent_under_optional_hint(self, builder: NodeBuilder) -> None:
        assert builder.build(None, Optional[int]) == OptionalNode()

    def test_optional_keeps_annotated_width(self, builder: NodeBuilder) -> None:
        node = builder.build(Retry(attempts=3))
        assert node == RecordNode(
            "Retry",
            (("attempts", OptionalNode(ScalarNode(ScalarKind.U8, 3))),),
        )

    def test_optional_field_default_none(self, builder: NodeBuilder) -> None:
        node = builder.build(Retry())
        assert node == RecordNode("Retry", (("attempts", OptionalNode()),))


class TestBytes:
    """Tests for bytes-like values."""

    def test_bytes(self, builder: NodeBuilder) -> None:
        assert builder.build(b"ab") == BytesNode(b"ab", Container.COLLECT)

    def test_bytearray_is_copied_to_bytes(self, builder: NodeBuilder) -> None:
        node = builder.build(bytearray(b"\x00\xff"))
        assert node == BytesNode(b"\x00\xff")


# ---------------------------------------------------------------------------
# Containers
# ---------------------------------------------------------------------------


class TestContainers:
    """Tests for lists, tuples, sets and mappings."""

    def test_list_is_collected_sequence(self, builder: NodeBuilder) -> None:
        node = builder.build([1, 2])
        assert node == SequenceNode((_int(1), _int(2)), Container.COLLECT)

    def test_vec_hint_sets_container_and_width(self, builder: NodeBuilder) -> None:
        node = builder.build([1, 2], Vec[U8])
        assert node == SequenceNode(
            (ScalarNode(ScalarKind.U8, 1), ScalarNode(ScalarKind.U8, 2)),
            Container.VEC,
        )

    def test_tuple(self, builder: NodeBuilder) -> None:
        assert builder.build((1, "a")) == TupleNode(
            (_int(1), ScalarNode(ScalarKind.STRING, "a"))
        )

    def test_empty_tuple_is_unit(self, builder: NodeBuilder) -> None:
        assert builder.build(()) == ScalarNode(ScalarKind.UNIT)

    def test_tuple_under_list_hint_is_sequence(self, builder: NodeBuilder) -> None:
        node = builder.build((1, 2), list[int])
        assert isinstance(node, SequenceNode)

    def test_tuple_hint_applies_per_position(self, builder: NodeBuilder) -> None:
        node = builder.build((1, "x"), tuple[U8, Char])
        assert node == TupleNode(
            (ScalarNode(ScalarKind.U8, 1), ScalarNode(ScalarKind.CHAR, "x"))
        )

    def test_set_is_unordered(self, builder: NodeBuilder) -> None:
        node = builder.build({1})
        assert node == SequenceNode((_int(1),), Container.COLLECT, unordered=True)

    def test_list_under_set_hint_is_unordered(self, builder: NodeBuilder) -> None:
        node = builder.build([2, 1], set[int])
        assert isinstance(node, SequenceNode)
        assert node.unordered

    def test_map_keeps_insertion_order(self, builder: NodeBuilder) -> None:
        node = builder.build({"b": 1, "a": 2})
        assert node == MapNode(
            (
                (ScalarNode(ScalarKind.STRING, "b"), _int(1)),
                (ScalarNode(ScalarKind.STRING, "a"), _int(2)),
            )
        )

    def test_map_hint_applies_to_keys_and_values(self, builder: NodeBuilder) -> None:
        node = builder.build({"k": 1}, dict[StaticStr, U8])
        assert node == MapNode(
            ((ScalarNode(ScalarKind.STR, "k"), ScalarNode(ScalarKind.U8, 1)),)
        )


# ---------------------------------------------------------------------------
# Records and variants
# ---------------------------------------------------------------------------


class TestRecords:
    """Tests for dataclass and NamedTuple records."""

    def test_dataclass_record(self, builder: NodeBuilder) -> None:
        node = builder.build(Point(1, 2))
        assert node == RecordNode("Point", (("x", _int(1)), ("y", _int(2))))

    def test_annotations_supply_widths(self, builder: NodeBuilder) -> None:
        node = builder.build(Pixel([255], 2.2, "srgb"))
        assert isinstance(node, RecordNode)
        fields = dict(node.fields)
        assert fields["channels"] == SequenceNode(
            (ScalarNode(ScalarKind.U8, 255),), Container.VEC
        )
        assert fields["gamma"] == ScalarNode(ScalarKind.F32, 2.2)
        assert fields["label"] == ScalarNode(ScalarKind.STR, "srgb")

    def test_fieldless_dataclass_is_unit_record(self, builder: NodeBuilder) -> None:
        assert builder.build(Marker()) == UnitRecordNode("Marker")

    def test_positional_dataclass(self, builder: NodeBuilder) -> None:
        node = builder.build(Meters(1.5))
        assert node == PositionalRecordNode(
            "Meters", (ScalarNode(ScalarKind.FLOAT, 1.5),)
        )

    def test_namedtuple_is_positional(self, builder: NodeBuilder) -> None:
        node = builder.build(Pair(7, "x"))
        assert node == PositionalRecordNode(
            "Pair",
            (ScalarNode(ScalarKind.U8, 7), ScalarNode(ScalarKind.STRING, "x")),
        )

    def test_field_plans_are_cached_per_class(self) -> None:
        """Two records of one class resolve annotations once."""
        builder = NodeBuilder(max_cache_size=4)
        builder.build([Point(1, 2), Point(3, 4)])
        assert len(builder._plans) == 1

    def test_unresolvable_annotations_fall_back(
        self, builder: NodeBuilder, caplog: pytest.LogCaptureFixture
    ) -> None:
        with caplog.at_level(logging.WARNING, logger="uneval.model.builder"):
            node = builder.build(Broken(1))
        assert node == RecordNode("Broken", (("value", _int(1)),))
        assert "could not resolve annotations" in caplog.text


class TestVariants:
    """Tests for Enum members and @rust_enum dataclass variants."""

    def test_enum_member_is_unit_variant(self, builder: NodeBuilder) -> None:
        assert builder.build(Color.Green) == VariantNode("Color", "Green")

    def test_positional_variant(self, builder: NodeBuilder) -> None:
        node = builder.build(Circle(3.5))
        assert node == VariantNode(
            "Shape",
            "Circle",
            PayloadKind.POSITIONAL,
            (ScalarNode(ScalarKind.FLOAT, 3.5),),
        )

    def test_named_variant(self, builder: NodeBuilder) -> None:
        node = builder.build(Rect(1.0, 2.0))
        assert isinstance(node, VariantNode)
        assert node.payload is PayloadKind.NAMED
        assert node.field_names == ("w", "h")

    def test_fieldless_variant(self, builder: NodeBuilder) -> None:
        assert builder.build(Empty()) == VariantNode("Shape", "Empty")

    def test_name_overrides(self, builder: NodeBuilder) -> None:
        node = builder.build(DotVariant(2))
        assert isinstance(node, VariantNode)
        assert (node.enum_name, node.variant_name) == ("Figure", "Dot")


# ---------------------------------------------------------------------------
# numpy
# ---------------------------------------------------------------------------


class TestNumpy:
    """Tests for numpy scalars and arrays."""

    def test_scalar_keeps_dtype(self, builder: NodeBuilder) -> None:
        assert builder.build(np.uint8(7)) == ScalarNode(ScalarKind.U8, 7)

    def test_float32_scalar(self, builder: NodeBuilder) -> None:
        node = builder.build(np.float32(0.5))
        assert node == ScalarNode(ScalarKind.F32, 0.5)

    def test_array_is_nested_sequence(self, builder: NodeBuilder) -> None:
        node = builder.build(np.array([[1, 2], [3, 4]], dtype=np.int16))
        assert isinstance(node, SequenceNode)
        assert len(node.items) == 2
        row = node.items[1]
        assert row == SequenceNode(
            (ScalarNode(ScalarKind.I16, 3), ScalarNode(ScalarKind.I16, 4))
        )

    def test_unsupported_dtype(self, builder: NodeBuilder) -> None:
        with pytest.raises(UnsupportedShapeError, match="dtype"):
            builder.build(np.complex64(1 + 2j))

    def test_declared_float_promotes_integer(self, builder: NodeBuilder) -> None:
        """A declared kind wins over the dtype, like it does for int."""
        assert builder.build(np.int64(5), F32) == ScalarNode(ScalarKind.F32, 5.0)

    def test_declared_integer_width(self, builder: NodeBuilder) -> None:
        assert builder.build(np.int64(7), U8) == ScalarNode(ScalarKind.U8, 7)

    def test_declared_integer_rejects_float(self, builder: NodeBuilder) -> None:
        with pytest.raises(UnsupportedShapeError, match="cannot be encoded as u8"):
            builder.build(np.float64(1.5), U8)

    def test_declared_kind_rejects_bool(self, builder: NodeBuilder) -> None:
        with pytest.raises(UnsupportedShapeError, match="cannot be encoded as u8"):
            builder.build(np.bool_(True), U8)

    def test_array_leaves_follow_element_hint(self, builder: NodeBuilder) -> None:
        node = builder.build(np.array([1, 2], dtype=np.int64), list[F32])
        assert node == SequenceNode(
            (ScalarNode(ScalarKind.F32, 1.0), ScalarNode(ScalarKind.F32, 2.0))
        )

    def test_array_depth_limit(self) -> None:
        with pytest.raises(UnsupportedShapeError, match="max_depth=1"):
            NodeBuilder(max_depth=1).build(np.zeros((2, 2, 2), dtype=np.int8))


# ---------------------------------------------------------------------------
# Rejections
# ---------------------------------------------------------------------------


class TestRejections:
    """Tests for values that have no Rust shape."""

    def test_arbitrary_object(self, builder: NodeBuilder) -> None:
        with pytest.raises(UnsupportedShapeError, match="unsupported value"):
            builder.build(object())

    def test_class_object(self, builder: NodeBuilder) -> None:
        with pytest.raises(UnsupportedShapeError):
            builder.build(Point)

    def test_cyclic_list(self, builder: NodeBuilder) -> None:
        cycle: list[object] = []
        cycle.append(cycle)
        with pytest.raises(UnsupportedShapeError, match="cyclic"):
            builder.build(cycle)

    def test_shared_child_is_not_a_cycle(self, builder: NodeBuilder) -> None:
        """The same list appearing twice side by side is fine."""
        shared = [1]
        node = builder.build([shared, shared])
        assert isinstance(node, SequenceNode)
        assert node.items[0] == node.items[1]

    def test_max_depth(self) -> None:
        nested: object = 1
        for _ in range(6):
            nested = [nested]
        with pytest.raises(UnsupportedShapeError, match="max_depth=3"):
            NodeBuilder(max_depth=3).build(nested)

    def test_default_max_depth_is_reachable(self, builder: NodeBuilder) -> None:
        """256 nested lists fit the default limit without exhausting the stack."""
        nested: object = 0
        for _ in range(256):
            nested = [nested]
        node = builder.build(nested)
        for _ in range(256):
            assert isinstance(node, SequenceNode)
            node = node.items[0]
        assert node == _int(0)

    def test_default_max_depth_exceeded(self, builder: NodeBuilder) -> None:
        nested: object = 0
        for _ in range(257):
            nested = [nested]
        with pytest.raises(UnsupportedShapeError, match="max_depth=256"):
            builder.build(nested)

    def test_deep_records_within_default_limit(self, builder: NodeBuilder) -> None:
        nested: object = 0
        for _ in range(255):
            nested = Meters(nested)  # type: ignore[arg-type]
        node = builder.build(nested)
        assert isinstance(node, PositionalRecordNode)

    def test_recursion_limit_surfaces_as_shape_error(self) -> None:
        nested: object = 0
        for _ in range(5000):
            nested = [nested]
        with pytest.raises(UnsupportedShapeError, match="max_depth=100000"):
            NodeBuilder(max_depth=100_000).build(nested)
