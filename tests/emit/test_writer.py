"""Tests for Fragment and ExpressionWriter."""

from __future__ import annotations

import pytest

from uneval.emit.writer import ArgsKind, ExpressionWriter, Fragment
from uneval.errors import InvalidNameError


@pytest.fixture
def writer() -> ExpressionWriter:
    return ExpressionWriter()


class TestFragment:
    """Tests for the conversion decision."""

    def test_needs_conversion_when_types_differ(self) -> None:
        assert Fragment('"a"', "&'static str", "String").needs_conversion

    def test_no_conversion_when_types_match(self) -> None:
        assert not Fragment("1", "u8", "u8").needs_conversion

    def test_no_conversion_when_a_type_is_unknown(self) -> None:
        assert not Fragment("1", None, "u8").needs_conversion
        assert not Fragment("1", "u8", None).needs_conversion


class TestEmbed:
    """Tests for ExpressionWriter.embed."""

    def test_plain(self, writer: ExpressionWriter) -> None:
        assert writer.embed(Fragment("1")) == "1"

    def test_into(self, writer: ExpressionWriter) -> None:
        fragment = writer.literal('"a"', "&'static str", "String")
        assert writer.embed(fragment) == '"a".into()'

    def test_negative_literal_is_parenthesised(self, writer: ExpressionWriter) -> None:
        fragment = Fragment("-1", "i32", "i64")
        assert writer.embed(fragment) == "(-1).into()"


class TestCompose:
    """Tests for ExpressionWriter.compose."""

    def test_ordered(self, writer: ExpressionWriter) -> None:
        result = writer.compose("Some", [Fragment("1")])
        assert result.text == "Some(1)"
        assert not result.needs_conversion

    def test_ordered_embeds_arguments(self, writer: ExpressionWriter) -> None:
        arg = Fragment('"a"', "&'static str", "String")
        assert writer.compose("Name", [arg]).text == 'Name("a".into())'

    def test_named(self, writer: ExpressionWriter) -> None:
        result = writer.compose(
            "Point", [("x", Fragment("1")), ("y", Fragment("2"))], ArgsKind.NAMED
        )
        assert result.text == "Point{x: 1, y: 2}"

    def test_named_escapes_keywords(self, writer: ExpressionWriter) -> None:
        result = writer.compose("Token", [("type", Fragment("1"))], ArgsKind.NAMED)
        assert result.text == "Token{r#type: 1}"

    def test_named_rejects_bad_field(self, writer: ExpressionWriter) -> None:
        with pytest.raises(InvalidNameError):
            writer.compose("T", [("not a name", Fragment("1"))], ArgsKind.NAMED)

    def test_none(self, writer: ExpressionWriter) -> None:
        assert writer.compose("Unit", kind=ArgsKind.NONE).text == "Unit"

    def test_none_rejects_arguments(self, writer: ExpressionWriter) -> None:
        with pytest.raises(ValueError, match="takes no arguments"):
            writer.compose("Unit", [Fragment("1")], ArgsKind.NONE)

    def test_delimited(self, writer: ExpressionWriter) -> None:
        assert writer.delimited("[", [Fragment("1"), Fragment("2")], "]") == "[1, 2]"
