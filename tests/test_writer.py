"""Tests for typejson.writer module."""

import io
import math
from decimal import Decimal

import pytest

from typejson.errors import ConversionError
from typejson.parser import parse
from typejson.values import JsonArray, JsonInt, JsonObject, JsonStr
from typejson.writer import JsonWriter, ValueBuilder, dumps, escape_string, format_number


class TestEscaping:
    """Test string escaping and number formatting."""

    def test_named_escapes(self) -> None:
        """Test quote, backslash and whitespace control characters."""
        assert escape_string('a"b\\c\b\f\n\r\t') == 'a\\"b\\\\c\\b\\f\\n\\r\\t'

    def test_other_control_characters(self) -> None:
        """Test that remaining control characters become \\u00XX."""
        assert escape_string("\x01\x1f") == "\\u0001\\u001f"

    def test_non_ascii_written_verbatim(self) -> None:
        """Test that printable non-ASCII text is not escaped."""
        assert escape_string("héllo ☃") == "héllo ☃"

    @pytest.mark.parametrize(
        ("value", "expected"),
        [(0, "0"), (-7, "-7"), (1.5, "1.5"), (Decimal("12.50"), "12.50")],
    )
    def test_numbers(self, value: int | float | Decimal, expected: str) -> None:
        """Test number literal text."""
        assert format_number(value) == expected

    @pytest.mark.parametrize("value", [math.nan, math.inf, -math.inf, Decimal("NaN")])
    def test_non_finite_numbers_rejected(self, value: float | Decimal) -> None:
        """Test that NaN and infinities have no JSON form."""
        with pytest.raises(ConversionError):
            format_number(value)


class TestJsonWriter:
    """Test separators and pretty printing."""

    def test_compact_output(self) -> None:
        """Test that separators are inserted automatically."""
        writer = JsonWriter()
        writer.begin_object()
        writer.write_name("a")
        writer.begin_array()
        writer.write_number(1)
        writer.write_bool(True)
        writer.write_null()
        writer.end_array()
        writer.write_name("b")
        writer.write_string("x")
        writer.end_object()
        assert writer.getvalue() == '{"a":[1,true,null],"b":"x"}'

    def test_pretty_output(self) -> None:
        """Test newlines and indentation per nesting level."""
        writer = JsonWriter(indent="  ")
        writer.begin_object()
        writer.write_name("a")
        writer.begin_array()
        writer.write_number(1)
        writer.write_number(2)
        writer.end_array()
        writer.write_name("b")
        writer.begin_object()
        writer.end_object()
        writer.end_object()
        assert writer.getvalue() == '{\n  "a": [\n    1,\n    2\n  ],\n  "b": {}\n}'

    def test_empty_containers(self) -> None:
        """Test that empty containers stay on one line."""
        assert dumps(JsonArray(items=()), indent="  ") == "[]"
        assert dumps(JsonObject(members={}), indent="\t") == "{}"

    def test_custom_sink(self) -> None:
        """Test writing into a caller supplied sink."""
        chunks: list[str] = []

        class Sink:
            def write(self, s: str) -> None:
                chunks.append(s)

        writer = JsonWriter(Sink())
        writer.write_value(JsonArray(items=(JsonInt(value=1), JsonStr(value="a"))))
        assert "".join(chunks) == '[1,"a"]'
        with pytest.raises(TypeError):
            writer.getvalue()

    def test_stringio_sink(self) -> None:
        """Test that a StringIO sink is written in place."""
        sink = io.StringIO()
        JsonWriter(sink).write_string("ok")
        assert sink.getvalue() == '"ok"'

    def test_dumps_round_trips_parse(self) -> None:
        """Test that parsed text renders back identically in compact form."""
        text = '{"z":[1,2.5,"s",null,true],"a":{"k":false}}'
        assert dumps(parse(text)) == text


class TestValueBuilder:
    """Test building JsonValue trees through the emitter protocol."""

    def test_builds_tree(self) -> None:
        """Test that emitted events produce the equivalent value."""
        builder = ValueBuilder()
        builder.begin_object()
        builder.write_name("n")
        builder.write_number(3)
        builder.write_name("xs")
        builder.begin_array()
        builder.write_string("a")
        builder.end_array()
        builder.end_object()
        assert builder.result == parse('{"n": 3, "xs": ["a"]}')

    def test_incomplete_tree(self) -> None:
        """Test that reading an unfinished tree fails."""
        builder = ValueBuilder()
        builder.begin_array()
        with pytest.raises(ValueError, match="No complete value"):
            _ = builder.result

    def test_mismatched_end_object(self) -> None:
        """Test that closing an array with end_object fails."""
        builder = ValueBuilder()
        builder.begin_array()
        with pytest.raises(ValueError, match="end_object"):
            builder.end_object()

    def test_mismatched_end_array(self) -> None:
        """Test that closing an object with end_array fails."""
        builder = ValueBuilder()
        builder.begin_object()
        with pytest.raises(ValueError, match="end_array"):
            builder.end_array()

    def test_end_without_open_container(self) -> None:
        """Test that ending a container that was never opened fails."""
        with pytest.raises(ValueError, match="open array"):
            ValueBuilder().end_array()
