"""Tests for typejson.parser module."""

import pytest

from typejson.errors import JsonSyntaxError
from typejson.parser import parse
from typejson.values import (
    JsonArray,
    JsonBool,
    JsonFloat,
    JsonInt,
    JsonNull,
    JsonObject,
    JsonStr,
)


class TestScalars:
    """Test parsing of literals, numbers and strings."""

    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("true", JsonBool(value=True)),
            ("false", JsonBool(value=False)),
            ("null", JsonNull()),
            ("0", JsonInt(value=0)),
            ("-12", JsonInt(value=-12)),
            ("1.5", JsonFloat(value=1.5)),
            ("-0.25e2", JsonFloat(value=-25.0)),
            ("1E3", JsonFloat(value=1000.0)),
            ('"hi"', JsonStr(value="hi")),
        ],
    )
    def test_scalar(self, text: str, expected: object) -> None:
        """Test that each scalar form parses to the matching value."""
        assert parse(text) == expected

    def test_int64_bounds_stay_integral(self) -> None:
        """Test that the signed 64-bit extremes parse as JsonInt."""
        assert parse(str(2**63 - 1)) == JsonInt(value=2**63 - 1)
        assert parse(str(-(2**63))) == JsonInt(value=-(2**63))

    def test_oversized_integer_becomes_float(self) -> None:
        """Test that an integer beyond 64 bits falls back to JsonFloat."""
        result = parse(str(2**64))
        assert isinstance(result, JsonFloat)
        assert result.value == float(2**64)

    def test_surrounding_whitespace(self) -> None:
        """Test that space, tab, CR and LF around the root are skipped."""
        assert parse(" \t\r\n42\n ") == JsonInt(value=42)


class TestStrings:
    """Test string escapes and control characters."""

    def test_simple_escapes(self) -> None:
        """Test every single-character escape."""
        result = parse(r'"\" \\ \/ \b \f \n \r \t"')
        assert result == JsonStr(value='" \\ / \b \f \n \r \t')

    def test_unicode_escape(self) -> None:
        """Test a BMP \\uXXXX escape."""
        assert parse(r'"caf\u00e9"') == JsonStr(value="café")

    def test_surrogate_pair_is_joined(self) -> None:
        """Test that an escaped surrogate pair decodes to one code point."""
        assert parse(r'"\ud83d\ude00"') == JsonStr(value="\U0001f600")

    def test_raw_control_character_rejected(self) -> None:
        """Test that an unescaped newline inside a string is an error."""
        with pytest.raises(JsonSyntaxError) as exc_info:
            parse('"a\nb"')
        assert exc_info.value.position == 2

    def test_invalid_escape(self) -> None:
        """Test that an unknown escape character is an error."""
        with pytest.raises(JsonSyntaxError) as exc_info:
            parse(r'"\x"')
        assert exc_info.value.position == 2
        assert exc_info.value.found == "'x'"

    def test_bad_hex_digit(self) -> None:
        """Test that a non-hex digit in \\u is reported at its position."""
        with pytest.raises(JsonSyntaxError) as exc_info:
            parse(r'"\u12G4"')
        assert exc_info.value.position == 5

    def test_truncated_unicode_escape(self) -> None:
        """Test that fewer than four hex digits is an error."""
        with pytest.raises(JsonSyntaxError):
            parse(r'"\u12')


class TestContainers:
    """Test arrays and objects."""

    def test_nested_document(self) -> None:
        """Test a document mixing every container and scalar kind."""
        result = parse('{"a": [1, {"b": null}], "c": "d"}')
        assert result == JsonObject(
            members={
                "a": JsonArray(
                    items=(JsonInt(value=1), JsonObject(members={"b": JsonNull()})),
                ),
                "c": JsonStr(value="d"),
            },
        )

    def test_empty_containers(self) -> None:
        """Test that empty object and array parse."""
        assert parse("{}") == JsonObject(members={})
        assert parse("[ ]") == JsonArray(items=())

    def test_member_order_preserved(self) -> None:
        """Test that members keep source order."""
        result = parse('{"z": 1, "a": 2, "m": 3}')
        assert isinstance(result, JsonObject)
        assert list(result.members) == ["z", "a", "m"]

    def test_duplicate_key_keeps_first_position_last_value(self) -> None:
        """Test duplicate member names."""
        result = parse('{"a": 1, "b": 2, "a": 3}')
        assert isinstance(result, JsonObject)
        assert list(result.members) == ["a", "b"]
        assert result.members["a"] == JsonInt(value=3)


class TestSyntaxErrors:
    """Test that malformed input reports position, expectation and finding."""

    def test_unterminated_string(self) -> None:
        """Test input ending inside a string."""
        with pytest.raises(JsonSyntaxError) as exc_info:
            parse('{"a":"b')
        assert exc_info.value.position == 7
        assert exc_info.value.found == "end of input"

    def test_trailing_comma_in_array(self) -> None:
        """Test that a trailing comma is rejected where a value is expected."""
        with pytest.raises(JsonSyntaxError) as exc_info:
            parse("[1,2,]")
        assert exc_info.value.position == 5
        assert exc_info.value.found == "']'"

    def test_trailing_comma_in_object(self) -> None:
        """Test that a trailing comma in an object is rejected."""
        with pytest.raises(JsonSyntaxError):
            parse('{"a": 1,}')

    def test_wrong_delimiter(self) -> None:
        """Test a missing comma between array elements."""
        with pytest.raises(JsonSyntaxError) as exc_info:
            parse("[1 2]")
        assert exc_info.value.position == 3
        assert exc_info.value.expected == "',' or ']'"

    @pytest.mark.parametrize("text", ["01", "-", "1.", "1e", "1e+", "-a", ".5"])
    def test_malformed_numbers(self, text: str) -> None:
        """Test number grammar violations."""
        with pytest.raises(JsonSyntaxError):
            parse(text)

    @pytest.mark.parametrize("text", ["tru", "nul", "fals", "True"])
    def test_bad_literals(self, text: str) -> None:
        """Test misspelled or truncated literals."""
        with pytest.raises(JsonSyntaxError):
            parse(text)

    def test_content_after_root(self) -> None:
        """Test that non-whitespace after the root value is an error."""
        with pytest.raises(JsonSyntaxError) as exc_info:
            parse("1 2")
        assert exc_info.value.position == 2

    def test_empty_input(self) -> None:
        """Test that empty text is not a document."""
        with pytest.raises(JsonSyntaxError):
            parse("")

    def test_depth_limit(self) -> None:
        """Test that nesting beyond max_depth fails."""
        assert parse("[[[]]]", max_depth=3) == JsonArray(
            items=(JsonArray(items=(JsonArray(items=()),)),),
        )
        with pytest.raises(JsonSyntaxError) as exc_info:
            parse("[[[[]]]]", max_depth=3)
        assert exc_info.value.position == 3

    def test_default_depth_limit(self) -> None:
        """Test that the default limit admits 100 levels and no more."""
        assert isinstance(parse("[" * 100 + "]" * 100), JsonArray)
        with pytest.raises(JsonSyntaxError, match="nesting depth of at most 100"):
            parse("[" * 101 + "]" * 101)

    def test_stack_exhaustion_is_a_syntax_error(self) -> None:
        """Test that nesting past the interpreter stack fails cleanly."""
        text = "[" * 5000 + "]" * 5000
        with pytest.raises(JsonSyntaxError, match="interpreter stack") as exc_info:
            parse(text, max_depth=100_000)
        assert isinstance(exc_info.value.__cause__, RecursionError)

    def test_long_finding_is_truncated(self) -> None:
        """Test that the message quotes at most 20 characters of input."""
        err = JsonSyntaxError(0, "a value", "x" * 50)
        assert err.found == "x" * 20 + "..."
        assert "at position 0" in str(err)
