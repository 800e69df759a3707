"""Hand-written JSON parser.

A single left-to-right pass with one character of lookahead and no
backtracking. The grammar is strict RFC 8259: no trailing commas, no comments,
no leading zeros, no raw control characters inside strings.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from typejson.errors import JsonSyntaxError
from typejson.values import (
    FALSE,
    NULL,
    TRUE,
    JsonArray,
    JsonFloat,
    JsonInt,
    JsonObject,
    JsonStr,
    JsonValue,
)

if TYPE_CHECKING:
    from collections.abc import Callable

DEFAULT_MAX_DEPTH = 100

_WHITESPACE = frozenset(" \t\r\n")
_DIGITS = frozenset("0123456789")
_HEX_DIGITS = frozenset("0123456789abcdefABCDEF")

_SIMPLE_ESCAPES = {
    '"': '"',
    "\\": "\\",
    "/": "/",
    "b": "\b",
    "f": "\f",
    "n": "\n",
    "r": "\r",
    "t": "\t",
}

_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1


def _describe(char: str | None) -> str:
    if char is None:
        return "end of input"
    return repr(char)


class JsonParser:
    """Recursive-descent parser over a JSON document held in memory."""

    def __init__(self, text: str, *, max_depth: int = DEFAULT_MAX_DEPTH) -> None:
        self.text = text
        self.pos = 0
        self.max_depth = max_depth
        self._depth = 0

    # ------------------------------------------------------------------
    # Cursor primitives
    # ------------------------------------------------------------------

    def peek(self) -> str | None:
        """Return the current character without consuming it (None at end)."""
        if self.pos >= len(self.text):
            return None
        return self.text[self.pos]

    def next(self, expected: str = "a character") -> str:
        """Consume and return the current character.

        Raises:
            JsonSyntaxError: At end of input

        """
        if self.pos >= len(self.text):
            raise JsonSyntaxError(self.pos, expected, "end of input")
        char = self.text[self.pos]
        self.pos += 1
        return char

    def expect(self, char: str) -> None:
        """Consume `char` or fail."""
        found = self.peek()
        if found != char:
            raise JsonSyntaxError(self.pos, repr(char), _describe(found))
        self.pos += 1

    def skip_whitespace(self) -> None:
        """Advance past space, tab, CR and LF."""
        while self.pos < len(self.text) and self.text[self.pos] in _WHITESPACE:
            self.pos += 1

    def fail(self, expected: str) -> JsonSyntaxError:
        """Build an error for the character under the cursor."""
        return JsonSyntaxError(self.pos, expected, _describe(self.peek()))

    # ------------------------------------------------------------------
    # Grammar
    # ------------------------------------------------------------------

    def parse(self) -> JsonValue:
        """Parse the whole input as a single JSON document."""
        value = self.parse_value()
        self.skip_whitespace()
        if self.pos < len(self.text):
            raise self.fail("end of input")
        return value

    def parse_value(self) -> JsonValue:
        """Parse any JSON value starting at the cursor."""
        self.skip_whitespace()
        char = self.peek()
        match char:
            case "{":
                return self._nested(self.parse_object)
            case "[":
                return self._nested(self.parse_array)
            case '"':
                return JsonStr(value=self.parse_string())
            case "t":
                self._literal("true")
                return TRUE
            case "f":
                self._literal("false")
                return FALSE
            case "n":
                self._literal("null")
                return NULL
            case _ if char == "-" or char in _DIGITS:
                return self.parse_number()
            case _:
                raise self.fail("a JSON value")

    def _nested(self, parse_container: Callable[[], JsonValue]) -> JsonValue:
        if self._depth >= self.max_depth:
            raise self.fail(f"nesting depth of at most {self.max_depth}")
        self._depth += 1
        try:
            return parse_container()
        except RecursionError as e:
            raise self.fail("nesting within the interpreter stack limit") from e
        finally:
            self._depth -= 1

    def parse_object(self) -> JsonObject:
        """Parse `{ name : value (, name : value)* }`."""
        self.expect("{")
        members: dict[str, JsonValue] = {}
        self.skip_whitespace()
        if self.peek() == "}":
            self.pos += 1
            return JsonObject(members=members)

        while True:
            self.skip_whitespace()
            if self.peek() != '"':
                raise self.fail("a string member name")
            name = self.parse_string()
            self.skip_whitespace()
            self.expect(":")
            members[name] = self.parse_value()
            self.skip_whitespace()
            delimiter = self.next("',' or '}'")
            if delimiter == "}":
                return JsonObject(members=members)
            if delimiter != ",":
                raise JsonSyntaxError(self.pos - 1, "',' or '}'", repr(delimiter))

    def parse_array(self) -> JsonArray:
        """Parse `[ value (, value)* ]`."""
        self.expect("[")
        items: list[JsonValue] = []
        self.skip_whitespace()
        if self.peek() == "]":
            self.pos += 1
            return JsonArray(items=())

        while True:
            items.append(self.parse_value())
            self.skip_whitespace()
            delimiter = self.next("',' or ']'")
            if delimiter == "]":
                return JsonArray(items=tuple(items))
            if delimiter != ",":
                raise JsonSyntaxError(self.pos - 1, "',' or ']'", repr(delimiter))

    def parse_string(self) -> str:
        """Parse a quoted string and decode its escapes."""
        self.expect('"')
        chunks: list[str] = []
        while True:
            char = self.next("'\"' to close the string")
            if char == '"':
                return "".join(chunks)
            if char == "\\":
                chunks.append(self._escape())
            elif char < " ":
                raise JsonSyntaxError(
                    self.pos - 1,
                    "an escaped control character",
                    repr(char),
                )
            else:
                chunks.append(char)

    def _escape(self) -> str:
        char = self.next("an escape character")
        if char in _SIMPLE_ESCAPES:
            return _SIMPLE_ESCAPES[char]
        if char != "u":
            raise JsonSyntaxError(self.pos - 1, "a valid escape character", repr(char))

        code = self._hex4()
        # Join a UTF-16 surrogate pair written as two escapes
        if 0xD800 <= code <= 0xDBFF and self.text.startswith("\\u", self.pos):
            saved = self.pos
            self.pos += 2
            low = self._hex4()
            if 0xDC00 <= low <= 0xDFFF:
                return chr(0x10000 + ((code - 0xD800) << 10) + (low - 0xDC00))
            self.pos = saved
        return chr(code)

    def _hex4(self) -> int:
        start = self.pos
        digits = self.text[start : start + 4]
        if len(digits) < 4:
            found = repr(digits) if digits else "end of input"
            raise JsonSyntaxError(start, "4 hex digits", found)
        for offset, digit in enumerate(digits):
            if digit not in _HEX_DIGITS:
                raise JsonSyntaxError(start + offset, "a hex digit", repr(digit))
        self.pos += 4
        return int(digits, 16)

    def parse_number(self) -> JsonInt | JsonFloat:
        """Parse `-?(0|[1-9][0-9]*)(.[0-9]+)?([eE][+-]?[0-9]+)?`."""
        start = self.pos
        is_float = False

        if self.peek() == "-":
            self.pos += 1

        if self.peek() == "0":
            self.pos += 1
            if self.peek() in _DIGITS:
                raise self.fail("'.', exponent or end of number after leading zero")
        elif self.peek() in _DIGITS:
            self._digits()
        else:
            raise self.fail("a digit")

        if self.peek() == ".":
            is_float = True
            self.pos += 1
            if self.peek() not in _DIGITS:
                raise self.fail("a digit after '.'")
            self._digits()

        if self.peek() in ("e", "E"):
            is_float = True
            self.pos += 1
            if self.peek() in ("+", "-"):
                self.pos += 1
            if self.peek() not in _DIGITS:
                raise self.fail("a digit in exponent")
            self._digits()

        literal = self.text[start : self.pos]
        if is_float:
            return JsonFloat(value=float(literal))
        number = int(literal)
        if _INT64_MIN <= number <= _INT64_MAX:
            return JsonInt(value=number)
        return JsonFloat(value=float(literal))

    def _digits(self) -> None:
        while self.pos < len(self.text) and self.text[self.pos] in _DIGITS:
            self.pos += 1

    def _literal(self, word: str) -> None:
        start = self.pos
        for offset, char in enumerate(word):
            found = self.peek()
            if found != char:
                raise JsonSyntaxError(start + offset, f"{word!r}", _describe(found))
            self.pos += 1


def parse(text: str, *, max_depth: int = DEFAULT_MAX_DEPTH) -> JsonValue:
    """Parse JSON text into a JsonValue tree.

    Args:
        text: Complete JSON document
        max_depth: Maximum nesting of arrays and objects

    Returns:
        The root value

    Raises:
        JsonSyntaxError: On any grammar violation, with the character offset

    """
    return JsonParser(text, max_depth=max_depth).parse()
