"""JSON emitters.

`JsonWriter` appends JSON text to a sink. `ValueBuilder` accepts the same
calls and assembles a JsonValue tree instead, so the mapper can target either.
"""

from __future__ import annotations

import io
import math
from decimal import Decimal
from typing import Any, Protocol

from typejson.errors import ConversionError
from typejson.values import (
    FALSE,
    NULL,
    TRUE,
    JsonArray,
    JsonBool,
    JsonFloat,
    JsonInt,
    JsonNull,
    JsonObject,
    JsonStr,
    JsonValue,
)

_ESCAPES = {
    '"': '\\"',
    "\\": "\\\\",
    "\b": "\\b",
    "\f": "\\f",
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
}


class TextSink(Protocol):
    """Anything text can be appended to (io.StringIO, an open file, ...)."""

    def write(self, s: str, /) -> Any: ...


class Emitter(Protocol):
    """Event interface driven by the mapper when serializing."""

    def begin_object(self) -> None: ...
    def end_object(self) -> None: ...
    def begin_array(self) -> None: ...
    def end_array(self) -> None: ...
    def write_name(self, name: str) -> None: ...
    def write_string(self, value: str) -> None: ...
    def write_number(self, value: int | float | Decimal) -> None: ...
    def write_bool(self, value: bool) -> None: ...  # noqa: FBT001
    def write_null(self) -> None: ...


def escape_string(value: str) -> str:
    """Escape a string for use between JSON double quotes."""
    out: list[str] = []
    for char in value:
        if char in _ESCAPES:
            out.append(_ESCAPES[char])
        elif char < " ":
            out.append(f"\\u{ord(char):04x}")
        else:
            out.append(char)
    return "".join(out)


def format_number(value: int | float | Decimal) -> str:
    """Render a number as a JSON literal.

    Raises:
        ConversionError: For NaN and infinities, which JSON cannot represent

    """
    if isinstance(value, bool):
        msg = f"Expected a number, got bool {value!r}"
        raise ConversionError(msg)
    if isinstance(value, int):
        return str(value)
    if isinstance(value, Decimal):
        if not value.is_finite():
            msg = f"Cannot represent non-finite Decimal {value} in JSON"
            raise ConversionError(msg)
        return str(value)
    if not math.isfinite(value):
        msg = f"Cannot represent non-finite float {value} in JSON"
        raise ConversionError(msg)
    return repr(value)


class JsonWriter:
    """Streaming JSON text writer.

    Member and element separators are inserted automatically. When `indent`
    is a string, output is pretty printed: a newline followed by one copy of
    `indent` per open container is written after each container open, after
    each separator and before each container close. Empty containers stay on
    one line.
    """

    def __init__(self, sink: TextSink | None = None, indent: str | None = None) -> None:
        self.sink: TextSink = sink if sink is not None else io.StringIO()
        self.indent = indent
        # One entry per open container: number of values written so far
        self._counts: list[int] = []
        self._after_name = False

    @property
    def pretty(self) -> bool:
        return self.indent is not None

    def getvalue(self) -> str:
        """Return the text written so far when the sink is a StringIO."""
        if not isinstance(self.sink, io.StringIO):
            msg = "getvalue() requires the default StringIO sink"
            raise TypeError(msg)
        return self.sink.getvalue()

    def _write(self, text: str) -> None:
        self.sink.write(text)

    def _newline(self) -> None:
        if self.indent is not None:
            self._write("\n" + self.indent * len(self._counts))

    def _before_value(self) -> None:
        if self._after_name:
            self._after_name = False
            return
        if not self._counts:
            return
        if self._counts[-1] > 0:
            self._write(",")
        self._newline()
        self._counts[-1] += 1

    def _open(self, bracket: str) -> None:
        self._before_value()
        self._write(bracket)
        self._counts.append(0)

    def _close(self, bracket: str) -> None:
        count = self._counts.pop()
        if count > 0:
            self._newline()
        self._write(bracket)

    def begin_object(self) -> None:
        self._open("{")

    def end_object(self) -> None:
        self._close("}")

    def begin_array(self) -> None:
        self._open("[")

    def end_array(self) -> None:
        self._close("]")

    def write_name(self, name: str) -> None:
        self._before_value()
        self._write(f'"{escape_string(name)}":')
        if self.pretty:
            self._write(" ")
        self._after_name = True

    def write_string(self, value: str) -> None:
        self._before_value()
        self._write(f'"{escape_string(value)}"')

    def write_raw(self, literal: str) -> None:
        """Write a number, boolean or null literal verbatim."""
        self._before_value()
        self._write(literal)

    def write_number(self, value: int | float | Decimal) -> None:
        self.write_raw(format_number(value))

    def write_bool(self, value: bool) -> None:  # noqa: FBT001
        self.write_raw("true" if value else "false")

    def write_null(self) -> None:
        self.write_raw("null")

    def write_value(self, value: JsonValue) -> None:
        """Write a parsed JsonValue tree."""
        match value:
            case JsonNull():
                self.write_null()
            case JsonBool(value=flag):
                self.write_bool(flag)
            case JsonInt(value=number) | JsonFloat(value=number):
                self.write_number(number)
            case JsonStr(value=text):
                self.write_string(text)
            case JsonArray(items=items):
                self.begin_array()
                for item in items:
                    self.write_value(item)
                self.end_array()
            case JsonObject(members=members):
                self.begin_object()
                for name, member in members.items():
                    self.write_name(name)
                    self.write_value(member)
                self.end_object()
            case _:
                msg = f"Unknown JSON value {value!r}"
                raise TypeError(msg)


class ValueBuilder:
    """Emitter that builds a JsonValue tree instead of text."""

    def __init__(self) -> None:
        # Open containers: a list of items or a members dict
        self._stack: list[list[JsonValue] | dict[str, JsonValue]] = []
        self._names: list[str | None] = []
        self._root: JsonValue | None = None

    @property
    def result(self) -> JsonValue:
        if self._root is None or self._stack:
            msg = "No complete value has been built"
            raise ValueError(msg)
        return self._root

    def _add(self, value: JsonValue) -> None:
        if not self._stack:
            self._root = value
            return
        container = self._stack[-1]
        if isinstance(container, dict):
            name = self._names[-1]
            if name is None:
                msg = "write_name() must precede an object member"
                raise ValueError(msg)
            container[name] = value
            self._names[-1] = None
        else:
            container.append(value)

    def begin_object(self) -> None:
        self._stack.append({})
        self._names.append(None)

    def end_object(self) -> None:
        if not self._stack or not isinstance(self._stack[-1], dict):
            msg = "end_object() does not match an open object"
            raise ValueError(msg)
        members = self._stack.pop()
        self._names.pop()
        self._add(JsonObject(members=members))

    def begin_array(self) -> None:
        self._stack.append([])
        self._names.append(None)

    def end_array(self) -> None:
        if not self._stack or not isinstance(self._stack[-1], list):
            msg = "end_array() does not match an open array"
            raise ValueError(msg)
        items = self._stack.pop()
        self._names.pop()
        self._add(JsonArray(items=tuple(items)))

    def write_name(self, name: str) -> None:
        self._names[-1] = name

    def write_string(self, value: str) -> None:
        self._add(JsonStr(value=value))

    def write_number(self, value: int | float | Decimal) -> None:
        format_number(value)
        if isinstance(value, int):
            self._add(JsonInt(value=value))
        else:
            self._add(JsonFloat(value=float(value)))

    def write_bool(self, value: bool) -> None:  # noqa: FBT001
        self._add(TRUE if value else FALSE)

    def write_null(self) -> None:
        self._add(NULL)


def dumps(value: JsonValue, *, indent: str | None = None) -> str:
    """Render a JsonValue tree as JSON text."""
    writer = JsonWriter(indent=indent)
    writer.write_value(value)
    return writer.getvalue()
