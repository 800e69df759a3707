"""Public entry points: JsonSerializer and the to_json/from_json helpers."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, overload

from typejson.context import SerializationContext
from typejson.errors import DeserializationError, MappingError, SerializationError
from typejson.mapper import Mapper
from typejson.parser import parse
from typejson.writer import JsonWriter

if TYPE_CHECKING:
    from typing import Protocol

    from typejson.values import JsonValue
    from typejson.writer import TextSink

    class Readable(Protocol):
        def read(self) -> str: ...


logger = logging.getLogger(__name__)

CONTENT_TYPE = "application/json"

_DEFAULT_CONTEXT = SerializationContext()

# Errors wrapped into the public SerializationError and DeserializationError
_FAILURES = (MappingError, TypeError, ValueError, RecursionError)


def _type_name(target: Any) -> str:
    return getattr(target, "__name__", None) or repr(target)


class JsonSerializer:
    """Converts typed objects to JSON text and back under one context.

    Example:
        serializer = JsonSerializer(SerializationContext.builder().serialize_nulls().build())
        text = serializer.serialize(order)
        order = serializer.deserialize(text, Order)

    Serializers hold no mutable state and may be shared between threads.
    """

    def __init__(self, context: SerializationContext | None = None) -> None:
        self.context = context if context is not None else _DEFAULT_CONTEXT

    @property
    def content_type(self) -> str:
        return CONTENT_TYPE

    @overload
    def serialize(self, obj: Any) -> str: ...

    @overload
    def serialize(self, obj: Any, sink: TextSink) -> None: ...

    def serialize(self, obj: Any, sink: TextSink | None = None) -> str | None:
        """Write obj as JSON.

        Args:
            obj: Object graph to serialize
            sink: Object with a `write(str)` method; when omitted the JSON
                text is returned

        Raises:
            SerializationError: If any value cannot be written

        """
        logger.debug("Serializing %s", type(obj).__name__)
        writer = JsonWriter(sink, indent=self.context.indentation)
        try:
            Mapper(self.context).write(obj, writer)
        except _FAILURES as e:
            msg = f"Cannot serialize {type(obj).__name__}: {e}"
            raise SerializationError(msg) from e
        return writer.getvalue() if sink is None else None

    def deserialize(self, source: str | Readable, target: Any) -> Any:
        """Read JSON text into an instance of target.

        Args:
            source: JSON text, or an object with a `read()` method
            target: Type annotation to read into (a class, `list[Item]`, ...)

        Returns:
            The converted value, or None for null, empty or blank input

        Raises:
            DeserializationError: If the text is malformed or cannot be
                converted to target

        """
        text = source if isinstance(source, str) else source.read()
        if not text.strip():
            return None
        logger.debug("Deserializing %d characters into %s", len(text), _type_name(target))
        try:
            value = parse(text, max_depth=self.context.max_depth)
            return Mapper(self.context).from_value(value, target)
        except _FAILURES as e:
            msg = f"Cannot deserialize {_type_name(target)}: {e}"
            raise DeserializationError(msg) from e

    def to_value(self, obj: Any) -> JsonValue:
        """Serialize obj to a JsonValue tree instead of text.

        Raises:
            SerializationError: If any value cannot be written

        """
        try:
            return Mapper(self.context).to_value(obj)
        except _FAILURES as e:
            msg = f"Cannot serialize {type(obj).__name__}: {e}"
            raise SerializationError(msg) from e

    def from_value(self, value: JsonValue, target: Any) -> Any:
        """Convert an already parsed JsonValue tree into an instance of target.

        Raises:
            DeserializationError: If the value cannot be converted to target

        """
        try:
            return Mapper(self.context).from_value(value, target)
        except _FAILURES as e:
            msg = f"Cannot deserialize {_type_name(target)}: {e}"
            raise DeserializationError(msg) from e


def to_json(obj: Any, context: SerializationContext | None = None) -> str:
    """Serialize obj to a JSON string.

    Args:
        obj: Object graph to serialize
        context: Options to use; defaults apply when omitted

    Returns:
        JSON text

    """
    return JsonSerializer(context).serialize(obj)


def from_json(text: str, target: Any, context: SerializationContext | None = None) -> Any:
    """Deserialize a JSON string into an instance of target.

    Args:
        text: JSON text
        target: Type annotation to read into
        context: Options to use; defaults apply when omitted

    Returns:
        The converted value, or None for null, empty or blank input

    """
    return JsonSerializer(context).deserialize(text, target)
