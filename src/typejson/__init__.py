"""typejson - JSON to typed-object mapping for Python 3.12+."""

from typejson.adapters import (
    UUID_ADAPTER,
    TypeAdapter,
    datetime_adapter,
    enum_adapter,
    path_adapter,
)
from typejson.context import (
    ContextBuilder,
    SerializationContext,
)
from typejson.errors import (
    ConstructionError,
    ConversionError,
    DeserializationError,
    JsonSyntaxError,
    MappingError,
    SerializationError,
    TypeMismatchError,
)
from typejson.parser import parse
from typejson.schema import (
    FieldOptions,
    camel_to_snake,
    extract_type,
    json_field,
    object_schema,
    snake_to_camel,
)
from typejson.serialization import (
    CONTENT_TYPE,
    JsonSerializer,
    from_json,
    to_json,
)
from typejson.types import Char
from typejson.values import (
    JsonArray,
    JsonBool,
    JsonFloat,
    JsonInt,
    JsonNull,
    JsonObject,
    JsonStr,
    JsonValue,
    from_python,
)
from typejson.writer import JsonWriter, dumps

__all__ = [
    # Serialization
    "CONTENT_TYPE",
    # Adapters
    "UUID_ADAPTER",
    # Field metadata
    "Char",
    # Errors
    "ConstructionError",
    # Context
    "ContextBuilder",
    "ConversionError",
    "DeserializationError",
    "FieldOptions",
    # Values
    "JsonArray",
    "JsonBool",
    "JsonFloat",
    "JsonInt",
    "JsonNull",
    "JsonObject",
    "JsonSerializer",
    "JsonStr",
    "JsonSyntaxError",
    "JsonValue",
    # Writer
    "JsonWriter",
    "MappingError",
    "SerializationContext",
    "SerializationError",
    "TypeAdapter",
    "TypeMismatchError",
    "camel_to_snake",
    "datetime_adapter",
    "dumps",
    "enum_adapter",
    "extract_type",
    "from_json",
    "from_python",
    "json_field",
    "object_schema",
    # Parsing
    "parse",
    "path_adapter",
    "snake_to_camel",
    "to_json",
]
