"""Type-coercion engine: typed objects to JSON and back.

The mapper walks an object graph and drives an emitter (`JsonWriter` for text,
`ValueBuilder` for a JsonValue tree), dispatching on each value's runtime type.
In the other direction it walks a JsonValue tree guided by a TypeDef,
coercing scalars, building containers and instantiating composite classes.

A Mapper holds per-call state (the current JSON path, cached class schemas),
so create one per conversion; the SerializationContext it reads is shared.
"""

from __future__ import annotations

import inspect
import logging
import math
import re
from collections.abc import Collection, Mapping
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import date, datetime, time
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import TYPE_CHECKING, Any, get_type_hints

from typejson.adapters import TypeAdapter, resolve_enum
from typejson.dates import (
    format_date,
    format_datetime,
    format_time,
    parse_date,
    parse_datetime,
    parse_time,
)
from typejson.errors import (
    ConstructionError,
    ConversionError,
    MappingError,
    TypeMismatchError,
)
from typejson.schema import ObjectSchema, class_adapter, extract_type, object_schema
from typejson.types import (
    AbstractSetType,
    AnyType,
    ArrayType,
    BoolType,
    CharType,
    DateTimeType,
    DateType,
    DecimalType,
    DictType,
    EnumType,
    ExternalType,
    FloatType,
    FrozenSetType,
    IntType,
    ListType,
    LiteralType,
    MappingType,
    NoneType,
    ObjectType,
    SequenceType,
    SetType,
    StrType,
    TimeType,
    TupleType,
    TypeDef,
    UnionType,
    accepts_none,
    runtime_class,
)
from typejson.values import (
    JsonArray,
    JsonBool,
    JsonFloat,
    JsonInt,
    JsonNull,
    JsonObject,
    JsonStr,
    JsonValue,
)
from typejson.writer import ValueBuilder

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator

    from typejson.context import SerializationContext
    from typejson.writer import Emitter

logger = logging.getLogger(__name__)

_INT_TEXT = re.compile(r"[+-]?\d+")
_FLOAT_TEXT = re.compile(r"[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?")
_FLOAT_SPECIALS = {"NaN": math.nan, "Infinity": math.inf, "-Infinity": -math.inf}
_IDENTIFIER = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")

# Field names tried, case-insensitively, when a scalar fills a composite object
_SCALAR_FIELD_NAMES = frozenset({"value", "id", "name"})
_FACTORY_NAMES = ("value_of", "from_value")

_SEQUENCE_TYPES = (ArrayType, TupleType, ListType, SequenceType)
_SET_TYPES = (SetType, FrozenSetType, AbstractSetType)
_MAP_TYPES = (DictType, MappingType)


@dataclass(frozen=True)
class Built:
    """Successful result of a construction strategy."""

    value: Any


class Mapper:
    """Recursive converter between Python objects and JSON."""

    def __init__(self, context: SerializationContext) -> None:
        self.context = context
        self._schemas: dict[type, ObjectSchema] = {}
        self._path: list[str | int] = []
        self._visiting: set[int] = set()

    # ------------------------------------------------------------------
    # Shared helpers
    # ------------------------------------------------------------------

    @property
    def path(self) -> str:
        """JSON path of the value currently being converted."""
        parts = ["$"]
        for segment in self._path:
            if isinstance(segment, int):
                parts.append(f"[{segment}]")
            elif _IDENTIFIER.fullmatch(segment):
                parts.append(f".{segment}")
            else:
                parts.append(f"[{segment!r}]")
        return "".join(parts)

    @contextmanager
    def _at(self, segment: str | int) -> Iterator[None]:
        """Descend into a member or element, enforcing the depth limit.

        Errors raised below without a location get the innermost path.
        """
        if len(self._path) >= self.context.max_depth:
            msg = f"Maximum nesting depth of {self.context.max_depth} exceeded"
            raise ConversionError(msg, path=self.path)
        self._path.append(segment)
        try:
            yield
        except MappingError as e:
            if e.path is None:
                e.path = self.path
            raise
        except RecursionError as e:
            msg = "Nesting exceeds the interpreter stack limit"
            raise ConversionError(msg, path=self.path) from e
        finally:
            self._path.pop()

    def schema(self, cls: type) -> ObjectSchema:
        """Field schema for cls, built once per mapper."""
        found = self._schemas.get(cls)
        if found is None:
            found = object_schema(
                cls,
                use_declared_names=self.context.use_declared_field_names,
            )
            self._schemas[cls] = found
        return found

    def _adapter_for(self, cls: type) -> TypeAdapter[Any] | None:
        return self.context.adapter_for(cls) or class_adapter(cls)

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------

    def to_value(self, obj: Any) -> JsonValue:
        """Serialize obj to a JsonValue tree."""
        builder = ValueBuilder()
        self.write(obj, builder)
        return builder.result

    def write(self, obj: Any, out: Emitter, *, date_format: str | None = None) -> None:
        """Serialize obj into the emitter, dispatching on its runtime type.

        Args:
            obj: Value to write
            out: Emitter receiving the JSON events
            date_format: Field-level date pattern overriding the context's

        """
        if obj is None:
            out.write_null()
            return

        typ = type(obj)
        if (adapter := self._adapter_for(typ)) is not None:
            adapted = self._adapt_out(adapter, obj)
            if type(adapted) is typ:
                msg = f"Adapter {adapter.name} returned the type it adapts ({typ.__name__})"
                raise ConversionError(msg)
            self.write(adapted, out)
            return

        if isinstance(obj, Enum):
            out.write_string(obj.name)
        elif isinstance(obj, bool):
            out.write_bool(obj)
        elif isinstance(obj, int | float | Decimal):
            out.write_number(obj)
        elif isinstance(obj, str):
            out.write_string(obj)
        elif isinstance(obj, datetime):
            out.write_string(format_datetime(obj, date_format or self.context.date_format))
        elif isinstance(obj, date):
            out.write_string(format_date(obj, date_format))
        elif isinstance(obj, time):
            out.write_string(format_time(obj, date_format))
        elif isinstance(obj, Mapping):
            self._write_mapping(obj, out, date_format)
        elif isinstance(obj, Collection) and not isinstance(obj, bytes | bytearray):
            self._write_collection(obj, out, date_format)
        else:
            self._write_object(obj, out)

    @contextmanager
    def _visit(self, obj: Any) -> Iterator[None]:
        key = id(obj)
        if key in self._visiting:
            msg = f"Circular reference to {type(obj).__name__} detected"
            raise ConversionError(msg, path=self.path)
        self._visiting.add(key)
        try:
            yield
        finally:
            self._visiting.discard(key)

    def _write_collection(
        self,
        items: Collection[Any],
        out: Emitter,
        date_format: str | None,
    ) -> None:
        with self._visit(items):
            out.begin_array()
            for index, item in enumerate(items):
                with self._at(index):
                    self.write(item, out, date_format=date_format)
            out.end_array()

    def _write_mapping(
        self,
        mapping: Mapping[Any, Any],
        out: Emitter,
        date_format: str | None,
    ) -> None:
        serialize_nulls = self.context.serialize_nulls
        with self._visit(mapping):
            out.begin_object()
            for key, value in mapping.items():
                if (key is None or value is None) and not serialize_nulls:
                    continue
                name = _key_text(key)
                with self._at(name):
                    out.write_name(name)
                    self.write(value, out, date_format=date_format)
            out.end_object()

    def _write_object(self, obj: Any, out: Emitter) -> None:
        schema = self.schema(type(obj))
        serialize_nulls = self.context.serialize_nulls
        with self._visit(obj):
            out.begin_object()
            for field in schema.serialized_fields:
                value = getattr(obj, field.name, None)
                if value is None and not serialize_nulls:
                    continue
                with self._at(field.wire_name):
                    out.write_name(field.wire_name)
                    if field.adapter is not None and value is not None:
                        self.write(self._adapt_out(field.adapter, value), out)
                    else:
                        self.write(value, out, date_format=field.date_format)
            out.end_object()

    def _adapt_out(self, adapter: TypeAdapter[Any], obj: Any) -> Any:
        try:
            return adapter.serialize(obj)
        except MappingError:
            raise
        except Exception as e:  # noqa: BLE001
            msg = f"Adapter {adapter.name} failed to serialize {type(obj).__name__}: {e}"
            raise ConversionError(msg) from e

    # ------------------------------------------------------------------
    # Deserialization
    # ------------------------------------------------------------------

    def from_value(self, value: JsonValue, target: Any) -> Any:
        """Deserialize a JsonValue tree into an instance of a type annotation."""
        typedef = target if isinstance(target, TypeDef) else extract_type(target)
        return self.read(value, typedef)

    def read(
        self,
        value: JsonValue,
        typedef: TypeDef,
        *,
        adapter: TypeAdapter[Any] | None = None,
        date_format: str | None = None,
    ) -> Any:
        """Convert value to the type described by typedef.

        Args:
            value: Parsed JSON value
            typedef: Descriptor of the target type
            adapter: Field-level adapter, applied before anything else
            date_format: Field-level date pattern overriding the context's

        Raises:
            TypeMismatchError: If the value's shape cannot fit the target
            ConversionError: If a scalar cannot be coerced
            ConstructionError: If the target cannot be instantiated

        """
        if isinstance(value, JsonNull):
            return None
        if adapter is not None:
            return self._adapt_in(adapter, value)
        cls = runtime_class(typedef)
        if cls is not None and (registered := self._adapter_for(cls)) is not None:
            return self._adapt_in(registered, value)

        reader = self._readers.get(type(typedef))
        if reader is None:
            msg = f"Unsupported target type {typedef.describe()}"
            raise ConstructionError(msg)
        return reader(self, value, typedef, date_format)

    def _adapt_in(self, adapter: TypeAdapter[Any], value: JsonValue) -> Any:
        try:
            return adapter.deserialize(value.to_python())
        except MappingError:
            raise
        except Exception as e:  # noqa: BLE001
            msg = f"Adapter {adapter.name} failed to deserialize {value.tag} value: {e}"
            raise ConversionError(msg) from e

    def _scalar(self, value: JsonValue, typedef: TypeDef) -> JsonValue:
        if not value.is_scalar:
            msg = f"Expected a scalar for {typedef.describe()}, got {value.tag}"
            raise TypeMismatchError(msg)
        return value

    # Scalars ----------------------------------------------------------

    def _read_any(self, value: JsonValue, typedef: TypeDef, _: str | None) -> Any:
        return value.to_python()

    def _read_none(self, value: JsonValue, typedef: TypeDef, _: str | None) -> None:
        msg = f"Expected null, got {value.tag}"
        raise TypeMismatchError(msg)

    def _read_int(self, value: JsonValue, typedef: TypeDef, _: str | None) -> int:
        match self._scalar(value, typedef):
            case JsonBool(value=flag):
                return int(flag)
            case JsonInt(value=number):
                return number
            case JsonFloat(value=number):
                if not math.isfinite(number):
                    msg = f"Cannot convert {number} to int"
                    raise ConversionError(msg)
                return math.trunc(number)
            case JsonStr(value=text) if _INT_TEXT.fullmatch(text):
                return int(text)
            case other:
                msg = f"Cannot convert {other.text()!r} to int"
                raise ConversionError(msg)

    def _read_float(self, value: JsonValue, typedef: TypeDef, _: str | None) -> float:
        match self._scalar(value, typedef):
            case JsonBool(value=flag):
                return float(flag)
            case JsonInt(value=number) | JsonFloat(value=number):
                return float(number)
            case JsonStr(value=text) if _FLOAT_TEXT.fullmatch(text):
                return float(text)
            case JsonStr(value=text) if text in _FLOAT_SPECIALS:
                return _FLOAT_SPECIALS[text]
            case other:
                msg = f"Cannot convert {other.text()!r} to float"
                raise ConversionError(msg)

    def _read_decimal(self, value: JsonValue, typedef: TypeDef, _: str | None) -> Decimal:
        match self._scalar(value, typedef):
            case JsonBool(value=flag):
                return Decimal(int(flag))
            case JsonInt(value=number):
                return Decimal(number)
            case JsonFloat(value=number):
                try:
                    return Decimal(repr(number))
                except InvalidOperation as e:
                    msg = f"Cannot convert {number} to Decimal"
                    raise ConversionError(msg) from e
            case JsonStr(value=text) if _FLOAT_TEXT.fullmatch(text):
                return Decimal(text)
            case other:
                msg = f"Cannot convert {other.text()!r} to Decimal"
                raise ConversionError(msg)

    def _read_bool(self, value: JsonValue, typedef: TypeDef, _: str | None) -> bool:
        match self._scalar(value, typedef):
            case JsonBool(value=flag):
                return flag
            case JsonInt(value=0 | 1 as number):
                return bool(number)
            case JsonStr(value=text) if text.casefold() in ("true", "false"):
                return text.casefold() == "true"
            case other:
                msg = f"Cannot convert {other.text()!r} to bool"
                raise ConversionError(msg)

    def _read_char(self, value: JsonValue, typedef: TypeDef, _: str | None) -> str:
        text = self._scalar(value, typedef).text()
        if not text:
            msg = "Cannot convert an empty string to a character"
            raise ConversionError(msg)
        return text[0]

    def _read_str(self, value: JsonValue, typedef: TypeDef, _: str | None) -> str:
        return self._scalar(value, typedef).text()

    def _read_enum(self, value: JsonValue, typedef: EnumType, _: str | None) -> Enum:
        return resolve_enum(typedef.cls, self._scalar(value, typedef).text())

    def _read_datetime(
        self,
        value: JsonValue,
        typedef: TypeDef,
        date_format: str | None,
    ) -> datetime:
        text = self._scalar(value, typedef).text()
        return parse_datetime(text, date_format or self.context.date_format)

    def _read_date(self, value: JsonValue, typedef: TypeDef, date_format: str | None) -> date:
        return parse_date(self._scalar(value, typedef).text(), date_format)

    def _read_time(self, value: JsonValue, typedef: TypeDef, date_format: str | None) -> time:
        return parse_time(self._scalar(value, typedef).text(), date_format)

    def _read_literal(self, value: JsonValue, typedef: LiteralType, _: str | None) -> Any:
        raw = self._scalar(value, typedef).to_python()
        for allowed in typedef.values:
            if raw == allowed and type(raw) is type(allowed):
                return allowed
        msg = f"Value {raw!r} is not one of {list(typedef.values)}"
        raise ConversionError(msg)

    # Containers -------------------------------------------------------

    def _read_collection(
        self,
        value: JsonValue,
        typedef: TypeDef,
        date_format: str | None,
    ) -> Any:
        if isinstance(value, JsonObject):
            msg = f"Expected an array for {typedef.describe()}, got object"
            raise TypeMismatchError(msg)
        # A lone scalar is read as a one-element collection
        items = value.items if isinstance(value, JsonArray) else (value,)

        if isinstance(typedef, TupleType):
            if len(items) != len(typedef.elements):
                msg = (
                    f"Expected {len(typedef.elements)} elements for "
                    f"{typedef.describe()}, got {len(items)}"
                )
                raise TypeMismatchError(msg)
            return tuple(
                self._read_element(index, item, element_type, date_format)
                for index, (item, element_type) in enumerate(
                    zip(items, typedef.elements, strict=True),
                )
            )

        element_type: TypeDef = typedef.element  # type: ignore[attr-defined]
        elements = [
            self._read_element(index, item, element_type, date_format)
            for index, item in enumerate(items)
        ]
        match typedef:
            case ArrayType():
                return tuple(elements)
            case ListType() | SequenceType():
                return elements
        try:
            match typedef:
                case SetType():
                    return set(elements)
                case FrozenSetType():
                    return frozenset(elements)
                case _:
                    # Insertion-ordered unique view for abstract sets
                    return dict.fromkeys(elements).keys()
        except TypeError as e:
            msg = f"Elements of {typedef.describe()} must be hashable: {e}"
            raise ConversionError(msg) from e

    def _read_element(
        self,
        index: int,
        item: JsonValue,
        element_type: TypeDef,
        date_format: str | None,
    ) -> Any:
        with self._at(index):
            return self.read(item, element_type, date_format=date_format)

    def _read_mapping(
        self,
        value: JsonValue,
        typedef: DictType | MappingType,
        date_format: str | None,
    ) -> dict[Any, Any]:
        if not isinstance(value, JsonObject):
            msg = f"Expected an object for {typedef.describe()}, got {value.tag}"
            raise TypeMismatchError(msg)
        result: dict[Any, Any] = {}
        for name, member in value.members.items():
            with self._at(name):
                key = self.read(JsonStr(value=name), typedef.key)
                result[key] = self.read(member, typedef.value, date_format=date_format)
        return result

    def _read_union(
        self,
        value: JsonValue,
        typedef: UnionType,
        date_format: str | None,
    ) -> Any:
        options = [o for o in typedef.options if not isinstance(o, NoneType)]
        if len(options) == 1:
            return self.read(value, options[0], date_format=date_format)

        # Options the JSON value fits without coercion go first
        ordered = sorted(options, key=lambda o: not _fits_natively(value, o))
        failures: list[MappingError] = []
        for option in ordered:
            try:
                return self.read(value, option, date_format=date_format)
            except MappingError as e:
                logger.debug("Union option %s rejected %s: %s", option.describe(), value.tag, e)
                failures.append(e)
        msg = f"Value of type {value.tag} matches no option of {typedef.describe()}"
        raise TypeMismatchError(msg) from failures[-1]

    def _read_external(self, value: JsonValue, typedef: ExternalType, _: str | None) -> Any:
        msg = f"No adapter registered for {typedef.cls.__name__}"
        raise ConstructionError(msg)

    # Composite objects ------------------------------------------------

    def _read_object(self, value: JsonValue, typedef: ObjectType, _: str | None) -> Any:
        cls = typedef.cls
        if isinstance(value, JsonObject):
            return self._read_members(value, cls)
        if isinstance(value, JsonArray):
            msg = f"Expected an object for {cls.__name__}, got array"
            raise TypeMismatchError(msg)
        return self._construct_from_scalar(value, cls)

    def _read_members(self, value: JsonObject, cls: type) -> Any:
        schema = self.schema(cls)
        assigned: dict[str, Any] = {}
        for key, member in value.members.items():
            field = schema.resolve(key)
            if field is None:
                logger.debug("Ignoring unknown member %r for %s", key, cls.__name__)
                continue
            with self._at(key):
                assigned[field.name] = self.read(
                    member,
                    field.type,
                    adapter=field.adapter,
                    date_format=field.date_format,
                )
        return self._instantiate(schema, assigned)

    def _instantiate(self, schema: ObjectSchema, assigned: dict[str, Any]) -> Any:
        """Create an instance of schema.cls holding the assigned field values.

        Dataclasses receive their init fields as keyword arguments; other
        classes are created with no arguments and assigned attribute by
        attribute.
        """
        cls = schema.cls
        if not schema.is_dataclass:
            instance = self._new_default(cls)
            for name, field_value in assigned.items():
                self._assign(instance, name, field_value)
            return instance

        kwargs: dict[str, Any] = {}
        late: dict[str, Any] = {}
        for field in schema.fields:
            if field.name in assigned:
                target = kwargs if field.init else late
                target[field.name] = assigned[field.name]
            elif field.init and not field.has_default:
                if not accepts_none(field.type):
                    msg = f"Missing value for field '{field.name}' of {cls.__name__}"
                    raise ConstructionError(msg)
                kwargs[field.name] = None
        try:
            instance = cls(**kwargs)
        except Exception as e:  # noqa: BLE001
            msg = f"Cannot create instance of {cls.__name__}: {e}"
            raise ConstructionError(msg) from e
        for name, field_value in late.items():
            self._assign(instance, name, field_value)
        return instance

    def _new_default(self, cls: type) -> Any:
        try:
            return cls()
        except Exception as e:  # noqa: BLE001
            msg = f"Cannot create instance of {cls.__name__} with no arguments: {e}"
            raise ConstructionError(msg) from e

    def _assign(self, instance: Any, name: str, field_value: Any) -> None:
        try:
            setattr(instance, name, field_value)
        except Exception as e:  # noqa: BLE001
            msg = f"Cannot assign field '{name}' of {type(instance).__name__}: {e}"
            raise ConstructionError(msg) from e

    def _construct_from_scalar(self, value: JsonValue, cls: type) -> Any:
        """Build a composite object from a number, bool or string.

        Strategies run in order until one applies: a one-argument constructor,
        a `value_of`/`from_value` factory, then filling the first field named
        value, id or name.
        """
        strategies: tuple[Callable[[JsonValue, type], Built | None], ...] = (
            self._build_with_constructor,
            self._build_with_factory,
            self._build_with_value_field,
        )
        for strategy in strategies:
            built = strategy(value, cls)
            if built is not None:
                return built.value
        msg = f"Cannot create {cls.__name__} from a {value.tag} value"
        raise ConversionError(msg)

    def _build_with_constructor(self, value: JsonValue, cls: type) -> Built | None:
        raw = value.to_python()
        if not _single_argument_accepts(cls, cls.__init__, raw):
            return None
        try:
            return Built(cls(raw))
        except Exception as e:  # noqa: BLE001
            msg = f"Constructor of {cls.__name__} rejected {raw!r}: {e}"
            raise ConstructionError(msg) from e

    def _build_with_factory(self, value: JsonValue, cls: type) -> Built | None:
        raw = value.to_python()
        for name in _FACTORY_NAMES:
            factory = getattr(cls, name, None)
            if not callable(factory) or not _single_argument_accepts(factory, factory, raw):
                continue
            try:
                return Built(factory(raw))
            except Exception as e:  # noqa: BLE001
                msg = f"{cls.__name__}.{name} rejected {raw!r}: {e}"
                raise ConstructionError(msg) from e
        return None

    def _build_with_value_field(self, value: JsonValue, cls: type) -> Built | None:
        schema = self.schema(cls)
        for field in schema.fields:
            if field.name.lower() in _SCALAR_FIELD_NAMES:
                logger.debug(
                    "Filling %s.%s from a %s value by field-name heuristic",
                    cls.__name__,
                    field.name,
                    value.tag,
                )
                converted = self.read(value, field.type, adapter=field.adapter)
                return Built(self._instantiate(schema, {field.name: converted}))
        return None

    _readers: dict[type[TypeDef], Callable[..., Any]] = {
        AnyType: _read_any,
        NoneType: _read_none,
        IntType: _read_int,
        FloatType: _read_float,
        DecimalType: _read_decimal,
        BoolType: _read_bool,
        CharType: _read_char,
        StrType: _read_str,
        EnumType: _read_enum,
        DateTimeType: _read_datetime,
        DateType: _read_date,
        TimeType: _read_time,
        LiteralType: _read_literal,
        ArrayType: _read_collection,
        TupleType: _read_collection,
        ListType: _read_collection,
        SequenceType: _read_collection,
        SetType: _read_collection,
        FrozenSetType: _read_collection,
        AbstractSetType: _read_collection,
        DictType: _read_mapping,
        MappingType: _read_mapping,
        UnionType: _read_union,
        ObjectType: _read_object,
        ExternalType: _read_external,
    }


def _key_text(key: Any) -> str:
    """String form of a mapping key."""
    if isinstance(key, Enum):
        return key.name
    if isinstance(key, bool):
        return "true" if key else "false"
    if key is None:
        return "null"
    return str(key)


def _fits_natively(value: JsonValue, typedef: TypeDef) -> bool:
    """True if value already has the JSON shape typedef is written as."""
    match value:
        case JsonBool():
            return isinstance(typedef, BoolType)
        case JsonInt():
            return isinstance(typedef, IntType | FloatType | DecimalType)
        case JsonFloat():
            return isinstance(typedef, FloatType | DecimalType)
        case JsonStr():
            return isinstance(
                typedef,
                StrType | CharType | EnumType | DateTimeType | DateType | TimeType,
            )
        case JsonArray():
            return isinstance(typedef, _SEQUENCE_TYPES + _SET_TYPES)
        case JsonObject():
            return isinstance(typedef, _MAP_TYPES + (ObjectType,))
    return False


def _single_argument_accepts(target: Any, signature_of: Any, raw: Any) -> bool:
    """True if target can be called with raw as its only argument.

    The first parameter must accept a positional argument whose annotation
    (when present) admits raw's type; every other parameter needs a default.
    """
    try:
        signature = inspect.signature(target)
    except (TypeError, ValueError):
        return False
    params = [
        p
        for p in signature.parameters.values()
        if p.kind not in (p.VAR_POSITIONAL, p.VAR_KEYWORD)
    ]
    if not params or params[0].kind is inspect.Parameter.KEYWORD_ONLY:
        return False
    if any(p.default is p.empty for p in params[1:]):
        return False

    first = params[0]
    try:
        hints = get_type_hints(signature_of)
    except Exception:  # noqa: BLE001
        hints = {}
    annotation = hints.get(first.name, first.annotation)
    if annotation is inspect.Parameter.empty or isinstance(annotation, str):
        return True
    try:
        expected = extract_type(annotation)
    except (TypeError, ValueError):
        return False
    return _scalar_fits(raw, expected)


def _scalar_fits(raw: Any, typedef: TypeDef) -> bool:
    match typedef:
        case AnyType():
            return True
        case BoolType():
            return isinstance(raw, bool)
        case IntType():
            return isinstance(raw, int) and not isinstance(raw, bool)
        case FloatType() | DecimalType():
            return isinstance(raw, int | float) and not isinstance(raw, bool)
        case StrType() | CharType():
            return isinstance(raw, str)
        case UnionType(options=options):
            return any(_scalar_fits(raw, option) for option in options)
    return False
