"""Type descriptor extraction and field resolution."""

from __future__ import annotations

import dataclasses
import datetime
import types
import typing
from collections.abc import (
    Collection,
    Iterable,
    Mapping,
    MutableMapping,
    MutableSequence,
    MutableSet,
    Sequence,
)
from collections.abc import Set as AbstractSet
from dataclasses import MISSING, dataclass
from decimal import Decimal
from enum import Enum
from typing import (
    Annotated,
    Any,
    ClassVar,
    Literal,
    NewType,
    TypeAliasType,
    TypeVar,
    Union,
    get_args,
    get_origin,
    get_type_hints,
)

from typejson.adapters import TypeAdapter
from typejson.types import (
    AbstractSetType,
    AnyType,
    ArrayType,
    BoolType,
    Char,
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
)

# Key under which FieldOptions are stored in dataclasses.field(metadata=...)
METADATA_KEY = "typejson"

# Class attribute holding a per-type adapter override
CLASS_ADAPTER_ATTR = "__json_adapter__"

_SCALARS: dict[Any, TypeDef] = {
    int: IntType(),
    float: FloatType(),
    str: StrType(),
    bool: BoolType(),
    type(None): NoneType(),
    None: NoneType(),
    Decimal: DecimalType(),
    datetime.datetime: DateTimeType(),
    datetime.date: DateType(),
    datetime.time: TimeType(),
    Char: CharType(),
    Any: AnyType(),
    object: AnyType(),
}

_SEQUENCE_ORIGINS = (Sequence, MutableSequence, Collection, Iterable)
_MAPPING_ORIGINS = (Mapping, MutableMapping)
_SET_ORIGINS = (AbstractSet, MutableSet)


@dataclass(frozen=True)
class FieldOptions:
    """Declarative per-field mapping options.

    Attach with `json_field(...)` on dataclasses, or as
    `Annotated[T, FieldOptions(...)]` on any annotated class.

    Attributes:
        name: Explicit wire name, used as is in both directions
        alternate: Extra names accepted when reading
        serialize: Include the field when writing
        deserialize: Accept the field when reading
        ignore: Exclude the field in both directions
        date_format: Pattern for date-like values of this field
        adapter: Adapter used for this field's value instead of type dispatch

    """

    name: str | None = None
    alternate: tuple[str, ...] = ()
    serialize: bool = True
    deserialize: bool = True
    ignore: bool = False
    date_format: str | None = None
    adapter: TypeAdapter[Any] | None = None


_DEFAULT_OPTIONS = FieldOptions()


def json_field(  # noqa: PLR0913
    *,
    name: str | None = None,
    alternate: Iterable[str] = (),
    serialize: bool = True,
    deserialize: bool = True,
    ignore: bool = False,
    date_format: str | None = None,
    adapter: TypeAdapter[Any] | None = None,
    default: Any = MISSING,
    default_factory: Any = MISSING,
    **kwargs: Any,
) -> Any:
    """Declare a dataclass field with JSON mapping options.

    Example:
        @dataclass
        class User:
            first_name: str = json_field(name="firstName", alternate=("fname",))
            password: str = json_field(ignore=True, default="")

    Remaining keyword arguments are passed to `dataclasses.field`.
    """
    options = FieldOptions(
        name=name,
        alternate=tuple(alternate),
        serialize=serialize,
        deserialize=deserialize,
        ignore=ignore,
        date_format=date_format,
        adapter=adapter,
    )
    metadata = {**kwargs.pop("metadata", {}), METADATA_KEY: options}
    return dataclasses.field(
        default=default,
        default_factory=default_factory,
        metadata=metadata,
        **kwargs,
    )


def camel_to_snake(name: str) -> str:
    """Convert camelCase to snake_case: "firstName" → "first_name".

    An underscore is inserted before every uppercase letter except at
    position 0, and the letter is lower-cased.
    """
    out: list[str] = []
    for index, char in enumerate(name):
        if char.isupper():
            if index > 0:
                out.append("_")
            out.append(char.lower())
        else:
            out.append(char)
    return "".join(out)


def snake_to_camel(name: str) -> str:
    """Convert snake_case to camelCase: "first_name" → "firstName"."""
    out: list[str] = []
    capitalize = False
    for char in name:
        if char == "_":
            capitalize = True
        elif capitalize:
            out.append(char.upper())
            capitalize = False
        else:
            out.append(char)
    return "".join(out)


def extract_type(py_type: Any) -> TypeDef:
    """Convert a Python type annotation to a TypeDef.

    Raises:
        ValueError: If the annotation is unresolved, unsupported or a
            type alias that refers to itself
        TypeError: If a Literal holds values other than str, int or bool

    """
    return _extract(py_type, frozenset())


def _extract(py_type: Any, expanding: frozenset[TypeAliasType]) -> TypeDef:
    origin = get_origin(py_type)
    args = get_args(py_type)

    if origin is Annotated:
        return _extract(args[0], expanding)

    if isinstance(py_type, TypeVar):
        bound = py_type.__bound__
        return _extract(bound, expanding) if bound is not None else AnyType()

    if isinstance(py_type, str | typing.ForwardRef):
        msg = f"Unresolved forward reference: {py_type!r}"
        raise ValueError(msg)

    if (scalar := _SCALARS.get(py_type)) is not None:
        return scalar

    if isinstance(py_type, NewType):
        return _extract(py_type.__supertype__, expanding)

    # Expand PEP 695 type aliases
    if isinstance(py_type, TypeAliasType):
        return _extract(py_type.__value__, _enter_alias(py_type, expanding))
    if isinstance(origin, TypeAliasType):
        type_params = origin.__type_params__
        if len(type_params) != len(args):
            msg = (
                f"Type alias {origin.__name__} expects {len(type_params)} "
                f"arguments but got {len(args)}"
            )
            raise ValueError(msg)
        substitutions = dict(zip(type_params, args, strict=True))
        return _extract(
            _substitute_type_params(origin.__value__, substitutions),
            _enter_alias(origin, expanding),
        )

    if isinstance(py_type, types.UnionType) or origin is Union:
        return UnionType(tuple(_extract(a, expanding) for a in args))

    if origin is Literal:
        for val in args:
            if not isinstance(val, str | int | bool):
                msg = f"Literal values must be str, int, or bool, got {type(val)}"
                raise TypeError(msg)
        return LiteralType(values=args)

    if origin is tuple or py_type is tuple:
        if not args:
            return ArrayType(element=AnyType())
        if len(args) == 2 and args[1] is Ellipsis:  # noqa: PLR2004
            return ArrayType(element=_extract(args[0], expanding))
        return TupleType(elements=tuple(_extract(arg, expanding) for arg in args))

    if origin is list or py_type is list:
        return ListType(element=_element(args, expanding))
    if origin is set or py_type is set:
        return SetType(element=_element(args, expanding))
    if origin is frozenset or py_type is frozenset:
        return FrozenSetType(element=_element(args, expanding))
    if origin is dict or py_type is dict:
        key, value = _key_value(args, expanding)
        return DictType(key=key, value=value)

    # Generic container types from collections.abc
    if origin in _MAPPING_ORIGINS or py_type in _MAPPING_ORIGINS:
        key, value = _key_value(args, expanding)
        return MappingType(key=key, value=value)
    if origin in _SET_ORIGINS or py_type in _SET_ORIGINS:
        return AbstractSetType(element=_element(args, expanding))
    if origin in _SEQUENCE_ORIGINS or py_type in _SEQUENCE_ORIGINS:
        return SequenceType(element=_element(args, expanding))

    # Parameterized user generics (Box[int]) map like their class
    if origin is not None and isinstance(origin, type):
        return _extract(origin, expanding)

    if isinstance(py_type, type):
        if issubclass(py_type, Enum):
            return EnumType(cls=py_type)
        if py_type.__module__ == "builtins":
            return ExternalType(cls=py_type)
        return ObjectType(cls=py_type)

    msg = f"Cannot extract type from: {py_type}"
    raise ValueError(msg)


def _enter_alias(
    alias: TypeAliasType,
    expanding: frozenset[TypeAliasType],
) -> frozenset[TypeAliasType]:
    """Mark alias as being expanded, rejecting aliases that contain themselves."""
    if alias in expanding:
        msg = f"Recursive type alias {alias.__name__} is not supported"
        raise ValueError(msg)
    return expanding | {alias}


def _element(args: tuple[Any, ...], expanding: frozenset[TypeAliasType]) -> TypeDef:
    return _extract(args[0], expanding) if args else AnyType()


def _key_value(
    args: tuple[Any, ...],
    expanding: frozenset[TypeAliasType],
) -> tuple[TypeDef, TypeDef]:
    if not args:
        return StrType(), AnyType()
    if len(args) != 2:  # noqa: PLR2004
        msg = "Mapping types must have key and value types"
        raise ValueError(msg)
    return _extract(args[0], expanding), _extract(args[1], expanding)


def _substitute_type_params(type_expr: Any, substitutions: dict[Any, Any]) -> Any:
    """Recursively substitute type parameters in a type expression."""
    if isinstance(type_expr, TypeVar) and type_expr in substitutions:
        return substitutions[type_expr]

    origin = get_origin(type_expr)
    args = get_args(type_expr)

    if origin is None or not args:
        return type_expr

    new_args = tuple(_substitute_type_params(arg, substitutions) for arg in args)

    # UnionType (| operator) needs special reconstruction
    if isinstance(type_expr, types.UnionType):
        result = new_args[0]
        for arg in new_args[1:]:
            result = result | arg
        return result

    return origin[new_args]


@dataclass(frozen=True)
class FieldSchema:
    """Resolved mapping of one field.

    Attributes:
        name: Declared (Python attribute) name
        wire_name: Name written when serializing
        alternates: Explicit names accepted when reading, besides wire_name
        type: Descriptor of the declared field type
        serialize: Whether the field is written
        deserialize: Whether the field is read
        adapter: Per-field adapter override
        date_format: Per-field date pattern override
        default: Default value, or MISSING
        default_factory: Default factory, or MISSING
        init: Whether the field is a constructor argument (dataclasses)

    """

    name: str
    wire_name: str
    alternates: tuple[str, ...]
    type: TypeDef
    serialize: bool = True
    deserialize: bool = True
    adapter: TypeAdapter[Any] | None = None
    date_format: str | None = None
    default: Any = dataclasses.field(default_factory=lambda: MISSING)
    default_factory: Any = dataclasses.field(default_factory=lambda: MISSING)
    init: bool = True

    @property
    def has_default(self) -> bool:
        return self.default is not MISSING or self.default_factory is not MISSING


@dataclass(frozen=True)
class ObjectSchema:
    """Ordered field descriptors of a composite class.

    `resolve()` maps an incoming member name to a field: explicit names and
    alternates are consulted first, then declared and naming-strategy names.
    """

    cls: type
    fields: tuple[FieldSchema, ...]
    is_dataclass: bool
    explicit_names: Mapping[str, FieldSchema]
    declared_names: Mapping[str, FieldSchema]

    @property
    def serialized_fields(self) -> tuple[FieldSchema, ...]:
        return tuple(f for f in self.fields if f.serialize)

    def resolve(self, key: str) -> FieldSchema | None:
        """Find the readable field for an incoming member name."""
        found = self.explicit_names.get(key)
        if found is None:
            found = self.declared_names.get(key)
        return found


def _split_options(hint: Any) -> tuple[Any, FieldOptions | None]:
    """Separate Annotated[T, FieldOptions(...)] into T and its options."""
    if get_origin(hint) is Annotated:
        base, *extras = get_args(hint)
        for extra in extras:
            if isinstance(extra, FieldOptions):
                return base, extra
        return base, None
    return hint, None


def _is_class_var(hint: Any) -> bool:
    return hint is ClassVar or get_origin(hint) is ClassVar


def _declared_fields(cls: type) -> list[tuple[str, Any, FieldOptions, dict[str, Any]]]:
    """List (name, hint, options, extras) for each mappable attribute of cls."""
    try:
        hints = get_type_hints(cls, include_extras=True)
    except NameError as e:
        msg = f"Cannot resolve annotations of {cls.__name__}: {e}"
        raise ValueError(msg) from e
    declared: list[tuple[str, Any, FieldOptions, dict[str, Any]]] = []

    if dataclasses.is_dataclass(cls):
        for f in dataclasses.fields(cls):
            if f.name.startswith("_"):
                continue
            hint, annotated = _split_options(hints.get(f.name, Any))
            options = f.metadata.get(METADATA_KEY) or annotated or _DEFAULT_OPTIONS
            extras = {
                "default": f.default,
                "default_factory": f.default_factory,
                "init": f.init,
            }
            declared.append((f.name, hint, options, extras))
        return declared

    # Plain classes: annotations in MRO order, base classes first
    seen: set[str] = set()
    for klass in reversed(cls.__mro__):
        for name in klass.__dict__.get("__annotations__", {}):
            if name in seen or name.startswith("_") or name not in hints:
                continue
            seen.add(name)
            hint, annotated = _split_options(hints[name])
            if _is_class_var(hint):
                continue
            default = getattr(cls, name, MISSING)
            extras = {"default": default, "default_factory": MISSING, "init": True}
            declared.append((name, hint, annotated or _DEFAULT_OPTIONS, extras))
    return declared


def object_schema(cls: type, *, use_declared_names: bool = False) -> ObjectSchema:
    """Build the field schema for a composite class.

    Args:
        cls: A dataclass or a class with annotated attributes
        use_declared_names: Write declared names instead of snake_case ones

    Returns:
        ObjectSchema with fields in declaration order (base classes first)

    """
    fields: list[FieldSchema] = []
    explicit_names: dict[str, FieldSchema] = {}
    declared_names: dict[str, FieldSchema] = {}

    for name, hint, options, extras in _declared_fields(cls):
        if options.name is not None:
            wire_name = options.name
        elif use_declared_names:
            wire_name = name
        else:
            wire_name = camel_to_snake(name)

        schema = FieldSchema(
            name=name,
            wire_name=wire_name,
            alternates=options.alternate,
            type=extract_type(hint),
            serialize=not options.ignore and options.serialize,
            deserialize=not options.ignore and options.deserialize,
            adapter=options.adapter,
            date_format=options.date_format,
            **extras,
        )
        fields.append(schema)

        if not schema.deserialize:
            continue
        # First field in declaration order wins a contested name
        if options.name is not None:
            explicit_names.setdefault(options.name, schema)
        for alternate in options.alternate:
            explicit_names.setdefault(alternate, schema)
        declared_names.setdefault(name, schema)
        if not use_declared_names:
            declared_names.setdefault(camel_to_snake(name), schema)

    return ObjectSchema(
        cls=cls,
        fields=tuple(fields),
        is_dataclass=dataclasses.is_dataclass(cls),
        explicit_names=types.MappingProxyType(explicit_names),
        declared_names=types.MappingProxyType(declared_names),
    )


def class_adapter(cls: type) -> TypeAdapter[Any] | None:
    """Adapter declared on the class itself via `__json_adapter__`.

    Only the class's own namespace is consulted; subclasses do not inherit
    their parent's adapter.
    """
    adapter = cls.__dict__.get(CLASS_ADAPTER_ATTR)
    if adapter is not None and not isinstance(adapter, TypeAdapter):
        msg = f"{cls.__name__}.{CLASS_ADAPTER_ATTR} must be a TypeAdapter"
        raise TypeError(msg)
    return adapter
