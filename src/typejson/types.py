"""Type descriptors: how a target type maps to and from JSON."""

from __future__ import annotations

import datetime
from dataclasses import dataclass
from decimal import Decimal
from typing import (
    ClassVar,
    NewType,
    dataclass_transform,
)

Char = NewType("Char", str)
"""A single character, written as a one-character JSON string."""


@dataclass(frozen=True)
@dataclass_transform(frozen_default=True)
class TypeDef:
    """Base for type descriptors."""

    tag: ClassVar[str]
    registry: ClassVar[dict[str, type[TypeDef]]] = {}

    def __init_subclass__(cls, tag: str | None = None) -> None:
        """Register descriptor subclass with automatic tag derivation."""
        dataclass(frozen=True)(cls)
        cls.tag = tag if tag is not None else cls.__name__

        if (existing := TypeDef.registry.get(cls.tag)) and existing is not cls:
            msg = (
                f"Tag '{cls.tag}' already registered to {existing}. "
                "Choose a different tag."
            )
            raise ValueError(msg)

        TypeDef.registry[cls.tag] = cls

    def describe(self) -> str:
        """Short human-readable name used in error messages."""
        return self.tag


class AnyType(TypeDef, tag="any"):
    """Any value: read back as natural Python values."""


class NoneType(TypeDef, tag="none"):
    """None/null type."""


class IntType(TypeDef, tag="int"):
    """Integer type."""


class FloatType(TypeDef, tag="float"):
    """Floating point type."""


class DecimalType(TypeDef, tag="decimal"):
    """Arbitrary precision decimal type."""


class BoolType(TypeDef, tag="bool"):
    """Boolean type."""


class CharType(TypeDef, tag="char"):
    """Single character type (see `Char`)."""


class StrType(TypeDef, tag="str"):
    """String type."""


class EnumType(TypeDef, tag="enum"):
    """Enum type, written by member name: Color → EnumType(cls=Color)."""

    cls: type

    def describe(self) -> str:
        return self.cls.__name__


# Temporal types - text representations chosen by the context or field
class DateTimeType(TypeDef, tag="datetime"):
    """DateTime type, formatted with the context's date pattern."""


class DateType(TypeDef, tag="date"):
    """Date type (year, month, day)."""


class TimeType(TypeDef, tag="time"):
    """Time type (hour, minute, second, microsecond)."""


class LiteralType(TypeDef, tag="literal"):
    """Literal enumeration: Literal["a", "b"] → LiteralType(values=("a", "b"))."""

    values: tuple[str | int | bool, ...]

    def describe(self) -> str:
        return f"Literal{list(self.values)}"


class ArrayType(TypeDef, tag="array"):
    """Homogeneous tuple: tuple[int, ...] → ArrayType(element=IntType())."""

    element: TypeDef

    def describe(self) -> str:
        return f"tuple[{self.element.describe()}, ...]"


class TupleType(TypeDef, tag="tuple"):
    """Fixed-length heterogeneous tuple: tuple[int, str] → TupleType(elements=(...))."""

    elements: tuple[TypeDef, ...]

    def describe(self) -> str:
        return f"tuple[{', '.join(e.describe() for e in self.elements)}]"


class ListType(TypeDef, tag="list"):
    """List type: list[int] → ListType(element=IntType())."""

    element: TypeDef

    def describe(self) -> str:
        return f"list[{self.element.describe()}]"


class SetType(TypeDef, tag="set"):
    """Set type: set[int] → SetType(element=IntType())."""

    element: TypeDef

    def describe(self) -> str:
        return f"set[{self.element.describe()}]"


class FrozenSetType(TypeDef, tag="frozenset"):
    """Immutable set type: frozenset[int] → FrozenSetType(element=IntType())."""

    element: TypeDef

    def describe(self) -> str:
        return f"frozenset[{self.element.describe()}]"


# Abstract container types - the mapper picks an ordered concrete type
class SequenceType(TypeDef, tag="sequence"):
    """Abstract ordered collection: Sequence[int], read back as a list."""

    element: TypeDef

    def describe(self) -> str:
        return f"Sequence[{self.element.describe()}]"


class AbstractSetType(TypeDef, tag="abstractset"):
    """Abstract set: Set[int], read back as an insertion-ordered keys view."""

    element: TypeDef

    def describe(self) -> str:
        return f"Set[{self.element.describe()}]"


class DictType(TypeDef, tag="dict"):
    """Dict type: dict[str, int] → DictType(key=StrType(), value=IntType())."""

    key: TypeDef
    value: TypeDef

    def describe(self) -> str:
        return f"dict[{self.key.describe()}, {self.value.describe()}]"


class MappingType(TypeDef, tag="mapping"):
    """Abstract mapping: Mapping[str, int], read back as a dict."""

    key: TypeDef
    value: TypeDef

    def describe(self) -> str:
        return f"Mapping[{self.key.describe()}, {self.value.describe()}]"


class UnionType(TypeDef, tag="union"):
    """Union type: int | str → UnionType(options=(IntType(), StrType()))."""

    options: tuple[TypeDef, ...]

    def describe(self) -> str:
        return " | ".join(option.describe() for option in self.options)

    @property
    def is_optional(self) -> bool:
        return any(isinstance(option, NoneType) for option in self.options)


class ObjectType(TypeDef, tag="object"):
    """Composite object (dataclass or annotated class) mapped field by field.

    Fields are resolved lazily through `typejson.schema.object_schema` so
    recursive classes can reference themselves.
    """

    cls: type

    def describe(self) -> str:
        return self.cls.__name__


class ExternalType(TypeDef, tag="external"):
    """Any other class; only convertible through a registered adapter."""

    cls: type

    def describe(self) -> str:
        return self.cls.__name__


def accepts_none(typedef: TypeDef) -> bool:
    """True if None is a legal value of the described type."""
    if isinstance(typedef, NoneType | AnyType):
        return True
    return isinstance(typedef, UnionType) and typedef.is_optional


def runtime_class(typedef: TypeDef) -> type | None:
    """Concrete class a descriptor stands for, used for adapter lookup."""
    return _RUNTIME_CLASSES.get(type(typedef)) or getattr(typedef, "cls", None)


_RUNTIME_CLASSES: dict[type[TypeDef], type] = {
    IntType: int,
    FloatType: float,
    DecimalType: Decimal,
    BoolType: bool,
    StrType: str,
    DateTimeType: datetime.datetime,
    DateType: datetime.date,
    TimeType: datetime.time,
}
