"""Serialization context: immutable options plus the type adapter registry."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Self

from typejson.adapters import TypeAdapter, builtin_adapters
from typejson.dates import DEFAULT_DATE_FORMAT
from typejson.parser import DEFAULT_MAX_DEPTH

if TYPE_CHECKING:
    from collections.abc import Mapping


def _builtin_registry() -> Mapping[type, TypeAdapter[Any]]:
    return MappingProxyType(builtin_adapters())


@dataclass(frozen=True)
class SerializationContext:
    """Options shared read-only by every conversion call.

    Build one with `SerializationContext.builder()` (or construct it directly)
    and reuse it; it never changes after construction, so it is safe to share
    between threads.

    Attributes:
        serialize_nulls: Emit fields and map entries whose value is None
        use_declared_field_names: Use Python field names on the wire instead of
            deriving snake_case names from camelCase ones
        date_format: strftime/strptime pattern for datetime values
        indentation: Indent unit for pretty printing, None for compact output
        max_depth: Maximum nesting depth in either direction
        adapters: Read-only registry of adapters keyed by exact type

    """

    serialize_nulls: bool = False
    use_declared_field_names: bool = False
    date_format: str = DEFAULT_DATE_FORMAT
    indentation: str | None = None
    max_depth: int = DEFAULT_MAX_DEPTH
    adapters: Mapping[type, TypeAdapter[Any]] = field(default_factory=_builtin_registry)

    def __post_init__(self) -> None:
        if self.max_depth < 1:
            msg = f"max_depth must be positive, got {self.max_depth}"
            raise ValueError(msg)
        if not isinstance(self.adapters, MappingProxyType):
            object.__setattr__(self, "adapters", MappingProxyType(dict(self.adapters)))

    @classmethod
    def builder(cls) -> ContextBuilder:
        """Start a builder with default options and the built-in adapters."""
        return ContextBuilder()

    def adapter_for(self, typ: type) -> TypeAdapter[Any] | None:
        """Registered adapter for exactly `typ`, or None."""
        return self.adapters.get(typ)

    def to_builder(self) -> ContextBuilder:
        """Start a builder pre-filled with this context's settings."""
        return ContextBuilder(self)


class ContextBuilder:
    """Fluent configuration for a SerializationContext.

    Usage:
        context = (
            SerializationContext.builder()
            .serialize_nulls()
            .pretty_printing("  ")
            .register_adapter(Money, money_adapter)
            .build()
        )
    """

    def __init__(self, base: SerializationContext | None = None) -> None:
        base = base if base is not None else SerializationContext()
        self._base = base
        self._adapters: dict[type, TypeAdapter[Any]] = dict(base.adapters)
        self._options: dict[str, Any] = {}

    def serialize_nulls(self, enabled: bool = True) -> Self:  # noqa: FBT001, FBT002
        """Emit None-valued fields and map entries as null."""
        self._options["serialize_nulls"] = enabled
        return self

    def use_declared_field_names(self, enabled: bool = True) -> Self:  # noqa: FBT001, FBT002
        """Use field names verbatim instead of the snake_case naming strategy."""
        self._options["use_declared_field_names"] = enabled
        return self

    def date_format(self, pattern: str) -> Self:
        """Set the strftime/strptime pattern for datetime values."""
        self._options["date_format"] = pattern
        return self

    def pretty_printing(self, indentation: str = "  ") -> Self:
        """Pretty print output using `indentation` per nesting level."""
        self._options["indentation"] = indentation
        return self

    def disable_pretty_printing(self) -> Self:
        """Produce compact output."""
        self._options["indentation"] = None
        return self

    def max_depth(self, depth: int) -> Self:
        """Limit nesting depth when parsing, reading and writing."""
        self._options["max_depth"] = depth
        return self

    def register_adapter[T](self, typ: type[T], adapter: TypeAdapter[T]) -> Self:
        """Register `adapter` for exactly `typ` (subclasses are not matched)."""
        self._adapters[typ] = adapter
        return self

    def unregister_adapter(self, typ: type) -> Self:
        """Remove the adapter for `typ`, including a built-in one."""
        self._adapters.pop(typ, None)
        return self

    def build(self) -> SerializationContext:
        """Create the immutable context."""
        return replace(
            self._base,
            adapters=MappingProxyType(dict(self._adapters)),
            **self._options,
        )
