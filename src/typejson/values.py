"""Dynamic JSON value model produced by the parser."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar, dataclass_transform


@dataclass(frozen=True)
@dataclass_transform(frozen_default=True)
class JsonValue:
    """Base for parsed JSON values."""

    tag: ClassVar[str]
    registry: ClassVar[dict[str, type[JsonValue]]] = {}

    def __init_subclass__(cls, tag: str | None = None) -> None:
        """Register value subclass with automatic tag derivation."""
        dataclass(frozen=True)(cls)
        cls.tag = tag if tag is not None else cls.__name__.lower().removeprefix("json")

        if (existing := JsonValue.registry.get(cls.tag)) and existing is not cls:
            msg = (
                f"Tag '{cls.tag}' already registered to {existing}. "
                "Choose a different tag."
            )
            raise ValueError(msg)

        JsonValue.registry[cls.tag] = cls

    @property
    def is_scalar(self) -> bool:
        """True for null, booleans, numbers and strings."""
        return not isinstance(self, JsonArray | JsonObject)

    def to_python(self) -> Any:
        """Convert to the natural Python value (dict, list, str, int, ...)."""
        raise NotImplementedError

    def text(self) -> str:
        """Textual form of a scalar, as used when coercing to a string."""
        msg = f"A JSON {self.tag} has no textual form"
        raise TypeError(msg)


class JsonNull(JsonValue, tag="null"):
    """The JSON literal null."""

    def to_python(self) -> None:
        return None

    def text(self) -> str:
        return "null"


class JsonBool(JsonValue, tag="bool"):
    """The JSON literals true and false."""

    value: bool

    def to_python(self) -> bool:
        return self.value

    def text(self) -> str:
        return "true" if self.value else "false"


class JsonInt(JsonValue, tag="int"):
    """An integral number that fits a signed 64-bit integer."""

    value: int

    def to_python(self) -> int:
        return self.value

    def text(self) -> str:
        return str(self.value)


class JsonFloat(JsonValue, tag="float"):
    """A number written with a fraction or exponent, or too large for JsonInt."""

    value: float

    def to_python(self) -> float:
        return self.value

    def text(self) -> str:
        return repr(self.value)


class JsonStr(JsonValue, tag="str"):
    """A JSON string, escapes already decoded."""

    value: str

    def to_python(self) -> str:
        return self.value

    def text(self) -> str:
        return self.value


class JsonArray(JsonValue, tag="array"):
    """Ordered sequence of values."""

    items: tuple[JsonValue, ...] = ()

    def to_python(self) -> list[Any]:
        return [item.to_python() for item in self.items]


class JsonObject(JsonValue, tag="object"):
    """Ordered mapping of unique member names to values.

    Members keep the position of their first insertion.
    """

    members: dict[str, JsonValue]

    def to_python(self) -> dict[str, Any]:
        return {name: value.to_python() for name, value in self.members.items()}


NULL = JsonNull()
TRUE = JsonBool(value=True)
FALSE = JsonBool(value=False)


def from_python(obj: Any) -> JsonValue:
    """Build a JsonValue tree from natural Python values.

    Accepts None, bool, int, float, str, lists/tuples and dicts (keys are
    converted with str()).

    Raises:
        TypeError: If a value has no JSON counterpart

    """
    if obj is None:
        return NULL
    if isinstance(obj, bool):
        return TRUE if obj else FALSE
    if isinstance(obj, int):
        return JsonInt(value=obj)
    if isinstance(obj, float):
        return JsonFloat(value=obj)
    if isinstance(obj, str):
        return JsonStr(value=obj)
    if isinstance(obj, list | tuple):
        return JsonArray(items=tuple(from_python(item) for item in obj))
    if isinstance(obj, dict):
        return JsonObject(members={str(k): from_python(v) for k, v in obj.items()})
    msg = f"Cannot convert {type(obj).__name__} to a JSON value"
    raise TypeError(msg)
