"""Type adapters: user-supplied converters that override default coercion.

An adapter converts exactly one type to a JSON-friendly "wire" value (usually a
string or number) and back. Adapters are looked up by exact type, either from
the context registry or from a per-field or per-class override.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from pathlib import Path, PosixPath, PurePath, PurePosixPath, PureWindowsPath, WindowsPath
from typing import TYPE_CHECKING, Any
from uuid import UUID

from typejson.dates import DEFAULT_DATE_FORMAT, format_datetime, parse_datetime
from typejson.errors import ConversionError

if TYPE_CHECKING:
    from collections.abc import Callable

_CANONICAL_UUID = re.compile(
    r"[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}",
)
_BARE_UUID = re.compile(r"[0-9a-f]{32}")


@dataclass(frozen=True)
class TypeAdapter[T]:
    """Named pair of conversion functions for one type.

    Attributes:
        type: The type this adapter handles (matched exactly, never by subclass)
        serialize: T → wire value; the result is serialized recursively
        deserialize: wire value (natural Python form of the JSON) → T
        name: Label used in error messages

    Example:
        TypeAdapter(
            Money,
            serialize=lambda m: f"{m.amount} {m.currency}",
            deserialize=Money.parse,
        )

    """

    type: type[T]
    serialize: Callable[[T], Any]
    deserialize: Callable[[Any], T]
    name: str = ""

    def __post_init__(self) -> None:
        if not self.name:
            object.__setattr__(self, "name", f"{self.type.__name__}Adapter")


def _strip_quotes(text: str) -> str:
    """Remove one pair of surrounding double quotes, if present."""
    if len(text) >= 2 and text.startswith('"') and text.endswith('"'):
        return text[1:-1]
    return text


def resolve_enum[E: Enum](enum_cls: type[E], text: str) -> E:
    """Find an enum member by name, leniently.

    Tries, in order: the exact name, the name with one pair of surrounding
    double quotes removed, then a case-insensitive match.

    Raises:
        ConversionError: If no member matches

    """
    members = enum_cls.__members__
    if text in members:
        return members[text]
    unquoted = _strip_quotes(text)
    if unquoted in members:
        return members[unquoted]
    folded = text.casefold()
    for name, member in members.items():
        if name.casefold() == folded:
            return member
    msg = f"Invalid enum value {text!r} for enum {enum_cls.__name__}"
    raise ConversionError(msg)


def parse_uuid(text: str) -> UUID:
    """Parse a UUID, tolerating common formatting variations.

    Accepts surrounding quotes and braces, embedded whitespace, upper case and
    a missing set of hyphens. Anything else must be in canonical
    8-4-4-4-12 form.

    Raises:
        ConversionError: If the text is not a UUID after normalization

    """
    candidate = _strip_quotes(text.strip())
    candidate = "".join(candidate.split()).lower().replace("{", "").replace("}", "")
    if _BARE_UUID.fullmatch(candidate) or _CANONICAL_UUID.fullmatch(candidate):
        return UUID(candidate)
    msg = f"Invalid UUID: {text!r}"
    raise ConversionError(msg)


def _require_str(value: Any, what: str) -> str:
    if not isinstance(value, str):
        msg = f"Expected a string for {what}, got {type(value).__name__}"
        raise ConversionError(msg)
    return value


def _read_uuid(value: Any) -> UUID | None:
    text = _require_str(value, "UUID")
    if not text.strip():
        return None
    return parse_uuid(text)


UUID_ADAPTER: TypeAdapter[UUID] = TypeAdapter(
    UUID,
    serialize=str,
    deserialize=_read_uuid,
    name="UUIDAdapter",
)


def path_adapter[P: PurePath](cls: type[P]) -> TypeAdapter[P]:
    """Adapter writing a path as its string form."""
    return TypeAdapter(
        cls,
        serialize=str,
        deserialize=lambda value: cls(_require_str(value, cls.__name__)),
    )


def datetime_adapter(pattern: str = DEFAULT_DATE_FORMAT) -> TypeAdapter[datetime]:
    """Adapter formatting datetimes with a fixed pattern.

    Useful as a field override when one field needs a pattern that differs
    from the context's.
    """
    return TypeAdapter(
        datetime,
        serialize=lambda value: format_datetime(value, pattern),
        deserialize=lambda value: parse_datetime(_require_str(value, "datetime"), pattern),
        name=f"DatetimeAdapter({pattern!r})",
    )


def enum_adapter[E: Enum](enum_cls: type[E]) -> TypeAdapter[E]:
    """Adapter writing enum members by name, read back with `resolve_enum`."""
    return TypeAdapter(
        enum_cls,
        serialize=lambda member: member.name,
        deserialize=lambda value: resolve_enum(enum_cls, str(value)),
    )


def builtin_adapters() -> dict[type, TypeAdapter[Any]]:
    """Adapters every context starts with."""
    adapters: dict[type, TypeAdapter[Any]] = {UUID: UUID_ADAPTER}
    for cls in (Path, PosixPath, WindowsPath, PurePath, PurePosixPath, PureWindowsPath):
        adapters[cls] = path_adapter(cls)
    return adapters
