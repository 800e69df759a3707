"""Error types raised while converting between JSON text and typed objects.

Four internal kinds describe what went wrong. They never escape the public
facade directly: `typejson.serialization` re-raises them as either a
`SerializationError` or a `DeserializationError` chained to the original.
"""

from __future__ import annotations

# Maximum number of characters of offending input quoted in a message
_MAX_FOUND_SHOWN = 20


class MappingError(Exception):
    """Base class for every conversion failure.

    Attributes:
        path: JSON path of the offending value (e.g. "$.items[2].name"),
            or None when the failure is not tied to a location.

    """

    def __init__(self, message: str, *, path: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.path = path

    def __str__(self) -> str:
        if self.path is None:
            return self.message
        return f"{self.message} (at {self.path})"


class JsonSyntaxError(MappingError):
    """Malformed JSON text.

    Always carries the character offset of the problem along with what the
    parser expected and what it found instead.
    """

    def __init__(self, position: int, expected: str, found: str) -> None:
        if len(found) > _MAX_FOUND_SHOWN:
            found = found[:_MAX_FOUND_SHOWN] + "..."
        super().__init__(f"Expected {expected} but found {found} at position {position}")
        self.position = position
        self.expected = expected
        self.found = found


class TypeMismatchError(MappingError):
    """The JSON value's shape cannot satisfy the requested target shape."""


class ConversionError(MappingError):
    """A value of compatible shape cannot be coerced to the concrete type."""


class ConstructionError(MappingError):
    """The target type cannot be instantiated or a field cannot be assigned."""


class SerializationError(Exception):
    """Raised by the public API when an object cannot be written as JSON."""


class DeserializationError(Exception):
    """Raised by the public API when JSON cannot be read into a typed object."""
