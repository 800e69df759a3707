"""Stateless date and time formatting.

Every function takes its pattern as an argument; there is no shared formatter
object, so contexts can be used from several threads without locking.
Patterns use `strftime`/`strptime` directives.
"""

from __future__ import annotations

from datetime import date, datetime, time

from typejson.errors import ConversionError

DEFAULT_DATE_FORMAT = "%Y-%m-%dT%H:%M:%S.%f%z"


def format_datetime(value: datetime, pattern: str = DEFAULT_DATE_FORMAT) -> str:
    """Format a datetime; a naive value renders `%z` as an empty string."""
    return value.strftime(pattern)


def parse_datetime(text: str, pattern: str = DEFAULT_DATE_FORMAT) -> datetime:
    """Parse a datetime written with `pattern`.

    When the pattern carries a `%z` offset, text without one is also accepted
    and yields a naive datetime, so naive values written with the same
    pattern read back unchanged.

    Raises:
        ConversionError: If the text does not match the pattern

    """
    try:
        return datetime.strptime(text, pattern)  # noqa: DTZ007
    except ValueError as e:
        if "%z" in pattern:
            try:
                return datetime.strptime(text, pattern.replace("%z", ""))  # noqa: DTZ007
            except ValueError:
                pass
        msg = f"Cannot parse datetime {text!r} with pattern {pattern!r}"
        raise ConversionError(msg) from e


def format_date(value: date, pattern: str | None = None) -> str:
    """Format a date as ISO 8601, or with `pattern` when given."""
    if pattern is None:
        return value.isoformat()
    return value.strftime(pattern)


def parse_date(text: str, pattern: str | None = None) -> date:
    """Parse an ISO 8601 date, or a date written with `pattern`.

    Raises:
        ConversionError: If the text is not a valid date

    """
    try:
        if pattern is None:
            return date.fromisoformat(text)
        return datetime.strptime(text, pattern).date()  # noqa: DTZ007
    except ValueError as e:
        msg = f"Cannot parse date {text!r}"
        raise ConversionError(msg) from e


def format_time(value: time, pattern: str | None = None) -> str:
    """Format a time as ISO 8601, or with `pattern` when given."""
    if pattern is None:
        return value.isoformat()
    return value.strftime(pattern)


def parse_time(text: str, pattern: str | None = None) -> time:
    """Parse an ISO 8601 time, or a time written with `pattern`.

    Raises:
        ConversionError: If the text is not a valid time

    """
    try:
        if pattern is None:
            return time.fromisoformat(text)
        parsed = datetime.strptime(text, pattern)  # noqa: DTZ007
        return parsed.timetz()
    except ValueError as e:
        msg = f"Cannot parse time {text!r}"
        raise ConversionError(msg) from e
