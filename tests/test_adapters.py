"""Tests for typejson.adapters and typejson.dates modules."""

from datetime import UTC, date, datetime, time
from enum import Enum
from pathlib import PurePosixPath
from uuid import UUID

import pytest

from typejson.adapters import (
    UUID_ADAPTER,
    TypeAdapter,
    builtin_adapters,
    datetime_adapter,
    enum_adapter,
    parse_uuid,
    path_adapter,
    resolve_enum,
)
from typejson.dates import (
    DEFAULT_DATE_FORMAT,
    format_date,
    format_datetime,
    parse_date,
    parse_datetime,
    parse_time,
)
from typejson.errors import ConversionError

SAMPLE_UUID = UUID("123e4567-e89b-12d3-a456-426614174000")


class Status(Enum):
    ACTIVE = "a"
    on_hold = "h"


class TestTypeAdapter:
    """Test the adapter record."""

    def test_default_name(self) -> None:
        """Test that the name derives from the adapted type."""
        adapter = TypeAdapter(complex, serialize=str, deserialize=complex)
        assert adapter.name == "complexAdapter"

    def test_explicit_name(self) -> None:
        """Test that an explicit name is kept."""
        assert UUID_ADAPTER.name == "UUIDAdapter"

    def test_builtin_registry(self) -> None:
        """Test the adapters every context starts with."""
        adapters = builtin_adapters()
        assert adapters[UUID] is UUID_ADAPTER
        assert PurePosixPath in adapters


class TestEnumResolution:
    """Test lenient enum member lookup."""

    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("ACTIVE", Status.ACTIVE),
            ('"ACTIVE"', Status.ACTIVE),
            ("active", Status.ACTIVE),
            ("ON_HOLD", Status.on_hold),
        ],
    )
    def test_lenient_lookup(self, text: str, expected: Status) -> None:
        """Test exact, quoted and case-insensitive names."""
        assert resolve_enum(Status, text) is expected

    def test_value_is_not_a_name(self) -> None:
        """Test that enum values are not accepted in place of names."""
        with pytest.raises(ConversionError, match="Invalid enum value"):
            resolve_enum(Status, "a")

    def test_enum_adapter(self) -> None:
        """Test the enum adapter in both directions."""
        adapter = enum_adapter(Status)
        assert adapter.serialize(Status.on_hold) == "on_hold"
        assert adapter.deserialize("Active") is Status.ACTIVE


class TestUuid:
    """Test lenient UUID parsing."""

    @pytest.mark.parametrize(
        "text",
        [
            "123e4567-e89b-12d3-a456-426614174000",
            "123E4567-E89B-12D3-A456-426614174000",
            "{123e4567-e89b-12d3-a456-426614174000}",
            '"123e4567-e89b-12d3-a456-426614174000"',
            " 123e4567-e89b-12d3-a456-426614174000\n",
            "123e4567e89b12d3a456426614174000",
        ],
    )
    def test_accepted_forms(self, text: str) -> None:
        """Test tolerated formatting variations."""
        assert parse_uuid(text) == SAMPLE_UUID

    @pytest.mark.parametrize("text", ["", "not-a-uuid", "123e4567-e89b-12d3-a456"])
    def test_rejected_forms(self, text: str) -> None:
        """Test that non-UUID text fails."""
        with pytest.raises(ConversionError):
            parse_uuid(text)

    def test_adapter_serializes_lowercase(self) -> None:
        """Test the canonical written form."""
        assert UUID_ADAPTER.serialize(SAMPLE_UUID) == "123e4567-e89b-12d3-a456-426614174000"

    def test_adapter_requires_string(self) -> None:
        """Test that a number is not a UUID."""
        with pytest.raises(ConversionError, match="Expected a string"):
            UUID_ADAPTER.deserialize(5)

    @pytest.mark.parametrize("text", ["", "  "])
    def test_adapter_reads_blank_as_none(self, text: str) -> None:
        """Test that an empty UUID string reads as None."""
        assert UUID_ADAPTER.deserialize(text) is None


class TestPathAdapter:
    """Test the path adapter."""

    def test_round_trip(self) -> None:
        """Test writing and reading a path."""
        adapter = path_adapter(PurePosixPath)
        assert adapter.serialize(PurePosixPath("/tmp/x")) == "/tmp/x"
        assert adapter.deserialize("/tmp/x") == PurePosixPath("/tmp/x")


class TestDates:
    """Test stateless date formatting."""

    def test_default_pattern_aware(self) -> None:
        """Test an aware datetime with the default pattern."""
        value = datetime(2024, 3, 5, 14, 30, 15, 250000, tzinfo=UTC)
        text = format_datetime(value)
        assert text == "2024-03-05T14:30:15.250000+0000"
        assert parse_datetime(text) == value

    def test_default_pattern_naive(self) -> None:
        """Test that a naive datetime reads back naive."""
        value = datetime(2024, 3, 5, 14, 30, 15, 250000)  # noqa: DTZ001
        text = format_datetime(value, DEFAULT_DATE_FORMAT)
        assert text == "2024-03-05T14:30:15.250000"
        assert parse_datetime(text) == value

    def test_custom_pattern(self) -> None:
        """Test a caller supplied pattern."""
        value = datetime(2024, 1, 2)  # noqa: DTZ001
        assert format_datetime(value, "%d/%m/%Y") == "02/01/2024"
        assert parse_datetime("02/01/2024", "%d/%m/%Y") == value

    def test_bad_datetime(self) -> None:
        """Test that unparseable text is a ConversionError."""
        with pytest.raises(ConversionError, match="Cannot parse datetime"):
            parse_datetime("yesterday")

    def test_date_and_time_iso(self) -> None:
        """Test ISO forms for date and time."""
        assert format_date(date(2024, 2, 29)) == "2024-02-29"
        assert parse_date("2024-02-29") == date(2024, 2, 29)
        assert parse_time("08:15:00") == time(8, 15)
        with pytest.raises(ConversionError):
            parse_date("2023-02-29")

    def test_datetime_adapter(self) -> None:
        """Test a fixed-pattern datetime adapter."""
        adapter = datetime_adapter("%Y-%m-%d")
        assert adapter.serialize(datetime(2020, 5, 17)) == "2020-05-17"  # noqa: DTZ001
        assert adapter.deserialize("2020-05-17") == datetime(2020, 5, 17)  # noqa: DTZ001
