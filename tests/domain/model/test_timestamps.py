from __future__ import annotations

from datetime import UTC, datetime, timedelta, timezone

import pytest

from vcstatus.domain.model import InvalidTimestamp, format_timestamp, is_later, parse_timestamp


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("2024-01-15T10:30:00Z", datetime(2024, 1, 15, 10, 30, tzinfo=UTC)),
        ("2024-01-15T10:30:00.250z", datetime(2024, 1, 15, 10, 30, 0, 250000, tzinfo=UTC)),
        ("2024-01-15T12:30:00+02:00", datetime(2024, 1, 15, 10, 30, tzinfo=UTC)),
        ("2024-01-15T10:30:00", datetime(2024, 1, 15, 10, 30, tzinfo=UTC)),
        ("2024-01-15", datetime(2024, 1, 15, tzinfo=UTC)),
    ],
)
def test_parse_timestamp(raw: str, expected: datetime) -> None:
    parsed = parse_timestamp(raw)

    assert parsed == expected
    assert isinstance(parsed, datetime)
    assert parsed.tzinfo is UTC


@pytest.mark.parametrize("raw", ["", "tomorrow", "2024-13-01T00:00:00Z", "15/01/2024"])
def test_parse_timestamp_never_raises(raw: str) -> None:
    assert parse_timestamp(raw) == InvalidTimestamp(raw)


def test_is_later_is_strict() -> None:
    earlier = datetime(2024, 1, 1, tzinfo=UTC)
    later = earlier + timedelta(seconds=1)

    assert is_later(later, earlier)
    assert not is_later(earlier, later)
    assert not is_later(earlier, earlier)


def test_is_later_with_invalid_timestamps() -> None:
    valid = datetime(2024, 1, 1, tzinfo=UTC)
    invalid = InvalidTimestamp("nope")

    assert not is_later(invalid, valid)
    assert not is_later(valid, invalid)
    assert not is_later(invalid, InvalidTimestamp("other"))


def test_format_timestamp_uses_millisecond_utc() -> None:
    value = datetime(2024, 3, 1, 14, 0, 0, 987654, tzinfo=timezone(timedelta(hours=2)))

    assert format_timestamp(value) == "2024-03-01T12:00:00.987Z"
    assert format_timestamp(datetime(2024, 3, 1)) == "2024-03-01T00:00:00.000Z"
