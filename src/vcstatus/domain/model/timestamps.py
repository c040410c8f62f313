"""Timestamp parsing for record ordering.

Record timestamps come from user-writable storage, so parsing never raises.
Unparseable input becomes an ``InvalidTimestamp``: a non-null value that is
never later than anything, including another ``InvalidTimestamp``.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime


@dataclass(frozen=True, slots=True)
class InvalidTimestamp:
    raw: str

    def __str__(self) -> str:
        return f"Invalid timestamp ({self.raw!r})"


type Timestamp = datetime | InvalidTimestamp


def parse_timestamp(raw: str) -> Timestamp:
    """Parse an ISO-8601 string into an aware UTC datetime.

    A trailing ``Z`` is accepted and naive values (including date-only strings)
    are read as UTC.
    """

    normalized = raw.strip()
    if normalized.endswith(("Z", "z")):
        normalized = normalized[:-1] + "+00:00"
    try:
        value = datetime.fromisoformat(normalized)
    except ValueError:
        return InvalidTimestamp(raw)
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def is_later(candidate: Timestamp, current: Timestamp) -> bool:
    """Strict ``candidate > current``; false whenever either side is invalid."""

    if isinstance(candidate, InvalidTimestamp) or isinstance(current, InvalidTimestamp):
        return False
    return candidate > current


def format_timestamp(value: datetime) -> str:
    """Render ``value`` as UTC ISO-8601 with millisecond precision and a ``Z`` suffix."""

    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value.astimezone(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


__all__ = ["InvalidTimestamp", "Timestamp", "format_timestamp", "is_later", "parse_timestamp"]
