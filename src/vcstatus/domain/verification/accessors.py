"""Read-only projections over a reduced status map."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from vcstatus.domain.model import CredentialStatus, VerificationRecord, VerificationStats

if TYPE_CHECKING:
    from vcstatus.domain.model import VerificationCategory, VerificationStatusMap


def is_category_verified(
    status_map: VerificationStatusMap,
    category: VerificationCategory,
) -> bool:
    return status_map[category].verified


def verification_stats(status_map: VerificationStatusMap) -> VerificationStats:
    verified = tuple(category for category, status in status_map.items() if status.verified)
    return VerificationStats(
        has_any=bool(verified),
        count=len(verified),
        verified_categories=verified,
    )


def most_recent_verification_date(status_map: VerificationStatusMap) -> datetime | None:
    """Return the latest ``verified_at`` across categories.

    Unparseable timestamps are not comparable and are skipped.
    """

    dates = [
        status.verified_at
        for status in status_map.values()
        if isinstance(status.verified_at, datetime)
    ]
    return max(dates, default=None)


def screen_name_for(source: object) -> str | None:
    """Return the screen name stored on a record or a status's winning record.

    Accepts a ``VerificationRecord`` or a ``CredentialStatus``; returns ``None``
    for anything else, or when no screen name is stored.
    """

    record = source.record if isinstance(source, CredentialStatus) else source
    if not isinstance(record, VerificationRecord):
        return None
    return getattr(record.credential, "screen_name", None) or None
