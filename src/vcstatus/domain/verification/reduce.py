"""Fold verification records into one status per category.

For every category the winner is the valid record with the latest
``created_at``. The comparison is strict, so among records with identical
timestamps the first one in input order wins. Timestamps that fail to parse
never win a comparison in either direction: a record with such a timestamp
cannot displace a winner, and once it is the winner nothing displaces it.

The result always holds one entry per registered category; categories
without a winner get ``CredentialStatus.empty()``.
"""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from vcstatus.domain.model import CredentialStatus, is_later, parse_timestamp

from .classify import classify_record
from .registry import DEFAULT_REGISTRY
from .validate import is_valid_record

if TYPE_CHECKING:
    from collections.abc import Iterable

    from vcstatus.domain.model import (
        VerificationCategory,
        VerificationRecord,
        VerificationStatusMap,
    )

    from .registry import CategoryRegistry

log = getLogger(__name__)


def status_from_record(record: VerificationRecord) -> CredentialStatus:
    """Build the verified status for a record that already passed validation."""

    verified_at = parse_timestamp(record.created_at) if record.created_at else None
    expiration = record.credential.expiration_date
    return CredentialStatus(
        verified=True,
        verified_at=verified_at,
        expiration_date=parse_timestamp(expiration) if expiration else None,
        record=record,
    )


def empty_status_map(*, registry: CategoryRegistry = DEFAULT_REGISTRY) -> VerificationStatusMap:
    return {category: CredentialStatus.empty() for category in registry.categories}


def reduce_records(
    records: Iterable[VerificationRecord],
    *,
    registry: CategoryRegistry = DEFAULT_REGISTRY,
    subject: str | None = None,
) -> VerificationStatusMap:
    """Reduce ``records`` to a total ``{category: CredentialStatus}`` map.

    When ``subject`` is given, records attesting a different subject are
    excluded so a store cannot inject another identity's attestations.
    """

    winners: dict[VerificationCategory, CredentialStatus] = {}
    for record in records:
        category = classify_record(record, registry=registry)
        if category is None or not is_valid_record(record):
            continue
        if subject is not None and record.subject != subject:
            log.warning(
                "Ignoring %s record %s: subject %r does not match %r",
                category,
                record.rkey,
                record.subject,
                subject,
            )
            continue

        candidate = status_from_record(record)
        current = winners.get(category)
        if current is None or _displaces(candidate, current):
            winners[category] = candidate

    return {
        category: winners.get(category) or CredentialStatus.empty()
        for category in registry.categories
    }


def _displaces(candidate: CredentialStatus, current: CredentialStatus) -> bool:
    if candidate.verified_at is None:
        return False
    if current.verified_at is None:
        return True
    return is_later(candidate.verified_at, current.verified_at)
