"""Map a record's credential type tags to a verification category."""

from __future__ import annotations

from typing import TYPE_CHECKING

from .registry import DEFAULT_REGISTRY

if TYPE_CHECKING:
    from vcstatus.domain.model import VerificationCategory, VerificationRecord

    from .registry import CategoryRegistry


def classify_record(
    record: VerificationRecord,
    *,
    registry: CategoryRegistry = DEFAULT_REGISTRY,
) -> VerificationCategory | None:
    tags = record.credential.type
    if tags is None:
        return None
    return registry.classify(tags)
