"""Derived per-category status values."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .enums import VerificationCategory
    from .record import VerificationRecord
    from .timestamps import Timestamp


@dataclass(frozen=True, slots=True, kw_only=True)
class CredentialStatus:
    """Trust status of one category, derived from its winning record."""

    verified: bool
    verified_at: Timestamp | None = None
    expiration_date: Timestamp | None = None
    record: VerificationRecord | None = None

    @classmethod
    def empty(cls) -> CredentialStatus:
        return cls(verified=False)


type VerificationStatusMap = dict[VerificationCategory, CredentialStatus]


@dataclass(frozen=True, slots=True, kw_only=True)
class VerificationStats:
    has_any: bool
    count: int
    verified_categories: tuple[VerificationCategory, ...]
