"""Verification-record reconciliation core.

Flow:
1) validate records structurally (``validate``)
2) classify each record into one category (``classify`` via ``registry``)
3) reduce records to one status per category, latest record wins (``reduce``)
4) read derived views from the status map (``accessors``)

``issue`` is the producer side: it turns a completed proof exchange into a
new record in the owner's repository store.
"""

from __future__ import annotations

from .accessors import (
    is_category_verified,
    most_recent_verification_date,
    screen_name_for,
    verification_stats,
)
from .acquire import (
    get_verification_record,
    list_verification_records,
    record_from_store_entry,
)
from .classify import classify_record
from .errors import (
    IssuanceError,
    MissingProofError,
    UnsupportedCategoryError,
    VerificationError,
)
from .issue import (
    RecordOwner,
    build_verification_record,
    issue_verification_record,
    record_view_url,
)
from .reduce import empty_status_map, reduce_records, status_from_record
from .registry import (
    ACCOUNT_VERIFICATION,
    AGE_VERIFICATION,
    DEFAULT_REGISTRY,
    CategoryRegistry,
    CategorySpec,
)
from .validate import is_valid_record

__all__ = [
    "ACCOUNT_VERIFICATION",
    "AGE_VERIFICATION",
    "DEFAULT_REGISTRY",
    "CategoryRegistry",
    "CategorySpec",
    "IssuanceError",
    "MissingProofError",
    "RecordOwner",
    "UnsupportedCategoryError",
    "VerificationError",
    "build_verification_record",
    "classify_record",
    "empty_status_map",
    "get_verification_record",
    "is_category_verified",
    "is_valid_record",
    "issue_verification_record",
    "list_verification_records",
    "most_recent_verification_date",
    "record_from_store_entry",
    "record_view_url",
    "reduce_records",
    "screen_name_for",
    "status_from_record",
    "verification_stats",
]
