"""Structural validity checks for verification records."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from vcstatus.domain.model import VerificationRecord


def is_valid_record(record: VerificationRecord) -> bool:
    """Return whether ``record`` may take part in status reduction.

    A record qualifies when it is persisted (has a record key), carries
    cryptographic evidence (credential hash) and has a creation timestamp.
    The timestamp format is not checked here.
    """

    return bool(record.rkey and record.credential.hash and record.created_at)
