"""Public domain model surface."""

from __future__ import annotations

from vcstatus.domain.model.enums import (
    CONNECTION_SUCCESS_STATES,
    CONNECTION_TERMINAL_STATES,
    PROOF_SUCCESS_STATES,
    PROOF_TERMINAL_STATES,
    ConnectionState,
    ProofState,
    VerificationCategory,
)
from vcstatus.domain.model.record import (
    CommitRef,
    CredentialData,
    VerificationRecord,
    rkey_from_uri,
)
from vcstatus.domain.model.status import (
    CredentialStatus,
    VerificationStats,
    VerificationStatusMap,
)
from vcstatus.domain.model.timestamps import (
    InvalidTimestamp,
    Timestamp,
    format_timestamp,
    is_later,
    parse_timestamp,
)

__all__ = [
    "CONNECTION_SUCCESS_STATES",
    "CONNECTION_TERMINAL_STATES",
    "PROOF_SUCCESS_STATES",
    "PROOF_TERMINAL_STATES",
    "CommitRef",
    "ConnectionState",
    "CredentialData",
    "CredentialStatus",
    "InvalidTimestamp",
    "ProofState",
    "Timestamp",
    "VerificationCategory",
    "VerificationRecord",
    "VerificationStats",
    "VerificationStatusMap",
    "format_timestamp",
    "is_later",
    "parse_timestamp",
    "rkey_from_uri",
]
