"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


class VerificationCategory(StrEnum):
    """Kinds of verification an attestation record can carry."""

    AGE = "age"
    ACCOUNT = "account"


class ConnectionState(StrEnum):
    INVITATION = "invitation"
    REQUEST = "request"
    RESPONSE = "response"
    ACTIVE = "active"
    ERROR = "error"


class ProofState(StrEnum):
    REQUEST_SENT = "request-sent"
    REQUEST_RECEIVED = "request-received"
    PRESENTATION_SENT = "presentation-sent"
    PRESENTATION_RECEIVED = "presentation-received"
    VERIFIED = "verified"
    DONE = "done"
    ABANDONED = "abandoned"


CONNECTION_SUCCESS_STATES = frozenset({ConnectionState.ACTIVE})
CONNECTION_TERMINAL_STATES = frozenset({ConnectionState.ACTIVE, ConnectionState.ERROR})
PROOF_SUCCESS_STATES = frozenset({ProofState.VERIFIED, ProofState.DONE})
PROOF_TERMINAL_STATES = frozenset({ProofState.VERIFIED, ProofState.DONE, ProofState.ABANDONED})
