"""Domain port definitions for adapters."""

from __future__ import annotations

from .cache import CONNECTIONS_NAMESPACE, PROOF_REQUESTS_NAMESPACE, CredentialCache
from .repository import VERIFICATION_COLLECTION, CreateRecordResult, RecordStore, StoreEntry
from .verifier import Connection, ConnectionInvitation, ProofExchange, VerifierService

__all__ = [
    "CONNECTIONS_NAMESPACE",
    "PROOF_REQUESTS_NAMESPACE",
    "VERIFICATION_COLLECTION",
    "Connection",
    "ConnectionInvitation",
    "CreateRecordResult",
    "CredentialCache",
    "ProofExchange",
    "RecordStore",
    "StoreEntry",
    "VerifierService",
]
