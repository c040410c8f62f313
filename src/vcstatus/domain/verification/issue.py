"""Build and persist verification records after a successful proof exchange.

Records are written to the owner's repository collection and returned with
the store-assigned ``uri``, ``cid``, ``rkey`` and ``commit`` attached.
"""

from __future__ import annotations

import hashlib
from dataclasses import dataclass
from datetime import UTC, datetime
from logging import getLogger
from typing import TYPE_CHECKING, cast

from vcstatus.domain.model import CredentialData, VerificationRecord, format_timestamp
from vcstatus.domain.ports.repository import VERIFICATION_COLLECTION

from .errors import IssuanceError, MissingProofError
from .registry import DEFAULT_REGISTRY

if TYPE_CHECKING:
    from collections.abc import Callable

    from vcstatus.domain.model import VerificationCategory
    from vcstatus.domain.ports.repository import RecordStore

    from .registry import CategoryRegistry

log = getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(UTC)


@dataclass(frozen=True, slots=True, kw_only=True)
class RecordOwner:
    """Identity of the account the record attests to."""

    did: str
    handle: str
    display_name: str = ""


def presentation_blob(proof: object) -> str | None:
    """Return the base64 presentation attached to a proof record, if any."""

    if not isinstance(proof, dict):
        return None
    pres = cast("dict[str, object]", proof).get("pres")
    if not isinstance(pres, dict):
        return None
    attachments = cast("dict[str, object]", pres).get("presentations~attach")
    if not isinstance(attachments, list) or not attachments:
        return None
    first = cast("list[object]", attachments)[0]
    if not isinstance(first, dict):
        return None
    data = cast("dict[str, object]", first).get("data")
    if not isinstance(data, dict):
        return None
    blob = cast("dict[str, object]", data).get("base64")
    return blob if isinstance(blob, str) and blob else None


def proof_hash(proof: object) -> str:
    """SHA-256 hex digest of the presentation blob."""

    blob = presentation_blob(proof)
    if blob is None:
        raise MissingProofError("No cryptographic proof found in the verification record")
    return hashlib.sha256(blob.encode("utf-8")).hexdigest()


def proof_record_url(verifier_base_url: str, pres_ex_id: str) -> str:
    return f"{verifier_base_url.rstrip('/')}/present-proof-2.0/records/{pres_ex_id}"


def record_view_url(service_url: str, owner_did: str, rkey: str) -> str:
    """Direct store URL for viewing one verification record."""

    base = service_url.rstrip("/")
    return (
        f"{base}/xrpc/com.atproto.repo.getRecord"
        f"?repo={owner_did}&collection={VERIFICATION_COLLECTION}&rkey={rkey}"
    )


def build_verification_record(
    *,
    owner: RecordOwner,
    category: VerificationCategory,
    pres_ex_id: str,
    proof: object,
    verifier_base_url: str,
    registry: CategoryRegistry = DEFAULT_REGISTRY,
    clock: Callable[[], datetime] = _utcnow,
) -> VerificationRecord:
    """Build an unsaved record for ``category`` from a completed proof exchange."""

    spec = registry.get(category)
    digest = proof_hash(proof)
    now = clock()
    return VerificationRecord(
        handle=owner.handle,
        display_name=owner.display_name,
        subject=owner.did,
        assertion=spec.assertion,
        created_at=format_timestamp(now),
        credential=CredentialData(
            uri=proof_record_url(verifier_base_url, pres_ex_id),
            hash=digest,
            type=spec.types,
            purpose=spec.purposes,
            expiration_date=spec.expiration(proof, now),
            screen_name=spec.screen_name(proof),
        ),
    )


async def issue_verification_record(
    store: RecordStore,
    *,
    owner: RecordOwner,
    category: VerificationCategory,
    pres_ex_id: str,
    proof: object,
    verifier_base_url: str,
    registry: CategoryRegistry = DEFAULT_REGISTRY,
    clock: Callable[[], datetime] = _utcnow,
) -> VerificationRecord:
    """Build a record, write it to ``store`` and return it with store metadata."""

    if not owner.did:
        raise IssuanceError("No authenticated user found")
    if not owner.handle:
        raise IssuanceError("User handle not available")

    record = build_verification_record(
        owner=owner,
        category=category,
        pres_ex_id=pres_ex_id,
        proof=proof,
        verifier_base_url=verifier_base_url,
        registry=registry,
        clock=clock,
    )

    try:
        result = await store.create_record(owner.did, VERIFICATION_COLLECTION, record.to_value())
    except Exception as exc:
        log.exception(
            "Failed to create %s verification record for %s (pres_ex_id=%s)",
            category,
            owner.did,
            pres_ex_id,
        )
        raise IssuanceError(f"Failed to create verification record: {exc}") from exc

    saved = record.with_store_metadata(uri=result.uri, cid=result.cid, commit=result.commit)
    log.info(
        "Created %s verification record: uri=%s, rkey=%s, hash=%s..., expires=%s",
        category,
        saved.uri,
        saved.rkey,
        saved.credential.hash[:8],
        saved.credential.expiration_date,
    )
    return saved


__all__ = [
    "RecordOwner",
    "build_verification_record",
    "issue_verification_record",
    "presentation_blob",
    "proof_hash",
    "proof_record_url",
    "record_view_url",
]
