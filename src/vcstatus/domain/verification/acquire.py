"""Read verification records from the owner's repository store."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from vcstatus.domain.model import VerificationRecord, rkey_from_uri
from vcstatus.domain.ports.repository import VERIFICATION_COLLECTION

if TYPE_CHECKING:
    from vcstatus.domain.ports.repository import RecordStore, StoreEntry

log = getLogger(__name__)


def record_from_store_entry(entry: StoreEntry) -> VerificationRecord:
    """Normalise a store envelope, deriving ``rkey`` from the record URI."""

    return VerificationRecord.from_value(
        entry.value,
        uri=entry.uri,
        cid=entry.cid,
        rkey=rkey_from_uri(entry.uri),
    )


async def list_verification_records(store: RecordStore, owner: str) -> list[VerificationRecord]:
    entries = await store.list_records(owner, VERIFICATION_COLLECTION)
    records = [record_from_store_entry(entry) for entry in entries]
    log.debug(
        "Fetched %s verification records for %s: %s",
        len(records),
        owner,
        [(record.rkey, record.created_at) for record in records],
    )
    return records


async def get_verification_record(
    store: RecordStore,
    owner: str,
    rkey: str,
) -> VerificationRecord | None:
    entry = await store.get_record(owner, VERIFICATION_COLLECTION, rkey)
    if entry is None:
        return None
    return VerificationRecord.from_value(entry.value, uri=entry.uri, cid=entry.cid, rkey=rkey)
