from __future__ import annotations

import asyncio

from vcstatus.domain.model import VerificationCategory
from vcstatus.domain.ports import StoreEntry
from vcstatus.domain.verification import (
    classify_record,
    get_verification_record,
    list_verification_records,
    record_from_store_entry,
)

from tests.helpers.verification import OWNER_DID, FakeRecordStore, make_record, store_entry

ACCOUNT = VerificationCategory.ACCOUNT


def test_record_from_store_entry_takes_rkey_from_uri() -> None:
    entry = store_entry(make_record(ACCOUNT, rkey="3kacct", screen_name="owner_x"))

    record = record_from_store_entry(entry)

    assert record.rkey == "3kacct"
    assert record.uri == entry.uri
    assert record.cid == "bafyrecord"
    assert record.credential.screen_name == "owner_x"
    assert classify_record(record) is ACCOUNT


def test_record_from_store_entry_tolerates_garbage_value() -> None:
    entry = StoreEntry(
        uri=f"at://{OWNER_DID}/app.bsky.graph.verification/3kbad",
        cid="bafybad",
        value="not a record",
    )

    record = record_from_store_entry(entry)

    assert record.rkey == "3kbad"
    assert record.credential.hash == ""


def test_list_verification_records_only_reads_owner_collection() -> None:
    mine = make_record(rkey="3kmine")
    theirs = make_record(rkey="3ktheirs", subject="did:plc:someoneelse")
    store = FakeRecordStore([store_entry(mine), store_entry(theirs)])

    records = asyncio.run(list_verification_records(store, OWNER_DID))

    assert [record.rkey for record in records] == ["3kmine"]


def test_get_verification_record_missing_returns_none() -> None:
    store = FakeRecordStore([store_entry(make_record(rkey="3kmine"))])

    assert asyncio.run(get_verification_record(store, OWNER_DID, "3kother")) is None
    found = asyncio.run(get_verification_record(store, OWNER_DID, "3kmine"))
    assert found is not None
    assert found.rkey == "3kmine"
