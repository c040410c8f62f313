"""Port for the owner's repository record store."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Mapping

    from vcstatus.domain.model import CommitRef

VERIFICATION_COLLECTION = "app.bsky.graph.verification"


@dataclass(frozen=True, slots=True)
class StoreEntry:
    """One record envelope as returned by the store."""

    uri: str
    cid: str | None
    value: Mapping[str, object] = field(default_factory=dict[str, object])


@dataclass(frozen=True, slots=True)
class CreateRecordResult:
    uri: str
    cid: str | None = None
    commit: CommitRef | None = None


@runtime_checkable
class RecordStore(Protocol):
    """Async record store scoped by repository (owner identity) and collection."""

    async def create_record(
        self,
        repo: str,
        collection: str,
        record: Mapping[str, object],
    ) -> CreateRecordResult: ...

    async def list_records(self, repo: str, collection: str) -> list[StoreEntry]: ...

    async def get_record(self, repo: str, collection: str, rkey: str) -> StoreEntry | None: ...


__all__ = ["VERIFICATION_COLLECTION", "CreateRecordResult", "RecordStore", "StoreEntry"]
