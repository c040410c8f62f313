"""XRPC client implementing the repository record store port."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

import httpx
from pydantic import ValidationError

from vcstatus.adapters.http_resilience import ResilientClient, default_client_factory
from vcstatus.config.repository import RepositoryConfig, get_repository_config
from vcstatus.domain.model import CommitRef
from vcstatus.domain.ports.repository import CreateRecordResult, RecordStore, StoreEntry

from .schema import CreateRecordResponse, ListRecordsResponse, RecordEnvelope, XrpcErrorResponse

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

    from vcstatus.config.http_resilience import ResilienceConfig

log = getLogger(__name__)

LIST_RECORDS = "/xrpc/com.atproto.repo.listRecords"
GET_RECORD = "/xrpc/com.atproto.repo.getRecord"
CREATE_RECORD = "/xrpc/com.atproto.repo.createRecord"
LIST_PAGE_SIZE = 100
_NOT_FOUND_ERRORS = frozenset({"RecordNotFound", "NotFound"})


class RecordStoreError(RuntimeError):
    """Raised when the repository store rejects a request or answers unexpectedly."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        error: str | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.error = error


def _to_entry(envelope: RecordEnvelope) -> StoreEntry:
    return StoreEntry(uri=envelope.uri, cid=envelope.cid, value=envelope.value)


def _page_entries(page: ListRecordsResponse, repo: str) -> list[StoreEntry]:
    entries: list[StoreEntry] = []
    for raw in page.records:
        try:
            envelope = RecordEnvelope.model_validate(raw)
        except ValidationError as exc:
            uri = raw.get("uri") if isinstance(raw, dict) else None
            log.warning(
                "Skipping malformed record %s in %s: %s",
                uri or "<no uri>",
                repo,
                exc.errors(include_url=False)[0]["msg"],
            )
            continue
        entries.append(_to_entry(envelope))
    return entries


def _error_from_response(response: httpx.Response, action: str) -> RecordStoreError:
    error_code: str | None = None
    detail = response.reason_phrase
    try:
        payload = XrpcErrorResponse.model_validate(response.json())
    except (ValueError, ValidationError):
        payload = None
    if payload is not None:
        error_code = payload.error
        detail = payload.message or payload.error
    return RecordStoreError(
        f"Failed to {action}: {detail}",
        status_code=response.status_code,
        error=error_code,
    )


class XrpcRecordStore:
    """Repository store backed by a PDS speaking ``com.atproto.repo`` XRPC."""

    def __init__(
        self,
        *,
        config: RepositoryConfig | None = None,
        client_factory: Callable[[ResilienceConfig], ResilientClient] | None = None,
    ) -> None:
        self._config = config or get_repository_config()
        self._resilience = self._config.resilience
        self._client_factory = client_factory or default_client_factory

    def _auth_headers(self) -> dict[str, str]:
        if self._config.access_token is None:
            return {}
        return {"Authorization": f"Bearer {self._config.access_token}"}

    async def list_records(self, repo: str, collection: str) -> list[StoreEntry]:
        entries: list[StoreEntry] = []
        cursor: str | None = None
        async with self._client_factory(self._resilience) as client:
            while True:
                params: dict[str, str | int] = {
                    "repo": repo,
                    "collection": collection,
                    "limit": LIST_PAGE_SIZE,
                }
                if cursor is not None:
                    params["cursor"] = cursor
                response = await client.get(
                    LIST_RECORDS,
                    params=params,
                    headers=self._auth_headers(),
                )
                if response.is_error:
                    raise _error_from_response(response, "list records")
                page = self._parse(ListRecordsResponse, response)
                entries.extend(_page_entries(page, repo))
                if not page.cursor or not page.records:
                    break
                cursor = page.cursor

        log.info(
            "Listed %s records from %s in %s: rkeys=%s",
            len(entries),
            collection,
            repo,
            [entry.uri.rsplit("/", 1)[-1] for entry in entries],
        )
        return entries

    async def get_record(self, repo: str, collection: str, rkey: str) -> StoreEntry | None:
        params = {"repo": repo, "collection": collection, "rkey": rkey}
        async with self._client_factory(self._resilience) as client:
            response = await client.get(GET_RECORD, params=params, headers=self._auth_headers())

        if response.is_error:
            error = _error_from_response(response, "get record")
            if response.status_code == httpx.codes.NOT_FOUND or error.error in _NOT_FOUND_ERRORS:
                log.info("Record %s not found in %s/%s", rkey, repo, collection)
                return None
            raise error
        return _to_entry(self._parse(RecordEnvelope, response))

    async def create_record(
        self,
        repo: str,
        collection: str,
        record: Mapping[str, object],
    ) -> CreateRecordResult:
        if self._config.access_token is None:
            raise RecordStoreError("Creating records requires an access token")

        body = {"repo": repo, "collection": collection, "record": dict(record)}
        async with self._client_factory(self._resilience) as client:
            response = await client.post(CREATE_RECORD, json=body, headers=self._auth_headers())

        if response.is_error:
            raise _error_from_response(response, "create record")
        created = self._parse(CreateRecordResponse, response)
        commit = (
            CommitRef(cid=created.commit.cid, rev=created.commit.rev) if created.commit else None
        )
        return CreateRecordResult(uri=created.uri, cid=created.cid, commit=commit)

    @staticmethod
    def _parse[TModel: ListRecordsResponse | RecordEnvelope | CreateRecordResponse](
        model: type[TModel],
        response: httpx.Response,
    ) -> TModel:
        try:
            return model.model_validate(response.json())
        except (ValueError, ValidationError) as exc:
            raise RecordStoreError(
                f"Unexpected repository response payload: {exc}",
                status_code=response.status_code,
            ) from exc


if TYPE_CHECKING:
    _store_check: RecordStore = XrpcRecordStore()
