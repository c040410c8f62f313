"""Pydantic models describing ``com.atproto.repo`` XRPC payloads."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class XrpcBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class RecordEnvelope(XrpcBaseModel):
    uri: str
    cid: str | None = None
    # Record values are user-writable; keep them untyped and parse them leniently later.
    value: dict[str, object] = Field(default_factory=dict)


class ListRecordsResponse(XrpcBaseModel):
    # Envelopes are validated one by one so a single bad record does not sink the page.
    records: list[object] = Field(default_factory=list)
    cursor: str | None = None


class CommitMeta(XrpcBaseModel):
    cid: str
    rev: str


class CreateRecordResponse(XrpcBaseModel):
    uri: str
    cid: str | None = None
    commit: CommitMeta | None = None
    validation_status: str | None = Field(default=None, alias="validationStatus")


class XrpcErrorResponse(XrpcBaseModel):
    error: str
    message: str | None = None
