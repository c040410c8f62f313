"""Pydantic models describing verifier agent payloads."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class VerifierBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class ConnectionInvitationPayload(VerifierBaseModel):
    connection_id: str
    invitation_url: str
    invitation: dict[str, object] = Field(default_factory=dict)


class ConnectionPayload(VerifierBaseModel):
    connection_id: str
    state: str
    their_label: str | None = None
    created_at: str | None = None
    updated_at: str | None = None


class ConnectionListResponse(VerifierBaseModel):
    results: list[ConnectionPayload] = Field(default_factory=list)


class ProofRecordPayload(VerifierBaseModel):
    # Everything else in the exchange (by_format, pres, ...) stays in the raw body.
    pres_ex_id: str
    state: str
    created_at: str | None = None
    updated_at: str | None = None


class ProofRecordListResponse(VerifierBaseModel):
    results: list[dict[str, object]] = Field(default_factory=list)
