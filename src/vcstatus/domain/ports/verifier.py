"""Port for the remote verifier service (connections and proof exchanges)."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Mapping

    from vcstatus.domain.model import ConnectionState, ProofState


@dataclass(frozen=True, slots=True)
class ConnectionInvitation:
    connection_id: str
    invitation_url: str


@dataclass(frozen=True, slots=True, kw_only=True)
class Connection:
    connection_id: str
    state: ConnectionState
    their_label: str | None = None
    created_at: str | None = None
    updated_at: str | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class ProofExchange:
    """A proof exchange as reported by the verifier.

    ``payload`` keeps the full response body; revealed attributes and the
    presentation blob are looked up in it at issuance.
    """

    pres_ex_id: str
    state: ProofState
    created_at: str | None = None
    updated_at: str | None = None
    payload: Mapping[str, object] = field(default_factory=dict[str, object])


@runtime_checkable
class VerifierService(Protocol):
    async def create_invitation(
        self,
        *,
        label: str | None = None,
        metadata: Mapping[str, object] | None = None,
    ) -> ConnectionInvitation: ...

    async def get_connections(self) -> list[Connection]: ...

    async def get_connection(self, connection_id: str) -> Connection: ...

    async def send_proof_request(self, request: Mapping[str, object]) -> ProofExchange: ...

    async def get_proof_records(self) -> list[ProofExchange]: ...

    async def get_proof_record(self, pres_ex_id: str) -> ProofExchange: ...


__all__ = ["Connection", "ConnectionInvitation", "ProofExchange", "VerifierService"]
