"""HTTP client for the credential verifier agent."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING, cast

from pydantic import BaseModel, ValidationError

from vcstatus.adapters.http_resilience import ResilientClient, default_client_factory
from vcstatus.config.verifier import VerifierConfig, get_verifier_config
from vcstatus.domain.model import ConnectionState, ProofState
from vcstatus.domain.ports.verifier import (
    Connection,
    ConnectionInvitation,
    ProofExchange,
    VerifierService,
)

from .schema import (
    ConnectionInvitationPayload,
    ConnectionListResponse,
    ConnectionPayload,
    ProofRecordListResponse,
    ProofRecordPayload,
)

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

    import httpx

    from vcstatus.config.http_resilience import ResilienceConfig

log = getLogger(__name__)

CREATE_INVITATION = "/connections/create-invitation"
CONNECTIONS = "/connections"
SEND_PROOF_REQUEST = "/present-proof-2.0/send-request"
PROOF_RECORDS = "/present-proof-2.0/records"


class VerifierAPIError(RuntimeError):
    """Raised when the verifier answers with an error or an unreadable payload."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


def _connection(payload: ConnectionPayload) -> Connection:
    try:
        state = ConnectionState(payload.state)
    except ValueError as exc:
        raise VerifierAPIError(
            f"Unknown connection state {payload.state!r} for {payload.connection_id}"
        ) from exc
    return Connection(
        connection_id=payload.connection_id,
        state=state,
        their_label=payload.their_label,
        created_at=payload.created_at,
        updated_at=payload.updated_at,
    )


def _proof_exchange(body: Mapping[str, object]) -> ProofExchange:
    try:
        payload = ProofRecordPayload.model_validate(body)
        state = ProofState(payload.state)
    except ValidationError as exc:
        raise VerifierAPIError(f"Unexpected proof record payload: {exc}") from exc
    except ValueError as exc:
        raise VerifierAPIError(f"Unknown proof state in {body.get('pres_ex_id')!r}") from exc
    return ProofExchange(
        pres_ex_id=payload.pres_ex_id,
        state=state,
        created_at=payload.created_at,
        updated_at=payload.updated_at,
        payload=dict(body),
    )


class VerifierClient:
    """Talks to the verifier's connection and present-proof 2.0 endpoints."""

    def __init__(
        self,
        *,
        config: VerifierConfig | None = None,
        client_factory: Callable[[ResilienceConfig], ResilientClient] | None = None,
    ) -> None:
        self._config = config or get_verifier_config()
        self._resilience = self._config.resilience
        self._client_factory = client_factory or default_client_factory

    @property
    def base_url(self) -> str:
        return self._config.base_url

    async def create_invitation(
        self,
        *,
        label: str | None = None,
        metadata: Mapping[str, object] | None = None,
    ) -> ConnectionInvitation:
        request: dict[str, object] = {}
        if label is not None:
            request["my_label"] = label
        if metadata is not None:
            request["metadata"] = dict(metadata)
        body = await self._request("POST", CREATE_INVITATION, "create invitation", json=request)
        invitation = self._parse(ConnectionInvitationPayload, body)
        log.info("Created connection invitation %s", invitation.connection_id)
        return ConnectionInvitation(
            connection_id=invitation.connection_id,
            invitation_url=invitation.invitation_url,
        )

    async def get_connections(self) -> list[Connection]:
        body = await self._request("GET", CONNECTIONS, "get connections")
        listing = self._parse(ConnectionListResponse, body)
        return [_connection(item) for item in listing.results]

    async def get_connection(self, connection_id: str) -> Connection:
        body = await self._request("GET", f"{CONNECTIONS}/{connection_id}", "get connection")
        return _connection(self._parse(ConnectionPayload, body))

    async def send_proof_request(self, request: Mapping[str, object]) -> ProofExchange:
        body = await self._request(
            "POST",
            SEND_PROOF_REQUEST,
            "send proof request",
            json=dict(request),
        )
        exchange = _proof_exchange(self._as_object(body))
        log.info("Sent proof request %s (state=%s)", exchange.pres_ex_id, exchange.state)
        return exchange

    async def get_proof_records(self) -> list[ProofExchange]:
        body = await self._request("GET", PROOF_RECORDS, "get proof records")
        listing = self._parse(ProofRecordListResponse, body)
        return [_proof_exchange(item) for item in listing.results]

    async def get_proof_record(self, pres_ex_id: str) -> ProofExchange:
        body = await self._request("GET", f"{PROOF_RECORDS}/{pres_ex_id}", "get proof record")
        return _proof_exchange(self._as_object(body))

    async def _request(
        self,
        method: str,
        path: str,
        action: str,
        *,
        json: object | None = None,
    ) -> object:
        async with self._client_factory(self._resilience) as client:
            if json is None:
                response = await client.request(method, path)
            else:
                response = await client.request(method, path, json=json)
        if response.is_error:
            raise VerifierAPIError(
                f"Failed to {action}: {response.reason_phrase}",
                status_code=response.status_code,
            )
        return self._json(response)

    @staticmethod
    def _json(response: httpx.Response) -> object:
        try:
            return response.json()
        except ValueError as exc:
            raise VerifierAPIError(
                f"Verifier returned a non-JSON body: {exc}",
                status_code=response.status_code,
            ) from exc

    @staticmethod
    def _as_object(body: object) -> Mapping[str, object]:
        if not isinstance(body, dict):
            raise VerifierAPIError("Expected a JSON object from the verifier")
        return cast("dict[str, object]", body)

    @staticmethod
    def _parse[TModel: BaseModel](model: type[TModel], body: object) -> TModel:
        try:
            return model.model_validate(body)
        except ValidationError as exc:
            raise VerifierAPIError(f"Unexpected verifier response payload: {exc}") from exc


if TYPE_CHECKING:
    _verifier_check: VerifierService = VerifierClient()
