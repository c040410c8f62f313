from __future__ import annotations

import asyncio
import json
from collections.abc import Callable  # noqa: TC003

import httpx
import pytest

from vcstatus.adapters.http_resilience import ResilienceConfig
from vcstatus.adapters.verifier import VerifierAPIError, VerifierClient
from vcstatus.config.verifier import VerifierConfig
from vcstatus.domain.model import ConnectionState, ProofState
from vcstatus.domain.ports import VerifierService

from tests.helpers.http import make_client_factory
from tests.helpers.verification import make_proof_payload

VERIFIER = "https://verifier.test"


def _client(handler: Callable[[httpx.Request], httpx.Response]) -> VerifierClient:
    config = VerifierConfig(
        base_url=VERIFIER,
        resilience=ResilienceConfig(
            name="verifier",
            base_url=VERIFIER,
            default_headers={"Content-Type": "application/json"},
        ),
    )
    return VerifierClient(config=config, client_factory=make_client_factory(handler))


def _connection(state: str) -> dict[str, object]:
    return {
        "connection_id": "conn-1",
        "state": state,
        "their_label": "Wallet",
        "created_at": "2024-03-01T11:59:00Z",
        "updated_at": "2024-03-01T12:00:00Z",
        "rfc23_state": "completed",
    }


def test_client_satisfies_port() -> None:
    client = _client(lambda _request: httpx.Response(200))

    assert isinstance(client, VerifierService)
    assert client.base_url == VERIFIER


def test_create_invitation() -> None:
    captured: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        captured.append(request)
        return httpx.Response(
            200,
            json={
                "connection_id": "conn-1",
                "invitation_url": "https://verifier.test?c_i=abc",
                "invitation": {"@type": "invitation", "label": "Verifier"},
            },
        )

    invitation = asyncio.run(_client(handler).create_invitation())

    assert invitation.connection_id == "conn-1"
    assert invitation.invitation_url == "https://verifier.test?c_i=abc"
    assert captured[0].method == "POST"
    assert captured[0].url.path == "/connections/create-invitation"
    assert json.loads(captured[0].content) == {}


def test_create_invitation_sends_label_and_metadata() -> None:
    bodies: list[object] = []

    def handler(request: httpx.Request) -> httpx.Response:
        bodies.append(json.loads(request.content))
        return httpx.Response(
            200,
            json={"connection_id": "conn-2", "invitation_url": "https://verifier.test?c_i=def"},
        )

    client = _client(handler)
    invitation = asyncio.run(
        client.create_invitation(label="age Credential", metadata={"credentialType": "age"})
    )

    assert invitation.connection_id == "conn-2"
    assert bodies == [{"my_label": "age Credential", "metadata": {"credentialType": "age"}}]


def test_get_connection_maps_state() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/connections/conn-1"
        return httpx.Response(200, json=_connection("active"))

    connection = asyncio.run(_client(handler).get_connection("conn-1"))

    assert connection.state is ConnectionState.ACTIVE
    assert connection.their_label == "Wallet"
    assert connection.updated_at == "2024-03-01T12:00:00Z"


def test_get_connections_lists_results() -> None:
    def handler(_request: httpx.Request) -> httpx.Response:
        results = [_connection("invitation"), _connection("error")]
        return httpx.Response(200, json={"results": results})

    connections = asyncio.run(_client(handler).get_connections())

    assert [connection.state for connection in connections] == [
        ConnectionState.INVITATION,
        ConnectionState.ERROR,
    ]


def test_unknown_connection_state_raises() -> None:
    def handler(_request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=_connection("pending"))

    with pytest.raises(VerifierAPIError, match="pending"):
        asyncio.run(_client(handler).get_connection("conn-1"))


def test_send_proof_request_posts_body() -> None:
    captured: dict[str, object] = {}

    def handler(request: httpx.Request) -> httpx.Response:
        captured["path"] = request.url.path
        captured["body"] = json.loads(request.content)
        return httpx.Response(200, json=make_proof_payload(state="request-sent"))

    request = {"connection_id": "conn-1", "anoncreds": {"cred_def_id": "cd"}}
    exchange = asyncio.run(_client(handler).send_proof_request(request))

    assert captured["path"] == "/present-proof-2.0/send-request"
    assert captured["body"] == request
    assert exchange.pres_ex_id == "pres-1"
    assert exchange.state is ProofState.REQUEST_SENT


def test_get_proof_record_keeps_full_payload() -> None:
    payload = make_proof_payload(state="done", revealed={"screen_name": "owner_x"})

    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/present-proof-2.0/records/pres-1"
        return httpx.Response(200, json=payload)

    exchange = asyncio.run(_client(handler).get_proof_record("pres-1"))

    assert exchange.state is ProofState.DONE
    assert exchange.payload == payload


def test_get_proof_records() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/present-proof-2.0/records"
        return httpx.Response(
            200,
            json={
                "results": [
                    make_proof_payload(pres_ex_id="p1", state="verified"),
                    make_proof_payload(pres_ex_id="p2", state="abandoned"),
                ]
            },
        )

    exchanges = asyncio.run(_client(handler).get_proof_records())

    assert [(exchange.pres_ex_id, exchange.state) for exchange in exchanges] == [
        ("p1", ProofState.VERIFIED),
        ("p2", ProofState.ABANDONED),
    ]


@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(500, text="boom"),
        httpx.Response(404, json={"detail": "missing"}),
    ],
)
def test_error_status_raises(response: httpx.Response) -> None:
    with pytest.raises(VerifierAPIError, match="Failed to get proof record") as excinfo:
        asyncio.run(_client(lambda _request: response).get_proof_record("pres-1"))

    assert excinfo.value.status_code == response.status_code


@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(200, text="<html>"),
        httpx.Response(200, json=["not", "an", "object"]),
        httpx.Response(200, json={"state": "done"}),
        httpx.Response(200, json={"pres_ex_id": "p", "state": "teleported"}),
    ],
)
def test_unexpected_payload_raises(response: httpx.Response) -> None:
    with pytest.raises(VerifierAPIError):
        asyncio.run(_client(lambda _request: response).get_proof_record("pres-1"))
