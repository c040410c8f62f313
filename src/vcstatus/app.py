"""Application orchestration entry points."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from datetime import UTC, date, datetime
from logging import getLogger
from typing import TYPE_CHECKING

import httpx

from vcstatus.adapters.atproto import RecordStoreError, XrpcRecordStore
from vcstatus.adapters.verifier import VerifierAPIError, VerifierClient
from vcstatus.config import get_polling_config, get_verifier_config
from vcstatus.domain.model import (
    CONNECTION_SUCCESS_STATES,
    CONNECTION_TERMINAL_STATES,
    PROOF_SUCCESS_STATES,
    PROOF_TERMINAL_STATES,
    VerificationCategory,
)
from vcstatus.domain.polling import StatusWatcher
from vcstatus.domain.ports.cache import CONNECTIONS_NAMESPACE, PROOF_REQUESTS_NAMESPACE
from vcstatus.domain.verification import (
    DEFAULT_REGISTRY,
    UnsupportedCategoryError,
    VerificationError,
    empty_status_map,
    get_verification_record,
    issue_verification_record,
    list_verification_records,
    reduce_records,
    verification_stats,
)

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from vcstatus.config import PollingConfig
    from vcstatus.domain.model import (
        VerificationRecord,
        VerificationStats,
        VerificationStatusMap,
    )
    from vcstatus.domain.ports import (
        Connection,
        ConnectionInvitation,
        CredentialCache,
        ProofExchange,
        RecordStore,
        VerifierService,
    )
    from vcstatus.domain.verification import CategoryRegistry, RecordOwner

    type Sleep = Callable[[float], Awaitable[object]]

log = getLogger(__name__)

TRANSPORT_ERRORS = (httpx.HTTPError, RecordStoreError, VerifierAPIError)


def _utcnow() -> datetime:
    return datetime.now(UTC)


@dataclass(slots=True)
class VerificationStatusResult:
    """Outcome of loading one account's verification status.

    ``error`` is set when the records could not be fetched; the map is then
    the empty map and must not be read as a confirmed "unverified".
    """

    status_map: VerificationStatusMap
    records: list[VerificationRecord] = field(default_factory=list["VerificationRecord"])
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def stats(self) -> VerificationStats:
        return verification_stats(self.status_map)


async def load_verification_status(
    owner_did: str,
    *,
    store: RecordStore | None = None,
    registry: CategoryRegistry = DEFAULT_REGISTRY,
) -> VerificationStatusResult:
    """Fetch every verification record of ``owner_did`` and reduce them per category."""

    effective_store = store or XrpcRecordStore()
    try:
        records = await list_verification_records(effective_store, owner_did)
    except TRANSPORT_ERRORS as exc:
        log.warning("Failed to load verification records for %s: %s", owner_did, exc)
        return VerificationStatusResult(status_map=empty_status_map(registry=registry), error=exc)

    status_map = reduce_records(records, registry=registry, subject=owner_did)
    log.info(
        "Loaded verification status for %s: records=%s, verified=%s",
        owner_did,
        len(records),
        [str(category) for category in verification_stats(status_map).verified_categories],
    )
    return VerificationStatusResult(status_map=status_map, records=records)


async def load_verification_record(
    owner_did: str,
    rkey: str,
    *,
    store: RecordStore | None = None,
) -> VerificationRecord | None:
    return await get_verification_record(store or XrpcRecordStore(), owner_did, rkey)


def _connection_entry(connection: Connection) -> dict[str, object]:
    return {
        "connectionId": connection.connection_id,
        "status": str(connection.state),
        "createdAt": connection.created_at,
        "updatedAt": connection.updated_at,
    }


def _proof_request_entry(exchange: ProofExchange) -> dict[str, object]:
    return {
        "presExId": exchange.pres_ex_id,
        "status": str(exchange.state),
        "createdAt": exchange.created_at,
        "updatedAt": exchange.updated_at,
    }


def build_proof_request(
    category: VerificationCategory | str,
    *,
    connection_id: str,
    cred_def_id: str,
    today: date | None = None,
    registry: CategoryRegistry = DEFAULT_REGISTRY,
) -> dict[str, object]:
    spec = registry.get(category)
    if spec.proof_request is None:
        raise UnsupportedCategoryError(spec.category)
    return spec.proof_request(connection_id, cred_def_id, today or _utcnow().date())


async def start_credential_flow(
    category: VerificationCategory | str,
    *,
    verifier: VerifierService | None = None,
    cache: CredentialCache | None = None,
    polling: PollingConfig | None = None,
    registry: CategoryRegistry = DEFAULT_REGISTRY,
    on_invitation: Callable[[ConnectionInvitation], object] | None = None,
    sleep: Sleep = asyncio.sleep,
) -> Connection:
    """Invite the credential holder and wait until their wallet connects.

    ``on_invitation`` receives the invitation before polling starts so the
    caller can hand the URL to the holder.
    """

    spec = registry.get(category)
    effective_verifier = verifier or VerifierClient()
    invitation = await effective_verifier.create_invitation(
        label=f"{spec.category} Credential",
        metadata={"credentialType": str(spec.category)},
    )
    log.info(
        "Created %s invitation %s: %s",
        spec.category,
        invitation.connection_id,
        invitation.invitation_url,
    )
    if on_invitation is not None:
        on_invitation(invitation)

    return await await_connection(
        invitation.connection_id,
        verifier=effective_verifier,
        cache=cache,
        polling=polling,
        sleep=sleep,
    )


async def request_proof(
    category: VerificationCategory | str,
    *,
    connection_id: str,
    cred_def_id: str,
    verifier: VerifierService | None = None,
    cache: CredentialCache | None = None,
    today: date | None = None,
    registry: CategoryRegistry = DEFAULT_REGISTRY,
) -> ProofExchange:
    """Send a proof request for ``category`` over an established connection."""

    request = build_proof_request(
        category,
        connection_id=connection_id,
        cred_def_id=cred_def_id,
        today=today,
        registry=registry,
    )
    exchange = await (verifier or VerifierClient()).send_proof_request(request)
    if cache is not None:
        cache.save(PROOF_REQUESTS_NAMESPACE, exchange.pres_ex_id, _proof_request_entry(exchange))
    log.info("Requested %s proof: pres_ex_id=%s", category, exchange.pres_ex_id)
    return exchange


async def await_connection(
    connection_id: str,
    *,
    verifier: VerifierService | None = None,
    cache: CredentialCache | None = None,
    polling: PollingConfig | None = None,
    sleep: Sleep = asyncio.sleep,
) -> Connection:
    """Poll a connection until it is ``active`` or ``error``."""

    effective_verifier = verifier or VerifierClient()
    config = polling or get_polling_config()

    async def fetch() -> Connection:
        return await effective_verifier.get_connection(connection_id)

    async with StatusWatcher(
        fetch,
        is_terminal=lambda connection: connection.state in CONNECTION_TERMINAL_STATES,
        interval_seconds=config.interval_seconds,
        max_attempts=config.max_attempts,
        transient_errors=TRANSPORT_ERRORS,
        sleep=sleep,
    ) as watcher:
        connection = await watcher.result()

    if connection.state in CONNECTION_SUCCESS_STATES and cache is not None:
        cache.save(CONNECTIONS_NAMESPACE, connection_id, _connection_entry(connection))
    log.info("Connection %s reached state %s", connection_id, connection.state)
    return connection


async def await_proof(
    pres_ex_id: str,
    *,
    verifier: VerifierService | None = None,
    cache: CredentialCache | None = None,
    polling: PollingConfig | None = None,
    sleep: Sleep = asyncio.sleep,
) -> ProofExchange:
    """Poll a proof exchange until it is ``verified``, ``done`` or ``abandoned``."""

    effective_verifier = verifier or VerifierClient()
    config = polling or get_polling_config()

    async def fetch() -> ProofExchange:
        return await effective_verifier.get_proof_record(pres_ex_id)

    async with StatusWatcher(
        fetch,
        is_terminal=lambda exchange: exchange.state in PROOF_TERMINAL_STATES,
        interval_seconds=config.interval_seconds,
        max_attempts=config.max_attempts,
        transient_errors=TRANSPORT_ERRORS,
        sleep=sleep,
    ) as watcher:
        exchange = await watcher.result()

    if exchange.state in PROOF_SUCCESS_STATES and cache is not None:
        cache.save(PROOF_REQUESTS_NAMESPACE, pres_ex_id, _proof_request_entry(exchange))
    log.info("Proof exchange %s reached state %s", pres_ex_id, exchange.state)
    return exchange


async def complete_verification(
    category: VerificationCategory | str,
    *,
    owner: RecordOwner,
    pres_ex_id: str,
    verifier: VerifierService | None = None,
    store: RecordStore | None = None,
    cache: CredentialCache | None = None,
    polling: PollingConfig | None = None,
    verifier_base_url: str | None = None,
    registry: CategoryRegistry = DEFAULT_REGISTRY,
    clock: Callable[[], datetime] = _utcnow,
    sleep: Sleep = asyncio.sleep,
) -> VerificationRecord:
    """Wait for a proof exchange to finish and write the resulting record."""

    spec = registry.get(category)
    exchange = await await_proof(
        pres_ex_id,
        verifier=verifier,
        cache=cache,
        polling=polling,
        sleep=sleep,
    )
    if exchange.state not in PROOF_SUCCESS_STATES:
        raise VerificationError(f"Proof exchange {pres_ex_id} ended in state {exchange.state}")

    return await issue_verification_record(
        store or XrpcRecordStore(),
        owner=owner,
        category=spec.category,
        pres_ex_id=exchange.pres_ex_id,
        proof=dict(exchange.payload),
        verifier_base_url=verifier_base_url or get_verifier_config().base_url,
        registry=registry,
        clock=clock,
    )


async def run_verification(
    category: VerificationCategory | str,
    *,
    owner: RecordOwner,
    connection_id: str,
    cred_def_id: str,
    verifier: VerifierService | None = None,
    store: RecordStore | None = None,
    cache: CredentialCache | None = None,
    polling: PollingConfig | None = None,
    verifier_base_url: str | None = None,
    registry: CategoryRegistry = DEFAULT_REGISTRY,
    clock: Callable[[], datetime] = _utcnow,
    sleep: Sleep = asyncio.sleep,
) -> VerificationRecord:
    """Request a proof, wait for the holder to present it and issue the record."""

    effective_verifier = verifier or VerifierClient()
    spec = registry.get(category)
    exchange = await request_proof(
        spec.category,
        connection_id=connection_id,
        cred_def_id=cred_def_id,
        verifier=effective_verifier,
        cache=cache,
        today=clock().date(),
        registry=registry,
    )
    return await complete_verification(
        spec.category,
        owner=owner,
        pres_ex_id=exchange.pres_ex_id,
        verifier=effective_verifier,
        store=store,
        cache=cache,
        polling=polling,
        verifier_base_url=verifier_base_url,
        registry=registry,
        clock=clock,
        sleep=sleep,
    )
