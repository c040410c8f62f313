"""Port for the optional local mirror of exchange state."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Mapping

PROOF_REQUESTS_NAMESPACE = "proof_requests"
CONNECTIONS_NAMESPACE = "connections"


@runtime_checkable
class CredentialCache(Protocol):
    """Best-effort key/value mirror; implementations must not raise on I/O failure."""

    def save(self, namespace: str, key: str, data: Mapping[str, object]) -> None: ...

    def get(self, namespace: str, key: str) -> dict[str, object] | None: ...

    def all(self, namespace: str) -> dict[str, dict[str, object]]: ...


__all__ = ["CONNECTIONS_NAMESPACE", "PROOF_REQUESTS_NAMESPACE", "CredentialCache"]
