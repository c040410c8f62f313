"""Verifier service configuration values."""

from __future__ import annotations

from dataclasses import dataclass
from typing import cast

from vcstatus.domain.model import PROOF_TERMINAL_STATES

from .env import optional_env_var
from .http_resilience import CacheConfig, RateLimit, ResilienceConfig

VERIFIER_BASE_URL = "https://verifier-server.asml.berkmancenter.org"
VERIFIER_TIMEOUT_SECONDS = 15.0
VERIFIER_CACHE_TTL_SECONDS = 24 * 60 * 60


def is_settled_proof_record(payload: object) -> bool:
    """Only proof records in a terminal state are cached; everything else is fetched live."""

    if not isinstance(payload, dict):
        return False
    record = cast("dict[str, object]", payload)
    return "pres_ex_id" in record and record.get("state") in PROOF_TERMINAL_STATES


@dataclass(frozen=True)
class VerifierConfig:
    """Holds verifier service configuration values."""

    base_url: str
    resilience: ResilienceConfig


def get_verifier_config(*, resilience: ResilienceConfig | None = None) -> VerifierConfig:
    base_url = optional_env_var("VCSTATUS_VERIFIER_URL", VERIFIER_BASE_URL) or VERIFIER_BASE_URL
    return VerifierConfig(
        base_url=base_url,
        resilience=resilience
        or ResilienceConfig(
            name="verifier",
            base_url=base_url,
            timeout_seconds=VERIFIER_TIMEOUT_SECONDS,
            ratelimit=RateLimit(max_calls=5, per_seconds=1.0),
            cache=CacheConfig(
                backend="sqlite",
                ttl_seconds=VERIFIER_CACHE_TTL_SECONDS,
                should_cache=is_settled_proof_record,
            ),
            default_headers={"Content-Type": "application/json"},
        ),
    )
