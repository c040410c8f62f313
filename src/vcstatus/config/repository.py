"""Repository store (PDS) configuration values."""

from __future__ import annotations

from dataclasses import dataclass

from .env import optional_env_var
from .http_resilience import RateLimit, ResilienceConfig

PDS_SERVICE_URL = "https://bsky.social"
PDS_TIMEOUT_SECONDS = 10.0


@dataclass(frozen=True)
class RepositoryConfig:
    """Holds repository store configuration values.

    ``access_token`` is only needed for writes; listing and reading records
    works anonymously.
    """

    service_url: str
    resilience: ResilienceConfig
    access_token: str | None = None


def get_repository_config(*, resilience: ResilienceConfig | None = None) -> RepositoryConfig:
    service_url = optional_env_var("VCSTATUS_PDS_URL", PDS_SERVICE_URL) or PDS_SERVICE_URL
    return RepositoryConfig(
        service_url=service_url,
        access_token=optional_env_var("VCSTATUS_ACCESS_TOKEN"),
        resilience=resilience
        or ResilienceConfig(
            name="pds",
            base_url=service_url,
            timeout_seconds=PDS_TIMEOUT_SECONDS,
            ratelimit=RateLimit(max_calls=10, per_seconds=1.0),
        ),
    )
