"""Polling defaults for exchange-state watchers."""

from __future__ import annotations

from dataclasses import dataclass

DEFAULT_POLL_INTERVAL_SECONDS = 3.0
DEFAULT_POLL_MAX_ATTEMPTS = 200


@dataclass(frozen=True, slots=True)
class PollingConfig:
    interval_seconds: float = DEFAULT_POLL_INTERVAL_SECONDS
    max_attempts: int | None = DEFAULT_POLL_MAX_ATTEMPTS


def get_polling_config() -> PollingConfig:
    return PollingConfig()
