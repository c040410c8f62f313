"""Application configuration helpers."""

from __future__ import annotations

from .env import optional_env_var, require_env_var, require_env_vars
from .errors import ConfigurationError, MissingConfigurationError
from .http_resilience import CacheConfig, RateLimit, ResilienceConfig, RetryPolicy
from .logging import configure_logging
from .polling import PollingConfig, get_polling_config
from .repository import RepositoryConfig, get_repository_config
from .storage import StorageConfig, get_cache_database_uri, get_storage_config
from .verifier import VerifierConfig, get_verifier_config

__all__ = [
    "CacheConfig",
    "ConfigurationError",
    "MissingConfigurationError",
    "PollingConfig",
    "RateLimit",
    "RepositoryConfig",
    "ResilienceConfig",
    "RetryPolicy",
    "StorageConfig",
    "VerifierConfig",
    "configure_logging",
    "get_cache_database_uri",
    "get_polling_config",
    "get_repository_config",
    "get_storage_config",
    "get_verifier_config",
    "optional_env_var",
    "require_env_var",
    "require_env_vars",
]
