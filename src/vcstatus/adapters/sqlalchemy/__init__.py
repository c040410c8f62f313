"""SQLAlchemy adapter package for the local credential cache."""

from __future__ import annotations

from .cache import SqlAlchemyCredentialCache
from .mappings import create_all_tables, credential_cache_table, metadata

__all__ = [
    "SqlAlchemyCredentialCache",
    "create_all_tables",
    "credential_cache_table",
    "metadata",
]
