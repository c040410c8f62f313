"""SQLAlchemy metadata for the local exchange-state mirror."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from sqlalchemy import JSON, Column, DateTime, MetaData, String, Table

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

log = getLogger(__name__)

metadata = MetaData()

credential_cache_table = Table(
    "credential_cache",
    metadata,
    Column("namespace", String, primary_key=True),
    Column("key", String, primary_key=True),
    Column("payload", JSON, nullable=False),
    Column("created_at", DateTime(timezone=True), nullable=False),
    Column("updated_at", DateTime(timezone=True), nullable=False),
)


def create_all_tables(engine: Engine) -> None:
    """Create the cache tables if they do not exist yet."""

    log.info("Creating credential cache tables")
    metadata.create_all(engine, checkfirst=True)
