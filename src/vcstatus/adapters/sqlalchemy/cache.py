"""Best-effort SQLAlchemy mirror of connection and proof-request state."""

from __future__ import annotations

from datetime import UTC, datetime
from logging import getLogger
from typing import TYPE_CHECKING, cast

from sqlalchemy import create_engine, insert, select, update
from sqlalchemy.exc import SQLAlchemyError

from vcstatus.config.storage import get_cache_database_uri
from vcstatus.domain.ports.cache import CredentialCache

from .mappings import create_all_tables, credential_cache_table

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

    from sqlalchemy.engine import Engine

log = getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(UTC)


class SqlAlchemyCredentialCache:
    """Key/value rows grouped by namespace.

    Every database failure is logged and swallowed: reads then return ``None``
    or an empty mapping, writes are dropped.
    """

    def __init__(
        self,
        *,
        engine: Engine | None = None,
        database_uri: str | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._engine = engine or create_engine(
            database_uri or get_cache_database_uri(),
            future=True,
        )
        self._clock = clock
        self._ready = False

    def _ensure_tables(self) -> None:
        if not self._ready:
            create_all_tables(self._engine)
            self._ready = True

    def save(self, namespace: str, key: str, data: Mapping[str, object]) -> None:
        now = self._clock()
        payload = dict(data)
        table = credential_cache_table
        try:
            self._ensure_tables()
            with self._engine.begin() as conn:
                existing = conn.execute(
                    select(table.c.key).where(table.c.namespace == namespace, table.c.key == key)
                ).first()
                if existing is None:
                    conn.execute(
                        insert(table).values(
                            namespace=namespace,
                            key=key,
                            payload=payload,
                            created_at=now,
                            updated_at=now,
                        )
                    )
                else:
                    conn.execute(
                        update(table)
                        .where(table.c.namespace == namespace, table.c.key == key)
                        .values(payload=payload, updated_at=now)
                    )
        except SQLAlchemyError:
            log.exception("Failed to cache %s entry %s", namespace, key)
            return
        log.debug("Cached %s entry %s", namespace, key)

    def get(self, namespace: str, key: str) -> dict[str, object] | None:
        table = credential_cache_table
        try:
            self._ensure_tables()
            with self._engine.connect() as conn:
                row = conn.execute(
                    select(table.c.payload).where(
                        table.c.namespace == namespace,
                        table.c.key == key,
                    )
                ).first()
        except SQLAlchemyError:
            log.exception("Failed to read cached %s entry %s", namespace, key)
            return None
        if row is None:
            return None
        return dict(cast("dict[str, object]", row.payload))

    def all(self, namespace: str) -> dict[str, dict[str, object]]:
        table = credential_cache_table
        try:
            self._ensure_tables()
            with self._engine.connect() as conn:
                rows = conn.execute(
                    select(table.c.key, table.c.payload)
                    .where(table.c.namespace == namespace)
                    .order_by(table.c.created_at, table.c.key)
                ).all()
        except SQLAlchemyError:
            log.exception("Failed to read cached %s entries", namespace)
            return {}
        return {row.key: dict(cast("dict[str, object]", row.payload)) for row in rows}


if TYPE_CHECKING:
    _cache_check: CredentialCache = SqlAlchemyCredentialCache()
