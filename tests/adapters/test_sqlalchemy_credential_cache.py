from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING

import pytest
from sqlalchemy import select
from sqlalchemy.exc import OperationalError

from vcstatus.adapters.sqlalchemy import SqlAlchemyCredentialCache, credential_cache_table
from vcstatus.domain.ports import (
    CONNECTIONS_NAMESPACE,
    PROOF_REQUESTS_NAMESPACE,
    CredentialCache,
)

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine


class _Clock:
    def __init__(self) -> None:
        self.now = datetime(2024, 3, 1, 12, tzinfo=UTC)

    def __call__(self) -> datetime:
        self.now += timedelta(seconds=1)
        return self.now


def test_cache_satisfies_port(sqlite_engine: Engine) -> None:
    assert isinstance(SqlAlchemyCredentialCache(engine=sqlite_engine), CredentialCache)


def test_save_and_get_round_trip(sqlite_engine: Engine) -> None:
    cache = SqlAlchemyCredentialCache(engine=sqlite_engine)
    entry = {
        "presExId": "pres-1",
        "status": "verified",
        "createdAt": "2024-03-01T12:00:00Z",
        "updatedAt": "2024-03-01T12:00:05Z",
    }

    cache.save(PROOF_REQUESTS_NAMESPACE, "pres-1", entry)

    assert cache.get(PROOF_REQUESTS_NAMESPACE, "pres-1") == entry
    assert cache.get(PROOF_REQUESTS_NAMESPACE, "missing") is None
    assert cache.get(CONNECTIONS_NAMESPACE, "pres-1") is None


def test_save_overwrites_and_keeps_created_at(sqlite_engine: Engine) -> None:
    cache = SqlAlchemyCredentialCache(engine=sqlite_engine, clock=_Clock())

    cache.save(CONNECTIONS_NAMESPACE, "conn-1", {"status": "invitation"})
    cache.save(CONNECTIONS_NAMESPACE, "conn-1", {"status": "active"})

    assert cache.get(CONNECTIONS_NAMESPACE, "conn-1") == {"status": "active"}
    with sqlite_engine.connect() as conn:
        rows = conn.execute(select(credential_cache_table)).all()
    assert len(rows) == 1
    assert rows[0].updated_at > rows[0].created_at


def test_all_is_scoped_to_namespace(sqlite_engine: Engine) -> None:
    cache = SqlAlchemyCredentialCache(engine=sqlite_engine, clock=_Clock())
    cache.save(CONNECTIONS_NAMESPACE, "conn-1", {"status": "active"})
    cache.save(CONNECTIONS_NAMESPACE, "conn-2", {"status": "active"})
    cache.save(PROOF_REQUESTS_NAMESPACE, "pres-1", {"status": "done"})

    assert cache.all(CONNECTIONS_NAMESPACE) == {
        "conn-1": {"status": "active"},
        "conn-2": {"status": "active"},
    }
    assert cache.all("unknown") == {}


def test_database_failures_are_swallowed(
    sqlite_engine: Engine,
    monkeypatch: pytest.MonkeyPatch,
    caplog: pytest.LogCaptureFixture,
) -> None:
    cache = SqlAlchemyCredentialCache(engine=sqlite_engine)

    def broken(_engine: Engine) -> None:
        raise OperationalError("CREATE TABLE", {}, Exception("disk I/O error"))

    monkeypatch.setattr("vcstatus.adapters.sqlalchemy.cache.create_all_tables", broken)

    cache.save(CONNECTIONS_NAMESPACE, "conn-1", {"status": "active"})
    assert cache.get(CONNECTIONS_NAMESPACE, "conn-1") is None
    assert cache.all(CONNECTIONS_NAMESPACE) == {}
    assert "Failed to cache connections entry conn-1" in caplog.text


def test_cache_uses_configured_database_uri() -> None:
    cache = SqlAlchemyCredentialCache(database_uri="sqlite+pysqlite:///:memory:")

    cache.save(CONNECTIONS_NAMESPACE, "conn-1", {"status": "active"})

    assert cache.get(CONNECTIONS_NAMESPACE, "conn-1") == {"status": "active"}
