"""Shared fixtures for sqlagent tests."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import duckdb
import pytest

from sqlagent.config import get_settings
from sqlagent.dialect import get_dialect
from sqlagent.drivers.base import Connection, QueryResult
from sqlagent.errors import BeginError, CommitError, QueryError, RollbackError


class FakeConnection(Connection):
    """
    In-memory Connection double.

    ``responses`` maps an SQL substring to the QueryResult returned for the
    first statement containing it; ``failures`` lists substrings that make a
    statement fail.
    """

    def __init__(
        self,
        responses: Optional[Dict[str, QueryResult]] = None,
        failures: Sequence[str] = (),
        *,
        dialect: str = "mysql",
        fail_begin: bool = False,
        fail_commit: bool = False,
        fail_rollback: bool = False,
    ) -> None:
        self.dialect = get_dialect(dialect)
        self.responses = responses or {}
        self.failures = list(failures)
        self.fail_begin = fail_begin
        self.fail_commit = fail_commit
        self.fail_rollback = fail_rollback
        self.executed: List[tuple] = []
        self.calls: List[str] = []
        self.closed = 0

    async def query(self, sql: str, params: Optional[Sequence[Any]] = None) -> QueryResult:
        self.executed.append((sql, params))
        self.calls.append("query")
        for needle in self.failures:
            if needle in sql:
                raise QueryError(sql, RuntimeError(f"failed: {needle}"))
        for needle, result in self.responses.items():
            if needle in sql:
                return result
        return QueryResult(rows=[], columns=[])

    async def begin(self) -> None:
        self.calls.append("begin")
        if self.fail_begin:
            raise BeginError(RuntimeError("begin refused"))

    async def commit(self) -> None:
        self.calls.append("commit")
        if self.fail_commit:
            raise CommitError(RuntimeError("commit failed"))

    async def rollback(self) -> None:
        self.calls.append("rollback")
        if self.fail_rollback:
            raise RollbackError(RuntimeError("rollback failed"))

    async def close(self) -> None:
        self.closed += 1

    @property
    def statements(self) -> List[str]:
        return [sql for sql, _ in self.executed]


def rows(*items: Dict[str, Any]) -> QueryResult:
    """QueryResult for a row-producing statement."""
    columns = list(items[0]) if items else []
    return QueryResult(rows=list(items), columns=columns)


@pytest.fixture(autouse=True)
def fresh_settings(monkeypatch):
    """Isolate tests from ambient SQLAGENT_* configuration."""
    monkeypatch.delenv("SQLAGENT_DATABASE_URL", raising=False)
    monkeypatch.delenv("SQLAGENT_AUTOCLOSE", raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def db_path(tmp_path: Path) -> Path:
    """A DuckDB file seeded with a users table."""
    path = tmp_path / "app.duckdb"
    conn = duckdb.connect(str(path))
    conn.execute("CREATE SEQUENCE user_ids START 1")
    conn.execute(
        """
        CREATE TABLE users (
            id INTEGER PRIMARY KEY DEFAULT nextval('user_ids'),
            name VARCHAR NOT NULL,
            age INTEGER
        )
        """
    )
    conn.execute("INSERT INTO users (name, age) VALUES ('Ann', 31), ('Bob', 25)")
    conn.close()
    return path


@pytest.fixture
def fetch_all(db_path: Path):
    """Read rows back from the seeded database after a pipeline has closed."""

    def _fetch(sql: str) -> list:
        with duckdb.connect(str(db_path)) as conn:
            return conn.execute(sql).fetchall()

    return _fetch


@pytest.fixture
def fake_connection():
    """Factory for FakeConnection instances."""
    return FakeConnection


@pytest.fixture
def rowset():
    """Factory for row-producing QueryResults."""
    return rows
