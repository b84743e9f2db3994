"""DuckDB connection - the default, embedded driver."""

from __future__ import annotations

import logging
from typing import Any, Optional, Sequence

import duckdb

from sqlagent.config import ConnectionOptions, get_settings
from sqlagent.dialect import get_dialect
from sqlagent.drivers.base import Connection, QueryResult
from sqlagent.errors import BeginError, CommitError, ConnectionAcquisitionError, QueryError, RollbackError
from sqlagent.parsing.sql import DML_KINDS, statement_kind

logger = logging.getLogger(__name__)


class DuckDBConnection(Connection):
    """
    Wraps a ``duckdb.DuckDBPyConnection``.

    DuckDB runs in-process, so statements execute directly on the event
    loop thread. DML without RETURNING yields a one-row ``Count`` result,
    which is reported as ``affected_rows``.
    """

    dialect = get_dialect("duckdb")

    def __init__(self, conn: duckdb.DuckDBPyConnection) -> None:
        self._conn: Optional[duckdb.DuckDBPyConnection] = conn

    @classmethod
    def open(cls, options: ConnectionOptions) -> DuckDBConnection:
        """
        Open a DuckDB database file (or ``:memory:``).

        Raises:
            ConnectionAcquisitionError: If the database cannot be opened
        """
        config = {"threads": get_settings().duckdb.threads, **options.options}
        try:
            conn = duckdb.connect(options.database, config=config)
        except duckdb.Error as e:
            raise ConnectionAcquisitionError(f"Failed to open DuckDB '{options.database}': {e}", cause=e) from e

        logger.info("Opened DuckDB connection: %s", options.database)
        return cls(conn)

    @property
    def raw(self) -> duckdb.DuckDBPyConnection:
        if self._conn is None:
            raise ConnectionAcquisitionError("DuckDB connection is closed")
        return self._conn

    async def query(self, sql: str, params: Optional[Sequence[Any]] = None) -> QueryResult:
        try:
            if params:
                cursor = self.raw.execute(sql, list(params))
            else:
                cursor = self.raw.execute(sql)

            columns = [desc[0] for desc in cursor.description] if cursor.description else []
            rows = [dict(zip(columns, row)) for row in cursor.fetchall()] if columns else []
        except duckdb.Error as e:
            raise QueryError(sql, e) from e

        kind = statement_kind(sql, dialect="duckdb")
        if kind not in DML_KINDS:
            return QueryResult(rows=rows, columns=columns)

        if columns == ["Count"]:
            affected = rows[0]["Count"] if rows else 0
            return QueryResult(affected_rows=affected, returns_rows=False)

        # DML with RETURNING: the first returned value is the generated id
        insert_id = None
        if kind == "insert" and rows:
            insert_id = next(iter(rows[0].values()))
        return QueryResult(
            rows=rows,
            columns=columns,
            affected_rows=len(rows),
            insert_id=insert_id,
            returns_rows=False,
        )

    async def begin(self) -> None:
        try:
            self.raw.begin()
        except duckdb.Error as e:
            raise BeginError(e) from e

    async def commit(self) -> None:
        try:
            self.raw.commit()
        except duckdb.Error as e:
            raise CommitError(e) from e

    async def rollback(self) -> None:
        try:
            self.raw.rollback()
        except duckdb.Error as e:
            raise RollbackError(e) from e

    async def close(self) -> None:
        if self._conn is None:
            return
        self._conn.close()
        self._conn = None
        logger.info("Closed DuckDB connection")
