"""MySQL connection.

Uses ``mysql.connector`` from the ``mysql-connector-python`` package::

    pip install mysql-connector-python
    # or:  pip install sqlagent[mysql]

The import is deferred to ``open()``: without the package a
``ConnectionAcquisitionError`` is raised when a pipeline starts.
"""

from __future__ import annotations

import asyncio
import logging
from functools import partial
from typing import Any, Callable, Optional, Sequence

from sqlagent.config import ConnectionOptions
from sqlagent.dialect import get_dialect
from sqlagent.drivers.base import Connection, QueryResult
from sqlagent.errors import BeginError, CommitError, ConnectionAcquisitionError, QueryError, RollbackError

logger = logging.getLogger(__name__)

DEFAULT_PORT = 3306


class MySQLConnection(Connection):
    """
    Wraps a ``mysql.connector`` connection.

    The connection runs in autocommit mode; ``begin()`` opens an explicit
    transaction. Blocking driver calls run in the loop's default executor.
    """

    dialect = get_dialect("mysql")

    def __init__(self, conn: Any) -> None:
        self._conn = conn

    @classmethod
    async def open(cls, options: ConnectionOptions) -> MySQLConnection:
        """
        Connect to a MySQL server.

        Raises:
            ConnectionAcquisitionError: If the driver is missing or the server
                refuses the connection
        """
        try:
            import mysql.connector
        except ImportError:
            raise ConnectionAcquisitionError(
                "mysql-connector-python is required for MySQL. "
                "Install with: pip install mysql-connector-python"
            ) from None

        connect = partial(
            mysql.connector.connect,
            host=options.host,
            port=options.port or DEFAULT_PORT,
            user=options.user,
            password=options.password,
            database=options.database or None,
            autocommit=True,
            **options.options,
        )
        loop = asyncio.get_running_loop()
        try:
            conn = await loop.run_in_executor(None, connect)
        except mysql.connector.Error as e:
            raise ConnectionAcquisitionError(f"Failed to connect to MySQL: {e}", cause=e) from e

        logger.info("Opened MySQL connection: %s@%s/%s", options.user, options.host, options.database)
        return cls(conn)

    async def _run(self, fn: Callable[[], Any]) -> Any:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, fn)

    async def query(self, sql: str, params: Optional[Sequence[Any]] = None) -> QueryResult:
        def _execute() -> QueryResult:
            cursor = self._conn.cursor(dictionary=True)
            try:
                cursor.execute(sql, tuple(params) if params else None)
                if cursor.with_rows:
                    rows = cursor.fetchall()
                    return QueryResult(rows=list(rows), columns=list(cursor.column_names))
                return QueryResult(
                    affected_rows=cursor.rowcount,
                    insert_id=cursor.lastrowid or None,
                    returns_rows=False,
                )
            finally:
                cursor.close()

        try:
            return await self._run(_execute)
        except Exception as e:
            raise QueryError(sql, e) from e

    async def begin(self) -> None:
        try:
            await self._run(self._conn.start_transaction)
        except Exception as e:
            raise BeginError(e) from e

    async def commit(self) -> None:
        try:
            await self._run(self._conn.commit)
        except Exception as e:
            raise CommitError(e) from e

    async def rollback(self) -> None:
        try:
            await self._run(self._conn.rollback)
        except Exception as e:
            raise RollbackError(e) from e

    async def close(self) -> None:
        if self._conn is None:
            return
        conn, self._conn = self._conn, None
        await self._run(conn.close)
        logger.info("Closed MySQL connection")
