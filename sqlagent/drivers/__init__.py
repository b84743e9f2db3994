"""Database drivers for sqlagent."""

from __future__ import annotations

from sqlagent.config import ConnectionOptions
from sqlagent.drivers.base import Connection, QueryResult
from sqlagent.drivers.duckdb import DuckDBConnection
from sqlagent.drivers.mysql import MySQLConnection
from sqlagent.errors import ConnectionAcquisitionError


async def connect(options: ConnectionOptions) -> Connection:
    """
    Open a connection for ``options.driver``.

    Raises:
        ConnectionAcquisitionError: For unknown drivers or failed connects
    """
    if options.driver == "duckdb":
        return DuckDBConnection.open(options)
    if options.driver == "mysql":
        return await MySQLConnection.open(options)
    raise ConnectionAcquisitionError(f"Unknown driver: '{options.driver}'")


__all__ = [
    "Connection",
    "QueryResult",
    "DuckDBConnection",
    "MySQLConnection",
    "connect",
]
