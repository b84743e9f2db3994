"""Tests for the DuckDB and MySQL connection wrappers."""

import duckdb
import pytest

from sqlagent.config import ConnectionOptions
from sqlagent.dialect import Dialect, get_dialect, register_dialect
from sqlagent.drivers import connect
from sqlagent.drivers.duckdb import DuckDBConnection
from sqlagent.drivers.mysql import MySQLConnection
from sqlagent.errors import ConfigError, ConnectionAcquisitionError, QueryError, RollbackError


class FakeCursor:
    def __init__(self, server):
        self.server = server
        self.with_rows = False
        self.column_names = ()
        self.rowcount = -1
        self.lastrowid = None
        self._rows = []

    def execute(self, sql, params=None):
        self.server.executed.append((sql, params))
        if "fail" in sql:
            raise RuntimeError("You have an error in your SQL syntax")
        if sql.startswith("SELECT"):
            self.with_rows = True
            self.column_names = ("id",)
            self._rows = [{"id": 1}]
        else:
            self.rowcount = 1
            self.lastrowid = 17 if sql.startswith("INSERT") else 0

    def fetchall(self):
        return self._rows

    def close(self):
        self.server.cursors_closed += 1


class FakeMySQL:
    """Stands in for a mysql.connector connection."""

    def __init__(self):
        self.executed = []
        self.cursors_closed = 0
        self.calls = []

    def cursor(self, dictionary=False):
        assert dictionary is True
        return FakeCursor(self)

    def start_transaction(self):
        self.calls.append("start_transaction")

    def commit(self):
        self.calls.append("commit")

    def rollback(self):
        raise RuntimeError("no transaction")

    def close(self):
        self.calls.append("close")


class TestMySQLConnection:
    """Test result translation with a fake mysql.connector connection."""

    @pytest.mark.asyncio
    async def test_select_rows(self):
        raw = FakeMySQL()
        conn = MySQLConnection(raw)

        result = await conn.query("SELECT id FROM users WHERE id = %s", [1])

        assert result.rows == [{"id": 1}]
        assert result.columns == ["id"]
        assert raw.executed == [("SELECT id FROM users WHERE id = %s", (1,))]
        assert raw.cursors_closed == 1

    @pytest.mark.asyncio
    async def test_insert_reports_id(self):
        conn = MySQLConnection(FakeMySQL())

        result = await conn.query("INSERT INTO users (`name`) VALUES(%s)", ["Ann"])

        assert result.returns_rows is False
        assert result.affected_rows == 1
        assert result.insert_id == 17

    @pytest.mark.asyncio
    async def test_update_has_no_insert_id(self):
        conn = MySQLConnection(FakeMySQL())

        result = await conn.query("UPDATE users SET `age`=%s", [3])

        assert result.insert_id is None

    @pytest.mark.asyncio
    async def test_driver_error_wrapped(self):
        raw = FakeMySQL()
        conn = MySQLConnection(raw)

        with pytest.raises(QueryError, match="error in your SQL syntax") as info:
            await conn.query("SELECT fail")

        assert info.value.sql == "SELECT fail"
        assert raw.cursors_closed == 1

    @pytest.mark.asyncio
    async def test_transaction_calls(self):
        raw = FakeMySQL()
        conn = MySQLConnection(raw)

        await conn.begin()
        await conn.commit()
        with pytest.raises(RollbackError):
            await conn.rollback()

        assert raw.calls == ["start_transaction", "commit"]

    @pytest.mark.asyncio
    async def test_close_once(self):
        raw = FakeMySQL()
        conn = MySQLConnection(raw)

        await conn.close()
        await conn.close()

        assert raw.calls == ["close"]

    def test_escape_uses_mysql_rules(self):
        assert MySQLConnection(FakeMySQL()).escape("a'b") == "'a\\'b'"


class TestDuckDBConnection:
    """Test the DuckDB wrapper on an in-memory database."""

    @pytest.fixture
    def conn(self):
        raw = duckdb.connect()
        raw.execute("CREATE TABLE items (id INTEGER, label VARCHAR)")
        raw.execute("INSERT INTO items VALUES (1, 'a'), (2, 'b')")
        return DuckDBConnection(raw)

    @pytest.mark.asyncio
    async def test_select(self, conn):
        result = await conn.query("SELECT * FROM items WHERE id = ?", [2])

        assert result.returns_rows is True
        assert result.rows == [{"id": 2, "label": "b"}]
        assert result.columns == ["id", "label"]

    @pytest.mark.asyncio
    async def test_update_reports_count(self, conn):
        result = await conn.query("UPDATE items SET label = ?", ["z"])

        assert result.returns_rows is False
        assert result.affected_rows == 2
        assert result.insert_id is None

    @pytest.mark.asyncio
    async def test_insert_returning(self, conn):
        result = await conn.query('INSERT INTO items VALUES (?, ?) RETURNING "id"', [9, "x"])

        assert result.returns_rows is False
        assert result.insert_id == 9
        assert result.rows == [{"id": 9}]

    @pytest.mark.asyncio
    async def test_query_error(self, conn):
        with pytest.raises(QueryError) as info:
            await conn.query("SELECT * FROM nothing_here")

        assert isinstance(info.value.original_error, duckdb.Error)

    @pytest.mark.asyncio
    async def test_rollback_without_transaction(self, conn):
        with pytest.raises(RollbackError):
            await conn.rollback()

    @pytest.mark.asyncio
    async def test_closed_connection(self, conn):
        await conn.close()
        await conn.close()

        with pytest.raises(ConnectionAcquisitionError):
            await conn.query("SELECT 1")

    def test_open_memory(self):
        conn = DuckDBConnection.open(ConnectionOptions())
        assert conn.raw.execute("SELECT 42").fetchone() == (42,)


class TestConnect:
    """Test driver dispatch."""

    @pytest.mark.asyncio
    async def test_duckdb(self):
        conn = await connect(ConnectionOptions(driver="duckdb"))

        assert isinstance(conn, DuckDBConnection)
        await conn.close()

    @pytest.mark.asyncio
    async def test_unknown_driver(self):
        with pytest.raises(ConnectionAcquisitionError, match="sqlite"):
            await connect(ConnectionOptions(driver="sqlite"))


class TestDialectRegistry:
    """Test dialect lookup."""

    def test_aliases(self):
        assert get_dialect("MariaDB") is get_dialect("mysql")

    def test_unknown(self):
        with pytest.raises(ConfigError):
            get_dialect("oracle")

    def test_register(self):
        class UpperDialect(Dialect):
            name = "duckdb"

            def escape_string(self, value):
                return "'" + value.upper() + "'"

            def limit_clause(self, skip, take):
                return ""

        register_dialect("upper", UpperDialect())

        assert get_dialect("upper").escape_string("a") == "'A'"
