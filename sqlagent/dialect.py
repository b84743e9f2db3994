"""SQL dialects: identifier quoting, string escaping, placeholders and paging.

Builders never hard-code engine syntax. Each connection carries a
``Dialect`` and every fragment that differs between engines goes through it.
"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from typing import Dict, Optional

from sqlglot import exp

from sqlagent.errors import ConfigError


class Dialect(ABC):
    """
    Engine-specific SQL fragment rendering.

    Subclasses set ``name`` to the sqlglot dialect they correspond to; the
    name is also the key used by ``get_dialect()``.
    """

    name: str = ""
    placeholder: str = "?"

    def quote_identifier(self, name: str) -> str:
        """Quote a column name for this engine. No validation is performed."""
        return exp.to_identifier(str(name), quoted=True).sql(dialect=self.name)

    def placeholders(self, count: int) -> str:
        """Comma-separated placeholder list."""
        return ",".join(self.placeholder for _ in range(count))

    @abstractmethod
    def escape_string(self, value: str) -> str:
        """Return ``value`` as a quoted string literal."""
        pass

    @abstractmethod
    def limit_clause(self, skip: int, take: int) -> str:
        """
        Render paging for ``skip``/``take`` (0 means unset).

        Returns an empty string when neither is set, otherwise the clause
        with a leading space.
        """
        pass

    def returning_clause(self, column: Optional[str]) -> str:
        """Clause appended to INSERT to report the generated identifier."""
        return ""

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


_MYSQL_ESCAPES = {
    "\0": "\\0",
    "\b": "\\b",
    "\t": "\\t",
    "\n": "\\n",
    "\r": "\\r",
    "\x1a": "\\Z",
    '"': '\\"',
    "'": "\\'",
    "\\": "\\\\",
}
_MYSQL_ESCAPE_RE = re.compile("[\0\b\t\n\r\x1a\"'\\\\]")


class MySQLDialect(Dialect):
    """MySQL / MariaDB - backtick identifiers, ``%s`` placeholders, ``LIMIT s,t``."""

    name = "mysql"
    placeholder = "%s"

    def escape_string(self, value: str) -> str:
        escaped = _MYSQL_ESCAPE_RE.sub(lambda m: _MYSQL_ESCAPES[m.group(0)], value)
        return f"'{escaped}'"

    def limit_clause(self, skip: int, take: int) -> str:
        if skip > 0 and take > 0:
            return f" LIMIT {skip},{take}"
        if take > 0:
            return f" LIMIT {take}"
        if skip > 0:
            # No offset-only form; row_count stands for "all remaining rows".
            return f" LIMIT {skip},row_count"
        return ""


class DuckDBDialect(Dialect):
    """DuckDB - double-quoted identifiers, ``?`` placeholders, ``LIMIT/OFFSET``."""

    name = "duckdb"
    placeholder = "?"

    def escape_string(self, value: str) -> str:
        return "'" + value.replace("'", "''") + "'"

    def limit_clause(self, skip: int, take: int) -> str:
        if skip > 0 and take > 0:
            return f" LIMIT {take} OFFSET {skip}"
        if take > 0:
            return f" LIMIT {take}"
        if skip > 0:
            return f" OFFSET {skip}"
        return ""

    def returning_clause(self, column: Optional[str]) -> str:
        if not column:
            return ""
        return f" RETURNING {self.quote_identifier(column)}"


DEFAULT_DIALECT: Dialect = MySQLDialect()

_DIALECTS: Dict[str, Dialect] = {
    "mysql": DEFAULT_DIALECT,
    "mariadb": DEFAULT_DIALECT,
    "duckdb": DuckDBDialect(),
}


def get_dialect(name: str) -> Dialect:
    """
    Get a dialect by driver name.

    Args:
        name: Driver or engine name (``mysql``, ``mariadb``, ``duckdb``)

    Returns:
        Shared Dialect instance

    Raises:
        ConfigError: If the name is not a known dialect
    """
    key = name.lower()
    if key not in _DIALECTS:
        raise ConfigError(f"Unknown dialect '{name}'. Supported: {sorted(_DIALECTS)}")
    return _DIALECTS[key]


def register_dialect(name: str, dialect: Dialect) -> None:
    """Register a custom dialect implementation."""
    _DIALECTS[name.lower()] = dialect


__all__ = [
    "Dialect",
    "MySQLDialect",
    "DuckDBDialect",
    "DEFAULT_DIALECT",
    "get_dialect",
    "register_dialect",
]
