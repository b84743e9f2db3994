"""Abstract connection interface consumed by the pipeline executor."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from sqlagent.dialect import Dialect


@dataclass
class QueryResult:
    """
    Driver-neutral outcome of one statement.

    Row-producing statements fill ``rows``/``columns``; data-modifying
    statements set ``returns_rows=False`` and report ``affected_rows`` and,
    for inserts, the generated ``insert_id``.
    """

    rows: List[Dict[str, Any]] = field(default_factory=list)
    columns: List[str] = field(default_factory=list)
    affected_rows: Optional[int] = None
    insert_id: Optional[Any] = None
    returns_rows: bool = True

    def __repr__(self) -> str:
        if self.returns_rows:
            return f"QueryResult({len(self.rows)} rows)"
        return f"QueryResult(affected={self.affected_rows}, insert_id={self.insert_id!r})"


class Connection(ABC):
    """
    One exclusively owned database connection.

    Implementations translate native driver failures into sqlagent errors:
    - query() raises QueryError
    - begin() raises BeginError
    - commit() raises CommitError
    - rollback() raises RollbackError
    """

    dialect: Dialect

    @abstractmethod
    async def query(self, sql: str, params: Optional[Sequence[Any]] = None) -> QueryResult:
        """
        Execute one statement.

        Args:
            sql: Statement text
            params: Positional parameters, or None for none

        Returns:
            QueryResult describing rows or affected rows
        """
        pass

    @abstractmethod
    async def begin(self) -> None:
        """Start a transaction."""
        pass

    @abstractmethod
    async def commit(self) -> None:
        """Commit the current transaction."""
        pass

    @abstractmethod
    async def rollback(self) -> None:
        """Roll back the current transaction."""
        pass

    @abstractmethod
    async def close(self) -> None:
        """Release the connection. Safe to call more than once."""
        pass

    def escape(self, value: str) -> str:
        """The driver's string-quoting primitive."""
        return self.dialect.escape_string(value)
