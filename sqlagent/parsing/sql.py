"""Lightweight SQL inspection used by drivers and commands."""

from __future__ import annotations

from typing import Optional

import sqlglot
from sqlglot import exp

DML_KINDS = frozenset({"insert", "update", "delete"})

_STATEMENT_KINDS = (
    (exp.Insert, "insert"),
    (exp.Update, "update"),
    (exp.Delete, "delete"),
    (exp.Select, "select"),
)


def statement_kind(sql: str, dialect: str = "duckdb") -> Optional[str]:
    """
    Classify a statement by its top-level node.

    Args:
        sql: SQL statement
        dialect: sqlglot dialect used for parsing

    Returns:
        "insert", "update", "delete", "select", or None when the statement
        is of another kind or cannot be parsed

    Examples:
        >>> statement_kind("UPDATE t SET a = 1")
        'update'
        >>> statement_kind("SELECT 1")
        'select'
    """
    try:
        parsed = sqlglot.parse_one(sql, dialect=dialect)
    except Exception:
        # Unparseable: caller falls back to the driver's own result shape
        return None

    for node_type, kind in _STATEMENT_KINDS:
        if isinstance(parsed, node_type):
            return kind
    return None


def is_single_row_template(sql: str) -> bool:
    """True when a raw template ends with ``limit 1`` (case-insensitive)."""
    return sql[-7:].lower() == "limit 1"
