"""Literal escaping for values embedded directly in generated SQL."""

from __future__ import annotations

import math
from datetime import date, datetime, time
from decimal import Decimal
from typing import Any, Optional

from sqlagent.dialect import DEFAULT_DIALECT, Dialect


def escape(value: Any, dialect: Optional[Dialect] = None) -> str:
    """
    Render a Python value as an SQL literal.

    Rules:
    - None → null
    - bool → 1 / 0
    - int, float, Decimal → decimal string, unquoted; NaN and infinities
      have no SQL literal and render as null
    - str → quoted and escaped by the dialect
    - list, tuple → elements joined by "," as one quoted string
      (not an SQL list, see ConditionBuilder.in_ for that)
    - date, datetime, time → ISO-8601, unquoted
    - anything else → str(value), quoted

    Args:
        value: Value to render
        dialect: Target dialect (defaults to MySQL)

    Examples:
        >>> escape(None)
        'null'
        >>> escape(True)
        '1'
        >>> escape("a'b")
        "'a\\\\'b'"
    """
    dialect = dialect or DEFAULT_DIALECT

    if value is None:
        return "null"

    # bool first: bool is an int subclass
    if isinstance(value, bool):
        return "1" if value else "0"

    if isinstance(value, float) and not math.isfinite(value):
        return "null"
    if isinstance(value, Decimal) and not value.is_finite():
        return "null"
    if isinstance(value, (int, float, Decimal)):
        return str(value)

    if isinstance(value, str):
        return dialect.escape_string(value)

    if isinstance(value, (list, tuple)):
        return dialect.escape_string(",".join("" if v is None else str(v) for v in value))

    # Unquoted: the target column must accept the bare ISO form.
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()

    return dialect.escape_string(str(value))


def column(name: str, dialect: Optional[Dialect] = None) -> str:
    """Quote a column name. Never pass untrusted names."""
    return (dialect or DEFAULT_DIALECT).quote_identifier(name)
