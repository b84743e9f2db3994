"""SQL inspection helpers for sqlagent."""

from sqlagent.parsing.sql import DML_KINDS, is_single_row_template, statement_kind

__all__ = [
    "DML_KINDS",
    "is_single_row_template",
    "statement_kind",
]
