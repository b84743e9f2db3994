"""sqlagent exception classes."""

from __future__ import annotations

from typing import Optional


class SqlAgentError(Exception):
    """Base exception for all sqlagent errors."""

    pass


class ConfigError(SqlAgentError):
    """Raised when connection options or settings are invalid."""

    pass


class ConnectionAcquisitionError(SqlAgentError):
    """Raised when a connection to the database cannot be opened."""

    def __init__(self, message: str, cause: Optional[Exception] = None) -> None:
        self.cause = cause
        super().__init__(message)


class QueryError(SqlAgentError):
    """Raised when the driver rejects a statement.

    The message is the driver's own message so it can be surfaced verbatim
    in a pipeline's error list.
    """

    def __init__(self, sql: str, original_error: Exception) -> None:
        self.sql = sql
        self.original_error = original_error
        super().__init__(str(original_error))


class TransactionError(SqlAgentError):
    """Base class for transaction boundary failures."""

    def __init__(self, original_error: Exception) -> None:
        self.original_error = original_error
        super().__init__(str(original_error))


class BeginError(TransactionError):
    """Raised when the driver refuses to start a transaction."""

    pass


class CommitError(TransactionError):
    """Raised when a commit fails."""

    pass


class RollbackError(TransactionError):
    """Raised when a rollback fails."""

    pass


class HookError(SqlAgentError):
    """Raised when a caller hook or cancel predicate fails.

    The message is the hook's own exception message.
    """

    def __init__(self, hook_name: str, original_error: Exception) -> None:
        self.hook_name = hook_name
        self.original_error = original_error
        super().__init__(str(original_error))
