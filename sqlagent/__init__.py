"""
sqlagent: Sequential SQL command pipelines

Declare dependent database operations up front, then run them one at a
time on a single connection:
- Fluent select/insert/update/delete declarations with a ConditionBuilder
- before/after hooks that see every earlier result and error
- Transaction boundaries with rollback after a failed statement
- Cancellation checkpoints that stop the rest of the pipeline
"""

from sqlagent.config import ConnectionOptions, SqlAgentSettings, get_settings
from sqlagent.core.agent import Agent
from sqlagent.core.command import (
    BeginCommand,
    CancelCommand,
    Command,
    CompiledQuery,
    DeleteCommand,
    EndCommand,
    InsertCommand,
    QueryCommand,
    SelectCommand,
    UpdateCommand,
)
from sqlagent.core.condition import ConditionBuilder
from sqlagent.core.escape import column, escape
from sqlagent.core.executor import PipelineExecutor
from sqlagent.core.queue import CommandQueue
from sqlagent.core.state import CANCEL_MARKER, PipelineState
from sqlagent.dialect import Dialect, DuckDBDialect, MySQLDialect, get_dialect
from sqlagent.drivers import Connection, DuckDBConnection, MySQLConnection, QueryResult, connect
from sqlagent.errors import (
    BeginError,
    CommitError,
    ConfigError,
    ConnectionAcquisitionError,
    HookError,
    QueryError,
    RollbackError,
    SqlAgentError,
    TransactionError,
)

__version__ = "0.1.0"

__all__ = [
    # Pipeline
    "Agent",
    "CommandQueue",
    "PipelineExecutor",
    "PipelineState",
    "CANCEL_MARKER",
    # Commands
    "Command",
    "QueryCommand",
    "InsertCommand",
    "SelectCommand",
    "UpdateCommand",
    "DeleteCommand",
    "BeginCommand",
    "EndCommand",
    "CancelCommand",
    "CompiledQuery",
    # SQL rendering
    "ConditionBuilder",
    "escape",
    "column",
    "Dialect",
    "MySQLDialect",
    "DuckDBDialect",
    "get_dialect",
    # Drivers
    "Connection",
    "QueryResult",
    "DuckDBConnection",
    "MySQLConnection",
    "connect",
    # Configuration
    "ConnectionOptions",
    "SqlAgentSettings",
    "get_settings",
    # Errors
    "SqlAgentError",
    "ConfigError",
    "ConnectionAcquisitionError",
    "HookError",
    "QueryError",
    "TransactionError",
    "BeginError",
    "CommitError",
    "RollbackError",
]
