"""Core sqlagent models and classes."""

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
from sqlagent.core.events import EventEmitter
from sqlagent.core.executor import PipelineExecutor
from sqlagent.core.queue import CommandQueue
from sqlagent.core.sequence import run_in_order
from sqlagent.core.state import CANCEL_MARKER, PipelineState

__all__ = [
    "Agent",
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
    "ConditionBuilder",
    "CommandQueue",
    "EventEmitter",
    "PipelineExecutor",
    "PipelineState",
    "CANCEL_MARKER",
    "column",
    "escape",
    "run_in_order",
]
