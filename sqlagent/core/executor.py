"""PipelineExecutor - runs queued commands one at a time on one connection."""

from __future__ import annotations

import logging
from typing import Any, List, Optional

from sqlagent.core.command import (
    BeginCommand,
    CancelCommand,
    Command,
    DeleteCommand,
    EndCommand,
    InsertCommand,
    QueryCommand,
    SelectCommand,
    UpdateCommand,
)
from sqlagent.core.events import EventEmitter, maybe_await
from sqlagent.core.sequence import run_in_order
from sqlagent.core.state import CANCEL_MARKER, PipelineState
from sqlagent.drivers.base import Connection, QueryResult
from sqlagent.errors import BeginError, CommitError, HookError, QueryError, RollbackError

logger = logging.getLogger(__name__)


class PipelineExecutor:
    """
    Interprets a command list against one connection.

    Commands run strictly in order. A failed query is recorded and the
    pipeline moves on; only ``before`` hooks, cancel checkpoints and a
    refused transaction stop work early. A hook or predicate that raises is
    recorded as an error and ends the run, rolling back an open transaction.
    The returned state holds every result produced, even when errors
    occurred.

    Example:
        >>> executor = PipelineExecutor(conn, events)
        >>> state = await executor.run(queue.drain())
        >>> errors, results = state.outcome()
    """

    def __init__(self, connection: Connection, events: Optional[EventEmitter] = None) -> None:
        self.connection = connection
        self.events = events or EventEmitter()
        self.state = PipelineState()

    async def run(self, commands: List[Command]) -> PipelineState:
        """
        Execute ``commands`` and return the final state.

        Args:
            commands: Commands in execution order

        Returns:
            PipelineState with results and accumulated errors
        """
        self.state = PipelineState()
        try:
            await run_in_order(commands, self._step)
        except HookError as e:
            logger.warning("Pipeline stopped, %s hook failed: %s", e.hook_name, e)
            self.state.record_error(e)
            if self.state.in_transaction:
                self.state.in_transaction = False
                self.state.pending_rollback = False
                await self._rollback()
        if self.state.in_transaction:
            logger.warning("Pipeline finished inside an open transaction")
        return self.state

    async def _step(self, command: Command) -> bool:
        """Run one command. Returns False to stop the pipeline."""
        match command:
            case CancelCommand():
                return await self._checkpoint(command)
            case BeginCommand():
                return await self._begin()
            case EndCommand():
                return await self._end()
            case QueryCommand() | InsertCommand() | SelectCommand() | UpdateCommand() | DeleteCommand():
                await self._execute(command)
                return True
            case _:
                raise TypeError(f"Unsupported command: {type(command).__name__}")

    # ─────────────────────────────────────────────────
    # Statements
    # ─────────────────────────────────────────────────

    async def _execute(self, command: Command) -> None:
        state = self.state

        if command.before is not None:
            allowed = await self._call_hook(
                "before", command.before, state.errors_or_none, state.results, command.values, command.condition
            )
            if allowed is False:
                logger.debug("Skipped '%s': before hook returned False", command.name)
                return

        # Rendered after the before hook so it can still adjust values/condition
        compiled = command.compile(self.connection.dialect)

        await self.events.emit("query", compiled.name, compiled.sql)
        logger.debug("Executing '%s': %s", compiled.name, compiled.sql)

        try:
            result = await self.connection.query(compiled.sql, compiled.params)
        except QueryError as e:
            logger.warning("Command '%s' failed: %s", compiled.name, e)
            state.record_error(e)
        else:
            if isinstance(command, InsertCommand):
                state.insert_id = result.insert_id
            state.results[compiled.name] = self._payload(command, result, compiled.single_row)
            await self.events.emit("data", compiled.name, state.results)

        if command.after is not None:
            await self._call_hook(
                "after", command.after, state.errors_or_none, state.results, command.values, command.condition
            )

        state.last_name = command.name

    @staticmethod
    async def _call_hook(hook_name: str, hook: Any, *args: Any) -> Any:
        try:
            return await maybe_await(hook(*args))
        except Exception as e:
            raise HookError(hook_name, e) from e

    @staticmethod
    def _payload(command: Command, result: QueryResult, single_row: bool) -> Any:
        """What a command stores in the result map."""
        if isinstance(command, (InsertCommand, UpdateCommand, DeleteCommand)) or not result.returns_rows:
            return result

        rows = result.rows
        if single_row:
            return rows[0] if rows else None
        return rows

    # ─────────────────────────────────────────────────
    # Checkpoints
    # ─────────────────────────────────────────────────

    async def _checkpoint(self, command: CancelCommand) -> bool:
        state = self.state
        predicate = command.predicate or self._last_result_present

        if await self._call_hook("cancel", predicate, state.errors_or_none, state.results) is False:
            logger.warning("Pipeline canceled after '%s'", state.last_name)
            state.errors.append(CANCEL_MARKER)
            state.canceled = True
            return False
        return True

    def _last_result_present(self, errors: Any, results: dict) -> bool:
        """Default cancel predicate: the last completed command returned something."""
        if self.state.last_name is None:
            return False

        result = results.get(self.state.last_name)
        if isinstance(result, list):
            return len(result) > 0
        return result is not None

    # ─────────────────────────────────────────────────
    # Transactions
    # ─────────────────────────────────────────────────

    async def _begin(self) -> bool:
        state = self.state
        try:
            await self.connection.begin()
        except BeginError as e:
            logger.warning("Could not begin transaction: %s", e)
            state.errors.append(str(e))
            return False

        logger.debug("Transaction started")
        state.in_transaction = True
        state.pending_rollback = False
        return True

    async def _end(self) -> bool:
        state = self.state
        state.in_transaction = False

        if state.pending_rollback:
            state.pending_rollback = False
            await self._rollback()
            return True

        try:
            await self.connection.commit()
        except CommitError as e:
            logger.warning("Commit failed, rolling back: %s", e)
            state.errors.append(str(e))
            await self._rollback()
            return False

        logger.debug("Transaction committed")
        return True

    async def _rollback(self) -> None:
        try:
            await self.connection.rollback()
        except RollbackError as e:
            logger.warning("Rollback failed: %s", e)
            self.state.errors.append(str(e))
        else:
            logger.debug("Transaction rolled back")
