"""CommandQueue - fluent declaration of pipeline steps."""

from __future__ import annotations

from typing import Any, Hashable, Iterable, Iterator, List, Optional, Sequence, Union

from sqlagent.core.command import (
    BeginCommand,
    CancelCommand,
    Command,
    DeleteCommand,
    EndCommand,
    Hook,
    InsertCommand,
    Predicate,
    QueryCommand,
    SelectCommand,
    UpdateCommand,
    column_names,
    values_dict,
)
from sqlagent.core.condition import ConditionBuilder
from sqlagent.dialect import DEFAULT_DIALECT, Dialect


class CommandQueue:
    """
    Ordered list of declared commands. Nothing is executed here.

    Commands without an explicit ``name`` are keyed by their position at
    declaration time. ``select``/``update``/``delete`` return the command's
    ConditionBuilder so the caller can keep chaining::

        queue.select("users", ["id", "name"], name="user").where("id", 7).first()
        queue.update("users", {"name": "Ann"}).where("id", 7)
    """

    def __init__(self, dialect: Optional[Dialect] = None) -> None:
        self.dialect = dialect or DEFAULT_DIALECT
        self.commands: List[Command] = []

    def __len__(self) -> int:
        return len(self.commands)

    def __iter__(self) -> Iterator[Command]:
        return iter(self.commands)

    def condition(self, skip: int = 0, take: int = 0) -> ConditionBuilder:
        """A fresh ConditionBuilder for this queue's dialect."""
        return ConditionBuilder(skip, take, dialect=self.dialect)

    def _name(self, name: Optional[Hashable]) -> Hashable:
        return len(self.commands) if name is None else name

    def _add(self, command: Command) -> None:
        self.commands.append(command)

    # ─────────────────────────────────────────────────
    # Raw queries
    # ─────────────────────────────────────────────────

    def query(
        self,
        sql: str,
        params: Union[Sequence[Any], ConditionBuilder, None] = None,
        *,
        name: Optional[Hashable] = None,
        before: Optional[Hook] = None,
        after: Optional[Hook] = None,
    ) -> CommandQueue:
        """
        Queue a raw SQL template.

        Args:
            sql: Statement, using the driver's placeholder style
            params: Positional parameters, or a ConditionBuilder whose
                    rendering is appended to ``sql``
            name: Result key (defaults to the positional index)
            before: Hook deciding whether to run; False skips
            after: Hook called after execution
        """
        self._add(QueryCommand(name=self._name(name), sql=sql, params=params, before=before, after=after))
        return self

    def push(
        self,
        sql: str,
        params: Union[Sequence[Any], ConditionBuilder, None] = None,
        *,
        name: Optional[Hashable] = None,
        before: Optional[Hook] = None,
        after: Optional[Hook] = None,
    ) -> CommandQueue:
        """Alias of ``query()``."""
        return self.query(sql, params, name=name, before=before, after=after)

    # ─────────────────────────────────────────────────
    # Generated statements
    # ─────────────────────────────────────────────────

    def insert(
        self,
        table: str,
        values: Any,
        *,
        name: Optional[Hashable] = None,
        exclude: Iterable[str] = (),
        metadata: Optional[dict] = None,
        returning: Optional[str] = None,
        before: Optional[Hook] = None,
        after: Optional[Hook] = None,
    ) -> CommandQueue:
        """
        Queue an INSERT built from ``values``.

        Args:
            table: Target table (inserted verbatim)
            values: Column → value mapping, or a pydantic model instance
            exclude: Keys to leave out of the column list
            metadata: Caller data carried with the command, never inserted
            returning: Identity column reported back by drivers that
                       support RETURNING
        """
        self._add(
            InsertCommand(
                name=self._name(name),
                table=table,
                data=values_dict(values),
                exclude=tuple(exclude),
                metadata=dict(metadata or {}),
                returning=returning,
                before=before,
                after=after,
            )
        )
        return self

    def select(
        self,
        table: str,
        columns: Any,
        *,
        name: Optional[Hashable] = None,
        exclude: Iterable[str] = (),
        skip: int = 0,
        take: int = 0,
        before: Optional[Hook] = None,
        after: Optional[Hook] = None,
    ) -> ConditionBuilder:
        """
        Queue a SELECT and return its condition builder.

        Args:
            table: Source table
            columns: Mapping (keys are used), pydantic model, or iterable of
                     column names; empty selects ``*``
            exclude: Column names to leave out
            skip: Initial offset
            take: Initial row limit (1 unwraps the result to a single row)
        """
        condition = self.condition(skip, take)
        self._add(
            SelectCommand(
                name=self._name(name),
                table=table,
                columns=column_names(columns),
                exclude=tuple(exclude),
                where=condition,
                before=before,
                after=after,
            )
        )
        return condition

    def update(
        self,
        table: str,
        values: Any,
        *,
        name: Optional[Hashable] = None,
        exclude: Iterable[str] = (),
        metadata: Optional[dict] = None,
        before: Optional[Hook] = None,
        after: Optional[Hook] = None,
    ) -> ConditionBuilder:
        """Queue an UPDATE built from ``values`` and return its condition builder."""
        condition = self.condition()
        self._add(
            UpdateCommand(
                name=self._name(name),
                table=table,
                data=values_dict(values),
                exclude=tuple(exclude),
                metadata=dict(metadata or {}),
                where=condition,
                before=before,
                after=after,
            )
        )
        return condition

    def delete(
        self,
        table: str,
        *,
        name: Optional[Hashable] = None,
        before: Optional[Hook] = None,
        after: Optional[Hook] = None,
    ) -> ConditionBuilder:
        """Queue a DELETE and return its condition builder."""
        condition = self.condition()
        self._add(DeleteCommand(name=self._name(name), table=table, where=condition, before=before, after=after))
        return condition

    def remove(
        self,
        table: str,
        *,
        name: Optional[Hashable] = None,
        before: Optional[Hook] = None,
        after: Optional[Hook] = None,
    ) -> ConditionBuilder:
        """Alias of ``delete()``."""
        return self.delete(table, name=name, before=before, after=after)

    # ─────────────────────────────────────────────────
    # Control commands
    # ─────────────────────────────────────────────────

    def begin(self) -> CommandQueue:
        self._add(BeginCommand())
        return self

    def end(self) -> CommandQueue:
        self._add(EndCommand())
        return self

    def cancel(self, predicate: Optional[Predicate] = None) -> CommandQueue:
        """
        Queue a cancellation checkpoint.

        Args:
            predicate: Called with (errors_or_none, results); returning False
                       cancels the rest of the pipeline. When omitted, the
                       pipeline is canceled if the most recently completed
                       command produced no result or an empty list.
        """
        self._add(CancelCommand(predicate=predicate))
        return self

    def validate(self, predicate: Optional[Predicate] = None) -> CommandQueue:
        """Alias of ``cancel()``."""
        return self.cancel(predicate)

    # ─────────────────────────────────────────────────
    # Queue maintenance
    # ─────────────────────────────────────────────────

    def destroy(self, name: Hashable) -> bool:
        """
        Remove the first queued command named ``name``. Returns whether one was found.

        Control commands (begin, end, cancel) are unnamed and never matched.
        """
        if name is None:
            return False
        for index, command in enumerate(self.commands):
            if command.name == name:
                del self.commands[index]
                return True
        return False

    def clear(self) -> None:
        self.commands.clear()

    def drain(self) -> List[Command]:
        """Take every queued command, leaving the queue empty."""
        commands, self.commands = self.commands, []
        return commands
