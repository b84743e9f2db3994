"""Command variants - one dataclass per pipeline step kind."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, ClassVar, Dict, Hashable, List, Mapping, Optional, Sequence, Tuple, Union

from sqlagent.core.condition import ConditionBuilder
from sqlagent.dialect import Dialect
from sqlagent.parsing.sql import is_single_row_template

# before/after hooks: (errors_or_none, results, values, condition) -> Optional[bool]
Hook = Callable[..., Any]
# cancel predicates: (errors_or_none, results) -> bool
Predicate = Callable[..., Any]


@dataclass
class CompiledQuery:
    """A command rendered to concrete SQL, ready for the driver."""

    name: Hashable
    sql: str
    params: Optional[List[Any]] = None
    single_row: bool = False


@dataclass
class Command:
    """Base for every pipeline step."""

    kind: ClassVar[str] = ""

    name: Hashable = None
    before: Optional[Hook] = None
    after: Optional[Hook] = None

    @property
    def values(self) -> Optional[Dict[str, Any]]:
        return None

    @property
    def condition(self) -> Optional[ConditionBuilder]:
        return None


@dataclass
class QueryCommand(Command):
    """Raw SQL template with optional parameters."""

    kind: ClassVar[str] = "query"

    sql: str = ""
    params: Union[Sequence[Any], ConditionBuilder, None] = None

    @property
    def single_row(self) -> bool:
        return is_single_row_template(self.sql)

    def compile(self, dialect: Dialect) -> CompiledQuery:
        if isinstance(self.params, ConditionBuilder):
            return CompiledQuery(self.name, self.sql + self.params.render(dialect), None, self.single_row)

        params = list(self.params) if self.params is not None else None
        return CompiledQuery(self.name, self.sql, params, self.single_row)


@dataclass
class _ValuesCommand(Command):
    """Shared column/parameter extraction for INSERT and UPDATE."""

    table: str = ""
    data: Dict[str, Any] = field(default_factory=dict)
    exclude: Tuple[str, ...] = ()
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def values(self) -> Dict[str, Any]:
        return self.data

    def columns_and_params(self) -> Tuple[List[str], List[Any]]:
        """Included column names and their parameter values, in key order."""
        columns = []
        params = []
        for key, value in self.data.items():
            if key in self.exclude:
                continue
            columns.append(key)
            params.append(value)
        return columns, params


@dataclass
class InsertCommand(_ValuesCommand):
    """INSERT built from a values mapping."""

    kind: ClassVar[str] = "insert"

    returning: Optional[str] = None

    def compile(self, dialect: Dialect) -> CompiledQuery:
        columns, params = self.columns_and_params()
        quoted = ",".join(dialect.quote_identifier(c) for c in columns)
        sql = (
            f"INSERT INTO {self.table} ({quoted}) "
            f"VALUES({dialect.placeholders(len(columns))})"
            f"{dialect.returning_clause(self.returning)}"
        )
        return CompiledQuery(self.name, sql, params, True)


@dataclass
class UpdateCommand(_ValuesCommand):
    """UPDATE built from a values mapping, filtered by a bound condition."""

    kind: ClassVar[str] = "update"

    where: ConditionBuilder = field(default_factory=ConditionBuilder)

    @property
    def condition(self) -> ConditionBuilder:
        return self.where

    def compile(self, dialect: Dialect) -> CompiledQuery:
        columns, params = self.columns_and_params()
        assignments = ",".join(f"{dialect.quote_identifier(c)}={dialect.placeholder}" for c in columns)
        sql = f"UPDATE {self.table} SET {assignments}{self.where.render(dialect)}"
        return CompiledQuery(self.name, sql, params, True)


@dataclass
class SelectCommand(Command):
    """SELECT of named columns, filtered and paged by a bound condition."""

    kind: ClassVar[str] = "select"

    table: str = ""
    columns: List[str] = field(default_factory=list)
    exclude: Tuple[str, ...] = ()
    where: ConditionBuilder = field(default_factory=ConditionBuilder)

    @property
    def condition(self) -> ConditionBuilder:
        return self.where

    def compile(self, dialect: Dialect) -> CompiledQuery:
        names = [dialect.quote_identifier(c) for c in self.columns if c not in self.exclude]
        sql = f"SELECT {','.join(names) or '*'} FROM {self.table}{self.where.render(dialect)}"
        return CompiledQuery(self.name, sql, None, self.where.take_count == 1)


@dataclass
class DeleteCommand(Command):
    """DELETE filtered by a bound condition."""

    kind: ClassVar[str] = "delete"

    table: str = ""
    where: ConditionBuilder = field(default_factory=ConditionBuilder)

    @property
    def condition(self) -> ConditionBuilder:
        return self.where

    def compile(self, dialect: Dialect) -> CompiledQuery:
        return CompiledQuery(self.name, f"DELETE FROM {self.table}{self.where.render(dialect)}", None, True)


@dataclass
class BeginCommand(Command):
    """Start a transaction."""

    kind: ClassVar[str] = "begin"


@dataclass
class EndCommand(Command):
    """Commit the open transaction, or roll it back after a failure."""

    kind: ClassVar[str] = "end"


@dataclass
class CancelCommand(Command):
    """
    Checkpoint that aborts the rest of the pipeline.

    ``predicate`` is called with (errors_or_none, results); returning False
    cancels. Without a predicate the executor checks that the most recently
    completed command produced a non-empty result.
    """

    kind: ClassVar[str] = "cancel"

    predicate: Optional[Predicate] = None


def column_names(schema: Any) -> List[str]:
    """
    Column names from a select schema.

    Accepts a mapping (its keys), a pydantic model class or instance (its
    fields), or any iterable of names.
    """
    fields = getattr(schema, "model_fields", None)
    if isinstance(fields, Mapping):
        return list(fields)
    return [str(key) for key in schema]


def values_dict(values: Any) -> Dict[str, Any]:
    """A mutable values mapping from a mapping or a pydantic model instance."""
    if isinstance(values, dict):
        return values
    if hasattr(values, "model_dump"):
        return values.model_dump()
    return dict(values)
