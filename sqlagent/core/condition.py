"""ConditionBuilder - WHERE / ORDER BY / GROUP BY / LIMIT clause rendering."""

from __future__ import annotations

import re
from typing import Any, Callable, Iterable, List, Optional, Union

from sqlagent.core.escape import column, escape
from sqlagent.dialect import DEFAULT_DIALECT, Dialect

_MISSING = object()

# A term that already carries its direction, e.g. "name DESC".
_DIRECTED_TERM = re.compile(r"\s(asc|desc)\s*$", re.IGNORECASE)

# Fragments are kept unrendered until the target dialect is known.
Fragment = Callable[[Dialect], str]


def _literal(text: str) -> Fragment:
    return lambda dialect: text


class ConditionBuilder:
    """
    Accumulates condition fragments and paging, then renders one clause.

    Every mutator returns the builder so calls can be chained::

        cond = ConditionBuilder()
        cond.where("age", ">", 18).and_().like("name", "a%").order("name", True).take(10)
        str(cond)
        # " WHERE `age`>18 AND `name` LIKE 'a%' ORDER BY `name` DESC LIMIT 10"

    Quoting and escaping happen at render time, so the same builder renders
    for whichever dialect the executing connection speaks. Boolean operators
    are literal fragments; ``and_()``/``or_()`` are no-ops while the fragment
    list is empty so a clause never starts with one.
    """

    def __init__(
        self,
        skip: int = 0,
        take: int = 0,
        dialect: Optional[Dialect] = None,
    ) -> None:
        self.dialect = dialect or DEFAULT_DIALECT
        self._fragments: List[Fragment] = []
        self._orders: Optional[List[Fragment]] = None
        self._skip = skip if skip and skip >= 0 else 0
        self._take = take if take and take >= 0 else 0

    @property
    def skip_count(self) -> int:
        return self._skip

    @property
    def take_count(self) -> int:
        return self._take

    @property
    def fragments(self) -> List[str]:
        """Predicate fragments rendered for the builder's own dialect."""
        return [fragment(self.dialect) for fragment in self._fragments]

    @property
    def orders(self) -> Optional[List[str]]:
        if self._orders is None:
            return None
        return [term(self.dialect) for term in self._orders]

    # ─────────────────────────────────────────────────
    # Predicates
    # ─────────────────────────────────────────────────

    def where(self, name: str, operator: Any, value: Any = _MISSING) -> ConditionBuilder:
        """Append ``name <operator> value``; the operator defaults to ``=``."""
        return self.push(name, operator, value)

    def push(self, name: str, operator: Any, value: Any = _MISSING) -> ConditionBuilder:
        if value is _MISSING:
            value = operator
            operator = "="

        self._fragments.append(lambda d: column(name, d) + operator + escape(value, d))
        return self

    def and_(self) -> ConditionBuilder:
        if self._fragments:
            self._fragments.append(_literal("AND"))
        return self

    def or_(self) -> ConditionBuilder:
        if self._fragments:
            self._fragments.append(_literal("OR"))
        return self

    def in_(self, name: str, values: Any) -> ConditionBuilder:
        """Append ``name IN (...)``. Ignored unless ``values`` is a list or tuple."""
        if not isinstance(values, (list, tuple)):
            return self

        values = tuple(values)
        self._fragments.append(lambda d: f"{column(name, d)} IN ({','.join(escape(v, d) for v in values)})")
        return self

    def like(self, name: str, value: Any) -> ConditionBuilder:
        self._fragments.append(lambda d: f"{column(name, d)} LIKE {escape(value, d)}")
        return self

    def between(self, name: str, value_a: Any, value_b: Any) -> ConditionBuilder:
        """
        Append ``name BETWEEN a AND b``.

        The bounds are inserted as given, without escaping. Callers must only
        pass trusted values (numbers or pre-escaped literals).
        """
        self._fragments.append(lambda d: f"{column(name, d)} BETWEEN {value_a} AND {value_b}")
        return self

    def group(self, name: str, values: Union[str, Iterable[str]]) -> ConditionBuilder:
        if not isinstance(values, str):
            values = ",".join(values)
        self._fragments.append(lambda d: f"{column(name, d)} GROUP BY {values}")
        return self

    def having(self, condition: str) -> ConditionBuilder:
        """Append a raw fragment verbatim."""
        self._fragments.append(_literal(condition))
        return self

    def sql(self, sql: str) -> ConditionBuilder:
        """Append a raw fragment verbatim."""
        self._fragments.append(_literal(sql))
        return self

    # ─────────────────────────────────────────────────
    # Ordering & paging
    # ─────────────────────────────────────────────────

    def order(self, name: str, desc: Union[bool, str, None] = None) -> ConditionBuilder:
        """
        Append an ORDER BY term.

        Args:
            name: Column name, or a pre-formatted term such as ``"name DESC"``
                  which is kept verbatim
            desc: True → DESC, False → ASC, a string is used as the direction,
                  None → ASC
        """
        if self._orders is None:
            self._orders = []

        if _DIRECTED_TERM.search(name):
            self._orders.append(_literal(name))
            return self

        if isinstance(desc, bool):
            direction = "DESC" if desc else "ASC"
        else:
            direction = desc or "ASC"

        self._orders.append(lambda d: f"{column(name, d)} {direction}")
        return self

    def skip(self, value: int) -> ConditionBuilder:
        self._skip = value
        return self

    def take(self, value: int) -> ConditionBuilder:
        self._take = value
        return self

    def first(self) -> ConditionBuilder:
        """Shorthand for ``skip(0).take(1)``."""
        self._skip = 0
        self._take = 1
        return self

    # ─────────────────────────────────────────────────
    # Rendering
    # ─────────────────────────────────────────────────

    def render(self, dialect: Optional[Dialect] = None) -> str:
        """
        Render the clause.

        Without predicates only the paging clause is rendered; ORDER BY terms
        are emitted together with a WHERE clause.

        Args:
            dialect: Dialect to render for; defaults to the builder's own
        """
        dialect = dialect or self.dialect
        limit = dialect.limit_clause(self._skip, self._take)

        if not self._fragments:
            return limit

        order = ""
        if self._orders:
            order = " ORDER BY " + ",".join(term(dialect) for term in self._orders)

        return " WHERE " + " ".join(fragment(dialect) for fragment in self._fragments) + order + limit

    def __str__(self) -> str:
        return self.render()

    def __repr__(self) -> str:
        return f"ConditionBuilder({self.render()!r})"
