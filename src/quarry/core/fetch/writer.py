"""SQL writer: compiles a FetchRequest into one parameterized statement.

The writer is a pure function of its input.  Each expansion returns the
rendered fragment together with the parameters it binds, and callers
concatenate both in the same left-to-right order, so the parameter sequence
always lines up with the placeholders in the text.

Rendering rules::

    SELECT <columns> FROM <table>
    WHERE <clause> AND <clause> ...          only if predicates are present
    ORDER BY <col> <dir>, <col> <dir> ...    only if sort keys are present
    LIMIT <n>                                only if limit/offset are set
    OFFSET <m>                               only if offset is set

    simple    -> (<text>)
    compound  -> (<child> OP <child> ...)

A compound group with no children (or whose children are all empty groups)
is elided: it renders nothing and binds nothing.

Example:
    >>> writer = FetchRequestSQLWriter()
    >>> command = writer.write(FetchRequest(
    ...     table="actor",
    ...     predicates=(SimplePredicate(text="name = ?", params=("Mark",)),),
    ... ))
    >>> command.text
    'SELECT * FROM actor\\nWHERE (name = ?)'
    >>> command.params
    ('Mark',)
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from .request import (
    CompoundPredicate,
    FetchRequest,
    LogicalOperator,
    PredicateClause,
    SimplePredicate,
    SortClause,
)


@dataclass(frozen=True)
class FetchCommand:
    """Compiled statement text and its positional parameters."""

    text: str
    params: tuple[Any, ...]


class FetchRequestSQLWriter:
    """Compiles fetch requests into SQL.

    Args:
        columns: Select list; ``"*"`` by default.  SQLite connections use
            ``"rowid AS rowid, *"`` so every row carries its identifier.
        separator: Joins the SELECT, WHERE, ORDER BY and paging pieces.
        unbounded_limit: LIMIT value emitted when only an offset is set,
            since neither SQLite nor MySQL accept OFFSET on its own.
    """

    def __init__(
        self,
        columns: str = "*",
        separator: str = "\n",
        unbounded_limit: str = "-1",
    ):
        self.columns = columns
        self.separator = separator
        self.unbounded_limit = unbounded_limit

    def write(self, request: FetchRequest) -> FetchCommand:
        pieces = [f"SELECT {self.columns} FROM {request.table}"]

        where, params = self.expand_predicates(request.predicates, LogicalOperator.AND)
        if where:
            pieces.append(f"WHERE {where}")

        if request.sort:
            pieces.append(self.expand_sort(request.sort))

        pieces.extend(self.expand_paging(request.limit, request.offset))

        return FetchCommand(text=self.separator.join(pieces), params=params)

    def expand_predicates(
        self,
        clauses: Sequence[PredicateClause],
        operator: LogicalOperator,
    ) -> tuple[str, tuple[Any, ...]]:
        """Render sibling clauses joined by ``operator``, without outer parentheses."""
        fragments: list[str] = []
        params: tuple[Any, ...] = ()
        for clause in clauses:
            text, clause_params = self.expand_predicate(clause)
            if text:
                fragments.append(text)
                params += clause_params
        return f" {operator.value} ".join(fragments), params

    def expand_predicate(self, clause: PredicateClause) -> tuple[str, tuple[Any, ...]]:
        match clause.kind:
            case "simple":
                return self.expand_simple_predicate(clause)
            case "compound":
                return self.expand_compound_predicate(clause)
            case _:
                raise TypeError(f"Unknown predicate kind: {clause.kind!r}")

    def expand_simple_predicate(self, clause: SimplePredicate) -> tuple[str, tuple[Any, ...]]:
        return f"({clause.text})", tuple(clause.params)

    def expand_compound_predicate(
        self, clause: CompoundPredicate
    ) -> tuple[str, tuple[Any, ...]]:
        text, params = self.expand_predicates(clause.predicates, clause.operator)
        if not text:
            return "", ()
        return f"({text})", params

    def expand_sort(self, sort: Sequence[SortClause]) -> str:
        return "ORDER BY " + ", ".join(
            f"{clause.column} {clause.direction.value}" for clause in sort
        )

    def expand_paging(self, limit: int | None, offset: int | None) -> list[str]:
        if limit is None and offset is None:
            return []
        pieces = [f"LIMIT {limit if limit is not None else self.unbounded_limit}"]
        if offset is not None:
            pieces.append(f"OFFSET {offset}")
        return pieces


__all__ = [
    "FetchCommand",
    "FetchRequestSQLWriter",
]
