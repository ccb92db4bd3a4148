"""Fluent builder for fetch requests.

Usage::

    actors = await (
        cn.from_("actor")
        .where("name <> ?", ["Mark"])
        .where_or(("role = ?", "R2-D2"), ("role = ?", "C3PO"))
        .order_by("surname", "ASC")
        .page(1, 5)
        .fetch()
    )

The builder only accumulates.  Malformed SQL fragments surface when the
connection executes the compiled statement, never while building.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from quarry.core.protocols import FetchExecutor, Row

from .request import (
    CompoundPredicate,
    FetchRequest,
    LogicalOperator,
    PredicateClause,
    SimplePredicate,
    SortClause,
    SortDirection,
)


class FetchRequestBuilder:
    """Incrementally assembles a :class:`FetchRequest` bound to a connection.

    Every mutator returns the builder itself so calls can be chained.
    """

    def __init__(self, connection: FetchExecutor, table: str):
        self._connection = connection
        self.table = table
        self.predicates: list[PredicateClause] = []
        self.sort: list[SortClause] = []
        self.limit_value: int | None = None
        self.offset_value: int | None = None

    def where(self, text: str, params: Sequence[Any] = ()) -> FetchRequestBuilder:
        """Append a simple predicate, AND-ed with everything else at the top level.

        A lone ``str`` or ``bytes`` value binds as one parameter.
        """
        if isinstance(params, (str, bytes)):
            params = (params,)
        self.predicates.append(SimplePredicate(text=text, params=tuple(params)))
        return self

    def where_and(self, *clauses: Sequence[Any]) -> FetchRequestBuilder:
        """Append one AND group built from ``(text, *params)`` tuples."""
        return self._where_compound(LogicalOperator.AND, clauses)

    def where_or(self, *clauses: Sequence[Any]) -> FetchRequestBuilder:
        """Append one OR group built from ``(text, *params)`` tuples."""
        return self._where_compound(LogicalOperator.OR, clauses)

    def _where_compound(
        self, operator: LogicalOperator, clauses: Sequence[Sequence[Any]]
    ) -> FetchRequestBuilder:
        children = tuple(
            SimplePredicate(text=text, params=tuple(params)) for text, *params in clauses
        )
        self.predicates.append(CompoundPredicate(operator=operator, predicates=children))
        return self

    def order_by(
        self, column: str, direction: SortDirection | str = SortDirection.ASC
    ) -> FetchRequestBuilder:
        """Append a sort key; call order sets key precedence."""
        self.sort.append(SortClause(column=column, direction=direction))
        return self

    def limit(self, count: int) -> FetchRequestBuilder:
        self.limit_value = count
        return self

    def offset(self, count: int) -> FetchRequestBuilder:
        self.offset_value = count
        return self

    def page(self, number: int, size: int) -> FetchRequestBuilder:
        """Restrict the result to one page; ``number`` starts at 1."""
        self.limit_value = size
        self.offset_value = max(number - 1, 0) * size
        return self

    def build(self) -> FetchRequest:
        """Snapshot the accumulated state as an immutable request."""
        return FetchRequest(
            table=self.table,
            predicates=tuple(self.predicates),
            sort=tuple(self.sort),
            limit=self.limit_value,
            offset=self.offset_value,
        )

    async def fetch(self) -> list[Row]:
        """Hand the request to the connection and return the matching rows."""
        return await self._connection.fetch(self.build())

    def __repr__(self) -> str:
        return (
            f"FetchRequestBuilder(table={self.table!r}, "
            f"predicates={len(self.predicates)}, sort={len(self.sort)})"
        )


__all__ = [
    "FetchRequestBuilder",
]
