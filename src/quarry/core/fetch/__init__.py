"""Fetch requests: the predicate/sort model, its fluent builder and the SQL writer.

Modules
-------
request     FetchRequest, SimplePredicate, CompoundPredicate, SortClause
builder     FetchRequestBuilder (where / where_and / where_or / order_by / page / fetch)
writer      FetchRequestSQLWriter, FetchCommand
"""

from .builder import FetchRequestBuilder
from .request import (
    CompoundPredicate,
    FetchRequest,
    LogicalOperator,
    PredicateClause,
    SimplePredicate,
    SortClause,
    SortDirection,
)
from .writer import FetchCommand, FetchRequestSQLWriter

__all__ = [
    "FetchRequest",
    "PredicateClause",
    "SimplePredicate",
    "CompoundPredicate",
    "LogicalOperator",
    "SortClause",
    "SortDirection",
    "FetchRequestBuilder",
    "FetchRequestSQLWriter",
    "FetchCommand",
]
