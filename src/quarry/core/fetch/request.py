"""Fetch request model: predicate trees and sort clauses.

A ``FetchRequest`` describes a read query independent of any SQL dialect:
a target table, an ordered list of predicate clauses (implicitly AND-ed at the
top level) and an ordered list of sort clauses.

Predicate clauses form a tagged union.  The ``kind`` tag is resolved once,
when the request is constructed, and the writer dispatches on it:

    ┌──────────────────────────┐     ┌──────────────────────────────────┐
    │ SimplePredicate          │     │ CompoundPredicate                │
    │ kind = "simple"          │     │ kind = "compound"                │
    │ text = "name = ?"        │     │ operator = AND | OR              │
    │ params = ("Mark",)       │     │ predicates = (clause, clause...) │
    └──────────────────────────┘     └──────────────────────────────────┘

Requests are plain, serializable values.  JSON payloads in the wire shape
used by older clients, where a compound clause carries ``"type": "OR"`` and
simple clauses carry no tag at all, are accepted by ``FetchRequest.from_dict``.

Example:
    >>> request = FetchRequest.from_dict({
    ...     "table": "actor",
    ...     "predicates": [
    ...         {"type": "OR", "predicates": [
    ...             {"text": "name = ?", "params": ["Mark"]},
    ...             {"text": "name = ?", "params": ["Carrie"]},
    ...         ]},
    ...     ],
    ...     "sort": [{"column": "surname", "direction": "ASC"}],
    ... })
    >>> request.predicates[0].kind
    'compound'
"""

from __future__ import annotations

from collections.abc import Mapping
from enum import Enum
from typing import Annotated, Any, Literal, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Discriminator,
    Field,
    NonNegativeInt,
    Tag,
    field_validator,
)


class LogicalOperator(str, Enum):
    """Operator joining the children of a compound predicate."""

    AND = "AND"
    OR = "OR"


class SortDirection(str, Enum):
    """Sort direction for a single ORDER BY key."""

    ASC = "ASC"
    DESC = "DESC"


class SimplePredicate(BaseModel):
    """Raw SQL boolean fragment plus the values bound to its placeholders.

    The number of placeholders in ``text`` is not checked against
    ``params``; a mismatch fails when the statement is executed.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    kind: Literal["simple"] = "simple"
    text: str
    params: tuple[Any, ...] = ()


class CompoundPredicate(BaseModel):
    """Nested AND/OR group of predicate clauses."""

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)

    kind: Literal["compound"] = "compound"
    operator: LogicalOperator = Field(alias="type")
    predicates: tuple[PredicateClause, ...] = ()

    @field_validator("operator", mode="before")
    @classmethod
    def _normalize_operator(cls, v: Any) -> Any:
        return v.upper() if isinstance(v, str) else v


def _predicate_kind(value: Any) -> str | None:
    """Resolve the variant tag of a raw or already-built predicate clause."""
    if isinstance(value, Mapping):
        if "kind" in value:
            return value["kind"]
        if "operator" in value or "type" in value:
            return "compound"
        return "simple"
    return getattr(value, "kind", None)


PredicateClause = Annotated[
    Union[
        Annotated[SimplePredicate, Tag("simple")],
        Annotated[CompoundPredicate, Tag("compound")],
    ],
    Discriminator(_predicate_kind),
]

CompoundPredicate.model_rebuild()


class SortClause(BaseModel):
    """One ORDER BY key."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    column: str
    direction: SortDirection = SortDirection.ASC

    @field_validator("direction", mode="before")
    @classmethod
    def _normalize_direction(cls, v: Any) -> Any:
        return v.upper() if isinstance(v, str) else v


class FetchRequest(BaseModel):
    """Table, predicate tree, sort list and optional paging window.

    ``limit`` and ``offset`` are rendered as inline integers and never add
    bound parameters.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    table: str
    predicates: tuple[PredicateClause, ...] = ()
    sort: tuple[SortClause, ...] = ()
    limit: NonNegativeInt | None = None
    offset: NonNegativeInt | None = None

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> FetchRequest:
        """Build a request from a JSON-like payload.

        Raises:
            pydantic.ValidationError: If the payload does not describe a
                structurally valid request.
        """
        return cls.model_validate(payload)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the same JSON-like shape ``from_dict`` accepts."""
        return self.model_dump(mode="json", exclude_none=True)


__all__ = [
    "LogicalOperator",
    "SortDirection",
    "SimplePredicate",
    "CompoundPredicate",
    "PredicateClause",
    "SortClause",
    "FetchRequest",
]
