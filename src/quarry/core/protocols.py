"""
Protocol definitions for quarry.

The fetch-request core depends on shape, not on a concrete connection class:
anything that can run a compiled statement and hand back rows satisfies
``FetchExecutor``.  The bundled SQLite and MySQL connections do; so does any
test double with the same two coroutines.

Architecture:
    ::

        FetchRequestBuilder ──fetch()──▶ FetchExecutor.fetch(request)
                                             │
                                             ▼
                                  FetchRequestSQLWriter.write(request)
                                             │
                                             ▼
                              FetchExecutor.execute_array(text, params)

Guardrails:
    ❌ DON'T: Import a concrete connection class into the fetch package
    ✅ DO: Type against FetchExecutor

Tags:
    protocol, connection, async, database, quarry
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from quarry.core.fetch.request import FetchRequest

Row = dict[str, Any]


@runtime_checkable
class FetchExecutor(Protocol):
    """
    Minimal ASYNC contract the fetch core calls into.

    Both coroutines may suspend on I/O and may fail independently per call.
    Execution errors propagate to the caller unchanged.
    """

    async def execute_array(self, text: str, params: Sequence[Any] = ()) -> list[Row]:
        """Execute ``text`` with positional ``params`` and return every row."""
        ...

    async def fetch(self, request: FetchRequest) -> list[Row]:
        """Compile ``request`` and return the matching rows."""
        ...


__all__ = [
    "Row",
    "FetchExecutor",
]
