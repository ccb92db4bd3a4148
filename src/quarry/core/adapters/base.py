"""Database connection base class.

Manifesto:
    Callers talk to one interface whatever the backend: raw execution
    (scalar / single / array / non-query), CRUD keyed by an identifier
    column, schema introspection, and fetch requests compiled by
    :class:`~quarry.core.fetch.writer.FetchRequestSQLWriter`.  Backends only
    implement connect / close and a blocking ``_execute_sync`` that runs one
    statement and translates driver errors.

Features:
    - Every public operation is a coroutine; blocking driver calls run in a
      worker thread via ``asyncio.to_thread``
    - Lazy connect on first statement, guarded against concurrent callers
    - Driver errors surface as ``QueryError`` / ``IntegrityError`` with the
      statement attached as context, logged once as ``statement_failed``
    - Async context-manager protocol for connection lifecycle

Tags:
    quarry, database, abstract-base, adapter-pattern, async

Doc-Types:
    api-reference
"""

from __future__ import annotations

import asyncio
import time
from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from quarry.core.dialect import Dialect, get_dialect
from quarry.core.errors import QueryError, QuarryError
from quarry.core.fetch import FetchRequest, FetchRequestBuilder, FetchRequestSQLWriter
from quarry.core.logging import LogContext, get_logger
from quarry.core.protocols import Row

from .types import DatabaseConfig, DatabaseType

logger = get_logger(__name__)


@dataclass
class StatementResult:
    """What one executed statement produced."""

    rows: list[Row] = field(default_factory=list)
    rowcount: int = -1
    lastrowid: Any = None


class DatabaseConnection(ABC):
    """
    Abstract base class for database connections.

    Subclasses set ``id_column`` (the column CRUD helpers key on) and
    ``fetch_columns`` (the select list used for fetch requests and for
    reading back inserted / updated rows).
    """

    id_column: str = "id"
    fetch_columns: str = "*"

    def __init__(self, config: DatabaseConfig):
        self._config = config
        self._connected = False
        self._connect_lock = asyncio.Lock()
        self._dialect: Dialect = get_dialect(config.db_type.value)

    @property
    def dialect(self) -> Dialect:
        """SQL dialect for this connection's database type."""
        return self._dialect

    @property
    def db_type(self) -> DatabaseType:
        return self._config.db_type

    @property
    def is_connected(self) -> bool:
        return self._connected

    # -- Lifecycle ---------------------------------------------------------

    @abstractmethod
    def _connect_sync(self) -> None:
        """Open the driver connection or pool. Runs in a worker thread."""
        ...

    @abstractmethod
    def _close_sync(self) -> None:
        """Release the driver connection or pool."""
        ...

    @abstractmethod
    def _execute_sync(self, text: str, params: tuple[Any, ...]) -> StatementResult:
        """Run one statement, translating driver errors to QuarryError."""
        ...

    async def connect(self) -> None:
        """Establish the connection (idempotent)."""
        async with self._connect_lock:
            if self._connected:
                return
            await asyncio.to_thread(self._connect_sync)
            self._connected = True
            logger.debug(
                "connection_opened",
                backend=self.db_type.value,
                target=self._config.to_connection_string(),
            )

    async def close(self) -> None:
        """Close the connection; safe to call when not connected."""
        async with self._connect_lock:
            if not self._connected:
                return
            await asyncio.to_thread(self._close_sync)
            self._connected = False
        logger.debug("connection_closed", backend=self.db_type.value)

    async def __aenter__(self) -> DatabaseConnection:
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    # -- Execution ---------------------------------------------------------

    async def _run(self, text: str, params: Sequence[Any] = ()) -> StatementResult:
        if not self._connected:
            await self.connect()

        bound = tuple(params)
        started = time.perf_counter()
        try:
            result = await asyncio.to_thread(self._execute_sync, text, bound)
        except QuarryError as e:
            e.with_context(
                backend=self.db_type.value,
                statement=text,
                param_count=len(bound),
            )
            logger.warning(
                "statement_failed",
                backend=self.db_type.value,
                statement=text,
                error=e.message,
                error_type=type(e).__name__,
                retryable=e.retryable,
            )
            raise

        logger.debug(
            "statement_executed",
            backend=self.db_type.value,
            statement=text,
            param_count=len(bound),
            rows=len(result.rows),
            duration_ms=round((time.perf_counter() - started) * 1000, 2),
        )
        return result

    async def execute_scalar(self, text: str, params: Sequence[Any] = ()) -> Any:
        """First column of the first row, or ``None`` if there are no rows."""
        row = await self.execute_single(text, params)
        if not row:
            return None
        return next(iter(row.values()))

    async def execute_single(self, text: str, params: Sequence[Any] = ()) -> Row | None:
        """First row, or ``None`` if there are no rows."""
        result = await self._run(text, params)
        return result.rows[0] if result.rows else None

    async def execute_array(self, text: str, params: Sequence[Any] = ()) -> list[Row]:
        """Every row produced by the statement."""
        result = await self._run(text, params)
        return result.rows

    async def execute_non_query(self, text: str, params: Sequence[Any] = ()) -> int:
        """Number of affected rows (0 when the driver cannot tell)."""
        result = await self._run(text, params)
        return max(result.rowcount, 0)

    # -- Introspection -----------------------------------------------------

    async def table_exists(self, table: str) -> bool:
        count = await self.execute_scalar(self._dialect.table_exists_query(), (table,))
        return bool(count)

    async def column_exists(self, table: str, column: str) -> bool:
        query = self._dialect.column_exists_query()
        if query is None:
            raise NotImplementedError(
                f"{type(self).__name__} must override column_exists()"
            )
        count = await self.execute_scalar(query, (table, column))
        return bool(count)

    # -- CRUD --------------------------------------------------------------

    def _select_by_id(self, table: str) -> str:
        quoted = self._dialect.quote_identifier(table)
        return f"SELECT {self.fetch_columns} FROM {quoted} WHERE {self.id_column} = ?"

    async def insert(self, table: str, record: Mapping[str, Any]) -> Row | None:
        """Insert ``record`` (its identifier key is ignored) and return the stored row."""
        data = dict(record)
        data.pop(self.id_column, None)
        quoted = self._dialect.quote_identifier(table)
        if data:
            columns = ", ".join(self._dialect.quote_identifier(c) for c in data)
            placeholders = self._dialect.placeholders(len(data))
            text = f"INSERT INTO {quoted} ({columns}) VALUES ({placeholders})"
        else:
            text = self._dialect.default_values_insert(quoted)

        result = await self._run(text, tuple(data.values()))
        return await self.execute_single(self._select_by_id(table), (result.lastrowid,))

    async def update(self, table: str, record: Mapping[str, Any]) -> Row | None:
        """Write every non-identifier key of ``record`` and return the stored row."""
        data = dict(record)
        if self.id_column not in data:
            raise QueryError(
                f"Cannot update {table}: record has no '{self.id_column}' value"
            ).with_context(backend=self.db_type.value, table=table)
        record_id = data.pop(self.id_column)
        if not data:
            return await self.execute_single(self._select_by_id(table), (record_id,))

        quoted = self._dialect.quote_identifier(table)
        assignments = ", ".join(f"{self._dialect.quote_identifier(c)} = ?" for c in data)
        await self.execute_non_query(
            f"UPDATE {quoted} SET {assignments} WHERE {self.id_column} = ?",
            (*data.values(), record_id),
        )
        return await self.execute_single(self._select_by_id(table), (record_id,))

    async def delete(self, table: str, record_id: Any) -> Row | None:
        """Delete one row by identifier and return it as it was."""
        existing = await self.execute_single(self._select_by_id(table), (record_id,))
        quoted = self._dialect.quote_identifier(table)
        await self.execute_non_query(
            f"DELETE FROM {quoted} WHERE {self.id_column} = ?",
            (record_id,),
        )
        return existing

    # -- Fetch requests ----------------------------------------------------

    def create_writer(self) -> FetchRequestSQLWriter:
        return FetchRequestSQLWriter(
            columns=self.fetch_columns,
            unbounded_limit=self._dialect.unbounded_limit(),
        )

    async def fetch(self, request: FetchRequest) -> list[Row]:
        """Compile ``request`` and return the matching rows."""
        command = self.create_writer().write(request)
        async with LogContext(table=request.table):
            return await self.execute_array(command.text, command.params)

    def from_(self, table: str) -> FetchRequestBuilder:
        """Start a fetch request against ``table``."""
        return FetchRequestBuilder(self, table)

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}({self._config.to_connection_string()!r}, "
            f"connected={self._connected})"
        )


__all__ = [
    "DatabaseConnection",
    "StatementResult",
]
