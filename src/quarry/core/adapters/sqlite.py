"""SQLite database connection."""

from __future__ import annotations

import sqlite3
import threading
from typing import Any

from quarry.core.errors import DatabaseConnectionError, IntegrityError, QueryError

from .base import DatabaseConnection, StatementResult
from .types import DatabaseConfig, DatabaseType


class SQLiteConnection(DatabaseConnection):
    """
    SQLite database connection.

    Uses the built-in sqlite3 module in autocommit mode. Rows are keyed by
    SQLite's implicit ``rowid``, which every fetched row carries.

    One driver connection is shared by all callers; statements are
    serialized on a lock so concurrent coroutines never interleave cursors.
    """

    id_column = "rowid"
    # aliased so the key stays "rowid" when an INTEGER PRIMARY KEY shadows it
    fetch_columns = "rowid AS rowid, *"

    def __init__(
        self,
        path: str = ":memory:",
        *,
        readonly: bool = False,
        timeout: float = 5.0,
        **kwargs: Any,
    ):
        config = DatabaseConfig(
            db_type=DatabaseType.SQLITE,
            path=path,
            readonly=readonly,
            options=kwargs,
        )
        super().__init__(config)
        self._timeout = timeout
        self._conn: sqlite3.Connection | None = None
        self._lock = threading.Lock()

    @classmethod
    def from_config(cls, config: DatabaseConfig) -> SQLiteConnection:
        return cls(
            path=config.path or ":memory:",
            readonly=config.readonly,
            timeout=float(config.connect_timeout),
            **config.options,
        )

    def _connect_sync(self) -> None:
        path = self._config.path or ":memory:"
        uri = path.startswith("file:") or "?" in path

        try:
            self._conn = sqlite3.connect(
                path,
                timeout=self._timeout,
                check_same_thread=False,
                isolation_level=None,
                uri=uri,
            )
            self._conn.row_factory = sqlite3.Row

            self._conn.execute("PRAGMA foreign_keys = ON")

            if self._config.readonly:
                self._conn.execute("PRAGMA query_only = ON")

        except sqlite3.Error as e:
            raise DatabaseConnectionError(
                f"Failed to connect to SQLite: {e}",
                cause=e,
            ) from e

    def _close_sync(self) -> None:
        if self._conn:
            with self._lock:
                self._conn.close()
            self._conn = None

    def _execute_sync(self, text: str, params: tuple[Any, ...]) -> StatementResult:
        if self._conn is None:
            raise DatabaseConnectionError("SQLite connection is closed")

        with self._lock:
            try:
                cursor = self._conn.execute(text, params)
                rows = [dict(row) for row in cursor.fetchall()]
                return StatementResult(
                    rows=rows,
                    rowcount=cursor.rowcount,
                    lastrowid=cursor.lastrowid,
                )
            except sqlite3.IntegrityError as e:
                raise IntegrityError(str(e), cause=e) from e
            except sqlite3.Error as e:
                raise QueryError(str(e), cause=e) from e

    async def column_exists(self, table: str, column: str) -> bool:
        # PRAGMA does not bind parameters, so only run it for a table that
        # was found through a bound query first
        if not await self.table_exists(table):
            return False
        columns = await self.execute_array(
            f"PRAGMA table_info({self._dialect.quote_identifier(table)})"
        )
        return any(c["name"] == column for c in columns)


__all__ = [
    "SQLiteConnection",
]
