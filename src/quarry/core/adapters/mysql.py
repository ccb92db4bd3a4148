"""MySQL database connection.

Uses ``mysql.connector`` from the ``mysql-connector-python`` package.
Statements with parameters run on prepared cursors, which accept the same
``?`` placeholders as SQLite, so predicate text is portable between the two
backends.

Install the driver::

    pip install mysql-connector-python
    # or:  pip install quarry[mysql]

This connection is import-guarded: if ``mysql.connector`` is not installed
a clear :class:`~quarry.core.errors.ConfigError` is raised at ``connect()``
time.
"""

from __future__ import annotations

import uuid
from typing import Any

from quarry.core.errors import (
    ConfigError,
    DatabaseConnectionError,
    IntegrityError,
    QueryError,
)

from .base import DatabaseConnection, StatementResult
from .types import DatabaseConfig, DatabaseType


class MySQLConnection(DatabaseConnection):
    """MySQL / MariaDB connection backed by a ``mysql.connector`` pool.

    Each statement checks a connection out of the pool and returns it
    afterwards, so concurrent fetches run independently.  The pool runs in
    autocommit mode.
    """

    id_column = "id"
    fetch_columns = "*"

    def __init__(
        self,
        host: str = "localhost",
        port: int = 3306,
        database: str = "",
        username: str | None = None,
        password: str | None = None,
        *,
        pool_size: int = 5,
        connect_timeout: int = 10,
        charset: str = "utf8mb4",
        **kwargs: Any,
    ):
        config = DatabaseConfig(
            db_type=DatabaseType.MYSQL,
            host=host,
            port=port,
            database=database,
            username=username,
            password=password,
            pool_size=pool_size,
            connect_timeout=connect_timeout,
            options={**(kwargs or {}), "charset": charset},
        )
        super().__init__(config)
        self._pool: Any = None
        self._errors: Any = None

    @classmethod
    def from_config(cls, config: DatabaseConfig) -> MySQLConnection:
        options = dict(config.options)
        charset = options.pop("charset", "utf8mb4")
        return cls(
            host=config.host,
            port=config.port,
            database=config.database,
            username=config.username,
            password=config.password,
            pool_size=config.pool_size,
            connect_timeout=config.connect_timeout,
            charset=charset,
            **options,
        )

    def _connect_sync(self) -> None:
        try:
            from mysql.connector import errors, pooling
        except ImportError:
            raise ConfigError(
                "mysql-connector-python is required for MySQL. "
                "Install with: pip install mysql-connector-python"
            ) from None

        self._errors = errors
        extra = {k: v for k, v in self._config.options.items() if k != "charset"}
        try:
            self._pool = pooling.MySQLConnectionPool(
                pool_name=f"quarry_{uuid.uuid4().hex[:8]}",
                pool_size=self._config.pool_size,
                host=self._config.host,
                port=self._config.port,
                database=self._config.database,
                user=self._config.username,
                password=self._config.password,
                charset=self._config.options.get("charset", "utf8mb4"),
                connection_timeout=self._config.connect_timeout,
                autocommit=True,
                **extra,
            )
        except errors.Error as e:
            raise DatabaseConnectionError(
                f"Failed to connect to MySQL: {e}",
                cause=e,
            ) from e

    def _close_sync(self) -> None:
        # mysql.connector pools have no closeall(); pooled connections close
        # when the pool is garbage collected
        self._pool = None

    def _checkout(self) -> Any:
        if self._pool is None:
            raise DatabaseConnectionError("MySQL connection pool is closed")
        try:
            return self._pool.get_connection()
        except self._errors.Error as e:
            raise DatabaseConnectionError(
                f"Failed to check out a MySQL connection: {e}",
                cause=e,
            ) from e

    def _execute_sync(self, text: str, params: tuple[Any, ...]) -> StatementResult:
        conn = self._checkout()
        try:
            cursor = conn.cursor(prepared=True) if params else conn.cursor()
            try:
                cursor.execute(text, params or None)
                rows = []
                if cursor.description:
                    columns = [desc[0] for desc in cursor.description]
                    rows = [dict(zip(columns, row, strict=False)) for row in cursor.fetchall()]
                return StatementResult(
                    rows=rows,
                    rowcount=cursor.rowcount,
                    lastrowid=cursor.lastrowid,
                )
            finally:
                cursor.close()
        except self._errors.IntegrityError as e:
            raise IntegrityError(str(e), cause=e) from e
        except self._errors.Error as e:
            raise QueryError(str(e), cause=e) from e
        finally:
            conn.close()  # returns the connection to the pool


__all__ = [
    "MySQLConnection",
]
