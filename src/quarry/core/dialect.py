"""SQL dialect abstraction for backend-agnostic statement generation.

The CRUD helpers and schema introspection on a connection need a handful of
backend-specific fragments: placeholder style, identifier quoting and the
catalog queries behind ``table_exists`` / ``column_exists``.  Each backend
provides them through a ``Dialect``; connection code never spells out
backend syntax itself.

Fetch requests are *not* routed through the dialect: predicate text is raw
caller SQL and is passed through untouched.

Architecture::

    ┌──────────────────────┐   ┌──────────────────────────────┐
    │ SQLiteDialect        │   │ MySQLDialect                 │
    │ ?, ?, ?              │   │ ?, ?, ?  (prepared cursor)   │
    │ `name`               │   │ `name`                       │
    │ sqlite_master        │   │ INFORMATION_SCHEMA           │
    └──────────────────────┘   └──────────────────────────────┘

Examples:
    >>> from quarry.core.dialect import get_dialect
    >>> d = get_dialect("sqlite")
    >>> d.placeholders(3)
    '?, ?, ?'
    >>> d.quote_identifier("order")
    '`order`'

Tags:
    dialect, sql, abstraction, portability, database, quarry
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class Dialect(Protocol):
    """SQL dialect contract.

    Every method returns a **SQL fragment** (string) valid for the target
    database.
    """

    @property
    def name(self) -> str:
        """Human-readable dialect name (e.g. ``'sqlite'``)."""
        ...

    def placeholders(self, count: int) -> str:
        """Comma-separated placeholder list."""
        ...

    def quote_identifier(self, name: str) -> str:
        """Quote a table or column name."""
        ...

    def default_values_insert(self, quoted_table: str) -> str:
        """INSERT statement for a row made only of column defaults."""
        ...

    def table_exists_query(self) -> str:
        """Query returning a single count, one placeholder for the table name."""
        ...

    def column_exists_query(self) -> str | None:
        """Query returning a single count for (table, column).

        ``None`` when the backend cannot bind parameters into its column
        catalog and the connection must inspect the table another way.
        """
        ...

    def unbounded_limit(self) -> str:
        """LIMIT value meaning 'no limit', for OFFSET without LIMIT."""
        ...


class SQLiteDialect:
    """SQLite dialect: ``?`` placeholders, backtick quoting."""

    @property
    def name(self) -> str:
        return "sqlite"

    def placeholders(self, count: int) -> str:
        return ", ".join("?" for _ in range(count))

    def quote_identifier(self, name: str) -> str:
        return "`" + name.replace("`", "``") + "`"

    def default_values_insert(self, quoted_table: str) -> str:
        return f"INSERT INTO {quoted_table} DEFAULT VALUES"

    def table_exists_query(self) -> str:
        return "SELECT COUNT(1) FROM sqlite_master WHERE type = 'table' AND name = ?"

    def column_exists_query(self) -> str | None:
        # PRAGMA table_info does not accept bound parameters
        return None

    def unbounded_limit(self) -> str:
        return "-1"


class MySQLDialect:
    """MySQL dialect.

    Statements run through ``mysql.connector`` prepared cursors, which accept
    ``?`` placeholders, so callers write the same predicate text on both
    backends.
    """

    @property
    def name(self) -> str:
        return "mysql"

    def placeholders(self, count: int) -> str:
        return ", ".join("?" for _ in range(count))

    def quote_identifier(self, name: str) -> str:
        return "`" + name.replace("`", "``") + "`"

    def default_values_insert(self, quoted_table: str) -> str:
        return f"INSERT INTO {quoted_table} () VALUES ()"

    def table_exists_query(self) -> str:
        return (
            "SELECT COUNT(*) FROM INFORMATION_SCHEMA.TABLES "
            "WHERE TABLE_SCHEMA = DATABASE() AND TABLE_NAME = ?"
        )

    def column_exists_query(self) -> str | None:
        return (
            "SELECT COUNT(1) FROM INFORMATION_SCHEMA.COLUMNS "
            "WHERE TABLE_SCHEMA = DATABASE() AND TABLE_NAME = ? AND COLUMN_NAME = ?"
        )

    def unbounded_limit(self) -> str:
        return "18446744073709551615"


# Pre-instantiated singletons (dialects are stateless)
_DIALECTS: dict[str, Dialect] = {
    "sqlite": SQLiteDialect(),
    "mysql": MySQLDialect(),
    "mariadb": MySQLDialect(),  # alias
}


def get_dialect(db_type: str) -> Dialect:
    """Get a dialect by database type name.

    Raises:
        ValueError: If ``db_type`` is not recognised.
    """
    key = db_type.lower() if isinstance(db_type, str) else db_type.value
    if key not in _DIALECTS:
        raise ValueError(
            f"Unknown dialect '{db_type}'. "
            f"Supported: {sorted(set(_DIALECTS) - {'mariadb'})}"
        )
    return _DIALECTS[key]


__all__ = [
    "Dialect",
    "SQLiteDialect",
    "MySQLDialect",
    "get_dialect",
]
