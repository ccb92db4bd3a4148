"""Quarry Core -- async database access with a fetch-request compiler.

Manifesto:
    Application code wants the same small set of operations on every
    relational backend: run a statement and get a scalar, a row, rows or an
    affected count; insert/update/delete by identifier; ask whether a table
    or column exists; and describe a filtered, sorted read without
    concatenating SQL by hand.  ``quarry.core`` provides those behind one
    interface.

Architecture::

    Layer 1 -- Type System & Errors
        errors.py          Structured error hierarchy (QuarryError, QueryError)
        protocols.py       FetchExecutor protocol + Row alias
        logging.py         structlog configuration

    Layer 2 -- Fetch Requests (pure, synchronous)
        fetch/request.py   FetchRequest, predicate tagged union, SortClause
        fetch/builder.py   FetchRequestBuilder (fluent accumulator)
        fetch/writer.py    FetchRequestSQLWriter -> FetchCommand

    Layer 3 -- Connections (async)
        dialect.py         Placeholders, quoting, catalog queries
        adapters/          DatabaseConnection, SQLite, MySQL, registry
        settings.py        QUARRY_DB_* environment settings
"""

from quarry.core.adapters import (
    DatabaseConfig,
    DatabaseConnection,
    DatabaseType,
    MySQLConnection,
    SQLiteConnection,
    connect_from_settings,
    get_connection,
)
from quarry.core.errors import (
    ConfigError,
    DatabaseConnectionError,
    DatabaseError,
    ErrorCategory,
    IntegrityError,
    QueryError,
    QuarryError,
)
from quarry.core.fetch import (
    CompoundPredicate,
    FetchCommand,
    FetchRequest,
    FetchRequestBuilder,
    FetchRequestSQLWriter,
    LogicalOperator,
    SimplePredicate,
    SortClause,
    SortDirection,
)
from quarry.core.logging import configure_logging, get_logger
from quarry.core.protocols import FetchExecutor, Row

__all__ = [
    # Fetch requests
    "FetchRequest",
    "SimplePredicate",
    "CompoundPredicate",
    "LogicalOperator",
    "SortClause",
    "SortDirection",
    "FetchRequestBuilder",
    "FetchRequestSQLWriter",
    "FetchCommand",
    # Connections
    "DatabaseConnection",
    "SQLiteConnection",
    "MySQLConnection",
    "DatabaseConfig",
    "DatabaseType",
    "get_connection",
    "connect_from_settings",
    "FetchExecutor",
    "Row",
    # Errors
    "QuarryError",
    "ErrorCategory",
    "ConfigError",
    "DatabaseError",
    "DatabaseConnectionError",
    "QueryError",
    "IntegrityError",
    # Logging
    "configure_logging",
    "get_logger",
]
