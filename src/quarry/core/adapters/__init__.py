"""Database connections -- one async interface over SQLite and MySQL.

Each connection is **import-guarded**: the database driver is only required
at ``connect()`` time, not at import time.  Install the corresponding extra::

    pip install quarry[mysql]          # mysql-connector-python

Architecture::

    DatabaseConnection (base.py)     Abstract base: execute_*, CRUD, fetch
        |-- SQLiteConnection         stdlib sqlite3 (always available)
        |-- MySQLConnection          mysql.connector (optional)

    ConnectionRegistry (registry.py) Singleton: DatabaseType -> connection class
    DatabaseConfig (types.py)        Dataclass of connection parameters
    DatabaseType (types.py)          Enum of supported backends

Guardrails:
    ❌ ``cn.execute_array("SELECT * FROM t WHERE id=" + user_input)``
    ✅ ``cn.execute_array("SELECT * FROM t WHERE id=?", [user_input])``
    ❌ Importing optional drivers at module scope
    ✅ Import-guarded at ``connect()`` time with clear ``ConfigError``

Tags:
    quarry, database, connections, multi-backend, import-guarded,
    registry-pattern, sqlite, mysql
"""

from quarry.core.dialect import Dialect, get_dialect

from .base import DatabaseConnection, StatementResult
from .mysql import MySQLConnection
from .registry import (
    ConnectionRegistry,
    connect_from_settings,
    connection_registry,
    get_connection,
)
from .sqlite import SQLiteConnection
from .types import DatabaseConfig, DatabaseType

__all__ = [
    # Types
    "DatabaseType",
    "DatabaseConfig",
    "StatementResult",
    # Abstractions
    "Dialect",
    "get_dialect",
    # Base class
    "DatabaseConnection",
    # Implementations
    "SQLiteConnection",
    "MySQLConnection",
    # Registry
    "ConnectionRegistry",
    "connection_registry",
    "get_connection",
    "connect_from_settings",
]
