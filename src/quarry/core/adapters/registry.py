"""Connection registry and factory.

Manifesto:
    Callers should never hard-code connection class names.  The registry
    maps ``DatabaseType`` strings to connection classes and the
    ``get_connection()`` factory creates a configured instance.

Features:
    - ``ConnectionRegistry`` singleton with pre-registered defaults
    - ``register()`` for custom / third-party connections
    - ``get_connection()``: type + kwargs → connection
    - ``connect_from_settings()``: environment-driven settings → connection

Tags:
    quarry, database, registry, factory, singleton

Doc-Types:
    api-reference
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from quarry.core.errors import InvalidConfigError

from .base import DatabaseConnection
from .mysql import MySQLConnection
from .sqlite import SQLiteConnection
from .types import DatabaseConfig, DatabaseType

if TYPE_CHECKING:
    from quarry.core.settings import DatabaseSettings


class ConnectionRegistry:
    """
    Registry for database connection classes.

    Pre-registered connections:
    - ``sqlite``: :class:`SQLiteConnection`
    - ``mysql`` / ``mariadb``: :class:`MySQLConnection`
    """

    def __init__(self):
        self._factories: dict[str, type[DatabaseConnection]] = {}
        self._register_defaults()

    def _register_defaults(self) -> None:
        self._factories["sqlite"] = SQLiteConnection
        self._factories["mysql"] = MySQLConnection
        self._factories["mariadb"] = MySQLConnection  # Alias

    def register(self, name: str, connection_class: type[DatabaseConnection]) -> None:
        """Register a connection class."""
        self._factories[name.lower()] = connection_class

    def _lookup(self, name: str) -> type[DatabaseConnection]:
        name = name.lower()
        if name not in self._factories:
            raise InvalidConfigError("backend", name, f"Unknown database backend: {name}")
        return self._factories[name]

    def create(self, name: str, **kwargs: Any) -> DatabaseConnection:
        """Create a connection by backend name."""
        return self._lookup(name)(**kwargs)

    def create_from_config(self, config: DatabaseConfig) -> DatabaseConnection:
        """Create a connection from a :class:`DatabaseConfig`."""
        return self._lookup(config.db_type.value).from_config(config)

    def list_backends(self) -> list[str]:
        """List registered backend names."""
        return sorted(self._factories.keys())


# Global registry
connection_registry = ConnectionRegistry()


def get_connection(
    db_type: DatabaseType | str,
    **kwargs: Any,
) -> DatabaseConnection:
    """
    Get a database connection by type.

    Usage:
        cn = get_connection(DatabaseType.SQLITE, path="data.db")
        cn = get_connection("mysql", host="localhost", database="inventory")
    """
    if isinstance(db_type, DatabaseType):
        name = db_type.value
    else:
        name = db_type

    return connection_registry.create(name, **kwargs)


def connect_from_settings(settings: DatabaseSettings | None = None) -> DatabaseConnection:
    """Create a connection from ``QUARRY_DB_*`` environment settings."""
    if settings is None:
        from quarry.core.settings import DatabaseSettings

        settings = DatabaseSettings()
    return connection_registry.create_from_config(settings.to_config())


__all__ = [
    "ConnectionRegistry",
    "connection_registry",
    "get_connection",
    "connect_from_settings",
]
