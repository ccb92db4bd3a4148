"""Tests for connection registration and the factory helpers."""

from __future__ import annotations

import pytest

from quarry.core.adapters.mysql import MySQLConnection
from quarry.core.adapters.registry import (
    ConnectionRegistry,
    connect_from_settings,
    connection_registry,
    get_connection,
)
from quarry.core.adapters.sqlite import SQLiteConnection
from quarry.core.adapters.types import DatabaseConfig, DatabaseType
from quarry.core.errors import ConfigError, InvalidConfigError, MissingConfigError
from quarry.core.settings import DatabaseSettings


class TestConnectionRegistry:
    def test_defaults_registered(self) -> None:
        assert connection_registry.list_backends() == ["mariadb", "mysql", "sqlite"]

    def test_unknown_raises(self) -> None:
        with pytest.raises(ConfigError, match="Unknown database backend: oracle") as exc_info:
            connection_registry.create("oracle")
        assert isinstance(exc_info.value, InvalidConfigError)
        assert exc_info.value.key == "backend"
        assert exc_info.value.value == "oracle"

    def test_lookup_is_case_insensitive(self) -> None:
        assert isinstance(connection_registry.create("SQLite"), SQLiteConnection)

    def test_mariadb_alias(self) -> None:
        assert isinstance(connection_registry.create("mariadb"), MySQLConnection)

    def test_register_custom(self) -> None:
        class MemoryConnection(SQLiteConnection):
            pass

        registry = ConnectionRegistry()
        registry.register("Memory", MemoryConnection)
        assert "memory" in registry.list_backends()
        assert isinstance(registry.create("memory"), MemoryConnection)
        # the global registry is untouched
        assert "memory" not in connection_registry.list_backends()

    def test_create_from_config(self) -> None:
        cn = connection_registry.create_from_config(
            DatabaseConfig(db_type=DatabaseType.MYSQL, host="db", port=3307, database="inv")
        )
        assert isinstance(cn, MySQLConnection)
        assert "db:3307/inv" in repr(cn)


class TestGetConnection:
    def test_by_enum(self) -> None:
        cn = get_connection(DatabaseType.SQLITE, path=":memory:")
        assert isinstance(cn, SQLiteConnection)
        assert cn.is_connected is False

    def test_by_name(self) -> None:
        cn = get_connection("mysql", host="localhost", database="inventory")
        assert isinstance(cn, MySQLConnection)

    @pytest.mark.asyncio
    async def test_sqlite_roundtrip(self) -> None:
        async with get_connection("sqlite") as cn:
            assert await cn.execute_scalar("SELECT 40 + 2") == 42


class TestConnectFromSettings:
    def test_explicit_settings(self) -> None:
        cn = connect_from_settings(DatabaseSettings(backend="sqlite", path=":memory:"))
        assert isinstance(cn, SQLiteConnection)

    def test_mysql_without_database(self, monkeypatch) -> None:
        monkeypatch.delenv("QUARRY_DB_DATABASE", raising=False)
        with pytest.raises(MissingConfigError, match="QUARRY_DB_DATABASE"):
            connect_from_settings(DatabaseSettings(backend="mysql"))

    def test_from_environment(self, monkeypatch) -> None:
        monkeypatch.setenv("QUARRY_DB_BACKEND", "mariadb")
        monkeypatch.setenv("QUARRY_DB_HOST", "db.internal")
        monkeypatch.setenv("QUARRY_DB_DATABASE", "inventory")
        cn = connect_from_settings()
        assert isinstance(cn, MySQLConnection)
        assert "db.internal:3306/inventory" in repr(cn)
