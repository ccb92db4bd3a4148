"""Environment-driven database settings.

Manifesto:
    Connection parameters should be explicit, validated, and
    environment-driven.  ``DatabaseSettings`` reads ``QUARRY_DB_*`` variables
    (and a ``.env`` file) and converts them into the
    :class:`~quarry.core.adapters.types.DatabaseConfig` the connections take.

Examples:
    >>> import os
    >>> os.environ["QUARRY_DB_BACKEND"] = "mysql"
    >>> os.environ["QUARRY_DB_DATABASE"] = "inventory"
    >>> DatabaseSettings().to_config().db_type
    <DatabaseType.MYSQL: 'mysql'>

Tags:
    settings, configuration, pydantic, environment, quarry
"""

from __future__ import annotations

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from quarry.core.adapters.types import DatabaseConfig, DatabaseType
from quarry.core.errors import MissingConfigError


class DatabaseSettings(BaseSettings):
    """Connection settings read from ``QUARRY_DB_*`` environment variables.

    Fields
    ──────
    backend          : ``sqlite`` or ``mysql``
    path             : SQLite file path (``:memory:`` by default)
    host / port      : MySQL server address
    database         : MySQL schema name
    username         : MySQL user
    password         : MySQL password (never echoed)
    pool_size        : MySQL pool size
    connect_timeout  : Seconds before a connect attempt fails
    readonly         : Open SQLite in query-only mode
    """

    model_config = SettingsConfigDict(
        env_prefix="QUARRY_DB_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    backend: DatabaseType = DatabaseType.SQLITE

    # ── SQLite ───────────────────────────────────────────────────
    path: str = ":memory:"
    readonly: bool = False

    # ── MySQL ────────────────────────────────────────────────────
    host: str = "localhost"
    port: int = Field(default=3306, ge=1, le=65535)
    database: str = ""
    username: str | None = None
    password: SecretStr | None = None
    pool_size: int = Field(default=5, ge=1, le=32)

    # ── Common ───────────────────────────────────────────────────
    connect_timeout: int = Field(default=10, ge=1)

    @field_validator("backend", mode="before")
    @classmethod
    def _normalize_backend(cls, v: object) -> object:
        if isinstance(v, str):
            v = v.lower()
            return "mysql" if v == "mariadb" else v
        return v

    def to_config(self) -> DatabaseConfig:
        """Convert to the dataclass the connections take.

        Raises:
            MissingConfigError: If the MySQL backend is selected without a
                ``QUARRY_DB_DATABASE``.
        """
        if self.backend == DatabaseType.MYSQL and not self.database:
            raise MissingConfigError("QUARRY_DB_DATABASE")
        return DatabaseConfig(
            db_type=self.backend,
            path=self.path,
            host=self.host,
            port=self.port,
            database=self.database,
            username=self.username,
            password=self.password.get_secret_value() if self.password else None,
            pool_size=self.pool_size,
            connect_timeout=self.connect_timeout,
            readonly=self.readonly,
        )


__all__ = [
    "DatabaseSettings",
]
