"""
Structured error types for quarry.

Every failure raised by a quarry connection is a ``QuarryError`` carrying a
category, a retry hint, structured context and the chained driver exception.
The fetch-request model, builder and writer raise nothing of their own:
malformed SQL fragments surface here, at execution time.

Architecture:
    ::

        ┌──────────────────────────────────────────────────────────┐
        │                      QuarryError                          │
        │  (category, retryable, context, cause)                   │
        ├──────────────────────────────────────────────────────────┤
        │  TransientError        ConfigError        DatabaseError  │
        │  (retryable=True)      (CONFIG)           (DATABASE)     │
        │       │                     │                  │         │
        │  DatabaseConnection   MissingConfig       QueryError     │
        │  Error                InvalidConfig       IntegrityError │
        └──────────────────────────────────────────────────────────┘

Examples:
    >>> error = QueryError("no such table: actor", cause=exc)
    >>> error.with_context(statement="SELECT * FROM actor")
    QueryError('no such table: actor', category=DATABASE)
    >>> error.retryable
    False

Guardrails:
    ❌ DON'T: Swallow the driver exception
    ✅ DO: Pass it as cause= so tracebacks keep the root cause

    ❌ DON'T: Retry QueryError; the statement itself is wrong
    ✅ DO: Retry only errors whose ``retryable`` flag is set

Tags:
    error-handling, exception-hierarchy, retry-logic, error-context, quarry

Doc-Types:
    - API Reference
    - Error Handling Guide
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ErrorCategory(str, Enum):
    """
    Standard error categories for classification and routing.

    Attributes:
        NETWORK: Connection refused, DNS, socket timeouts
        DATABASE: Statement rejected, constraint violations
        CONFIG: Missing driver, invalid settings
        INTERNAL: Bugs, unexpected state
    """

    NETWORK = "NETWORK"
    DATABASE = "DATABASE"
    CONFIG = "CONFIG"
    INTERNAL = "INTERNAL"


@dataclass
class ErrorContext:
    """
    Structured metadata attached to an error.

    ``statement`` and ``param_count`` describe the SQL that failed;
    ``backend`` and ``table`` say where. Anything else goes in ``metadata``.
    """

    backend: str | None = None
    table: str | None = None
    statement: str | None = None
    param_count: int | None = None

    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging."""
        result = {}
        for key in ["backend", "table", "statement", "param_count"]:
            value = getattr(self, key)
            if value is not None:
                result[key] = value
        if self.metadata:
            result.update(self.metadata)
        return result


class QuarryError(Exception):
    """
    Base exception for all quarry errors.

    Subclasses set ``default_category`` and ``default_retryable`` so callers
    rarely pass them explicitly.

    Examples:
        >>> error = QuarryError("Something went wrong")
        >>> error.category
        <ErrorCategory.INTERNAL: 'INTERNAL'>
        >>> error.to_dict()["retryable"]
        False
    """

    default_category: ErrorCategory = ErrorCategory.INTERNAL
    default_retryable: bool = False

    def __init__(
        self,
        message: str,
        *,
        category: ErrorCategory | None = None,
        retryable: bool | None = None,
        context: ErrorContext | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.category = category or self.default_category
        self.retryable = retryable if retryable is not None else self.default_retryable
        self.context = context or ErrorContext()
        self.cause = cause

        if cause is not None:
            self.__cause__ = cause

    def with_context(self, **kwargs: Any) -> QuarryError:
        """
        Add context to this error (fluent API).

        Usage:
            raise QueryError("Failed", cause=exc).with_context(
                backend="sqlite",
                statement=text,
            )
        """
        for key, value in kwargs.items():
            if hasattr(self.context, key) and key != "metadata":
                setattr(self.context, key, value)
            else:
                self.context.metadata[key] = value
        return self

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        result = {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "category": self.category.value,
            "retryable": self.retryable,
        }
        context_dict = self.context.to_dict()
        if context_dict:
            result["context"] = context_dict
        if self.cause is not None:
            result["cause"] = str(self.cause)
        return result

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, category={self.category.value})"


# =============================================================================
# TRANSIENT ERRORS (Usually Retryable)
# =============================================================================


class TransientError(QuarryError):
    """Temporary error that may succeed on retry."""

    default_category = ErrorCategory.NETWORK
    default_retryable = True


class DatabaseConnectionError(TransientError):
    """Could not open a connection or check one out of the pool."""

    default_category = ErrorCategory.DATABASE


# =============================================================================
# CONFIGURATION ERRORS
# =============================================================================


class ConfigError(QuarryError):
    """
    Configuration error.

    Never retryable - configuration must be fixed.
    """

    default_category = ErrorCategory.CONFIG
    default_retryable = False


class MissingConfigError(ConfigError):
    """Required configuration is missing."""

    def __init__(self, key: str, message: str | None = None):
        self.key = key
        super().__init__(message or f"Missing required configuration: {key}")


class InvalidConfigError(ConfigError):
    """Configuration value is invalid."""

    def __init__(self, key: str, value: Any, message: str | None = None):
        self.key = key
        self.value = value
        super().__init__(message or f"Invalid configuration for {key}: {value!r}")


# =============================================================================
# DATABASE ERRORS
# =============================================================================


class DatabaseError(QuarryError):
    """Database query error."""

    default_category = ErrorCategory.DATABASE
    default_retryable = False


class QueryError(DatabaseError):
    """The backend rejected or failed to execute a statement."""

    pass


class IntegrityError(DatabaseError):
    """Database integrity constraint violation."""

    pass


__all__ = [
    "ErrorCategory",
    "ErrorContext",
    "QuarryError",
    "TransientError",
    "DatabaseConnectionError",
    "ConfigError",
    "MissingConfigError",
    "InvalidConfigError",
    "DatabaseError",
    "QueryError",
    "IntegrityError",
]
