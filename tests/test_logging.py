"""
Tests for the logging module.

Tests verify:
- Bound context reaches every event and can be removed again
- Service metadata and ECS field renames
- configure_logging accepts both renderers
"""

import structlog
import pytest

from quarry.core.logging import (
    LogContext,
    _add_service_metadata,
    _elasticsearch_compatible,
    bind_context,
    configure_logging,
    get_logger,
    unbind_context,
)


@pytest.fixture(autouse=True)
def reset_structlog():
    structlog.contextvars.clear_contextvars()
    yield
    structlog.contextvars.clear_contextvars()
    structlog.reset_defaults()


def current_context() -> dict:
    return structlog.contextvars.get_contextvars()


class TestContextManagement:
    """Test bind/unbind operations."""

    def test_bind_context(self):
        bind_context(backend="sqlite", table="actor")
        assert current_context() == {"backend": "sqlite", "table": "actor"}

    def test_unbind_context(self):
        bind_context(backend="sqlite", table="actor")
        unbind_context("table")
        assert current_context() == {"backend": "sqlite"}


class TestLogContext:
    """Test the scoped LogContext manager."""

    @pytest.mark.asyncio
    async def test_scope(self):
        async with LogContext(table="actor", request_id="abc"):
            assert current_context() == {"table": "actor", "request_id": "abc"}
        assert current_context() == {}

    @pytest.mark.asyncio
    async def test_outer_context_survives(self):
        bind_context(backend="mysql")
        async with LogContext(table="actor"):
            pass
        assert current_context() == {"backend": "mysql"}

    @pytest.mark.asyncio
    async def test_bound_context_reaches_events(self):
        async with LogContext(table="actor"):
            event = structlog.contextvars.merge_contextvars(
                None, "info", {"event": "fetch_started"}
            )
        assert event == {"event": "fetch_started", "table": "actor"}


class TestProcessors:
    """Test the custom processors."""

    def test_service_metadata_default(self):
        event = _add_service_metadata(None, "info", {"event": "x"})
        assert event["service.name"]

    def test_service_metadata_does_not_override(self):
        event = _add_service_metadata(None, "info", {"event": "x", "service.name": "other"})
        assert event["service.name"] == "other"

    def test_elasticsearch_renames(self):
        event = _elasticsearch_compatible(
            None, "info", {"event": "x", "timestamp": "2026-01-01T00:00:00Z", "level": "info"}
        )
        assert event == {
            "event": "x",
            "@timestamp": "2026-01-01T00:00:00Z",
            "log.level": "info",
        }

    def test_elasticsearch_leaves_other_fields(self):
        event = _elasticsearch_compatible(None, "info", {"event": "x", "rows": 3})
        assert event == {"event": "x", "rows": 3}


class TestConfigureLogging:
    """Test logging configuration."""

    def test_configure_sets_service_name(self):
        configure_logging(level="DEBUG", json_format=True, service="inventory")
        event = _add_service_metadata(None, "info", {"event": "x"})
        assert event["service.name"] == "inventory"
        configure_logging(level="INFO", json_format=False)

    def test_configure_console(self):
        configure_logging(level="WARNING", json_format=False, add_timestamp=False)
        assert structlog.is_configured()

    def test_get_logger_returns_bound_logger(self):
        log = get_logger("test.module")

        assert hasattr(log, "info")
        assert hasattr(log, "debug")
        assert hasattr(log, "warning")
